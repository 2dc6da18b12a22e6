#!/usr/bin/env python
"""
Export or import the flat CSV price list.

Usage:
    python scripts/price_list.py export [path]
    python scripts/price_list.py import [path]
"""
import argparse
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from cake_pricing.config.settings import get_settings
from cake_pricing.engine import RulesTableError
from cake_pricing.rules.price_list import read_price_list, write_price_list
from cake_pricing.services.rules_store import RulesStore


def main():
    parser = argparse.ArgumentParser(description="Cake pricing price list tool")
    parser.add_argument("action", choices=["export", "import"])
    parser.add_argument("path", nargs="?", type=Path, help="CSV path (defaults to data/price-list.csv)")
    args = parser.parse_args()

    settings = get_settings()
    path = args.path or settings.price_list_csv
    store = RulesStore(settings.pricing_structure, settings.backups_dir)

    if args.action == "export":
        write_price_list(store.snapshot(), path)
        print(f"✅ Exported price list to {path}")
        return

    structure, errors = read_price_list(path, dict(store.snapshot().template_aliases))
    if not errors:
        try:
            result = store.update(structure)
        except RulesTableError as e:
            errors = e.errors
    
    if errors:
        print("Validation errors:")
        for err in errors:
            print(f"  ❌ {err}")
        sys.exit(1)

    print(f"✅ Imported price list from {path}")
    if result.backup:
        print(f"   Backup: {result.backup}")
    for warning in result.warnings:
        print(f"   ⚠️ {warning}")


if __name__ == "__main__":
    main()
