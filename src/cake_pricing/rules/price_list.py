"""
Price List - flat CSV view of the pricing structure.

Admins edit prices in a spreadsheet; this module flattens a rules table into
`category,key,price_cents` rows and compiles such rows back into the JSON
pricing structure the store accepts.
"""
import io
import math
from pathlib import Path
from typing import Optional

import pandas as pd

from ..engine.rules_table import PricingRulesTable

COLUMNS = ['category', 'key', 'price_cents']

# CSV category -> JSON section
CATEGORY_SECTIONS = {
    'base': 'basePrices',
    'flavor': 'flavorPrices',
    'icing': 'icingTypes',
    'decoration': 'decorationPrices',
    'dietary': 'dietaryPrices',
    'shape': 'shapePrices',
    'template': 'templatePrices',
}
LAYER_CATEGORY = 'layer'
LAYER_KEY = 'per-extra-layer'


def to_frame(table: PricingRulesTable) -> pd.DataFrame:
    """Flatten a rules table into one row per priced id."""
    data = table.to_dict()
    rows = []
    for category, section in CATEGORY_SECTIONS.items():
        if category == 'template':
            continue
        for key, cents in data[section].items():
            rows.append({'category': category, 'key': key, 'price_cents': cents})
    rows.append({'category': LAYER_CATEGORY, 'key': LAYER_KEY, 'price_cents': data['layerPrice']})
    for key, cents in data['templatePrices'].items():
        rows.append({'category': 'template', 'key': key, 'price_cents': cents})

    df = pd.DataFrame(rows, columns=COLUMNS)
    df['price_cents'] = df['price_cents'].astype('int64')
    return df


def from_frame(
    df: pd.DataFrame,
    template_aliases: Optional[dict[str, str]] = None
) -> tuple[dict, list[str]]:
    """
    Compile price list rows into a pricing structure dict.

    Template aliases have no price, so they are carried over from
    `template_aliases` (usually the current table's).

    Returns (structure, errors). The structure still has to pass rules table
    validation (negative amounts, missing sizes) before it can be used.
    """
    errors = []

    df = df.copy()
    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in COLUMNS if c not in df.columns]
    if missing:
        return {}, [f"Price list is missing column(s): {', '.join(missing)}"]

    df['category'] = df['category'].fillna('').astype(str).str.strip().str.lower()
    df['key'] = df['key'].fillna('').astype(str).str.strip()
    prices = pd.to_numeric(df['price_cents'], errors='coerce')

    structure = {section: {} for section in CATEGORY_SECTIONS.values()}
    layer_rows = 0

    for idx, row in df.iterrows():
        line_num = idx + 2  # header is line 1
        category = row['category']
        if not category and not row['key']:
            continue

        cents = prices.loc[idx]
        if pd.isna(cents) or not math.isfinite(cents) or cents != int(cents):
            errors.append(f"Line {line_num}: price_cents must be a whole number, got {row['price_cents']!r}")
            continue
        cents = int(cents)

        if category == LAYER_CATEGORY:
            structure['layerPrice'] = cents
            layer_rows += 1
        elif category in CATEGORY_SECTIONS:
            if not row['key']:
                errors.append(f"Line {line_num}: key is required for category '{category}'")
                continue
            section = structure[CATEGORY_SECTIONS[category]]
            if row['key'] in section:
                errors.append(f"Line {line_num}: duplicate {category} '{row['key']}'")
                continue
            section[row['key']] = cents
        else:
            errors.append(
                f"Line {line_num}: unknown category '{category}', must be one of: "
                f"{', '.join(sorted([*CATEGORY_SECTIONS, LAYER_CATEGORY]))}"
            )

    if layer_rows == 0:
        errors.append("Price list must include a 'layer' row")
    elif layer_rows > 1:
        errors.append("Price list must include exactly one 'layer' row")

    structure['templateAliases'] = {
        alias: target for alias, target in (template_aliases or {}).items()
        if target in structure['templatePrices']
    }
    return structure, errors


def to_csv_text(table: PricingRulesTable) -> str:
    return to_frame(table).to_csv(index=False)


def from_csv_text(text: str, template_aliases: Optional[dict[str, str]] = None) -> tuple[dict, list[str]]:
    try:
        df = pd.read_csv(io.StringIO(text), dtype={'category': str, 'key': str})
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        return {}, [f"Could not parse price list: {e}"]
    return from_frame(df, template_aliases)


def write_price_list(table: PricingRulesTable, path: Path) -> Path:
    """Export a table to CSV."""
    path.parent.mkdir(parents=True, exist_ok=True)
    to_frame(table).to_csv(path, index=False)
    return path


def read_price_list(path: Path, template_aliases: Optional[dict[str, str]] = None) -> tuple[dict, list[str]]:
    """Compile a CSV price list file."""
    if not path.exists():
        return {}, [f"Price list not found: {path}"]
    return from_csv_text(path.read_text(encoding='utf-8'), template_aliases)
