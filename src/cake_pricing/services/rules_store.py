"""
Rules Store - holds the live pricing rules snapshot.

Reads/writes pricing-structure.json, validates admin updates, keeps
timestamped backups of every replaced file, and swaps the in-memory
snapshot in one step so calculations never see a half-applied update.
"""
import json
import logging
import os
import tempfile
import threading
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from ..engine.exceptions import RulesTableError
from ..engine.rules_table import PricingRulesTable, validate_structure

logger = logging.getLogger(__name__)

DEFAULT_RULES_PATH = Path(__file__).resolve().parent.parent / 'data' / 'default_pricing.json'
BACKUP_PREFIX = "pricing-structure-"


@dataclass
class ValidationResult:
    """Result of pricing structure validation."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class UpdateResult:
    """Outcome of a successful update."""
    table: PricingRulesTable
    backup: Optional[str] = None
    warnings: list[str] = field(default_factory=list)


@dataclass
class BackupInfo:
    """A backup file on disk."""
    filename: str
    size: int
    created_at: str


def validate_pricing(data: Any) -> ValidationResult:
    """Validate a pricing structure without building a table."""
    _, errors, warnings = validate_structure(data)
    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def _read_json(path: Path) -> Any:
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


class RulesStore:
    """Service owning the pricing rules file and its current snapshot."""

    def __init__(self, rules_path: Path, backups_dir: Optional[Path] = None):
        self.rules_path = Path(rules_path)
        self.backups_dir = Path(backups_dir) if backups_dir else self.rules_path.parent / 'backups'
        self.loaded_at: Optional[str] = None
        self._lock = threading.Lock()
        self._snapshot = self._load()

    def _load(self) -> PricingRulesTable:
        """Load the rules file, falling back to the packaged defaults."""
        if self.rules_path.exists():
            source = self.rules_path
        else:
            logger.warning(f"Pricing structure not found at {self.rules_path}, using packaged defaults")
            source = DEFAULT_RULES_PATH

        try:
            data = _read_json(source)
        except ValueError as e:
            logger.error(f"Could not parse {source}: {e}")
            raise RulesTableError([f"Could not parse {source}: {e}"]) from e
        table = PricingRulesTable.from_dict(data)
        self.loaded_at = datetime.now().isoformat()
        logger.info(f"Loaded pricing structure from {source}")
        return table

    def snapshot(self) -> PricingRulesTable:
        """The current rules table. Never mutated; replaced wholesale on update."""
        return self._snapshot

    def reload(self) -> PricingRulesTable:
        """Re-read the rules file from disk and swap it in."""
        with self._lock:
            self._snapshot = self._load()
            return self._snapshot

    def update(self, data: Any) -> UpdateResult:
        """
        Replace the pricing structure.

        Validates first; on success backs up the current file, writes the new
        one atomically and swaps the snapshot.

        Raises:
            RulesTableError: if the structure is invalid (nothing is written)
        """
        fields, errors, warnings = validate_structure(data)
        if errors:
            logger.warning(f"Rejected pricing update with {len(errors)} error(s)")
            raise RulesTableError(errors, warnings)
        table = PricingRulesTable(**fields)

        with self._lock:
            backup = self._backup_current()
            self._write(table)
            self._snapshot = table
            self.loaded_at = datetime.now().isoformat()

        logger.info(f"Pricing structure updated (backup: {backup or 'none'})")
        return UpdateResult(table=table, backup=backup, warnings=warnings)

    def _backup_current(self) -> Optional[str]:
        """Copy the current rules file into the backups directory."""
        if not self.rules_path.exists():
            return None

        self.backups_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime('%Y%m%d-%H%M%S-%f')
        backup_path = self.backups_dir / f"{BACKUP_PREFIX}{stamp}.json"
        counter = 1
        while backup_path.exists():
            backup_path = self.backups_dir / f"{BACKUP_PREFIX}{stamp}-{counter}.json"
            counter += 1
        backup_path.write_bytes(self.rules_path.read_bytes())
        return backup_path.name

    def _write(self, table: PricingRulesTable):
        """Write the table to the rules file via a temp file + rename."""
        self.rules_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.rules_path.parent, prefix='.pricing-', suffix='.json'
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(table.to_dict(), f, indent=2)
                f.write("\n")
            os.replace(tmp_name, self.rules_path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def list_backups(self) -> list[BackupInfo]:
        """List backup files, newest first."""
        if not self.backups_dir.exists():
            return []

        backups = []
        for path in self.backups_dir.glob(f"{BACKUP_PREFIX}*.json"):
            stat = path.stat()
            backups.append(BackupInfo(
                filename=path.name,
                size=stat.st_size,
                created_at=datetime.fromtimestamp(stat.st_mtime).isoformat(),
            ))
        # Timestamped names sort chronologically
        backups.sort(key=lambda b: b.filename, reverse=True)
        return backups

    def get_stats(self) -> dict:
        """Summary of the current snapshot."""
        return {
            "rules_path": str(self.rules_path),
            "loaded_at": self.loaded_at,
            "counts": self.snapshot().counts(),
            "backups": len(self.list_backups()),
        }
