"""
Centralized settings and path configuration for the pricing service.
"""
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 4 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


@dataclass
class Settings:
    """Application settings with sensible defaults."""
    
    project_root: Path
    
    # Rules table (JSON) and its backups
    pricing_structure: Path
    backups_dir: Path
    
    # Flat price list used by the CSV tooling
    price_list_csv: Path
    
    log_level: str = "INFO"
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    
    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        load_dotenv()
        root = project_root or get_project_root()
        data_dir = root / 'data'
        
        pricing_structure = os.getenv("CAKE_PRICING_STRUCTURE")
        backups_dir = os.getenv("CAKE_PRICING_BACKUPS")
        origins = os.getenv("CORS_ORIGINS", "*")
        
        return cls(
            project_root=root,
            pricing_structure=Path(pricing_structure) if pricing_structure else data_dir / 'pricing-structure.json',
            backups_dir=Path(backups_dir) if backups_dir else data_dir / 'backups',
            price_list_csv=data_dir / 'price-list.csv',
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            api_host=os.getenv("APP_HOST", "0.0.0.0"),
            api_port=int(os.getenv("APP_PORT", "5000")),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
