"""
Centralized settings and path configuration for the circuit pricing service.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    # Walk up from this file to find the project root
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists() or (parent / 'data' / 'categories.csv').exists():
            return parent
    # Fallback to 4 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path
    data_dir: Path

    # Store tables
    categories_csv: Path
    carrier_quotes_csv: Path
    circuit_quotes_csv: Path
    profiles_csv: Path

    # Category build inputs/outputs
    markup_workbook: Path
    category_overrides_csv: Path
    build_report: Path

    # Outbound e-mail
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    notify_from: str = "Universal Platform <noreply@californiatelecom.com>"
    outbox_path: Optional[Path] = None
    platform_url: str = "https://universal.californiatelecom.com/circuit-quotes"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_username and self.smtp_password)

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()
        data_dir = Path(os.environ.get('CIRCUIT_PRICING_DATA_DIR', root / 'data'))

        try:
            smtp_port = int(os.environ.get('SMTP_PORT', '587'))
        except ValueError:
            smtp_port = 587

        return cls(
            project_root=root,
            data_dir=data_dir,
            categories_csv=data_dir / 'categories.csv',
            carrier_quotes_csv=data_dir / 'carrier_quotes.csv',
            circuit_quotes_csv=data_dir / 'circuit_quotes.csv',
            profiles_csv=data_dir / 'profiles.csv',
            markup_workbook=data_dir / 'Markup Policies.xlsx',
            category_overrides_csv=data_dir / 'category_overrides.csv',
            build_report=data_dir / 'outputs' / 'build_report.json',
            smtp_host=os.environ.get('SMTP_HOST') or None,
            smtp_port=smtp_port,
            smtp_username=os.environ.get('SMTP_USERNAME') or None,
            smtp_password=os.environ.get('SMTP_PASSWORD') or None,
            notify_from=os.environ.get('NOTIFY_FROM', cls.notify_from),
            outbox_path=data_dir / 'outputs' / 'outbox.jsonl',
            platform_url=os.environ.get('PLATFORM_URL', cls.platform_url),
            log_level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
            log_json=os.environ.get('LOG_JSON', '').lower() in ('1', 'true', 'yes'),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
