"""Configuration management for CAPES Research Exporter.

Loads configuration from environment variables with .env file support.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file from project root
_env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(_env_path)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


@dataclass
class ExporterConfig:
    """Export pipeline configuration."""

    navigation_delay: float = 1.2  # Settling delay before leaving a page (seconds)
    resume_delay: float = 0.5  # Pause before re-extracting after a page load
    processing_timeout: float = 30.0  # Watchdog for extraction + decision
    max_page_loads: int = 500  # Page loads per session before handing off to `resume`
    http_timeout: float = 20.0
    user_agent: str = DEFAULT_USER_AGENT
    state_dir: Optional[Path] = None  # Checkpoint directory; platform default if None
    output_dir: Path = Path("./exports")
    http_debug: bool = False

    def validate(self) -> list[str]:
        """Validate configuration values.

        Returns:
            List of validation error messages, empty if valid.
        """
        errors = []
        if self.navigation_delay < 0:
            errors.append("CAPES_EXPORT_NAV_DELAY must not be negative")
        if self.resume_delay < 0:
            errors.append("CAPES_EXPORT_RESUME_DELAY must not be negative")
        if self.processing_timeout <= 0:
            errors.append("CAPES_EXPORT_TIMEOUT must be positive")
        if self.max_page_loads < 1:
            errors.append("CAPES_EXPORT_MAX_PAGE_LOADS must be at least 1")
        if self.http_timeout <= 0:
            errors.append("CAPES_EXPORT_HTTP_TIMEOUT must be positive")
        return errors


def get_config() -> ExporterConfig:
    """Load configuration from environment variables.

    Returns:
        ExporterConfig instance populated from environment.
    """
    state_dir = os.environ.get("CAPES_EXPORT_STATE_DIR")

    return ExporterConfig(
        navigation_delay=float(os.environ.get("CAPES_EXPORT_NAV_DELAY", "1.2")),
        resume_delay=float(os.environ.get("CAPES_EXPORT_RESUME_DELAY", "0.5")),
        processing_timeout=float(os.environ.get("CAPES_EXPORT_TIMEOUT", "30")),
        max_page_loads=int(os.environ.get("CAPES_EXPORT_MAX_PAGE_LOADS", "500")),
        http_timeout=float(os.environ.get("CAPES_EXPORT_HTTP_TIMEOUT", "20")),
        user_agent=os.environ.get("CAPES_EXPORT_USER_AGENT", DEFAULT_USER_AGENT),
        state_dir=Path(state_dir) if state_dir else None,
        output_dir=Path(os.environ.get("CAPES_EXPORT_OUTPUT_DIR", "./exports")),
        http_debug=os.environ.get("CAPES_EXPORT_HTTP_DEBUG", "").lower() == "true",
    )
