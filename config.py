"""Configuration settings for the MPP Parser Service."""

import json
import logging
from datetime import datetime, tzinfo
from pathlib import Path
from typing import List, Optional
from zoneinfo import ZoneInfo

from pydantic import Field
from pydantic_settings import BaseSettings
from rich.console import Console
from rich.logging import RichHandler


class Settings(BaseSettings):
    """Global settings for the MPP Parser Service.

    Settings can be overridden via environment variables with MPP_PARSER_ prefix.
    Example: MPP_PARSER_LOCAL_TIMEZONE=Europe/Madrid
    """

    service_name: str = Field(
        default="MPP Parser Service",
        description="Name reported by the health endpoint"
    )

    # Upload validation
    allowed_extensions: List[str] = Field(
        default_factory=lambda: [".mpp", ".mpx", ".mpt", ".xml"],
        description="File suffixes accepted by the parse operation"
    )

    # Dates
    datetime_format: str = Field(
        default="%Y-%m-%dT%H:%M:%S",
        description="strftime pattern for datetimes on the wire (no offset)"
    )
    local_timezone: Optional[str] = Field(
        default=None,
        description="IANA zone used to localize calendar timestamps; system zone when unset"
    )

    # Durations
    default_minutes_per_day: int = Field(
        default=480,
        gt=0,
        description="Working minutes per day when the document does not declare one"
    )

    # HTTP service
    host: str = Field(default="0.0.0.0", description="Bind address for `main.py serve`")
    port: int = Field(default=8080, description="Bind port for `main.py serve`")
    cors_origins: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by the CORS middleware"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for JSON-lines log output"
    )

    model_config = {
        "env_prefix": "MPP_PARSER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def get_local_timezone(self) -> Optional[tzinfo]:
        """Zone that calendar timestamps are converted into.

        None means the system zone; datetime.fromtimestamp and astimezone then
        apply its rules (daylight saving included) at each instant.
        """
        if self.local_timezone:
            return ZoneInfo(self.local_timezone)
        return None

    def is_allowed_extension(self, file_name: str) -> bool:
        """Check a file name's suffix against allowed_extensions (case-insensitive)."""
        suffix = Path(file_name).suffix.lower()
        return suffix in {ext.lower() for ext in self.allowed_extensions}

    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path as Path object."""
        return Path(self.log_file) if self.log_file else None


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record, for machine-readable log files."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def configure_logging(level: Optional[str] = None, log_file: Optional[Path] = None) -> None:
    """Install rich console logging (and an optional JSON file handler) on the root logger.

    Safe to call more than once; handlers installed by a previous call are replaced.
    """
    root = logging.getLogger()
    root.setLevel((level or settings.log_level).upper())

    for handler in list(root.handlers):
        if getattr(handler, "_mpp_parser", False):
            root.removeHandler(handler)

    console_handler = RichHandler(
        console=Console(stderr=True), rich_tracebacks=True, show_path=False
    )
    console_handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    console_handler._mpp_parser = True
    root.addHandler(console_handler)

    log_file = log_file or settings.get_log_file_path()
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JsonLineFormatter())
        file_handler._mpp_parser = True
        root.addHandler(file_handler)


# Create singleton instance
settings = Settings()
