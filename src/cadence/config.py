"""Configuration management for Cadence."""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

CADENCE_HOME = Path(os.environ.get("CADENCE_HOME", Path.home() / "cadence"))
CONFIG_FILE = CADENCE_HOME / "config" / "cadence.conf"
DATA_DIR = CADENCE_HOME / "data"
WORK_HOURS_RE = re.compile(r"^(\d{1,2})(?::(\d{2}))?-(\d{1,2})(?::(\d{2}))?$")


@dataclass
class Config:
    """Cadence configuration."""

    work_hours: str = "09:00-18:00"
    slot_minutes: int = 30
    horizon_days: int = 7
    suggestion_count: int = 5
    data_dir: str = ""

    @property
    def work_start_hour(self) -> int:
        return int(self.work_hours.split("-")[0].split(":")[0])

    @property
    def work_end_hour(self) -> int:
        return int(self.work_hours.split("-")[1].split(":")[0])

    @property
    def tasks_file(self) -> Path:
        data_dir = Path(self.data_dir).expanduser() if self.data_dir else DATA_DIR
        return data_dir / "tasks.json"


def _parse_work_hours(value: str) -> tuple[int, int] | None:
    """Whole-hour range like 09:00-18:00, or None if unusable."""
    parsed = WORK_HOURS_RE.match(value)
    if not parsed:
        logger.warning(f"Ignoring WORK_HOURS={value!r}: expected HH:00-HH:00")
        return None
    start_hour, start_minute, end_hour, end_minute = parsed.groups()
    if start_minute not in (None, "00") or end_minute not in (None, "00"):
        logger.warning(f"Ignoring WORK_HOURS={value!r}: work hours must start and end on the hour")
        return None
    start, end = int(start_hour), int(end_hour)
    if not 0 <= start < end <= 24:
        logger.warning(f"Ignoring WORK_HOURS={value!r}: hours must satisfy 0 <= start < end <= 24")
        return None
    return start, end


def _parse_positive_int(key: str, value: str, default: int) -> int:
    try:
        parsed = int(value)
    except ValueError:
        logger.warning(f"Ignoring {key.upper()}={value!r}: not an integer")
        return default
    if parsed < 1:
        logger.warning(f"Ignoring {key.upper()}={value!r}: must be at least 1")
        return default
    return parsed


def load_config() -> Config:
    """Load configuration from cadence.conf file."""
    config = Config()

    if not CONFIG_FILE.exists():
        return config

    for line in CONFIG_FILE.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = value.strip()

        # Handle quoted values with inline comments: "value" # comment
        if value[:1] in ('"', "'"):
            quote = value[0]
            end_quote = value.find(quote, 1)
            value = value[1:end_quote] if end_quote != -1 else value[1:]
        elif "#" in value:
            value = value.split("#")[0].strip()

        match key:
            case "work_hours":
                if _parse_work_hours(value):
                    config.work_hours = value
            case "slot_minutes":
                config.slot_minutes = _parse_positive_int(key, value, config.slot_minutes)
            case "horizon_days":
                config.horizon_days = _parse_positive_int(key, value, config.horizon_days)
            case "suggestion_count":
                config.suggestion_count = _parse_positive_int(key, value, config.suggestion_count)
            case "data_dir":
                config.data_dir = value

    return config
