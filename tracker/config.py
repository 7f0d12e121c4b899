"""Runtime configuration.

Values come from the environment (optionally a ``.env`` file):

    FINTRACK_DATA_PATH        JSON store file (default: data/seed.json)
    FINTRACK_LOG_LEVEL        logging level name (default: INFO)
    FINTRACK_WINDOW_SIZE      months in the trailing series (default: 6)
    FINTRACK_REFERENCE_MONTH  YYYY-MM treated as "now" (default: today's month)
"""
import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from tracker.aggregation import DEFAULT_WINDOW_SIZE
from tracker.domain import current_month_year, parse_month_key

_PROJECT_ROOT = Path(__file__).parent.parent.resolve()
DEFAULT_DATA_PATH = _PROJECT_ROOT / "data" / "seed.json"


@dataclass(frozen=True)
class AggregationConfig:
    window_size: int = DEFAULT_WINDOW_SIZE
    reference_month: Optional[str] = None

    def __post_init__(self):
        if self.window_size < 1:
            raise ValueError(f"window_size must be at least 1, got {self.window_size}")
        if self.reference_month is not None:
            parse_month_key(self.reference_month)

    def resolve_reference_month(self, today: Optional[date] = None) -> str:
        return self.reference_month or current_month_year(today)


@dataclass(frozen=True)
class Settings:
    data_path: Path
    log_level: str
    aggregation: AggregationConfig


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    if env is None:
        load_dotenv()
        env = os.environ

    return Settings(
        data_path=Path(env.get("FINTRACK_DATA_PATH") or DEFAULT_DATA_PATH),
        log_level=(env.get("FINTRACK_LOG_LEVEL") or "INFO").upper(),
        aggregation=AggregationConfig(
            window_size=_int_setting(env, "FINTRACK_WINDOW_SIZE", DEFAULT_WINDOW_SIZE),
            reference_month=env.get("FINTRACK_REFERENCE_MONTH") or None,
        ),
    )
