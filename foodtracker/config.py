"""TOML configuration loader for the tracker."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from .pricing.currency import ANCHOR_CURRENCY, DEFAULT_RATES, CurrencyConverter

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]


@dataclass
class DatabaseConfig:
    path: str = "~/.config/foodtracker/purchases.db"


@dataclass
class MirrorConfig:
    enabled: bool = True
    path: str = "~/.config/foodtracker/mirror.json"
    key: str = "foodItems"


@dataclass
class CurrencyConfig:
    anchor: str = ANCHOR_CURRENCY
    rates: dict[str, float] = field(default_factory=lambda: dict(DEFAULT_RATES))


@dataclass
class DisplayConfig:
    default_sort: str = "date"


@dataclass
class TrackerConfig:
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    mirror: MirrorConfig = field(default_factory=MirrorConfig)
    currency: CurrencyConfig = field(default_factory=CurrencyConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)


def load_config(path: str | Path | None = None) -> TrackerConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    Storage paths can be overridden via environment variables.

    Raises:
        ValueError: If the currency anchor is missing from the rate table,
            is not quoted at 1.0, or a rate is not positive.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    dbs = raw.get("database", {})
    mir = raw.get("mirror", {})
    cur = raw.get("currency", {})
    dsp = raw.get("display", {})

    # Resolve storage paths: config file → environment variable → default
    db_path = (
        dbs.get("path", "")
        or os.environ.get("FOODTRACKER_DB_PATH", "")
        or DatabaseConfig.path
    )
    mirror_path = (
        mir.get("path", "")
        or os.environ.get("FOODTRACKER_MIRROR_PATH", "")
        or MirrorConfig.path
    )

    # Defaults are quoted against DKK; another anchor needs its own full table
    anchor = cur.get("anchor", ANCHOR_CURRENCY)
    custom = {k: float(v) for k, v in cur.get("rates", {}).items()}
    rates = {**DEFAULT_RATES, **custom} if anchor == ANCHOR_CURRENCY else custom
    CurrencyConverter(rates, anchor=anchor)  # raises ValueError for a bad table

    return TrackerConfig(
        database=DatabaseConfig(path=db_path),
        mirror=MirrorConfig(
            enabled=mir.get("enabled", True),
            path=mirror_path,
            key=mir.get("key", "foodItems"),
        ),
        currency=CurrencyConfig(
            anchor=anchor,
            rates=rates,
        ),
        display=DisplayConfig(
            default_sort=dsp.get("default_sort", "date"),
        ),
    )
