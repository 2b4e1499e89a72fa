# pathviz/app/config.py
#!/usr/bin/env python3
"""
Viewer settings.

Resolution order, later wins:
    defaults  ->  ENV (PATHVIZ_ROWS, ...)  ->  CLI (--rows=30, ...)
Bad values are logged and ignored.
"""

import logging
import os
import sys
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence

from pathviz.core.pacing import DEFAULT_DELAY_MS, MIN_DELAY_MS

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Settings:
    rows: int = 20
    cols: int = 20
    delay_ms: int = DEFAULT_DELAY_MS
    obstacle_density: float = 0.3
    log_level: str = "WARNING"


# setting -> (env var, cli flag, parser)
def _size(v: str) -> int:
    n = int(v)
    if n < 2:
        raise ValueError("grid side must be at least 2")
    return n

def _delay(v: str) -> int:
    return max(MIN_DELAY_MS, int(v))

def _density(v: str) -> float:
    d = float(v)
    if not 0.0 <= d <= 1.0:
        raise ValueError("density must be within [0, 1]")
    return d

def _level(v: str) -> str:
    v = v.upper()
    if v not in LOG_LEVELS:
        raise ValueError(f"unknown log level {v}")
    return v

_FIELDS = {
    "rows":             ("PATHVIZ_ROWS",      "--rows",      _size),
    "cols":             ("PATHVIZ_COLS",      "--cols",      _size),
    "delay_ms":         ("PATHVIZ_DELAY_MS",  "--delay",     _delay),
    "obstacle_density": ("PATHVIZ_DENSITY",   "--density",   _density),
    "log_level":        ("PATHVIZ_LOG_LEVEL", "--log-level", _level),
}


def _cli_values(argv: Sequence[str]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for arg in argv:
        if arg.startswith("--") and "=" in arg:
            flag, value = arg.split("=", 1)
            out[flag] = value
    return out


def resolve_settings(argv: Optional[Sequence[str]] = None,
                     env: Optional[Mapping[str, str]] = None) -> Settings:
    argv = sys.argv[1:] if argv is None else argv
    env = os.environ if env is None else env
    cli = _cli_values(argv)

    settings = Settings()
    for name, (env_key, flag, parse) in _FIELDS.items():
        for source, raw in (("env " + env_key, env.get(env_key)), ("flag " + flag, cli.get(flag))):
            if raw is None:
                continue
            try:
                setattr(settings, name, parse(raw))
            except ValueError as ex:
                logger.warning("ignoring %s=%r: %s", source, raw, ex)
    return settings
