# pathviz/app/settings.py
#!/usr/bin/env python3
"""
Viewer settings.

Each value comes from an environment variable and can be overridden on the
command line with --key=value:

    PATHVIZ_SIZE       --size=10            grid side length
    PATHVIZ_HEURISTIC  --heuristic=manhattan  manhattan | zero
    PATHVIZ_MAP        --map=pathviz/maps/02_detour.json
    PATHVIZ_SAVE       --save=custom_map.json  where [S] writes the layout
    PATHVIZ_SPEED      --speed=2            replay steps per second (1..60)
    PATHVIZ_LOG_LEVEL  --log-level=INFO
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

from pathviz.core.heuristics import HEURISTICS

logger = logging.getLogger(__name__)

MIN_SPEED, MAX_SPEED = 1, 60
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_ENV = {
    "size": "PATHVIZ_SIZE",
    "heuristic": "PATHVIZ_HEURISTIC",
    "map": "PATHVIZ_MAP",
    "save": "PATHVIZ_SAVE",
    "speed": "PATHVIZ_SPEED",
    "log-level": "PATHVIZ_LOG_LEVEL",
}


@dataclass
class Settings:
    size: int = 10
    heuristic: str = "manhattan"
    map_path: Optional[Path] = None
    save_path: Path = Path("custom_map.json")  # relative to the working directory
    steps_per_sec: int = 2  # one step per 500 ms
    log_level: str = "INFO"


def _raw_values(argv: Sequence[str], environ: Mapping[str, str]) -> dict:
    raw = {k: environ[v] for k, v in _ENV.items() if environ.get(v)}
    for arg in argv:
        if not arg.startswith("--") or "=" not in arg:
            continue
        key, value = arg[2:].split("=", 1)
        if key in _ENV:
            raw[key] = value
    return raw


def resolve_settings(argv: Optional[Sequence[str]] = None,
                     environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from environment then argv; bad values keep the default."""
    argv = list(argv) if argv is not None else []
    environ = environ if environ is not None else os.environ
    raw = _raw_values(argv, environ)
    s = Settings()

    if "size" in raw:
        try:
            size = int(raw["size"])
            if size < 2:
                raise ValueError(size)
            s.size = size
        except ValueError:
            logger.warning("Ignoring invalid grid size %r", raw["size"])

    if "heuristic" in raw:
        name = raw["heuristic"].lower()
        if name in HEURISTICS:
            s.heuristic = name
        else:
            logger.warning("Unknown heuristic %r, using %s", raw["heuristic"], s.heuristic)

    if "map" in raw:
        s.map_path = Path(raw["map"])

    if "save" in raw:
        s.save_path = Path(raw["save"])

    if "speed" in raw:
        try:
            s.steps_per_sec = max(MIN_SPEED, min(MAX_SPEED, int(raw["speed"])))
        except ValueError:
            logger.warning("Ignoring invalid speed %r", raw["speed"])

    if "log-level" in raw:
        level = raw["log-level"].upper()
        if level in LOG_LEVELS:
            s.log_level = level
        else:
            logger.warning("Unknown log level %r", raw["log-level"])

    return s
