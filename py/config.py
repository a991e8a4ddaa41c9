"""Engine configuration and YAML loading."""
from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from detector import DEFAULT_STOCK_CYCLE_LIMIT
from state import DRAW_MODES

logger = logging.getLogger(__name__)


@dataclass
class KlondikeConfig:
    draw_mode: int = 1
    stock_cycle_limit: int = DEFAULT_STOCK_CYCLE_LIMIT
    auto_complete_step_limit: int = 52
    seed: int | None = None
    check_invariants: bool = True
    auto_stuck_check: bool = True

    def __post_init__(self) -> None:
        if self.draw_mode not in DRAW_MODES:
            msg = f"Draw mode must be one of {DRAW_MODES}, got {self.draw_mode}"
            raise ValueError(msg)
        if self.stock_cycle_limit < 1:
            msg = f"Stock cycle limit must be at least 1, got {self.stock_cycle_limit}"
            raise ValueError(msg)
        if self.auto_complete_step_limit < 1:
            msg = f"Auto-complete step limit must be at least 1, got {self.auto_complete_step_limit}"
            raise ValueError(msg)


def load_config(path: str | Path = "klondike.yaml") -> KlondikeConfig:
    """Load engine settings from a YAML file.

    Parameters
    ----------
    path:
        Path to a YAML mapping whose keys are ``KlondikeConfig`` fields.

    Returns
    -------
    KlondikeConfig
        Settings from the file, defaults for anything it leaves out.
    """
    config_path = Path(path)
    if not config_path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with config_path.open("r", encoding="utf-8") as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Configuration in {path} must be a mapping")

    known = {f.name for f in fields(KlondikeConfig)}
    for key in sorted(set(data) - known):
        logger.warning("Unknown config key '%s' in %s, ignoring", key, path)

    return KlondikeConfig(**{key: value for key, value in data.items() if key in known})
