"""Global configuration and defaults for bmsim."""

from __future__ import annotations

import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class SimulationConfig:
    """Tick-simulation parameters."""

    minutes: int = 0
    report_every: int = 15  # minutes between progress log lines
    fire_drill: Optional[str] = None  # room type to drill, "ALL" for every room


@dataclass
class Config:
    """Top-level configuration."""

    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    encoding: str = "utf-8"
    debug_output_dir: Optional[Path] = None

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML file."""
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}

        sim_data = data.get("simulation", {})
        debug_dir = data.get("debug_output_dir")

        return cls(
            simulation=SimulationConfig(**sim_data) if sim_data else SimulationConfig(),
            encoding=data.get("encoding", "utf-8"),
            debug_output_dir=Path(debug_dir) if debug_dir else None,
        )

    @classmethod
    def default(cls) -> "Config":
        return cls()
