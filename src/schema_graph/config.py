"""Loading resolution settings from .sgc config files."""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Any

from schema_graph.parsing.config_parser import ConfigParser
from schema_graph.types import ResolutionConfig

DATA_DIR = Path(__file__).parent / "data"

# Curated cycle seeds for the vSphere API reference documentation
VSPHERE_CONFIG_PATH = DATA_DIR / "vsphere.sgc"


def parse_config(text: str) -> ResolutionConfig:
    """Parse config text into a ResolutionConfig.

    Raises:
        SyntaxError: On malformed input.
        ValueError: On unknown settings or invalid values.
    """
    return ConfigParser().parse(text)


def load_config(path: Path | str) -> ResolutionConfig:
    """Load a ResolutionConfig from a .sgc file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    return parse_config(path.read_text(encoding="utf-8"))


def vsphere_config() -> ResolutionConfig:
    """Return the bundled vSphere configuration."""
    return load_config(VSPHERE_CONFIG_PATH)


def with_overrides(config: ResolutionConfig, **overrides: Any) -> ResolutionConfig:
    """Return a copy of ``config`` with the non-None ``overrides`` applied."""
    changes = {key: value for key, value in overrides.items() if value is not None}
    return dataclasses.replace(config, **changes)
