import yaml
import json
import dataclasses
from typing import Optional
from pathlib import Path

from ..configs import GenerationConfig
from ..exceptions import ConfigurationError

def load_config(path: str, section: Optional[str] = None) -> GenerationConfig:
    """
    Load a generator configuration from a YAML or JSON file.

    Args:
        path: Path to the config file.
        section: Optional top-level key holding the generator settings.
            When None the whole file is used.

    Returns:
        GenerationConfig built from the file (defaults fill missing keys).
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(p, 'r') as f:
        if p.suffix == '.json':
            config = json.load(f)
        else:
            # yaml is the default format
            config = yaml.safe_load(f)

    config = config or {}
    if section is not None:
        if section not in config:
            raise ConfigurationError(f"Section '{section}' not found in {path}")
        config = config[section] or {}

    if not isinstance(config, dict):
        raise ConfigurationError(f"Expected a mapping of settings in {path}, got {type(config).__name__}")

    known = {f.name for f in dataclasses.fields(GenerationConfig)}
    unknown = sorted(set(config) - known)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys in {path}: {unknown}")

    return GenerationConfig(**config)
