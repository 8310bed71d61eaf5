"""Loading of runner configuration from YAML files."""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from checkmark.config import RunnerConfig

log = logging.getLogger(__name__)


def load_config(path: Path) -> RunnerConfig:
    """Load and validate a runner configuration file.

    Args:
        path: Path to a YAML file holding ``RunnerConfig`` fields

    Returns:
        The validated configuration

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is empty, is not valid YAML, or does not match
            the configuration schema

    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        raise ValueError(f"Empty config file: {path}")

    try:
        config = RunnerConfig.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid config schema in {path}: {e}") from e

    log.debug("Loaded config from %s: %s", path, config)
    return config
