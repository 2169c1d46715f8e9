"""
Optional YAML file holding defaults for the e2e environment flags.

Keys are the flag names as typed on the command line, e.g.:

    cluster: my-cluster
    dockerrepo: gcr.io/my-project
    logverbose: true

Values from the file replace the built-in defaults; flags given on the command
line still take precedence.
"""
import os
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from e2e_env.errors import ConfigFileError
from e2e_env.logger import get_logger

logger = get_logger("config_file")


class StrictBaseModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        arbitrary_types_allowed=False,
    )


class FlagsFile(StrictBaseModel):
    cluster: Optional[str] = None
    clusterregion: Optional[str] = None
    logverbose: Optional[bool] = None
    dockerrepo: Optional[str] = None
    emitmetrics: Optional[bool] = None
    tag: Optional[str] = None
    languages: Optional[str] = None


# Flags file key -> argparse destination.
FLAG_DESTINATIONS = {
    "cluster": "cluster",
    "clusterregion": "cluster_region",
    "logverbose": "log_verbose",
    "dockerrepo": "docker_repo",
    "emitmetrics": "emit_metrics",
    "tag": "tag",
    "languages": "languages",
}


def _load_yaml(file_path: str) -> Any:
    if not os.path.isfile(file_path):
        raise ConfigFileError(f"Flags file {file_path} does not exist or is not a file")
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except OSError as e:
        raise ConfigFileError(f"Flags file {file_path} is not readable: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigFileError(f"Invalid YAML in {file_path}: {e}") from e


def load_flag_defaults(file_path: str) -> Dict[str, Any]:
    """
    Load a flags file and return the values it sets, keyed by argparse destination.

    Raises:
        ConfigFileError: If the file cannot be read or does not match `FlagsFile`.
    """
    logger.debug(f"Loading flags file: {file_path}")
    content = _load_yaml(file_path)
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigFileError(
            f"Flags file {file_path} must contain a mapping, got {type(content).__name__}"
        )

    try:
        flags_file = FlagsFile.model_validate(content)
    except ValidationError as e:
        raise ConfigFileError(f"Invalid flags file {file_path}:\n{e}") from e

    values = flags_file.model_dump(exclude_unset=True, exclude_none=True)
    logger.debug(f"Loaded flag defaults: {values}")
    return {FLAG_DESTINATIONS[key]: value for key, value in values.items()}
