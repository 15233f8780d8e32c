"""YAML file storage for persisted vehicles and service log."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from .exceptions import PersistenceFailure

logger = logging.getLogger(__name__)

NAMESPACE = "maintenance_tracker"
VEHICLES_KEY = f"{NAMESPACE}.vehicles"
MAINTENANCE_LOG_KEY = f"{NAMESPACE}.log"


class YamlStorage:
    """
    Key/value document storage: one YAML file per key in a directory.

    Each document is a list of field-named mappings. A missing key loads as
    an empty list. Any I/O or YAML fault is raised as PersistenceFailure.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.yaml"

    def load(self, key: str) -> List[Dict[str, Any]]:
        path = self.path_for(key)
        if not path.exists():
            return []
        try:
            with open(path, "r") as fp:
                data = yaml.load(fp, Loader=yaml.SafeLoader)
        except (OSError, yaml.YAMLError) as e:
            raise PersistenceFailure(key, f"load failed: {e}") from e
        if data is None:
            return []
        if not isinstance(data, list):
            raise PersistenceFailure(key, f"expected a list, got {type(data).__name__}")
        return data

    def save(self, key: str, items: List[Dict[str, Any]]) -> None:
        """Write a document atomically (temp file, then rename)."""
        path = self.path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w") as fp:
                    yaml.dump(
                        items,
                        fp,
                        default_flow_style=False,
                        allow_unicode=True,
                        sort_keys=False,
                        width=120,
                    )
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, yaml.YAMLError) as e:
            raise PersistenceFailure(key, f"save failed: {e}") from e
        logger.debug("Saved %d records to %s", len(items), path)
