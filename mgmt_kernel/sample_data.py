"""
Sample-data loader (``mgmt_kernel.sample_data``).

Responsibility
--------------
Loads the YAML documents bundled with each module and hands back plain
dicts.  The services turn those dicts into validated entities when an
interactive session starts; nothing here is configuration and nothing is
ever written back.

Failure modes
-------------
* Missing file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing section  -> ``KeyError`` from ``require_section``.
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path
from typing import Any

import yaml

from mgmt_kernel.logging_config import get_logger

logger = get_logger("sample_data")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_package_yaml(package: str, filename: str) -> dict[str, Any]:
    """Load a YAML resource shipped inside ``package``."""
    with resources.as_file(resources.files(package).joinpath(filename)) as path:
        data = load_yaml_file(path)
    logger.debug(
        "sample_data_loaded",
        extra={"package": package, "resource": filename, "sections": sorted(data)},
    )
    return data


def require_section(data: dict[str, Any], name: str) -> list[dict[str, Any]]:
    """Return a list section of a loaded document, or raise ``KeyError``."""
    if name not in data:
        raise KeyError(f"sample data has no {name!r} section")
    return list(data[name] or [])
