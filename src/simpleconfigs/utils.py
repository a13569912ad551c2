"""Utility functions for simpleconfigs."""

import logging
from pathlib import Path
from typing import Any

from .exceptions import ConfigFileError
from .exceptions import ConfigFormatError
from .models import SECTION_SEPARATOR

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


def read_text(path: str | Path) -> str:
    """Read a configuration file.

    Args:
        path: Path to the file

    Returns:
        File contents decoded as UTF-8

    Raises:
        ConfigFileError: If the file is missing or unreadable
    """
    path = Path(path)
    if not path.exists():
        raise ConfigFileError(f"No such file: {path.absolute()}")

    try:
        with open(path, encoding=ENCODING) as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileError(f"Failed to read configuration from {path}: {e}") from e


def write_text(path: str | Path, text: str) -> None:
    """Write a configuration file, replacing any existing one.

    Args:
        path: Path to the file
        text: Configuration text

    Raises:
        ConfigFileError: If write fails
    """
    path = Path(path)

    # Ensure directory exists
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding=ENCODING, newline="\n") as f:
            f.write(text)
    except OSError as e:
        raise ConfigFileError(f"Failed to write configuration to {path}: {e}") from e

    logger.debug(f"Wrote {len(text)} characters to {path}")


def flatten(mapping: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested mappings into dotted keys.

    Keys are emitted in mapping order, depth first. Empty nested mappings
    produce no keys.

    Examples:
        >>> flatten({"a": 1, "b": {"c": 2, "d": {"e": 3}}})
        {'a': 1, 'b.c': 2, 'b.d.e': 3}
    """
    result: dict[str, Any] = {}

    for key, value in mapping.items():
        full_key = f"{prefix}{SECTION_SEPARATOR}{key}" if prefix else str(key)
        if isinstance(value, dict):
            result.update(flatten(value, full_key))
        else:
            result[full_key] = value

    return result


def unflatten(flat: dict[str, Any]) -> dict[str, Any]:
    """Nest dotted keys into mappings.

    Inverse of flatten. A dotted path that runs through a key already holding
    a plain value cannot be nested.

    Examples:
        >>> unflatten({"a": 1, "b.c": 2, "b.d.e": 3})
        {'a': 1, 'b': {'c': 2, 'd': {'e': 3}}}

    Raises:
        ConfigFormatError: If a key is both a value and a section
    """
    result: dict[str, Any] = {}

    for key, value in flat.items():
        *sections, local_name = key.split(SECTION_SEPARATOR)
        node = result
        for name in sections:
            child = node.setdefault(name, {})
            if not isinstance(child, dict):
                raise ConfigFormatError(f"'{name}' in '{key}' is both a value and a section")
            node = child
        if isinstance(node.get(local_name), dict):
            raise ConfigFormatError(f"'{key}' is both a value and a section")
        node[local_name] = value

    return result
