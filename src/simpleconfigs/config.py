"""Configuration object: a parsed store with typed accessors and saving."""

import logging
import re
from collections.abc import Callable
from collections.abc import Iterator
from pathlib import Path
from typing import Any
from typing import TypeVar

import yaml

from .exceptions import ConfigFormatError
from .exceptions import ConfigUsageError
from .models import ASSIGN_MARK
from .models import SECTION_SEPARATOR
from .models import SectionIndex
from .models import Store
from .models import Value
from .parser import expand_tabs
from .parser import parse as parse_text
from .parser import parse_value
from .serializer import serialize
from .utils import flatten
from .utils import read_text
from .utils import unflatten
from .utils import write_text

logger = logging.getLogger(__name__)

T = TypeVar("T")

_INTEGER_RE = re.compile(r"[+-]?\d+")
_FLOAT_RE = re.compile(r"[+-]?(?:NaN|Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

_UNSET: Any = object()


def to_text(value: Any) -> Value:
    """Convert a Python value to its stored textual form.

    Sequences become lists of strings, booleans become `true`/`false` and
    everything else goes through str().
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return [_scalar_text(item) for item in value]
    return str(value)


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _bounded_int(bits: int) -> Callable[[str], int]:
    low, high = -(2 ** (bits - 1)), 2 ** (bits - 1) - 1

    def convert(text: str) -> int:
        if not _INTEGER_RE.fullmatch(text):
            raise ValueError(f"not an integer literal: {text!r}")
        number = int(text)
        if not low <= number <= high:
            raise ValueError(f"{number} out of range [{low}, {high}]")
        return number

    return convert


def _to_bool(text: str) -> bool:
    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"not a boolean literal: {text!r}")


def _to_float(text: str) -> float:
    if not _FLOAT_RE.fullmatch(text):
        raise ValueError(f"not a decimal literal: {text!r}")
    return float(text)


def _copy(value: Value | None) -> Value | None:
    return list(value) if isinstance(value, list) else value


def _check_storable(key: str, value: Value) -> None:
    # Values must survive a serialize/parse round trip as a single line
    texts = value if isinstance(value, list) else [value]
    if isinstance(value, str) and not value.strip():
        raise ConfigFormatError(f"Value cannot be empty for '{key}'")
    for text in texts:
        if "\n" in text or "\r" in text:
            raise ConfigFormatError(f"Value for '{key}' cannot contain line breaks")


def _to_char(text: str) -> str:
    if not text:
        raise ValueError("empty string has no first character")
    return text[0]


class Config:
    """Parsed configuration with typed accessors.

    A Config holds an insertion-ordered store of dotted keys and the indent
    of every section those keys name, which is what lets it be written back
    as indented text.

    Args:
        text: Configuration text to parse. An empty Config is created when
            omitted.

    Example:
        ```python
        config = Config("server:\\n    port = 8080\\n")
        config.get_int("server.port")  # 8080
        config.get_string("server.host", "localhost")  # inserts the default
        config.save("app.conf")  # writes only because of the insertion
        ```
    """

    def __init__(self, text: str | None = None):
        """Parse configuration text, or start empty.

        Args:
            text: Configuration text

        Raises:
            ConfigFormatError: If the text is malformed
        """
        if text is None:
            store, sections = {}, SectionIndex()
        else:
            store, sections = parse_text(text)
        self._store: Store = store
        self._sections = sections
        self._dirty = False

    # ===== Construction =====

    @classmethod
    def parse(cls, text: str) -> "Config":
        """Parse configuration text.

        Raises:
            ConfigUsageError: If text is None
            ConfigFormatError: If the text is malformed
        """
        if text is None:
            raise ConfigUsageError("Cannot parse config from None")
        return cls(text)

    @classmethod
    def from_pairs(cls, *kv: str) -> "Config":
        """Build a Config from alternating keys and values.

        Keys may be dotted; their sections are registered at the depth of
        their position in the key. Bracketed values are parsed as lists.

        Args:
            *kv: key1, value1, key2, value2, ...

        Raises:
            ConfigUsageError: If the argument count is odd, an item is None or
                not a string, or a key is the assign mark
            ConfigFormatError: If a key or value is empty, or a value spans
                several lines
        """
        if len(kv) % 2 != 0:
            raise ConfigUsageError("Key-value list length must be a multiple of two")

        config = cls()
        for raw_key, raw_value in zip(kv[0::2], kv[1::2]):
            if raw_key is None or raw_value is None:
                raise ConfigUsageError("Keys and values cannot be None")
            if not isinstance(raw_key, str) or not isinstance(raw_value, str):
                raise ConfigUsageError("Keys and values must be strings")

            key = expand_tabs(raw_key.strip())
            if not key.replace(" ", ""):
                raise ConfigFormatError("Key cannot be empty")
            if raw_key == ASSIGN_MARK or key == ASSIGN_MARK.strip():
                raise ConfigUsageError(f"Invalid key: '{raw_key}'")
            value = expand_tabs(raw_value.strip())
            if not value.replace(" ", ""):
                raise ConfigFormatError(f"Value cannot be empty for '{key}'")

            config._sections.register_path(key.split(SECTION_SEPARATOR)[:-1])
            stored = parse_value(value)
            _check_storable(key, stored)
            config._store[key] = stored

        return config

    @classmethod
    def from_dict(cls, mapping: dict[str, Any]) -> "Config":
        """Build a Config from nested mappings.

        Nested mappings become sections; everything else is stored as text.

        Raises:
            ConfigFormatError: If a value is None
        """
        config = cls()
        for key, value in flatten(mapping).items():
            if value is None:
                raise ConfigFormatError(f"Value cannot be empty for '{key}'")
            config.set(key, value)
        config._dirty = False
        return config

    @classmethod
    def from_yaml(cls, text: str) -> "Config":
        """Build a Config from a YAML mapping document.

        Raises:
            ConfigFormatError: If the YAML is invalid or not a mapping
        """
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigFormatError(f"Invalid YAML: {e}") from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigFormatError(f"YAML document must be a mapping, got {type(data).__name__}")
        return cls.from_dict(data)

    # ===== File Access =====

    @classmethod
    def read(cls, path: str | Path) -> "Config":
        """Parse a configuration file.

        Raises:
            ConfigUsageError: If path is None
            ConfigFileError: If the file is missing or unreadable
            ConfigFormatError: If the contents are malformed
        """
        if path is None:
            raise ConfigUsageError("Path cannot be None")
        return cls(read_text(path))

    @staticmethod
    def write(path: str | Path, config: "Config") -> None:
        """Write a configuration to a file unconditionally.

        Raises:
            ConfigUsageError: If path or config is None
            ConfigFileError: If write fails
        """
        if config is None:
            raise ConfigUsageError("Config cannot be None")
        if path is None:
            raise ConfigUsageError("Path cannot be None")
        write_text(path, config.to_text())
        logger.info(f"Wrote {len(config)} entries to {path}")

    def save(self, path: str | Path) -> "Config":
        """Write to a file if anything changed since loading or the last save.

        Args:
            path: Target file

        Returns:
            This config
        """
        if not self._dirty:
            logger.info(f"No changes, skipping save to {path}")
            return self
        self.write(path, self)
        self._dirty = False
        return self

    @property
    def is_dirty(self) -> bool:
        """True when the store changed since it was loaded or last saved."""
        return self._dirty

    # ===== Raw Access =====

    def keys(self):
        return self._store.keys()

    def values(self) -> list[Value]:
        return [_copy(value) for value in self._store.values()]

    def items(self) -> list[tuple[str, Value]]:
        return [(key, _copy(value)) for key, value in self._store.items()]

    @property
    def sections(self) -> SectionIndex:
        return self._sections

    def raw(self, key: str) -> Value | None:
        """Get the stored value for key, or None if unset.

        Lists are returned as copies; change them through set().

        Raises:
            ConfigUsageError: If key is None
        """
        if key is None:
            raise ConfigUsageError("Key cannot be None")
        return _copy(self._store.get(key))

    def get(self, key: str) -> Value | None:
        """Get the stored value for key without any coercion, or None if unset."""
        return self.raw(key)

    def get_or_insert(self, key: str, default: Any) -> Value:
        """Get the value for key, storing default first if key is unset.

        This is a mutating read: inserting the default marks the config
        dirty, so a following save() writes it out.

        Args:
            key: Configuration key
            default: Value to store when key is unset

        Returns:
            The stored value (the textual form of default if it was inserted)
        """
        if default is None:
            raise ConfigUsageError("Default cannot be None")
        current = self.raw(key)
        if current is not None:
            return current
        self.set(key, default)
        return _copy(self._store[key])

    def set(self, key: str, value: Any) -> "Config":
        """Set a value, replacing any existing one in place.

        Args:
            key: Configuration key, dotted for entries inside sections
            value: Value to store; sequences are stored as lists

        Returns:
            This config, for chaining

        Raises:
            ConfigUsageError: If key or value is None, or key is invalid
            ConfigFormatError: If the value is blank or spans several lines
        """
        if key is None:
            raise ConfigUsageError("Key cannot be None")
        if not key or key == ASSIGN_MARK:
            raise ConfigUsageError(f"Invalid key: '{key}'")
        if value is None:
            raise ConfigUsageError("Value cannot be None")

        stored = to_text(value)
        _check_storable(key, stored)
        if self._store.get(key) != stored:
            self._dirty = True
        self._store[key] = stored
        self._sections.register_path(key.split(SECTION_SEPARATOR)[:-1])
        return self

    def remove(self, key: str) -> bool:
        """Remove a key.

        Returns:
            True if removed, False if not found
        """
        if self.raw(key) is None:
            return False
        del self._store[key]
        self._dirty = True
        return True

    # ===== Typed Access =====

    def _typed(self, key: str, default: Any, type_name: str, convert: Callable[[str], T]) -> T:
        if default is _UNSET:
            text = self.raw(key)
        else:
            if default is None:
                raise ConfigUsageError(f"Default cannot be None for {type_name}")
            text = self.get_or_insert(key, default)

        article = "an" if type_name[0] in "AEIOU" else "a"
        if not isinstance(text, str):
            raise ConfigFormatError(f"Value at '{key}' is not {article} {type_name}")
        try:
            return convert(text)
        except ValueError as e:
            raise ConfigFormatError(f"Value at '{key}' is not {article} {type_name}") from e

    def get_string(self, key: str, default: str = _UNSET) -> str | None:
        """Get a string value.

        Without a default, returns None for an unset key. With a default, an
        unset key is set to it first.

        Raises:
            ConfigFormatError: If the stored value is a list
        """
        if default is _UNSET and self.raw(key) is None:
            return None
        return self._typed(key, default, "String", str)

    def get_boolean(self, key: str, default: bool = _UNSET) -> bool:
        """Get a boolean value; accepts `true` and `false` in any case."""
        return self._typed(key, default, "Boolean", _to_bool)

    def get_byte(self, key: str, default: int = _UNSET) -> int:
        """Get a signed 8-bit integer."""
        return self._typed(key, default, "Byte", _bounded_int(8))

    def get_short(self, key: str, default: int = _UNSET) -> int:
        """Get a signed 16-bit integer."""
        return self._typed(key, default, "Short", _bounded_int(16))

    def get_int(self, key: str, default: int = _UNSET) -> int:
        """Get a signed 32-bit integer.

        Args:
            key: Configuration key
            default: Stored and returned if key is unset

        Returns:
            The parsed integer

        Raises:
            ConfigFormatError: If the value is missing (and no default is
                given), not a decimal integer, or out of range
        """
        return self._typed(key, default, "Integer", _bounded_int(32))

    def get_long(self, key: str, default: int = _UNSET) -> int:
        """Get a signed 64-bit integer."""
        return self._typed(key, default, "Long", _bounded_int(64))

    def get_float(self, key: str, default: float = _UNSET) -> float:
        """Get a floating point value.

        Accepts decimal and exponent notation plus `NaN` and `Infinity`.
        Underscore digit grouping and Python spellings such as `inf` are
        rejected.
        """
        return self._typed(key, default, "Float", _to_float)

    def get_double(self, key: str, default: float = _UNSET) -> float:
        """Get a floating point value; same grammar as get_float()."""
        return self._typed(key, default, "Double", _to_float)

    def get_char(self, key: str, default: str = _UNSET) -> str:
        """Get the first character of a string value."""
        return self._typed(key, default, "Character", _to_char)

    def get_list(self, key: str, default: list = _UNSET) -> list[str] | None:
        """Get a list value.

        Without a default, returns None for an unset key. With a default, an
        unset key is set to it first.

        Raises:
            ConfigFormatError: If the stored value is not a list
        """
        if default is _UNSET:
            value = self.raw(key)
            if value is None:
                return None
        else:
            if default is None:
                raise ConfigUsageError("Default cannot be None for List")
            value = self.get_or_insert(key, list(default))

        if not isinstance(value, list):
            raise ConfigFormatError(f"Value at '{key}' is not a List")
        return value

    # ===== Conversion =====

    def to_text(self) -> str:
        """Render as configuration text. Comments are not preserved."""
        return serialize(self._store, self._sections)

    def to_dict(self) -> dict[str, Any]:
        """Nested view of the store, sections as mappings."""
        return unflatten({key: _copy(value) for key, value in self._store.items()})

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    # ===== Protocols =====

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"Config({len(self._store)} entries, dirty={self._dirty})"

    def __len__(self) -> int:
        return len(self._store)

    def __iter__(self) -> Iterator[str]:
        return iter(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __getitem__(self, key: str) -> Value:
        return _copy(self._store[key])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Config):
            return NotImplemented
        return self._store == other._store

    __hash__ = None  # type: ignore[assignment]
