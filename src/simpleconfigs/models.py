"""Data models and format constants for simpleconfigs."""

from enum import Enum

# Separates an entry's key from its value: `key = value`
ASSIGN_MARK = " = "
# Terminates a section header: `section:`
SECTION_MARK = ":"
COMMENT_MARK = "#"
LIST_OPEN = "["
LIST_CLOSE = "]"
LIST_SEPARATOR = ", "
# Joins section names and the local name into a dotted key
SECTION_SEPARATOR = "."
INDENT_SIZE = 4

Value = str | list[str]
Store = dict[str, Value]


class LineKind(Enum):
    """Classification of a single configuration line."""

    BLANK = "blank"
    COMMENT = "comment"
    SECTION = "section"
    ENTRY = "entry"


class SectionIndex:
    """Section names declared at each indent depth.

    Depths are leading-space counts (multiples of INDENT_SIZE). Names are
    kept in declaration order per depth and registered by bare name only, so
    two sections sharing a name at the same depth map to one record.
    """

    def __init__(self) -> None:
        self._depths: dict[int, dict[str, None]] = {}

    def add(self, indent: int, name: str) -> None:
        """Register a section name at the given indent (duplicates ignored)."""
        self._depths.setdefault(indent, {})[name] = None

    def register_path(self, sections: list[str]) -> None:
        """Register every section of a dotted path at its nesting depth."""
        for depth, name in enumerate(sections):
            self.add(depth * INDENT_SIZE, name)

    def names_at(self, indent: int) -> list[str]:
        return list(self._depths.get(indent, ()))

    def indent_of(self, name: str, preferred: int | None = None) -> int | None:
        """Look up the indent a section name was declared at.

        Args:
            name: Bare section name
            preferred: Depth to try first, typically the section's position
                in the key being serialized

        Returns:
            The preferred depth if the name is declared there, otherwise the
            first depth declaring it, or None if it was never declared
        """
        if preferred is not None and name in self._depths.get(preferred, ()):
            return preferred
        for indent in sorted(self._depths):
            if name in self._depths[indent]:
                return indent
        return None

    def depths(self) -> list[int]:
        return sorted(self._depths)

    def copy(self) -> "SectionIndex":
        clone = SectionIndex()
        for indent, names in self._depths.items():
            clone._depths[indent] = dict(names)
        return clone

    def __contains__(self, name: object) -> bool:
        return any(name in names for names in self._depths.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SectionIndex):
            return NotImplemented
        return {k: set(v) for k, v in self._depths.items()} == {k: set(v) for k, v in other._depths.items()}

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        body = ", ".join(f"{indent}: {list(names)}" for indent, names in sorted(self._depths.items()))
        return f"SectionIndex({{{body}}})"
