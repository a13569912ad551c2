"""Parser turning configuration text into a store and section index."""

import logging

from .exceptions import ConfigFormatError
from .exceptions import ConfigUsageError
from .models import ASSIGN_MARK
from .models import COMMENT_MARK
from .models import INDENT_SIZE
from .models import LIST_CLOSE
from .models import LIST_OPEN
from .models import LIST_SEPARATOR
from .models import SECTION_MARK
from .models import SECTION_SEPARATOR
from .models import LineKind
from .models import SectionIndex
from .models import Store
from .models import Value

logger = logging.getLogger(__name__)


def normalize_line_breaks(text: str) -> str:
    """Convert Windows and classic Mac line breaks to `\\n`."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def expand_tabs(line: str) -> str:
    """Replace every tab with INDENT_SIZE spaces."""
    return line.replace("\t", " " * INDENT_SIZE)


def classify_line(line: str) -> LineKind:
    """Classify a tab-expanded line.

    Args:
        line: Raw line with tabs already expanded

    Returns:
        LineKind of the line. ENTRY is returned for anything that is not
        blank, a comment or a section header; the caller validates it.
    """
    stripped = line.strip()
    if len(stripped.replace(" ", "")) < 2:
        return LineKind.BLANK
    if stripped.startswith(COMMENT_MARK):
        return LineKind.COMMENT
    if stripped.endswith(SECTION_MARK):
        return LineKind.SECTION
    return LineKind.ENTRY


def measure_indent(line: str) -> int:
    """Count leading spaces, requiring a multiple of INDENT_SIZE.

    Raises:
        ConfigFormatError: If the indent is not a multiple of INDENT_SIZE
    """
    indent = len(line) - len(line.lstrip(" "))
    if indent % INDENT_SIZE != 0:
        raise ConfigFormatError(f"Indent size must be a multiple of {INDENT_SIZE}: '{line.strip()}'")
    return indent


def parse_value(text: str) -> Value:
    """Parse a raw value using the list/scalar grammar.

    A value wrapped in `[` and `]` is a list split on `, `; anything else is
    returned verbatim.

    Examples:
        >>> parse_value("[a, b, c]")
        ['a', 'b', 'c']

        >>> parse_value("[]")
        []

        >>> parse_value("plain")
        'plain'
    """
    if text.startswith(LIST_OPEN) and text.endswith(LIST_CLOSE) and len(text) >= 2:
        inner = text[len(LIST_OPEN) : len(text) - len(LIST_CLOSE)]
        if not inner:
            return []
        return inner.split(LIST_SEPARATOR)
    return text


class _ParseState:
    """Section path and indent carried from one line to the next."""

    def __init__(self) -> None:
        self.section_path: list[str] = []
        self.current_indent = 0
        self.store: Store = {}
        self.sections = SectionIndex()

    def _leave_sections(self, indent: int) -> None:
        # Dedent pops back out to the enclosing section at this depth
        if indent < self.current_indent:
            self.section_path = self.section_path[: indent // INDENT_SIZE]

    def feed(self, line: str) -> None:
        line = expand_tabs(line)
        kind = classify_line(line)

        if kind is LineKind.SECTION:
            self._section(line)
        elif kind is LineKind.ENTRY:
            self._entry(line)

    def _section(self, line: str) -> None:
        indent = measure_indent(line)
        self._leave_sections(indent)

        stripped = line.strip()
        name = stripped[: -len(SECTION_MARK)]
        self.sections.add(indent, name)
        self.section_path.append(name)
        self.current_indent = indent

    def _entry(self, line: str) -> None:
        indent = measure_indent(line)
        self._leave_sections(indent)

        stripped = line.strip()
        if ASSIGN_MARK not in stripped:
            raise ConfigFormatError(f"Not a statement: '{stripped}'")
        local_key, _, raw_value = stripped.partition(ASSIGN_MARK)

        if self.section_path:
            key = SECTION_SEPARATOR.join(self.section_path) + SECTION_SEPARATOR + local_key
        else:
            key = local_key
        self.store[key] = parse_value(raw_value.strip())
        self.current_indent = indent


def parse(text: str) -> tuple[Store, SectionIndex]:
    """Parse configuration text.

    Args:
        text: Configuration text with any line-break convention

    Returns:
        Tuple of (store, section index). The store maps dotted keys to
        values in first-seen order.

    Raises:
        ConfigFormatError: If a line is malformed
    """
    if text is None:
        raise ConfigUsageError("Cannot parse config from None")

    state = _ParseState()
    for line in normalize_line_breaks(text).split("\n"):
        state.feed(line)

    logger.debug(f"Parsed {len(state.store)} entries in {len(state.sections.depths())} indent levels")
    return state.store, state.sections
