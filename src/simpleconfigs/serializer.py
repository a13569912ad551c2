"""Serializer rebuilding configuration text from a flat dotted-key store."""

import logging
from collections.abc import Iterator

from .exceptions import ConfigFormatError
from .models import ASSIGN_MARK
from .models import INDENT_SIZE
from .models import LIST_CLOSE
from .models import LIST_OPEN
from .models import LIST_SEPARATOR
from .models import SECTION_MARK
from .models import SECTION_SEPARATOR
from .models import SectionIndex
from .models import Store
from .models import Value

logger = logging.getLogger(__name__)


def render_value(value: Value) -> str:
    """Render a stored value in its textual form.

    Examples:
        >>> render_value(["a", "b"])
        '[a, b]'

        >>> render_value([])
        '[]'
    """
    if isinstance(value, list):
        return LIST_OPEN + LIST_SEPARATOR.join(str(item) for item in value) + LIST_CLOSE
    return str(value)


class _SectionNode:
    """Entries and subsections of one section, in first-seen order."""

    def __init__(self, name: str | None = None) -> None:
        self.name = name
        # Each child is either ("entry", local_name, value) or ("section", node)
        self.children: list[tuple] = []
        self.subsections: dict[str, "_SectionNode"] = {}

    def subsection(self, name: str) -> "_SectionNode":
        node = self.subsections.get(name)
        if node is None:
            node = _SectionNode(name)
            self.subsections[name] = node
            self.children.append(("section", node))
        return node


def group_by_section(store: Store) -> _SectionNode:
    """Group keys into a section tree.

    Keys of a section are gathered under that section even when the store
    interleaves them with keys of other sections. Sections and entries keep
    the order in which they were first seen.
    """
    root = _SectionNode()
    for key, value in store.items():
        *sections, local_name = key.split(SECTION_SEPARATOR)
        node = root
        for name in sections:
            node = node.subsection(name)
        node.children.append(("entry", local_name, value))
    return root


def _emit(node: _SectionNode, sections: SectionIndex, depth: int) -> Iterator[str]:
    for child in node.children:
        if child[0] == "entry":
            _, local_name, value = child
            yield " " * (depth * INDENT_SIZE) + local_name + ASSIGN_MARK + render_value(value)
            continue

        subsection = child[1]
        indent = sections.indent_of(subsection.name, preferred=depth * INDENT_SIZE)
        if indent is None:
            raise ConfigFormatError(f'No indent for configuration section "{subsection.name}"')
        yield " " * indent + subsection.name + SECTION_MARK
        yield from _emit(subsection, sections, depth + 1)


def serialize(store: Store, sections: SectionIndex) -> str:
    """Render a store as configuration text.

    Args:
        store: Dotted keys mapped to values
        sections: Indent depths of every section named in the store

    Returns:
        Configuration text, one line per header or entry, `\\n` terminated

    Raises:
        ConfigFormatError: If a section has no recorded indent
    """
    lines = list(_emit(group_by_section(store), sections, 0))
    logger.debug(f"Serialized {len(store)} entries into {len(lines)} lines")
    return "".join(line + "\n" for line in lines)
