"""Tests for the configuration serializer."""

import pytest
from simpleconfigs import ConfigFormatError
from simpleconfigs import SectionIndex
from simpleconfigs import parse
from simpleconfigs import render_value
from simpleconfigs import serialize


class TestRenderValue:
    """Test value rendering."""

    def test_scalar(self):
        """Test scalars render verbatim."""
        assert render_value("hello") == "hello"

    def test_list(self):
        """Test lists render bracketed with comma-space separators."""
        assert render_value(["a", "b", "c"]) == "[a, b, c]"

    def test_empty_list(self):
        """Test empty lists render as []."""
        assert render_value([]) == "[]"


class TestSerialize:
    """Test rebuilding text from a store."""

    def test_flat(self):
        """Test top-level entries render without headers."""
        assert serialize({"a": "1", "b": ["x"]}, SectionIndex()) == "a = 1\nb = [x]\n"

    def test_nested(self):
        """Test section headers and indentation are reconstructed."""
        sections = SectionIndex()
        sections.add(0, "top")
        sections.add(4, "sub")
        text = serialize({"top.sub.k": "v", "other": "1"}, sections)
        assert text == "top:\n    sub:\n        k = v\nother = 1\n"

    def test_contiguous_store_keeps_order(self):
        """Test already-grouped stores are emitted in store order."""
        text = "a:\n    b:\n        k = 1\n    j = 2\nz = 3\n"
        store, sections = parse(text)
        assert serialize(store, sections) == text

    def test_interleaved_sections_are_grouped(self):
        """Test keys of one section are gathered under a single header."""
        sections = SectionIndex()
        sections.register_path(["s1"])
        sections.register_path(["s2"])
        store = {"s1.a": "1", "s2.b": "2", "s1.c": "3"}

        text = serialize(store, sections)

        assert text == "s1:\n    a = 1\n    c = 3\ns2:\n    b = 2\n"
        assert text.count("s1:") == 1
        reparsed, _ = parse(text)
        assert reparsed == store

    def test_same_name_under_different_parents(self):
        """Test a subsection name reused under two parents gets two headers."""
        store, sections = parse("a:\n    x:\n        k = 1\nb:\n    x:\n        k = 2\n")
        assert store == {"a.x.k": "1", "b.x.k": "2"}

        text = serialize(store, sections)

        assert text.count("    x:") == 2
        assert parse(text)[0] == store

    def test_missing_section_indent(self):
        """Test an unregistered section cannot be serialized."""
        with pytest.raises(ConfigFormatError, match='No indent for configuration section "ghost"'):
            serialize({"ghost.k": "v"}, SectionIndex())

    def test_comments_dropped(self):
        """Test comments do not survive a round trip."""
        store, sections = parse("# comment\nk = v\n")
        assert serialize(store, sections) == "k = v\n"


class TestRoundTrip:
    """Test parse/serialize round trips."""

    SAMPLE = """\
# Sample configuration
indep_entry_1 = -10
test_section:
    sub_1:
        a = qwe
        b = rty
    sub_2:
        a = uio
        abc:
            test_list = [a, s, d, f]
            pi = 3.14
        empty = []
    x0_formula = -b/2a
indep_entry_2 = -9
"""

    def test_round_trip_content_equal(self):
        """Test serialize(parse(T)) parses back to the same store."""
        store, sections = parse(self.SAMPLE)
        again, _ = parse(serialize(store, sections))
        assert again == store

    def test_idempotent(self):
        """Test re-serializing a reparsed store yields identical text."""
        store, sections = parse(self.SAMPLE)
        first = serialize(store, sections)
        second = serialize(*parse(first))
        assert first == second

    def test_sample_keys(self):
        """Test the sample flattens to the expected dotted keys."""
        store, _ = parse(self.SAMPLE)
        assert store["test_section.sub_2.abc.test_list"] == ["a", "s", "d", "f"]
        assert store["test_section.sub_2.empty"] == []
        assert store["test_section.x0_formula"] == "-b/2a"
        assert store["indep_entry_2"] == "-9"
