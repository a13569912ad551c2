"""Tests for utility functions."""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest
from simpleconfigs import ConfigFileError
from simpleconfigs import ConfigFormatError
from simpleconfigs.utils import flatten
from simpleconfigs.utils import read_text
from simpleconfigs.utils import unflatten
from simpleconfigs.utils import write_text


class TestFlatten:
    """Test flatten and unflatten functions."""

    def test_empty(self):
        """Test flattening an empty mapping."""
        assert flatten({}) == {}
        assert unflatten({}) == {}

    def test_nested(self):
        """Test nested mappings become dotted keys in order."""
        nested = {"a": 1, "b": {"c": 2, "d": {"e": 3}}}
        flat = flatten(nested)
        assert flat == {"a": 1, "b.c": 2, "b.d.e": 3}
        assert list(flat) == ["a", "b.c", "b.d.e"]

    def test_lists_are_values(self):
        """Test lists are not descended into."""
        assert flatten({"a": {"l": [1, 2]}}) == {"a.l": [1, 2]}

    def test_unflatten_nested(self):
        """Test dotted keys nest back into mappings."""
        assert unflatten({"a": 1, "b.c": 2, "b.d.e": 3}) == {"a": 1, "b": {"c": 2, "d": {"e": 3}}}

    def test_unflatten_value_and_section_conflict(self):
        """Test a key cannot be both a value and a section."""
        with pytest.raises(ConfigFormatError):
            unflatten({"a": 1, "a.b": 2})
        with pytest.raises(ConfigFormatError):
            unflatten({"a.b": 2, "a": 1})


class TestFileAccess:
    """Test read_text and write_text functions."""

    @pytest.fixture
    def tmpdir_path(self):
        """Create a temporary directory for testing."""
        with TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    def test_write_then_read(self, tmpdir_path):
        """Test text survives a write/read cycle."""
        path = tmpdir_path / "nested" / "app.conf"
        write_text(path, "k = v\n")
        assert read_text(path) == "k = v\n"

    def test_write_replaces_existing(self, tmpdir_path):
        """Test writing overwrites an existing file."""
        path = tmpdir_path / "app.conf"
        write_text(path, "long = contents\n")
        write_text(path, "k = v\n")
        assert read_text(path) == "k = v\n"

    def test_read_missing(self, tmpdir_path):
        """Test reading a missing file names the path."""
        path = tmpdir_path / "missing.conf"
        with pytest.raises(ConfigFileError, match="missing.conf"):
            read_text(path)

    def test_write_into_file_path_fails(self, tmpdir_path):
        """Test write failures are wrapped."""
        blocker = tmpdir_path / "blocker"
        blocker.write_text("not a directory")
        with pytest.raises(ConfigFileError):
            write_text(blocker / "app.conf", "k = v\n")
