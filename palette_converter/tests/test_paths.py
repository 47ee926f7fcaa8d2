#!/usr/bin/env python3
"""
Tests for output path synthesis
"""

import os

import pytest
from hypothesis import given
from hypothesis import strategies as st

from palette_converter.models import Container, Entry
from palette_converter.paths import ensure_parent_dir, relative_segments, sanitize, synthesize


def nested_entry(base, names, root_name="a.pac"):
    """Entry inside the archive <base>/<root_name> at the given inner path"""
    archive_path = os.path.join(base, root_name)
    root = Container(name=root_name, primary_path=archive_path)
    return Entry(
        name=names[-1],
        primary_path=archive_path,
        extended_paths=tuple(names),
        data=b"",
        virtual_root=root,
    )


@pytest.mark.unit
class TestSynthesize:
    """Test output path reconstruction"""

    def test_archive_input(self, temp_dir):
        """Test an archive converted on its own: the archive is the root"""
        base = str(temp_dir / "base")
        out = str(temp_dir / "out")
        entry = nested_entry(base, ["sub", "x.hip"])

        result = synthesize(entry, os.path.join(base, "a.pac"), out, "hpl")

        assert result == os.path.join(out, "sub", "x.hpl")

    def test_archive_in_directory_input(self, temp_dir):
        """Test that the archive becomes a directory without its extension"""
        base = str(temp_dir / "base")
        out = str(temp_dir / "out")
        entry = nested_entry(base, ["sub", "x.hip"])

        result = synthesize(entry, base, out, ".hpl")

        assert result == os.path.join(out, "a", "sub", "x.hpl")

    def test_doubly_nested_archive(self, temp_dir):
        base = str(temp_dir / "base")
        out = str(temp_dir / "out")
        entry = nested_entry(base, ["inner.pac", "char_00.hpl"])

        result = synthesize(entry, base, out, ".act")

        assert result == os.path.join(out, "a", "inner", "char_00.act")

    def test_plain_file_in_directory(self, temp_dir):
        base = str(temp_dir / "in")
        out = str(temp_dir / "in_Converted")
        entry = Entry.from_path(os.path.join(base, "sub", "pal.act"))

        result = synthesize(entry, base, out, ".hpl")

        assert result == os.path.join(out, "sub", "pal.hpl")

    def test_single_file_next_to_input(self, temp_dir):
        entry = Entry.from_path(str(temp_dir / "pal.act"))
        result = synthesize(entry, str(temp_dir), str(temp_dir), ".hpl")
        assert result == str(temp_dir / "pal.hpl")

    def test_result_is_absolute(self):
        entry = Entry(name="x.act", primary_path="rel/x.act")
        result = synthesize(entry, "rel", "out", ".hpl")
        assert os.path.isabs(result)
        assert result == os.path.abspath(os.path.join("out", "x.hpl"))

    def test_placeholder_sanitized(self, temp_dir):
        base = str(temp_dir)
        entry = nested_entry(base, ["b?d", "n?me.hpl"])

        result = synthesize(entry, base, str(temp_dir / "out"), ".act")

        assert "?" not in result
        assert result.endswith(os.path.join("a", "b_d", "n_me.act"))

    def test_extension_case_preserved_for_replacement(self, temp_dir):
        entry = Entry.from_path(str(temp_dir / "PAL.ACT"))
        result = synthesize(entry, str(temp_dir), str(temp_dir), ".HPL")
        assert result == str(temp_dir / "PAL.hpl")

    def test_entry_without_extension(self, temp_dir):
        entry = Entry.from_path(str(temp_dir / "palette"))
        result = synthesize(entry, str(temp_dir), str(temp_dir), ".hpl")
        assert result == str(temp_dir / "palette.hpl")

    def test_only_suffix_replaced(self, temp_dir):
        """Test that an extension-like name part elsewhere survives"""
        entry = Entry.from_path(str(temp_dir / "x.act.backup" / "y.act"))
        result = synthesize(entry, str(temp_dir), str(temp_dir / "o"), ".hpl")
        assert result == str(temp_dir / "o" / "x.act.backup" / "y.hpl")


@pytest.mark.unit
def test_relative_segments(temp_dir):
    base = str(temp_dir)
    entry = nested_entry(base, ["x.hpl"])
    assert relative_segments(entry, base) == [f"{os.sep}a.pac", "x.hpl"]


@pytest.mark.unit
@given(st.text(alphabet=st.sampled_from("ab?_/.x"), max_size=40))
def test_sanitize_idempotent(path):
    once = sanitize(path)
    assert sanitize(once) == once
    assert "?" not in once


@pytest.mark.unit
def test_ensure_parent_dir(temp_dir):
    target = temp_dir / "a" / "b" / "file.hpl"
    ensure_parent_dir(str(target))
    ensure_parent_dir(str(target))
    assert target.parent.is_dir()
