#!/usr/bin/env python3
"""
Tests for the FPAC container reader
"""

import gzip

import pytest

from palette_converter.exceptions import ContainerError
from palette_converter.models import Container, Obfuscation
from palette_converter.pac_archive import (
    list_children,
    load_container,
    open_container,
)


@pytest.fixture
def archive_file(temp_dir):
    def write(name, data):
        path = temp_dir / name
        path.write_bytes(data)
        return str(path)
    return write


@pytest.mark.unit
class TestLoadContainer:
    """Test container detection"""

    def test_plain_archive(self, archive_file, make_fpac, hpl_data):
        root = load_container(archive_file("a.pac", make_fpac([("a.hpl", hpl_data)])))
        assert root.obfuscation is Obfuscation.NONE

    def test_compressed_archives(self, archive_file, make_dfasfpac, make_gzip_fpac, hpl_data):
        deflated = load_container(archive_file("a.pac", make_dfasfpac([("a.hpl", hpl_data)])))
        gzipped = load_container(archive_file("b.pac", make_gzip_fpac([("a.hpl", hpl_data)])))

        assert deflated.obfuscation is Obfuscation.FPAC_DEFLATION
        assert gzipped.obfuscation is Obfuscation.SWITCH_COMPRESSION

    def test_root_keeps_decompressed_bytes(self, archive_file, make_gzip_fpac, hpl_data):
        root = load_container(archive_file("a.pac", make_gzip_fpac([("a.hpl", hpl_data)])))
        assert root.get_bytes()[:4] == b"FPAC"

    def test_not_an_archive(self, archive_file, hpl_data):
        assert load_container(archive_file("a.hpl", hpl_data)) is None
        assert load_container(archive_file("empty.pac", b"")) is None

    def test_gzip_of_something_else(self, archive_file):
        assert load_container(archive_file("a.gz", gzip.compress(b"plain text"))) is None

    def test_corrupt_deflate_stream(self, archive_file):
        data = b"DFASFPAC" + b"\x00" * 8 + b"not zlib"
        assert load_container(archive_file("a.pac", data)) is None

    def test_inconsistent_header(self, archive_file):
        assert load_container(archive_file("a.pac", b"FPAC" + b"\xff" * 28)) is None

    def test_missing_paths(self, temp_dir):
        assert load_container(str(temp_dir / "missing.pac")) is None
        assert load_container(str(temp_dir)) is None

    def test_empty_archive_is_valid(self, archive_file, make_fpac):
        root = load_container(archive_file("a.pac", make_fpac([])))
        assert list_children(root) == []


@pytest.mark.unit
class TestListChildren:
    """Test member enumeration"""

    def test_members_in_stored_order(self, archive_file, make_fpac, hpl_data, empty_hpl):
        path = archive_file("chr.pac", make_fpac([
            ("b.hpl", hpl_data), ("a.hpl", empty_hpl),
        ]))

        children = list_children(open_container(path))

        assert [c.name for c in children] == ["b.hpl", "a.hpl"]
        assert children[0].get_bytes() == hpl_data
        assert children[1].get_bytes() == empty_hpl

    def test_child_paths(self, archive_file, make_fpac, hpl_data):
        path = archive_file("chr.pac", make_fpac([("sub\\x.hpl", hpl_data)]))
        root = open_container(path)

        child = list_children(root)[0]

        assert child.name == "x.hpl"
        assert child.primary_path == path
        assert child.extended_paths == ("sub", "x.hpl")
        assert child.virtual_root is root
        assert child.is_nested

    def test_nested_archive_is_container(self, archive_file, make_fpac, hpl_data):
        inner = make_fpac([("x.hpl", hpl_data)])
        path = archive_file("outer.pac", make_fpac([("inner.pac", inner)]))
        root = open_container(path)

        inner_entry = list_children(root)[0]
        grandchild = list_children(inner_entry)[0]

        assert isinstance(inner_entry, Container)
        assert grandchild.extended_paths == ("inner.pac", "x.hpl")
        assert grandchild.virtual_root is root
        assert grandchild.get_bytes() == hpl_data

    def test_compressed_nested_archive(self, archive_file, make_fpac, make_gzip_fpac, hpl_data):
        inner = make_gzip_fpac([("x.hpl", hpl_data)])
        path = archive_file("outer.pac", make_fpac([("inner.pacgz", inner)]))

        inner_entry = list_children(open_container(path))[0]

        assert isinstance(inner_entry, Container)
        assert inner_entry.obfuscation is Obfuscation.SWITCH_COMPRESSION
        assert list_children(inner_entry)[0].get_bytes() == hpl_data

    def test_deflated_root(self, archive_file, make_dfasfpac, hpl_data):
        path = archive_file("chr.pac", make_dfasfpac([("a.hpl", hpl_data)]))
        root = open_container(path)

        assert root.obfuscation is Obfuscation.FPAC_DEFLATION
        assert list_children(root)[0].get_bytes() == hpl_data

    def test_big_endian_archive(self, archive_file, make_fpac, hpl_data):
        path = archive_file("chr.pac", make_fpac([("a.hpl", hpl_data)], prefix=">"))
        assert list_children(open_container(path))[0].get_bytes() == hpl_data

    def test_short_name_field(self, archive_file, make_fpac, hpl_data):
        path = archive_file("chr.pac", make_fpac([("a.hpl", hpl_data)], name_length=0x8))
        assert list_children(open_container(path))[0].name == "a.hpl"

    def test_undecodable_name_gets_placeholder(self, archive_file, make_fpac, hpl_data):
        path = archive_file("chr.pac", make_fpac([(b"n\xffme.hpl", hpl_data)]))
        assert list_children(open_container(path))[0].name == "n?me.hpl"

    def test_blank_name_gets_index(self, archive_file, make_fpac, hpl_data):
        path = archive_file("chr.pac", make_fpac([("a.hpl", hpl_data), ("", hpl_data)]))
        assert list_children(open_container(path))[1].name == "0001"

    def test_truncated_entry(self, archive_file, make_fpac, hpl_data):
        data = make_fpac([("a.hpl", hpl_data)])
        path = archive_file("chr.pac", data[:len(data) - len(hpl_data) // 2])

        with pytest.raises(ContainerError):
            list_children(open_container(path))

    def test_prepopulated_children_returned(self):
        container = Container(name="mem.pac", primary_path="/in/mem.pac", children=())
        assert list_children(container) == []


@pytest.mark.unit
class TestOpenContainer:
    def test_not_an_archive(self, archive_file):
        with pytest.raises(ContainerError):
            open_container(archive_file("a.pac", b"nothing here"))

    def test_missing_file(self, temp_dir):
        with pytest.raises(ContainerError):
            open_container(str(temp_dir / "missing.pac"))
