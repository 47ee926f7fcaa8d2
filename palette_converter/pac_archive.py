#!/usr/bin/env python3
"""
ArcSys FPAC container reader
Recognises plain, deflated and gzip-wrapped FPAC archives and lists their members
"""

import gzip
import os
import struct
import zlib
from typing import Optional

from .constants import (
    DFASFPAC_HEADER_SIZE,
    DFASFPAC_MAGIC,
    FPAC_ENTRY_ALIGNMENT,
    FPAC_ENTRY_FIELDS_SIZE,
    FPAC_HEADER_SIZE,
    FPAC_MAGIC,
    GZIP_MAGIC,
)
from .exceptions import ContainerError
from .logging_config import get_logger
from .models import Container, Entry, Obfuscation

logger = get_logger("pac_archive")

# Upper bound for the per-entry name field; anything larger is a corrupt header
MAX_NAME_LENGTH = 0x1000


class FPACHeader:
    """Parsed FPAC header"""

    def __init__(self, prefix: str, data_start: int, total_size: int,
                 file_count: int, flags: int, name_length: int):
        self.prefix = prefix
        self.data_start = data_start
        self.total_size = total_size
        self.file_count = file_count
        self.flags = flags
        self.name_length = name_length

    @property
    def entry_size(self) -> int:
        size = self.name_length + FPAC_ENTRY_FIELDS_SIZE
        remainder = size % FPAC_ENTRY_ALIGNMENT
        if remainder:
            size += FPAC_ENTRY_ALIGNMENT - remainder
        return size

    def is_consistent(self, buffer_size: int) -> bool:
        if not 0 < self.name_length <= MAX_NAME_LENGTH:
            return False
        if self.data_start > buffer_size:
            return False
        table_end = FPAC_HEADER_SIZE + self.file_count * self.entry_size
        return table_end <= self.data_start


def _unwrap(data: bytes) -> Optional[tuple[bytes, Obfuscation]]:
    """Strip any compression layer, None when the bytes are not an FPAC archive"""
    if data[:4] == FPAC_MAGIC:
        return data, Obfuscation.NONE

    try:
        if data[:8] == DFASFPAC_MAGIC:
            payload = zlib.decompress(data[DFASFPAC_HEADER_SIZE:])
            kind = Obfuscation.FPAC_DEFLATION
        elif data[:2] == GZIP_MAGIC:
            payload = gzip.decompress(data)
            kind = Obfuscation.SWITCH_COMPRESSION
        else:
            return None
    except (zlib.error, OSError, EOFError):
        return None

    if payload[:4] != FPAC_MAGIC:
        return None
    return payload, kind


def _parse_header(payload: bytes) -> FPACHeader:
    if len(payload) < FPAC_HEADER_SIZE:
        raise ContainerError("FPAC header is truncated")

    for prefix in ("<", ">"):
        fields = struct.unpack_from(f"{prefix}5I", payload, 4)
        header = FPACHeader(prefix, *fields)
        if header.is_consistent(len(payload)):
            return header

    raise ContainerError("FPAC header is inconsistent with the archive size")


def _decode_name(raw: bytes) -> str:
    """Decode an entry name; unrepresentable bytes become '?'"""
    return raw.decode("ascii", errors="replace").replace("\ufffd", "?")


def _read_source(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def open_container(path: str) -> Container:
    """
    Open a physical FPAC archive as the root of a traversal.

    The returned container keeps the decompressed archive bytes, so listing
    its members does not read the file again.

    Raises:
        ContainerError: If the file is not a readable FPAC archive
    """
    path = os.path.abspath(path)
    try:
        data = _read_source(path)
    except OSError as e:
        raise ContainerError(f"Could not read {path}: {e}") from e

    unwrapped = _unwrap(data)
    if unwrapped is None:
        raise ContainerError(f"{os.path.basename(path)} is not a valid FPAC archive")
    payload, obfuscation = unwrapped
    _parse_header(payload)

    return Container(
        name=os.path.basename(path),
        primary_path=path,
        data=payload,
        obfuscation=obfuscation,
    )


def load_container(path: str) -> Optional[Container]:
    """
    Open a file as an FPAC archive if it is one.

    Returns:
        The root container, or None for missing files, directories and
        anything that is not an FPAC archive with a sane header
    """
    if not os.path.isfile(path):
        return None
    try:
        return open_container(path)
    except ContainerError:
        return None


def list_children(container: Container) -> list[Entry]:
    """
    List the immediate members of a container in stored order.

    Members that are themselves FPAC archives are returned as Container
    instances; they are not opened here.

    Raises:
        ContainerError: If the container bytes are not a readable archive
    """
    if container.children is not None:
        return list(container.children)

    unwrapped = _unwrap(container.get_bytes())
    if unwrapped is None:
        raise ContainerError(f"{container.name} is not a valid FPAC archive")
    payload = unwrapped[0]
    header = _parse_header(payload)

    logger.debug(
        f"{container.name}: {header.file_count} entries, "
        f"name length {header.name_length}"
    )

    root = container.root
    children: list[Entry] = []
    for i in range(header.file_count):
        position = FPAC_HEADER_SIZE + i * header.entry_size
        raw_name = payload[position:position + header.name_length].split(b"\x00", 1)[0]
        _index, offset, size = struct.unpack_from(
            f"{header.prefix}3I", payload, position + header.name_length
        )

        start = header.data_start + offset
        chunk = payload[start:start + size]
        if len(chunk) != size:
            raise ContainerError(
                f"Entry {i} of {container.name} runs past the end of the archive"
            )

        parts = tuple(p for p in _decode_name(raw_name).replace("\\", "/").split("/")
                      if p not in ("", ".", ".."))
        if not parts:
            parts = (f"{i:04d}",)

        extended_paths = container.extended_paths + parts
        nested = _unwrap(chunk)
        if nested is not None:
            child: Entry = Container(
                name=parts[-1],
                primary_path=container.primary_path,
                extended_paths=extended_paths,
                data=chunk,
                virtual_root=root,
                obfuscation=nested[1],
            )
        else:
            child = Entry(
                name=parts[-1],
                primary_path=container.primary_path,
                extended_paths=extended_paths,
                data=chunk,
                virtual_root=root,
            )
        children.append(child)

    return children
