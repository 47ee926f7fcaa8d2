#!/usr/bin/env python3
"""
Data model for the palette converter
Entries found during traversal, colors, and the per-run configuration
"""

import enum
import os
from dataclasses import dataclass, field
from typing import Optional

from .constants import ACT_EXTENSION, HPL_EXTENSION, OPAQUE_ALPHA


class Obfuscation(enum.Enum):
    """Transform applied to an entry's underlying bytes (informational)"""
    NONE = "None"
    BBTAG_ENCRYPTION = "BBTAGEncryption"
    FPAC_ENCRYPTION = "FPACEncryption"
    FPAC_DEFLATION = "FPACDeflation"
    SWITCH_COMPRESSION = "SwitchCompression"
    FPAC_ENCRYPTION_DEFLATION = "FPACEncryptionDeflation"

    @property
    def tag(self) -> str:
        """Short label shown next to a container name while scanning"""
        if self is Obfuscation.NONE:
            return ""
        if self in (Obfuscation.BBTAG_ENCRYPTION, Obfuscation.FPAC_ENCRYPTION):
            return "encrypted"
        if self in (Obfuscation.FPAC_DEFLATION, Obfuscation.SWITCH_COMPRESSION):
            return "compressed"
        return "encrypted+compressed"


class PaletteFormat(enum.Enum):
    """Target palette file formats"""
    HPL = "HPL"
    ACT = "ACT"

    @property
    def extension(self) -> str:
        return HPL_EXTENSION if self is PaletteFormat.HPL else ACT_EXTENSION

    @property
    def uses_endianness(self) -> bool:
        return self is PaletteFormat.HPL

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["PaletteFormat"]:
        """Match a format name case-insensitively, None when unknown"""
        if not value:
            return None
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        return None


class Endianness(enum.Enum):
    """Byte order for HPL output"""
    LITTLE = "LittleEndian"
    BIG = "BigEndian"

    @property
    def struct_prefix(self) -> str:
        return "<" if self is Endianness.LITTLE else ">"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Endianness"]:
        """Match an endianness name case-insensitively, None when unknown"""
        if not value:
            return None
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        return None


@dataclass(frozen=True)
class Color:
    """A single palette color"""
    r: int
    g: int
    b: int
    a: int = OPAQUE_ALPHA

    def to_rgb(self) -> tuple[int, int, int]:
        return self.r, self.g, self.b


Palette = list[Color]


@dataclass(frozen=True, eq=False)
class Entry:
    """
    One addressable unit of data: a physical file or a member of a container.

    Attributes:
        name: File name of the entry (no directories)
        primary_path: Physical path of the file on disk; for nested entries
            this is the outermost container file
        extended_paths: Container-relative path components, outermost first,
            ending with this entry's own name. Empty for physical files
        data: In-container bytes; for a root container, its decompressed
            archive bytes. None for other physical files
        virtual_root: Outermost container this entry lives inside, None
            when the entry is not nested
        obfuscation: Transform that was applied to the stored bytes
    """
    name: str
    primary_path: str
    extended_paths: tuple[str, ...] = ()
    data: Optional[bytes] = field(default=None, repr=False)
    virtual_root: Optional["Entry"] = field(default=None, repr=False)
    obfuscation: Obfuscation = Obfuscation.NONE

    @classmethod
    def from_path(cls, path: str) -> "Entry":
        path = os.path.abspath(path)
        return cls(name=os.path.basename(path), primary_path=path)

    @property
    def extension(self) -> str:
        """Extension with its original case, including the dot"""
        return os.path.splitext(self.name)[1]

    @property
    def root(self) -> "Entry":
        """The outermost container, or the entry itself when not nested"""
        return self.virtual_root if self.virtual_root is not None else self

    @property
    def is_nested(self) -> bool:
        return self.root is not self

    @property
    def full_name(self) -> str:
        """Display path: the physical path followed by the in-container path"""
        if not self.extended_paths:
            return self.primary_path
        return os.path.join(self.primary_path, *self.extended_paths)

    def get_bytes(self) -> bytes:
        if self.data is not None:
            return self.data
        with open(self.primary_path, "rb") as f:
            return f.read()


@dataclass(frozen=True, eq=False)
class Container(Entry):
    """
    An entry that owns an ordered list of child entries.

    children stays None until the container is read; pac_archive.list_children
    parses the stored bytes in that case.
    """
    children: Optional[tuple[Entry, ...]] = field(default=None, repr=False)


@dataclass(frozen=True)
class RunConfig:
    """Resolved configuration for one conversion run"""
    palette_format: PaletteFormat = PaletteFormat.HPL
    endianness: Endianness = Endianness.LITTLE
    output_dir: Optional[str] = None
    replace: bool = False
    continue_without_pause: bool = False
