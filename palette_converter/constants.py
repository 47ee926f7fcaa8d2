#!/usr/bin/env python3
"""
Constants for the ArcSys palette converter
All magic numbers and format specifications in one place
"""

# Output formats
DEFAULT_FORMAT = "HPL"

# Palette specifications
PALETTE_ENTRIES = 256  # Colors in a full palette
RGB888_MAX_VALUE = 255  # 8 bits per color component
OPAQUE_ALPHA = 255

# HPL (ArcSys palette) layout
HPL_MAGIC = b"HPAL"
HPL_VERSION = 0x125
HPL_HEADER_SIZE = 0x20
HPL_BYTES_PER_COLOR = 4  # BGRA little endian, ARGB big endian

# HIP (ArcSys image) layout
HIP_MAGIC = b"HIP\x00"
HIP_HEADER_SIZE = 0x20
HIP_BYTES_PER_COLOR = 4

# ACT (Adobe color table) layout
ACT_COLOR_TABLE_SIZE = PALETTE_ENTRIES * 3  # 768 bytes
ACT_TRAILER_SIZE = 4  # uint16 color count, uint16 transparent index
ACT_NO_TRANSPARENCY = 0xFFFF

# RIFF / JASC palettes
RIFF_MAGIC = b"RIFF"
RIFF_PAL_FORM = b"PAL "
RIFF_DATA_CHUNK = b"data"
JASC_MAGIC = "JASC-PAL"
JASC_VERSION = "0100"

# Adobe swatches
ACO_COLORSPACE_RGB = 0
ACO_COLORSPACE_HSB = 1
ACO_COLORSPACE_CMYK = 2
ACO_COLORSPACE_GRAYSCALE = 8
ACO_COMPONENT_MAX = 65535
ACO_GRAYSCALE_MAX = 10000
ASE_MAGIC = b"ASEF"
ASE_BLOCK_COLOR = 0x0001

# FPAC containers
FPAC_MAGIC = b"FPAC"
FPAC_HEADER_SIZE = 0x20
FPAC_ENTRY_ALIGNMENT = 0x10
FPAC_ENTRY_FIELDS_SIZE = 12  # index, offset, size
DFASFPAC_MAGIC = b"DFASFPAC"
DFASFPAC_HEADER_SIZE = 0x10
GZIP_MAGIC = b"\x1f\x8b"

# Extensions
HPL_EXTENSION = ".hpl"
HIP_EXTENSION = ".hip"
ACT_EXTENSION = ".act"
ACO_EXTENSION = ".aco"
ASE_EXTENSION = ".ase"
PAL_EXTENSION = ".pal"
DDS_EXTENSION = ".dds"

SUPPORTED_IMAGE_EXTENSIONS = frozenset({
    ".bmp", ".dib", ".gif", ".jpeg", ".jpg", ".jpe", ".jfif",
    ".png", ".tiff", ".tif", ".wmp", ".dds",
})

# Path synthesis
INVALID_NAME_PLACEHOLDER = "?"
INVALID_NAME_REPLACEMENT = "_"
CONVERTED_DIR_SUFFIX = "_Converted"

# Option parsing
FLAG_MARKER = "-"
