#!/usr/bin/env python3
"""
Palette file formats
Readers for ArcSys, Adobe and Windows palettes and the two output encoders
"""

import colorsys
import struct

from .constants import (
    ACO_COLORSPACE_CMYK,
    ACO_COLORSPACE_GRAYSCALE,
    ACO_COLORSPACE_HSB,
    ACO_COLORSPACE_RGB,
    ACO_COMPONENT_MAX,
    ACO_GRAYSCALE_MAX,
    ACT_COLOR_TABLE_SIZE,
    ACT_NO_TRANSPARENCY,
    ACT_TRAILER_SIZE,
    ASE_BLOCK_COLOR,
    ASE_MAGIC,
    HIP_BYTES_PER_COLOR,
    HIP_HEADER_SIZE,
    HIP_MAGIC,
    HPL_BYTES_PER_COLOR,
    HPL_HEADER_SIZE,
    HPL_MAGIC,
    HPL_VERSION,
    JASC_MAGIC,
    JASC_VERSION,
    PALETTE_ENTRIES,
    RGB888_MAX_VALUE,
    RIFF_DATA_CHUNK,
    RIFF_MAGIC,
    RIFF_PAL_FORM,
)
from .exceptions import PaletteFormatError
from .logging_config import get_logger
from .models import Color, Endianness, Palette

logger = get_logger("palette_formats")


def _clamp_byte(value: float) -> int:
    return max(0, min(RGB888_MAX_VALUE, int(round(value))))


def _pad_palette(palette: Palette) -> Palette:
    """Truncate or pad a palette to exactly 256 entries"""
    colors = list(palette[:PALETTE_ENTRIES])
    colors.extend(Color(0, 0, 0, 0) for _ in range(PALETTE_ENTRIES - len(colors)))
    return colors


# --- ArcSys HPL ---


def _hpl_prefix(data: bytes) -> str:
    """Detect the byte order of an HPL header from its version field"""
    if struct.unpack_from("<I", data, 4)[0] == HPL_VERSION:
        return "<"
    if struct.unpack_from(">I", data, 4)[0] == HPL_VERSION:
        return ">"
    # Unknown version: trust whichever color count fits the buffer
    little_count = struct.unpack_from("<I", data, 12)[0]
    fits = HPL_HEADER_SIZE + little_count * HPL_BYTES_PER_COLOR <= len(data)
    return "<" if fits else ">"


def load_hpl(data: bytes) -> Palette:
    """
    Read an ArcSys HPL palette.

    Args:
        data: Raw HPL file bytes

    Returns:
        Palette in file order

    Raises:
        PaletteFormatError: If the bytes are not an HPL palette
    """
    if len(data) < HPL_HEADER_SIZE or data[:4] != HPL_MAGIC:
        raise PaletteFormatError("Not an HPL palette")

    prefix = _hpl_prefix(data)
    count = struct.unpack_from(f"{prefix}I", data, 12)[0]
    end = HPL_HEADER_SIZE + count * HPL_BYTES_PER_COLOR
    if end > len(data):
        raise PaletteFormatError(
            f"HPL palette declares {count} colors but holds {len(data)} bytes"
        )

    palette = []
    for offset in range(HPL_HEADER_SIZE, end, HPL_BYTES_PER_COLOR):
        if prefix == "<":
            b, g, r, a = data[offset:offset + HPL_BYTES_PER_COLOR]
        else:
            a, r, g, b = data[offset:offset + HPL_BYTES_PER_COLOR]
        palette.append(Color(r, g, b, a))
    return palette


def encode_hpl(palette: Palette, endianness: Endianness = Endianness.LITTLE) -> bytes:
    """
    Encode a palette as a 256-color ArcSys HPL file.

    Little endian files store BGRA, big endian files store ARGB.
    """
    colors = _pad_palette(palette)
    prefix = endianness.struct_prefix
    file_size = HPL_HEADER_SIZE + len(colors) * HPL_BYTES_PER_COLOR

    output = bytearray(
        struct.pack(f"{prefix}4sIII16x", HPL_MAGIC, HPL_VERSION, file_size, len(colors))
    )
    for color in colors:
        if endianness is Endianness.LITTLE:
            output.extend((color.b, color.g, color.r, color.a))
        else:
            output.extend((color.a, color.r, color.g, color.b))
    return bytes(output)


# --- ArcSys HIP ---


def load_hip(data: bytes) -> Palette:
    """
    Read the palette embedded in an ArcSys HIP image.

    The palette of an indexed HIP image follows the fixed header and the
    extra header block whose size is stored in the last header field.
    True-color images carry a color count of zero and yield an empty palette.
    """
    if len(data) < HIP_HEADER_SIZE or data[:4] != HIP_MAGIC:
        raise PaletteFormatError("Not a HIP image")

    (_magic, _version, _file_length, color_count, _width, _height,
     _image_format, extra_header_size) = struct.unpack_from("<4s7I", data, 0)

    start = HIP_HEADER_SIZE + extra_header_size
    end = start + color_count * HIP_BYTES_PER_COLOR
    if end > len(data):
        raise PaletteFormatError("HIP palette runs past the end of the file")

    palette = []
    for offset in range(start, end, HIP_BYTES_PER_COLOR):
        b, g, r, a = data[offset:offset + HIP_BYTES_PER_COLOR]
        palette.append(Color(r, g, b, a))
    return palette


# --- Adobe color table ---


def load_act(data: bytes) -> Palette:
    """
    Read an Adobe ACT color table.

    A 772 byte table ends with a big endian color count and transparent
    index; a bare 768 byte table always holds 256 colors.
    """
    if len(data) < ACT_COLOR_TABLE_SIZE:
        raise PaletteFormatError(
            f"ACT tables are at least {ACT_COLOR_TABLE_SIZE} bytes, got {len(data)}"
        )

    count = PALETTE_ENTRIES
    transparent = ACT_NO_TRANSPARENCY
    if len(data) >= ACT_COLOR_TABLE_SIZE + ACT_TRAILER_SIZE:
        count, transparent = struct.unpack_from(">HH", data, ACT_COLOR_TABLE_SIZE)
        if count == 0 or count > PALETTE_ENTRIES:
            count = PALETTE_ENTRIES

    palette = []
    for i in range(count):
        r, g, b = data[i * 3:i * 3 + 3]
        palette.append(Color(r, g, b, 0 if i == transparent else RGB888_MAX_VALUE))
    return palette


def encode_act(palette: Palette) -> bytes:
    """Encode a palette as a 772 byte ACT table with count trailer"""
    count = min(len(palette), PALETTE_ENTRIES)
    colors = _pad_palette(palette)

    transparent = ACT_NO_TRANSPARENCY
    for i, color in enumerate(colors[:count]):
        if color.a == 0:
            transparent = i
            break

    output = bytearray()
    for color in colors:
        output.extend(color.to_rgb())
    output.extend(struct.pack(">HH", count, transparent))
    return bytes(output)


# --- Microsoft RIFF palette ---


def is_valid_riff_pal(data: bytes) -> bool:
    return len(data) >= 12 and data[:4] == RIFF_MAGIC and data[8:12] == RIFF_PAL_FORM


def load_riff_pal(data: bytes) -> Palette:
    """Read the 'data' chunk of a RIFF PAL file"""
    if not is_valid_riff_pal(data):
        raise PaletteFormatError("Not a RIFF palette")

    position = 12
    while position + 8 <= len(data):
        chunk_id, chunk_size = struct.unpack_from("<4sI", data, position)
        position += 8
        if chunk_id == RIFF_DATA_CHUNK:
            _version, count = struct.unpack_from("<HH", data, position)
            entries = data[position + 4:position + 4 + count * 4]
            if len(entries) != count * 4:
                raise PaletteFormatError("RIFF palette data chunk is truncated")
            return [
                Color(entries[i], entries[i + 1], entries[i + 2])
                for i in range(0, len(entries), 4)
            ]
        # Chunks are word aligned
        position += chunk_size + (chunk_size & 1)

    raise PaletteFormatError("RIFF palette has no data chunk")


# --- JASC (Paint Shop Pro) palette ---


def is_valid_jasc_pal(data: bytes) -> bool:
    return data.startswith(JASC_MAGIC.encode("ascii"))


def load_jasc_pal(data: bytes) -> Palette:
    """Read a JASC-PAL text palette"""
    if not is_valid_jasc_pal(data):
        raise PaletteFormatError("Not a JASC palette")

    lines = [line.strip() for line in data.decode("latin-1").splitlines()]
    if len(lines) < 3 or lines[1] != JASC_VERSION:
        raise PaletteFormatError("JASC palette header is incomplete")

    try:
        count = int(lines[2])
        palette = []
        for line in lines[3:3 + count]:
            values = [int(v) for v in line.split()]
            if len(values) < 3:
                raise PaletteFormatError(f"Malformed JASC color line: {line!r}")
            alpha = values[3] if len(values) > 3 else RGB888_MAX_VALUE
            palette.append(Color(*(_clamp_byte(v) for v in values[:3]), _clamp_byte(alpha)))
    except ValueError as e:
        raise PaletteFormatError(f"Malformed JASC palette: {e}") from e

    if len(palette) != count:
        raise PaletteFormatError(f"JASC palette declares {count} colors, found {len(palette)}")
    return palette


# --- Adobe swatches ---


def _aco_color(space: int, w: int, x: int, y: int, z: int):
    if space == ACO_COLORSPACE_RGB:
        return Color(w // 257, x // 257, y // 257)
    if space == ACO_COLORSPACE_HSB:
        r, g, b = colorsys.hsv_to_rgb(
            w / ACO_COMPONENT_MAX, x / ACO_COMPONENT_MAX, y / ACO_COMPONENT_MAX
        )
        return Color(_clamp_byte(r * 255), _clamp_byte(g * 255), _clamp_byte(b * 255))
    if space == ACO_COLORSPACE_CMYK:
        # 0 is full ink, 65535 is no ink
        k = z / ACO_COMPONENT_MAX
        return Color(
            _clamp_byte(255 * (w / ACO_COMPONENT_MAX) * k),
            _clamp_byte(255 * (x / ACO_COMPONENT_MAX) * k),
            _clamp_byte(255 * (y / ACO_COMPONENT_MAX) * k),
        )
    if space == ACO_COLORSPACE_GRAYSCALE:
        gray = _clamp_byte(255 - w * 255 / ACO_GRAYSCALE_MAX)
        return Color(gray, gray, gray)
    return None


def load_aco(data: bytes) -> Palette:
    """
    Read an Adobe ACO swatch file.

    Only the first section is read; version 2 sections carry a name after
    every color which is skipped. Unsupported color spaces are dropped.
    """
    if len(data) < 4:
        raise PaletteFormatError("ACO file is truncated")

    version, count = struct.unpack_from(">HH", data, 0)
    if version not in (1, 2):
        raise PaletteFormatError(f"Unknown ACO version {version}")

    palette = []
    position = 4
    try:
        for _ in range(count):
            space, w, x, y, z = struct.unpack_from(">5H", data, position)
            position += 10
            if version == 2:
                _zero, name_length = struct.unpack_from(">HH", data, position)
                position += 4 + name_length * 2
            color = _aco_color(space, w, x, y, z)
            if color is None:
                logger.debug(f"Skipping ACO swatch in unsupported color space {space}")
                continue
            palette.append(color)
    except struct.error as e:
        raise PaletteFormatError(f"ACO file is truncated: {e}") from e
    return palette


def load_ase(data: bytes) -> Palette:
    """Read the RGB, CMYK and gray swatches of an Adobe ASE file"""
    if len(data) < 12 or data[:4] != ASE_MAGIC:
        raise PaletteFormatError("Not an ASE swatch file")

    block_count = struct.unpack_from(">I", data, 8)[0]
    palette = []
    position = 12
    try:
        for _ in range(block_count):
            block_type, block_length = struct.unpack_from(">HI", data, position)
            position += 6
            block_end = position + block_length
            if block_type == ASE_BLOCK_COLOR:
                name_length = struct.unpack_from(">H", data, position)[0]
                cursor = position + 2 + name_length * 2
                model = data[cursor:cursor + 4].decode("ascii", errors="replace").strip()
                cursor += 4
                if model == "RGB":
                    r, g, b = struct.unpack_from(">3f", data, cursor)
                    palette.append(Color(_clamp_byte(r * 255), _clamp_byte(g * 255), _clamp_byte(b * 255)))
                elif model == "CMYK":
                    c, m, y, k = struct.unpack_from(">4f", data, cursor)
                    palette.append(Color(
                        _clamp_byte(255 * (1 - c) * (1 - k)),
                        _clamp_byte(255 * (1 - m) * (1 - k)),
                        _clamp_byte(255 * (1 - y) * (1 - k)),
                    ))
                elif model == "Gray":
                    gray = _clamp_byte(struct.unpack_from(">f", data, cursor)[0] * 255)
                    palette.append(Color(gray, gray, gray))
                else:
                    logger.debug(f"Skipping ASE swatch in unsupported model {model!r}")
            position = block_end
    except struct.error as e:
        raise PaletteFormatError(f"ASE file is truncated: {e}") from e
    return palette
