"""
Shared pytest fixtures and configuration for palette converter tests
"""

import gzip
import logging
import os
import struct
import tempfile
import zlib
from pathlib import Path

import pytest
from hypothesis import HealthCheck, settings

from palette_converter import settings_manager
from palette_converter.logging_config import LOGGER_NAME
from palette_converter.models import Color
from palette_converter.settings_manager import SettingsManager

# Autouse fixtures below are function scoped; property tests never touch them
settings.register_profile(
    "dev",
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture, HealthCheck.too_slow],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture, HealthCheck.too_slow],
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def build_fpac(files, name_length=0x20, prefix="<"):
    """Build FPAC archive bytes from (name, data) pairs"""
    entry_size = name_length + 12
    if entry_size % 16:
        entry_size += 16 - entry_size % 16
    data_start = 0x20 + len(files) * entry_size

    table = bytearray()
    blob = bytearray()
    for index, (name, data) in enumerate(files):
        raw_name = name.encode("ascii") if isinstance(name, str) else name
        table += raw_name.ljust(name_length, b"\x00")[:name_length]
        table += struct.pack(f"{prefix}3I", index, len(blob), len(data))
        table += b"\x00" * (entry_size - name_length - 12)
        blob += data
        if len(blob) % 16:
            blob += b"\x00" * (16 - len(blob) % 16)

    header = struct.pack(
        f"{prefix}4s5I8x", b"FPAC", data_start, data_start + len(blob),
        len(files), 0, name_length,
    )
    return bytes(header + table + blob)


def build_dfasfpac(files):
    """Build a deflated FPAC archive"""
    payload = build_fpac(files)
    return b"DFASFPAC" + struct.pack("<II", len(payload), 0) + zlib.compress(payload)


def build_gzip_fpac(files):
    """Build a gzip-wrapped FPAC archive"""
    return gzip.compress(build_fpac(files))


def build_hpl(colors, prefix="<"):
    """Build HPL bytes for a list of (r, g, b, a) tuples"""
    data = bytearray(struct.pack(f"{prefix}4sIII16x", b"HPAL", 0x125,
                                 0x20 + len(colors) * 4, len(colors)))
    for r, g, b, a in colors:
        data += bytes((b, g, r, a) if prefix == "<" else (a, r, g, b))
    return bytes(data)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_fpac():
    return build_fpac


@pytest.fixture
def make_dfasfpac():
    return build_dfasfpac


@pytest.fixture
def make_gzip_fpac():
    return build_gzip_fpac


@pytest.fixture
def make_hpl():
    return build_hpl


@pytest.fixture
def sample_colors():
    """Sixteen opaque test colors"""
    return [(i * 16, 255 - i * 16, i * 8, 255) for i in range(16)]


@pytest.fixture
def sample_palette(sample_colors):
    return [Color(*c) for c in sample_colors]


@pytest.fixture
def hpl_data(sample_colors):
    return build_hpl(sample_colors)


@pytest.fixture
def act_data(sample_colors):
    """ACT table holding the sample colors with a count trailer"""
    table = bytearray(768)
    for i, (r, g, b, _a) in enumerate(sample_colors):
        table[i * 3:i * 3 + 3] = bytes((r, g, b))
    return bytes(table) + struct.pack(">HH", len(sample_colors), 0xFFFF)


@pytest.fixture
def empty_hpl():
    """HPL file that declares no colors"""
    return build_hpl([])


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep settings out of the real home directory"""
    settings_path = tmp_path / "settings" / "settings.json"

    def mock_get_settings_path(self):
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        return settings_path

    monkeypatch.setattr(SettingsManager, "_get_settings_path", mock_get_settings_path)
    monkeypatch.setattr(settings_manager, "_settings_instance", None)
    return settings_path


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() so caplog keeps working between tests"""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
