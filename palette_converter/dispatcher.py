#!/usr/bin/env python3
"""
Format dispatch
Maps an entry's extension to the reader that extracts its palette
"""

import enum
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from . import image_loader, palette_formats
from .constants import (
    ACO_EXTENSION,
    ACT_EXTENSION,
    ASE_EXTENSION,
    HIP_EXTENSION,
    HPL_EXTENSION,
    PAL_EXTENSION,
    SUPPORTED_IMAGE_EXTENSIONS,
)
from .logging_config import get_logger
from .models import Entry, Palette

logger = get_logger("dispatcher")

Loader = Callable[[bytes], Palette]
Probe = Callable[[bytes], bool]


class ExtractionStatus(enum.Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of extracting a palette from one entry"""
    status: ExtractionStatus
    palette: Palette = field(default_factory=list)
    reason: str = ""

    @property
    def found(self) -> bool:
        return self.status is ExtractionStatus.FOUND

    @classmethod
    def success(cls, palette: Palette) -> "ExtractionResult":
        return cls(ExtractionStatus.FOUND, list(palette))

    @classmethod
    def not_found(cls, reason: str = "") -> "ExtractionResult":
        return cls(ExtractionStatus.NOT_FOUND, reason=reason)

    @classmethod
    def error(cls, reason: str) -> "ExtractionResult":
        return cls(ExtractionStatus.ERROR, reason=reason)


@dataclass(frozen=True)
class DirectFormat:
    """Extension owned by exactly one reader"""
    load: Loader

    def extract(self, data: bytes, extension: str) -> Optional[Palette]:
        return self.load(data)


@dataclass(frozen=True)
class ProbedFormat:
    """
    Extension shared by several incompatible layouts.

    Candidates are tried in order; the first whose probe accepts the bytes
    is loaded. None means no layout matched.
    """
    candidates: tuple[tuple[Probe, Loader], ...]

    def extract(self, data: bytes, extension: str) -> Optional[Palette]:
        for probe, load in self.candidates:
            if probe(data):
                return load(data)
        return None


@dataclass(frozen=True)
class ImageFormat:
    """Raster image whose decoded form may carry a palette"""

    def extract(self, data: bytes, extension: str) -> Optional[Palette]:
        return image_loader.load_image_palette(data, extension)


Strategy = Union[DirectFormat, ProbedFormat, ImageFormat]


def default_registry() -> dict[str, Strategy]:
    """Build the extension to strategy table for every supported source format"""
    registry: dict[str, Strategy] = {
        extension: ImageFormat() for extension in SUPPORTED_IMAGE_EXTENSIONS
    }
    registry.update({
        HPL_EXTENSION: DirectFormat(palette_formats.load_hpl),
        HIP_EXTENSION: DirectFormat(palette_formats.load_hip),
        ACT_EXTENSION: DirectFormat(palette_formats.load_act),
        ACO_EXTENSION: DirectFormat(palette_formats.load_aco),
        ASE_EXTENSION: DirectFormat(palette_formats.load_ase),
        PAL_EXTENSION: ProbedFormat((
            (palette_formats.is_valid_riff_pal, palette_formats.load_riff_pal),
            (palette_formats.is_valid_jasc_pal, palette_formats.load_jasc_pal),
        )),
    })
    return registry


class FormatDispatcher:
    """Selects and runs the palette reader for an entry"""

    def __init__(self, registry: Optional[dict[str, Strategy]] = None):
        self.registry = registry if registry is not None else default_registry()

    def supports(self, extension: str) -> bool:
        return extension.lower() in self.registry

    def extract(self, entry: Entry) -> ExtractionResult:
        """
        Extract the palette of an entry.

        Never raises: reader failures become ERROR results, unknown
        extensions, unmatched layouts and empty palettes become NOT_FOUND.
        """
        extension = entry.extension.lower()
        strategy = self.registry.get(extension)
        if strategy is None:
            return ExtractionResult.not_found(f"Unsupported extension {extension!r}")

        try:
            palette = strategy.extract(entry.get_bytes(), extension)
        except Exception as e:
            logger.debug(f"Reader for {entry.full_name} failed", exc_info=True)
            return ExtractionResult.error(str(e) or type(e).__name__)

        if palette is None:
            return ExtractionResult.not_found(f"No known {extension} layout matched")
        if not palette:
            return ExtractionResult.not_found("Palette is empty")
        return ExtractionResult.success(palette)
