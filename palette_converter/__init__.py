"""
ArcSystemWorks Palette Converter
Batch-converts palettes from ArcSys archives, images and swatch files to HPL or ACT
"""

from .converter import ConversionDriver
from .dispatcher import ExtractionResult, ExtractionStatus, FormatDispatcher
from .models import Color, Container, Endianness, Entry, PaletteFormat, RunConfig
from .options import parse_options, resolve_run_config
from .paths import synthesize
from .traversal import ArchiveTraversal

__version__ = "1.0.0"
__all__ = [
    "ArchiveTraversal",
    "Color",
    "Container",
    "ConversionDriver",
    "Endianness",
    "Entry",
    "ExtractionResult",
    "ExtractionStatus",
    "FormatDispatcher",
    "PaletteFormat",
    "RunConfig",
    "parse_options",
    "resolve_run_config",
    "synthesize",
]
