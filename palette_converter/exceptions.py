"""
Exception hierarchy for the palette converter
"""


class PaletteConverterError(Exception):
    """Base class for all palette converter errors"""
    pass


class PaletteFormatError(PaletteConverterError):
    """Raised when bytes are not a valid instance of a palette format"""
    pass


class ContainerError(PaletteConverterError):
    """Raised when an FPAC container cannot be read"""
    pass


class InputPathError(PaletteConverterError):
    """Raised when the input file or folder cannot be used at all"""
    pass
