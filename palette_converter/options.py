#!/usr/bin/env python3
"""
Command-line option parsing
Flags with optional value lists, resolved into the per-run configuration
"""

import enum
import os
import sys
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from .constants import FLAG_MARKER
from .logging_config import get_logger
from .models import Endianness, PaletteFormat, RunConfig

logger = get_logger("options")

FolderPicker = Callable[[str], Optional[str]]


class Option(enum.Enum):
    ENDIANNESS = "Endianness"
    OUTPUT = "Output"
    REPLACE = "Replace"
    CONTINUE = "Continue"


@dataclass(frozen=True)
class ConsoleOption:
    """One entry of the option table"""
    name: str
    short_op: str
    long_op: str
    description: str
    flag: Option
    has_arg: bool = False

    def matches(self, token: str) -> bool:
        return token in (self.short_op, self.long_op)


CONSOLE_OPTIONS = (
    ConsoleOption(
        name="Endianness",
        short_op="-en",
        long_op="--endianness",
        description="If the output is HPL, sets the output file's endianness. "
                    "{LittleEndian|BigEndian}",
        flag=Option.ENDIANNESS,
        has_arg=True,
    ),
    ConsoleOption(
        name="Output",
        short_op="-o",
        long_op="--output",
        description="Specifies the output directory for the output files.",
        flag=Option.OUTPUT,
        has_arg=True,
    ),
    ConsoleOption(
        name="Replace",
        short_op="-r",
        long_op="--replace",
        description="Don't create a backup and replace same named files in output directory.",
        flag=Option.REPLACE,
    ),
    ConsoleOption(
        name="Continue",
        short_op="-c",
        long_op="--continue",
        description="Don't pause the application when finished.",
        flag=Option.CONTINUE,
    ),
)


@dataclass(frozen=True)
class ConversionOptions:
    """Flags seen on the command line and the raw values of each"""
    flags: frozenset = frozenset()
    values: dict = field(default_factory=dict)

    def has(self, flag: Option) -> bool:
        return flag in self.flags

    def values_for(self, flag: Option) -> tuple[str, ...]:
        return self.values.get(flag, ())


def find_option(token: str) -> Optional[ConsoleOption]:
    for option in CONSOLE_OPTIONS:
        if option.matches(token):
            return option
    return None


def is_flag(token: str) -> bool:
    return token.startswith(FLAG_MARKER)


def clean_path_arg(value: str) -> str:
    """Turn a stray quote left by drag-and-drop into a path separator"""
    return value.replace('"', os.sep)


def parse_options(tokens: Sequence[str]) -> ConversionOptions:
    """
    Scan tokens for registered flags.

    A flag that takes values consumes every following token up to the next
    flag. A value equal (ignoring case) to the value accepted just before
    it is dropped. Tokens that are neither flags nor flag values are left
    alone.

    Args:
        tokens: Command-line tokens with the input path and format removed

    Returns:
        ConversionOptions with the active flags and their value lists
    """
    flags = set()
    values = {}

    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1
        if not is_flag(token):
            continue

        option = find_option(token)
        if option is None:
            logger.warning(f"Unknown option {token}. Ignoring...")
            continue

        flags.add(option.flag)
        if not option.has_arg:
            continue

        accepted: list[str] = []
        while i < len(tokens) and not is_flag(tokens[i]):
            value = tokens[i]
            i += 1
            if accepted and value.lower() == accepted[-1].lower():
                continue
            accepted.append(value)
        values[option.flag] = tuple(accepted)

    return ConversionOptions(frozenset(flags), values)


def get_install_dir() -> str:
    """Directory the program was started from"""
    if sys.argv and sys.argv[0]:
        return os.path.dirname(os.path.abspath(sys.argv[0]))
    return os.getcwd()


def _resolve_endianness(options: ConversionOptions, default: Endianness) -> Endianness:
    if not options.has(Option.ENDIANNESS):
        return default

    values = options.values_for(Option.ENDIANNESS)
    if not values:
        return Endianness.LITTLE

    parsed = Endianness.parse(values[0])
    if parsed is None:
        # Unknown names leave the default in place
        return default
    return parsed


def _resolve_output(options: ConversionOptions, pick_folder: Optional[FolderPicker],
                    default_output_dir: Optional[str]) -> Optional[str]:
    if not options.has(Option.OUTPUT):
        return None

    values = [v for v in options.values_for(Option.OUTPUT) if v.strip()]
    if not values and pick_folder is not None:
        picked = pick_folder("Select output folder...")
        if picked:
            values = [picked]

    output_dir = None
    if values:
        output_dir = os.path.abspath(clean_path_arg(values[0]))
        if len(values) > 1:
            logger.warning(
                f'Too many arguments for output path. Defaulting to "{output_dir}"...'
            )
        if not os.path.isdir(output_dir):
            logger.warning("Given output path does not exist. Ignoring...")
            output_dir = None
    else:
        logger.warning("No output path was given. Ignoring...")

    if output_dir is None and default_output_dir and os.path.isdir(default_output_dir):
        logger.info("Using default output path...")
        output_dir = default_output_dir

    return output_dir


def resolve_run_config(options: ConversionOptions,
                       palette_format: PaletteFormat = PaletteFormat.HPL,
                       pick_folder: Optional[FolderPicker] = None,
                       default_output_dir: Optional[str] = None,
                       default_endianness: Endianness = Endianness.LITTLE) -> RunConfig:
    """
    Resolve parsed options into the immutable configuration of a run.

    Bad or missing values never abort: each one logs a warning and falls
    back to a default.

    Args:
        options: Result of parse_options
        palette_format: Target format chosen from the positional arguments
        pick_folder: Called with a dialog title when --output has no value
        default_output_dir: Fallback for an unusable --output value;
            the install directory when None
        default_endianness: Byte order used when --endianness is absent
            or names an unknown byte order
    """
    if default_output_dir is None:
        default_output_dir = get_install_dir()

    return RunConfig(
        palette_format=palette_format,
        endianness=_resolve_endianness(options, default_endianness),
        output_dir=_resolve_output(options, pick_folder, default_output_dir),
        replace=options.has(Option.REPLACE),
        continue_without_pause=options.has(Option.CONTINUE),
    )


def format_usage(program: str) -> str:
    """Usage text listing every option"""
    short_width = max(len(o.short_op) for o in CONSOLE_OPTIONS)
    long_width = max(len(o.long_op) for o in CONSOLE_OPTIONS)

    lines = [
        f"Usage: {program} <file/folder path> [HPL/ACT] [options...]",
        "Options:",
    ]
    for option in CONSOLE_OPTIONS:
        lines.append(
            f"{option.short_op.ljust(short_width)}\t"
            f"{option.long_op.ljust(long_width)}\t{option.description}"
        )
    return "\n".join(lines)
