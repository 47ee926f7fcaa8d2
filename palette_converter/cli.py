#!/usr/bin/env python3
"""
ArcSystemWorks palette converter

Usage:
    palette-converter <file/folder path> [HPL/ACT] [options...]

Options:
    -en, --endianness <name>   HPL byte order {LittleEndian|BigEndian}
    -o,  --output <dir>        Output directory
    -r,  --replace             Overwrite existing files without a backup
    -c,  --continue            Don't pause when finished
"""

import os
import sys
from typing import Optional

from . import dialogs
from .converter import ConversionDriver
from .exceptions import InputPathError
from .logging_config import get_logger, setup_logging
from .models import PaletteFormat, RunConfig
from .options import (
    clean_path_arg,
    format_usage,
    is_flag,
    parse_options,
    resolve_run_config,
)
from .settings_manager import SettingsManager, get_settings

PROGRAM = "palette-converter"
BANNER = "\nArcSystemWorks Palette Converter\n"
HELP_TOKENS = ("-h", "--help")

logger = get_logger("cli")


def split_positionals(args: list[str]) -> tuple[Optional[str], Optional[PaletteFormat], list[str]]:
    """
    Separate the input path and the format name from the option tokens.

    The format may be the first or the second token. When the format comes
    first, the path is taken from the second token.

    Returns:
        (input path or None, format or None, remaining tokens)
    """
    palette_format = None
    format_index = None
    for index in (0, 1):
        if index < len(args) and not is_flag(args[index]):
            palette_format = PaletteFormat.parse(args[index])
            if palette_format is not None:
                format_index = index
                break

    path_index = None
    for index in (0, 1):
        if index >= len(args) or index == format_index:
            continue
        token = args[index]
        if token.strip() and not is_flag(token):
            path_index = index
        # Only the very first non-format token can be the path
        break

    remaining = [
        token for i, token in enumerate(args) if i not in (format_index, path_index)
    ]
    input_path = args[path_index] if path_index is not None else None
    return input_path, palette_format, remaining


def pick_input(settings: SettingsManager) -> Optional[str]:
    """Ask for an input file, then for a folder if no file was chosen"""
    initial_dir = settings.get("last_input_dir", "")
    try:
        path = dialogs.open_file_dialog(
            "Select input file...", dialogs.FileFilters.INPUT, initial_dir
        )
        if not path:
            path = dialogs.open_folder_dialog("Select input folder...", initial_dir)
    except ImportError as e:
        logger.warning(f"Interactive pickers are unavailable: {e}")
        return None

    settings.remember_input(path)
    return path


def pick_output(settings: SettingsManager, title: str) -> Optional[str]:
    try:
        path = dialogs.open_folder_dialog(title, settings.get("last_output_dir", ""))
    except ImportError as e:
        logger.warning(f"Interactive pickers are unavailable: {e}")
        return None

    settings.remember_output(path)
    return path


def pause(config: Optional[RunConfig] = None, force: bool = False):
    """Wait for the user unless --continue was given"""
    if config is not None and config.continue_without_pause and not force:
        return

    print("Press Enter to exit...")
    try:
        input()
    except EOFError:
        pass


def main(argv: Optional[list[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)

    setup_logging()
    print(BANNER)

    if not args or args[0] in HELP_TOKENS:
        print(format_usage(PROGRAM))
        pause()
        return 0

    config = None
    driver = None
    try:
        settings = get_settings()
        input_path, palette_format, remaining = split_positionals(args)
        if palette_format is None:
            palette_format = settings.default_format()

        if not input_path:
            input_path = pick_input(settings)
            if not input_path:
                print(format_usage(PROGRAM))
                pause()
                return 0

        input_path = os.path.abspath(clean_path_arg(input_path))
        config = resolve_run_config(
            parse_options(remaining),
            palette_format,
            pick_folder=lambda title: pick_output(settings, title),
            default_endianness=settings.default_endianness(),
        )

        driver = ConversionDriver(config)
        driver.run(input_path)
    except InputPathError as e:
        logger.error("The given file/folder does not exist.")
        logger.debug(str(e))
        pause(config, force=True)
        return 1
    except Exception:
        if driver is not None and driver.current_file:
            logger.error(f"Current File: {driver.current_file}")
        logger.exception("Something went wrong!")
        pause(config, force=True)
        return 1

    pause(config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
