#!/usr/bin/env python3
"""
Output path synthesis
Mirrors an entry's position inside nested containers under the output root
"""

import os

from .constants import INVALID_NAME_PLACEHOLDER, INVALID_NAME_REPLACEMENT
from .models import Entry

_SEPARATORS = os.sep + (os.altsep or "")


def sanitize(path: str) -> str:
    """Replace the placeholder left by undecodable archive names"""
    return path.replace(INVALID_NAME_PLACEHOLDER, INVALID_NAME_REPLACEMENT)


def relative_segments(entry: Entry, input_base_dir: str) -> list[str]:
    """
    Path segments of an entry relative to the conversion root.

    The physical path comes first with the input base directory stripped
    as a literal prefix, followed by the in-container path components.
    """
    segments = [entry.primary_path, *entry.extended_paths]
    if input_base_dir and segments[0].startswith(input_base_dir):
        segments[0] = segments[0][len(input_base_dir):]
    return segments


def synthesize(entry: Entry, input_base_dir: str, output_base_dir: str,
               target_extension: str) -> str:
    """
    Compute the absolute output path for an entry.

    Args:
        entry: Entry being converted
        input_base_dir: Directory (or container file) the conversion started from
        output_base_dir: Root of the output tree
        target_extension: Extension of the output format, e.g. '.hpl'

    Returns:
        Absolute, normalized path with the extension replaced and every
        placeholder character sanitized
    """
    if not target_extension.startswith("."):
        target_extension = f".{target_extension}"
    target_extension = target_extension.lower()

    segments = relative_segments(entry, input_base_dir)
    relative = os.sep.join(segments) if any(segments) else entry.name

    joined = os.path.join(output_base_dir, relative.lstrip(_SEPARATORS))
    save_path = sanitize(os.path.abspath(joined))

    # Collapse the outermost container's suffix so 'a.pac' becomes directory 'a'
    root_extension = entry.root.extension
    if entry.is_nested and root_extension:
        save_path = save_path.replace(root_extension, "")

    extension = entry.extension
    if extension and save_path.endswith(extension):
        save_path = save_path[:-len(extension)]
    save_path += target_extension

    return sanitize(save_path)


def ensure_parent_dir(path: str) -> None:
    """Create the parent directories of a file path if they are missing"""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
