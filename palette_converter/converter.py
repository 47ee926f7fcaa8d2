#!/usr/bin/env python3
"""
Conversion driver
Walks the input, extracts each entry's palette and writes it in the target format
"""

import os
from typing import Optional

from . import pac_archive
from .constants import CONVERTED_DIR_SUFFIX
from .dispatcher import ExtractionStatus, FormatDispatcher
from .exceptions import ContainerError, InputPathError
from .file_operations import FileOperations
from .logging_config import get_logger
from .models import Container, Entry, Palette, PaletteFormat, RunConfig
from .palette_formats import encode_act, encode_hpl
from .paths import ensure_parent_dir, synthesize
from .traversal import ArchiveTraversal

logger = get_logger("converter")


class ConversionDriver:
    """
    Converts a file, an FPAC archive or a folder of both.

    Entries are processed one at a time in traversal order. A failing entry
    is logged and skipped; only an unusable input path stops the run.

    Attributes:
        current_file: Display path of the entry being processed, for error reports
        written: Output files written so far
        skipped: Number of entries that produced no output
    """

    def __init__(self, config: RunConfig, dispatcher: Optional[FormatDispatcher] = None):
        self.config = config
        self.dispatcher = dispatcher or FormatDispatcher()
        self.current_file = ""
        self.written: list[str] = []
        self.skipped = 0

    def run(self, input_path: str) -> list[str]:
        """
        Convert everything reachable from an input path.

        Raises:
            InputPathError: If the input path does not exist
            ContainerError: If a single archive input cannot be read
        """
        input_path = os.path.abspath(input_path)
        if not os.path.exists(input_path):
            raise InputPathError(f"The given file/folder does not exist: {input_path}")

        if os.path.isdir(input_path):
            self._convert_directory(input_path)
        else:
            container = pac_archive.load_container(input_path)
            if container is not None:
                self._convert_archive(container)
            else:
                output_root = self.config.output_dir or os.path.dirname(input_path)
                self.process_entry(
                    Entry.from_path(input_path), os.path.dirname(input_path), output_root
                )

        logger.info("Complete.")
        return self.written

    def _convert_directory(self, directory: str):
        output_root = self.config.output_dir or f"{directory}{CONVERTED_DIR_SUFFIX}"
        for path in FileOperations.find_files(directory):
            container = pac_archive.load_container(path)
            if container is None:
                self.process_entry(Entry.from_path(path), directory, output_root)
                continue
            try:
                entries = self.expand(container)
            except ContainerError as e:
                logger.warning(f"{e}. Skipping {os.path.basename(path)}...")
                self.skipped += 1
                continue
            for entry in entries:
                self.process_entry(entry, directory, output_root)

    def _convert_archive(self, container: Container):
        archive_path = container.primary_path
        stem = os.path.splitext(container.name)[0]
        parent = self.config.output_dir or os.path.dirname(archive_path)
        output_root = os.path.join(parent, stem)
        for entry in self.expand(container):
            self.process_entry(entry, archive_path, output_root)

    def expand(self, container: Container) -> list[Entry]:
        """Flatten a container, reporting each scanned archive"""
        traversal = ArchiveTraversal(self._list_children, self._on_scan)
        return traversal.expand(container)

    def _list_children(self, container: Container) -> list[Entry]:
        if not container.is_nested:
            return pac_archive.list_children(container)
        try:
            return pac_archive.list_children(container)
        except ContainerError as e:
            logger.warning(f"{e}. Skipping contents of {container.name}...")
            return []

    def _on_scan(self, container: Container, depth: int):
        self.current_file = container.full_name
        tag = container.obfuscation.tag
        suffix = f" ({tag})" if tag else ""
        logger.info(f"{' ' * (depth * 4)}Scanning {container.name}{suffix}...")

    def encode(self, palette: Palette) -> bytes:
        if self.config.palette_format is PaletteFormat.HPL:
            return encode_hpl(palette, self.config.endianness)
        return encode_act(palette)

    def process_entry(self, entry: Entry, base_directory: str,
                      output_root: str) -> Optional[str]:
        """
        Convert one entry.

        Args:
            entry: Entry to convert
            base_directory: Prefix stripped from the entry's physical path
            output_root: Root of the output tree

        Returns:
            Path of the written file, or None if the entry was skipped
        """
        self.current_file = entry.full_name
        logger.info(f"Processing {entry.name}")

        save_path = synthesize(
            entry, base_directory, output_root, self.config.palette_format.extension
        )
        file_name = os.path.basename(save_path)

        result = self.dispatcher.extract(entry)
        if result.status is ExtractionStatus.ERROR:
            logger.warning(f"Retrieving palette failed. Skipping {file_name}...")
            logger.debug(f"{entry.full_name}: {result.reason}")
            self.skipped += 1
            return None
        if not result.found:
            logger.info(f"No colors found. Skipping {file_name}...")
            self.skipped += 1
            return None

        try:
            self.write(save_path, self.encode(result.palette))
        except OSError as e:
            logger.warning(f"Could not write {save_path}: {e}. Skipping {file_name}...")
            self.skipped += 1
            return None

        logger.info(f"Finished processing {file_name}")
        self.written.append(save_path)
        return save_path

    def write(self, save_path: str, data: bytes):
        """Write output bytes, backing up an existing file unless replacing"""
        ensure_parent_dir(save_path)
        if os.path.exists(save_path) and not self.config.replace:
            backup = FileOperations.create_backup(save_path)
            if backup is None:
                logger.warning(f"Could not back up {save_path}")
            else:
                logger.info(f"Backed up {os.path.basename(save_path)} to {os.path.basename(backup)}")

        with open(save_path, "wb") as f:
            f.write(data)
