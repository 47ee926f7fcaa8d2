#!/usr/bin/env python3
"""
Common file operation utilities
Directory enumeration and backups of output files about to be overwritten
"""

import itertools
import os
import shutil
from typing import Optional

from .logging_config import get_logger

logger = get_logger("file_operations")


class FileOperations:
    """Utility class for common file operations"""

    @staticmethod
    def find_files(directory: str) -> list[str]:
        """
        List every file below a directory

        Files of a directory come before the contents of its subdirectories;
        both are visited in name order. Symlinked directories are not entered,
        so link loops cannot recurse forever.

        Args:
            directory: Directory to search

        Returns:
            Absolute file paths
        """
        with os.scandir(directory) as it:
            children = sorted(it, key=lambda e: e.name)

        files = [os.path.abspath(e.path) for e in children if e.is_file()]
        for subdir in (e for e in children if e.is_dir(follow_symlinks=False)):
            files.extend(FileOperations.find_files(subdir.path))
        return files

    @staticmethod
    def backup_path(file_path: str, suffix: str = ".bak") -> str:
        """First unused backup name: file.bak, then file.1.bak, file.2.bak, ..."""
        candidates = itertools.chain(
            [f"{file_path}{suffix}"],
            (f"{file_path}.{n}{suffix}" for n in itertools.count(1)),
        )
        return next(c for c in candidates if not os.path.exists(c))

    @staticmethod
    def create_backup(file_path: str, suffix: str = ".bak") -> Optional[str]:
        """
        Copy a file to its first unused backup name

        Returns:
            Backup file path or None if there was nothing to copy or the copy failed
        """
        if not os.path.isfile(file_path):
            return None

        target = FileOperations.backup_path(file_path, suffix)
        try:
            shutil.copy2(file_path, target)
        except OSError as e:
            logger.debug(f"Backup of {file_path} failed: {e}")
            return None
        return target
