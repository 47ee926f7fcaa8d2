#!/usr/bin/env python3
"""
Interactive file and folder pickers
Qt dialogs shown when the command line leaves a path out
"""

import sys
from typing import Optional


class FileFilters:
    """Common file filter strings"""

    SUPPORTED_FILES = (
        "Supported Files (*.act *.pal *.aco *.ase *.hpl *.hip *.pac *.paccs *.pacgz)"
    )
    PALETTE_FILES = "Palette Files (*.act *.pal)"
    SWATCHES = "Swatches (*.aco *.ase)"
    ARCSYS_PALETTES = "ArcSys Palettes (*.hpl *pal.pac)"
    ARCSYS_IMAGES = "ArcSys Images (*.hip *img.pac *vri.pac)"
    ARCSYS_FILES = "ArcSys Files (*.pac *.paccs *.pacgz)"
    ALL_FILES = "All Files (*.*)"

    INPUT = ";;".join((
        SUPPORTED_FILES, PALETTE_FILES, SWATCHES, ARCSYS_PALETTES,
        ARCSYS_IMAGES, ARCSYS_FILES, ALL_FILES,
    ))


# Kept on the module so the application outlives the dialog call
_app = None


def _file_dialog_class():
    """Import Qt lazily and make sure a QApplication exists"""
    global _app
    from PyQt6.QtWidgets import QApplication, QFileDialog

    if QApplication.instance() is None:
        _app = QApplication(sys.argv[:1])
    return QFileDialog


def open_file_dialog(title: str, file_filter: str = FileFilters.ALL_FILES,
                     initial_dir: str = "") -> Optional[str]:
    """
    Browse for a file using a file dialog

    Args:
        title: Dialog title
        file_filter: Qt filter string (e.g., "Palette Files (*.act *.pal)")
        initial_dir: Initial directory to open

    Returns:
        Selected file path or None if cancelled
    """
    dialog = _file_dialog_class()
    file_name, _ = dialog.getOpenFileName(None, title, initial_dir, file_filter)
    return file_name if file_name else None


def open_folder_dialog(title: str, initial_dir: str = "") -> Optional[str]:
    """
    Browse for a folder

    Returns:
        Selected folder path or None if cancelled
    """
    dialog = _file_dialog_class()
    folder = dialog.getExistingDirectory(None, title, initial_dir)
    return folder if folder else None
