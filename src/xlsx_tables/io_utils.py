"""
I/O utilities for workbook loading and output path handling.
"""

from pathlib import Path
from typing import Union
import logging

import openpyxl
from openpyxl.workbook import Workbook

from .exceptions import OutputInitializationFailed

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

EXCEL_SUFFIXES = ['.xlsx', '.xlsm']


def load_workbook_safe(path: PathLike, read_only: bool = False) -> Workbook:
    """
    Safely load an Excel workbook.

    Args:
        path: Path to the Excel file
        read_only: Open in streaming read-only mode

    Returns:
        Loaded openpyxl workbook

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If file is not a valid Excel file
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    if not path.suffix.lower() in EXCEL_SUFFIXES:
        raise ValueError(f"File must be an Excel file (.xlsx or .xlsm): {path}")

    try:
        return openpyxl.load_workbook(path, read_only=read_only, data_only=False)
    except Exception as e:
        raise ValueError(f"Failed to load Excel file {path}: {e}")


def ensure_out_dir(path: Path) -> Path:
    """
    Ensure output directory exists.

    Args:
        path: Directory path to create

    Returns:
        The created directory path
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def generate_unique_filename(base_path: Path, extension: str = ".xlsx") -> Path:
    """
    Generate a unique filename by adding numeric suffix if needed.

    Args:
        base_path: Base path without extension
        extension: File extension to use

    Returns:
        Unique file path
    """
    full_path = base_path.with_name(base_path.name + extension)

    if not full_path.exists():
        return full_path

    counter = 2
    while True:
        new_path = base_path.with_name(f"{base_path.name} #{counter}{extension}")
        if not new_path.exists():
            return new_path
        counter += 1


def prepare_output_path(path: PathLike, overwrite: bool = False) -> Path:
    """
    Create the parent directory and pick the path a workbook will be saved to.

    An existing file is kept unless overwrite is set; the new workbook then
    goes to the first free "<stem> #N" sibling.

    Args:
        path: Requested output path
        overwrite: Replace an existing file instead of writing a sibling

    Returns:
        The path to save to

    Raises:
        OutputInitializationFailed: If the directory cannot be created or the
            target is not a writable file location
    """
    path = Path(path)
    if path.suffix.lower() in EXCEL_SUFFIXES:
        suffix = path.suffix
        base_path = path.with_name(path.name[:-len(suffix)])
    else:
        suffix = ".xlsx"
        base_path = path
    requested = base_path.with_name(base_path.name + suffix)

    try:
        ensure_out_dir(path.parent)
    except OSError as e:
        raise OutputInitializationFailed(path, e) from e

    if requested.is_dir():
        raise OutputInitializationFailed(requested, "target is a directory")

    if overwrite:
        return requested

    target = generate_unique_filename(base_path, suffix)
    if target != requested:
        logger.info(f"{path} already exists, writing to {target}")
    return target


def save_workbook(wb: Workbook, path: Path) -> Path:
    """
    Save an openpyxl workbook, translating OS failures.

    Raises:
        OutputInitializationFailed: If the file cannot be written
    """
    try:
        wb.save(path)
    except OSError as e:
        raise OutputInitializationFailed(path, e) from e
    return path
