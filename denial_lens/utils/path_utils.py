"""
Path utility functions for locating the data directory.

These functions handle both development (script) and production (PyInstaller exe) modes.
"""

import os
import sys
from pathlib import Path


def get_base_path() -> Path:
    """
    Get the base application path.

    In PyInstaller bundle: Returns directory containing the executable
    In script mode: Returns the project root directory

    Returns:
        Path to base application directory
    """
    if hasattr(sys, '_MEIPASS'):
        return Path(os.path.dirname(sys.executable))
    # denial_lens/utils/path_utils.py -> project root
    return Path(__file__).resolve().parent.parent.parent


def get_data_path() -> Path:
    """
    Get the path to the data directory.

    Data directory contains config/ and the claims dataset under db/.

    Returns:
        Path to data/ directory
    """
    return get_base_path() / "data"
