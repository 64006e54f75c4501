"""
Utility Functions Module.

Contains helper functions for file paths and resource lookup.
"""

from .path_utils import get_base_path, get_data_path

__all__ = [
    'get_base_path',
    'get_data_path',
]
