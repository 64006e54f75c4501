"""
Loader Module.

Reads data files at runtime so data can be updated without rebuilding.
"""

from .data_loader import load_data_file, load_dataset_text, read_text_file

__all__ = [
    'load_data_file',
    'load_dataset_text',
    'read_text_file',
]
