"""
Data Loader for the claims dataset and other files under data/.

Reading files is kept here so the parsing and matching engine only ever
sees in-memory text.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from denial_lens.utils.path_utils import get_data_path

logger = logging.getLogger(__name__)


def load_data_file(relative_path: str, data_path: Optional[Path] = None) -> Optional[Path]:
    """
    Get path to a data file.

    Args:
        relative_path: Relative path from data/ directory (e.g., "db/denial_df.csv")
        data_path: Base data path (defaults to get_data_path())

    Returns:
        Path to data file, or None if not found
    """
    if data_path is None:
        data_path = get_data_path()

    file_path = data_path / relative_path

    if file_path.exists():
        return file_path

    return None


def read_text_file(path: Union[str, Path], encoding: str = "utf-8") -> str:
    """
    Read a whole text file.

    Raises:
        OSError: if the file cannot be read.
        UnicodeDecodeError: if the file is not valid in ``encoding``.
    """
    with open(path, "r", encoding=encoding, newline="") as f:
        text = f.read()
    logger.debug("Read %d characters from %s", len(text), path)
    return text


def load_dataset_text(dataset_file: str, encoding: str = "utf-8",
                      data_path: Optional[Path] = None) -> str:
    """
    Read the claims dataset.

    Args:
        dataset_file: Absolute path, or path relative to data/.
        encoding: File encoding.
        data_path: Base data path (defaults to get_data_path())

    Raises:
        FileNotFoundError: if the dataset does not exist.
    """
    path = Path(dataset_file)
    if not path.is_absolute():
        resolved = load_data_file(dataset_file, data_path)
        if resolved is None:
            raise FileNotFoundError(f"Dataset not found: {dataset_file}")
        path = resolved
    return read_text_file(path, encoding)
