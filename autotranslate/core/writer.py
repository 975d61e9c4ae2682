"""
Catalog writer.

Translated catalogs and cache snapshots are written atomically so an
interrupted run never leaves a half-written JSON file behind.
"""

import json
import tempfile
from pathlib import Path
from typing import Any, Dict

from autotranslate.exceptions import PersistError
from autotranslate.logger import get_logger

logger = get_logger(__name__)


def write_catalog_file(file_path: Path, data: Dict[str, Any]):
    """
    Write JSON to file atomically.

    The data is written to a temporary file in the target directory, then
    renamed over the target path; if anything fails the original file is
    unchanged.

    Args:
        file_path: Target file path
        data: Data to write as JSON

    Raises:
        PersistError: If the write fails
    """
    file_path = Path(file_path)

    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        temp_fd, temp_path = tempfile.mkstemp(
            dir=file_path.parent,
            prefix=f".{file_path.stem}_",
            suffix=".json.tmp"
        )
    except OSError as e:
        raise PersistError(file_path, str(e))

    temp_path = Path(temp_path)

    try:
        with open(temp_fd, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.write('\n')

        temp_path.replace(file_path)
        logger.debug(f"Atomic write successful: {file_path}")

    except (OSError, TypeError, ValueError) as e:
        if temp_path.exists():
            temp_path.unlink()
        raise PersistError(file_path, f"atomic write failed: {e}")


def delete_catalog_file(file_path: Path):
    """
    Remove a catalog that no longer has a source counterpart.

    Raises:
        PersistError: If the file cannot be removed
    """
    file_path = Path(file_path)
    try:
        file_path.unlink()
    except FileNotFoundError:
        return
    except OSError as e:
        raise PersistError(file_path, f"could not delete: {e}")

    logger.info(f"Deleted unused file {file_path}")
