"""
Diff engine.

Compares a source catalog against the snapshot of that same source taken
when a target language was last translated, so that edited source
strings get translated again.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from autotranslate.core.catalog import FileType, build_catalog, read_json_file
from autotranslate.exceptions import LoadError
from autotranslate.logger import get_logger

logger = get_logger(__name__)


def changed_keys(current: Dict[str, Any], cached: Optional[Dict[str, Any]]) -> Set[str]:
    """
    Keys that are new or whose value changed since the snapshot.

    Without a snapshot every key counts as changed. Keys removed from the
    source are not reported.

    Example:
        >>> sorted(changed_keys({"a": 1, "b": 3, "c": 4}, {"a": 1, "b": 2}))
        ['b', 'c']
    """
    if cached is None:
        return set(current)

    return {key for key, value in current.items() if key not in cached or cached[key] != value}


def unused_keys(source: Dict[str, Any], target: Dict[str, Any]) -> List[str]:
    """Target keys that no longer exist in the source, in target order."""
    return [key for key in target if key not in source]


def load_snapshot(path: Path, kind: FileType, with_arrays: bool = False) -> Optional[Dict[str, Any]]:
    """
    Load a cached source snapshot, flattened the same way as its source.

    Returns:
        Flat snapshot content, or None when there is no usable snapshot
    """
    path = Path(path)
    if not path.is_file():
        return None

    try:
        data = read_json_file(path)
    except LoadError as e:
        logger.warning(f"Ignoring cache snapshot: {e}")
        return None

    return build_catalog(path.name, data, kind, with_arrays).content
