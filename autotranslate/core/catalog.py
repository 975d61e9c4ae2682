"""
Catalog loading module.

This module turns a directory of JSON translation files into catalogs:
- Detecting whether a file is key-based or natural-language
- Flattening key-based files into dotted keys
- Rebuilding nested JSON from flat keys for writing
- Finding inconsistent natural keys and invalid key-based keys
"""

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from autotranslate.exceptions import InvalidKeysError, LoadError
from autotranslate.logger import get_logger

logger = get_logger(__name__)

SEPARATOR = '.'


class FileType(str, Enum):
    KEY_BASED = 'key-based'
    NATURAL = 'natural'
    AUTO = 'auto'


@dataclass
class Catalog:
    """One loaded translation file."""
    name: str                   # Path relative to the language directory, e.g. 'common.json'
    kind: FileType              # KEY_BASED or NATURAL, never AUTO
    content: Dict[str, Any]     # Flat key -> value, in file order
    original: Dict[str, Any]    # Parsed JSON as found on disk

    def is_translatable(self, key: str) -> bool:
        """Only non-empty strings are sent to a translation service."""
        if not isinstance(self.content.get(key), str):
            return False
        return bool(self.source_text(key).strip())

    def source_text(self, key: str) -> str:
        """Text to translate for a key: natural catalogs use the key itself."""
        return key if self.kind == FileType.NATURAL else self.content[key]


def flatten_json(data: Dict[str, Any], with_arrays: bool = False, parent_key: str = '') -> Dict[str, Any]:
    """
    Flatten a nested JSON structure into a flat dictionary.

    Args:
        data: The nested dictionary to flatten
        with_arrays: Flatten arrays into indexed keys instead of keeping them as values
        parent_key: The parent key for recursion

    Returns:
        A flat dictionary of dotted key paths to leaf values

    Example:
        >>> flatten_json({"home": {"title": "Hello", "tags": ["a", "b"]}}, with_arrays=True)
        {'home.title': 'Hello', 'home.tags.0': 'a', 'home.tags.1': 'b'}
    """
    items: Dict[str, Any] = {}

    for key, value in data.items():
        new_key = f"{parent_key}{SEPARATOR}{key}" if parent_key else str(key)

        if isinstance(value, dict) and value:
            items.update(flatten_json(value, with_arrays, new_key))
        elif isinstance(value, list) and value and with_arrays:
            indexed = {str(i): item for i, item in enumerate(value)}
            items.update(flatten_json(indexed, with_arrays, new_key))
        else:
            items[new_key] = value

    return items


def _lists_from_digit_keys(node: Any) -> Any:
    """Turn objects keyed exactly 0..n-1 back into lists; other digit keys stay object keys."""
    if not isinstance(node, dict):
        return node

    node = {key: _lists_from_digit_keys(value) for key, value in node.items()}
    indices = [str(index) for index in range(len(node))]
    if node and set(node) == set(indices):
        return [node[key] for key in indices]
    return node


def unflatten_content(flat: Dict[str, Any], with_arrays: bool = False) -> Dict[str, Any]:
    """
    Rebuild nested JSON from flat key paths.

    Args:
        flat: Flat key -> value mapping
        with_arrays: Rebuild indexed keys as lists

    Returns:
        Nested dictionary

    Example:
        >>> unflatten_content({"home.title": "Hello", "home.tags.0": "a"}, with_arrays=True)
        {'home': {'title': 'Hello', 'tags': ['a']}}
    """
    result: Dict[str, Any] = {}

    for path, value in flat.items():
        keys = path.split(SEPARATOR)
        node = result

        for key in keys[:-1]:
            if not isinstance(node.get(key), dict):
                # Handle conflict: a leaf cannot also hold children
                node[key] = {}
            node = node[key]

        node[keys[-1]] = value

    if not with_arrays:
        return result

    return {key: _lists_from_digit_keys(value) for key, value in result.items()}


def detect_file_type(data: Dict[str, Any]) -> FileType:
    """
    A file is natural-language when any top-level string entry has a key
    containing a period or a space, which dotted key paths never do.
    """
    for key, value in data.items():
        if isinstance(value, str) and ('.' in key or ' ' in key):
            return FileType.NATURAL
    return FileType.KEY_BASED


def read_json_file(path: Path) -> Dict[str, Any]:
    """
    Read a JSON object from disk.

    Raises:
        LoadError: If the file is unreadable, not valid JSON or not an object
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise LoadError(path, f"invalid JSON ({e})")
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(path, str(e))

    if not isinstance(data, dict):
        raise LoadError(path, f"expected a JSON object, got {type(data).__name__}")

    return data


def build_catalog(
    name: str,
    data: Dict[str, Any],
    file_type: FileType = FileType.AUTO,
    with_arrays: bool = False,
) -> Catalog:
    """Build a catalog from parsed JSON."""
    kind = detect_file_type(data) if FileType(file_type) == FileType.AUTO else FileType(file_type)
    content = flatten_json(data, with_arrays) if kind == FileType.KEY_BASED else dict(data)
    return Catalog(name=name, kind=kind, content=content, original=data)


def load_catalog(
    path: Path,
    base_dir: Path,
    file_type: FileType = FileType.AUTO,
    with_arrays: bool = False,
) -> Catalog:
    """
    Load one translation file.

    Args:
        path: Path to the JSON file
        base_dir: Language directory the catalog name is relative to
        file_type: Forced file type, or AUTO to detect it
        with_arrays: Flatten arrays into indexed keys

    Raises:
        LoadError: If the file cannot be loaded
    """
    data = read_json_file(path)
    catalog = build_catalog(path.relative_to(base_dir).as_posix(), data, file_type, with_arrays)
    logger.debug(f"Loaded {catalog.name} ({catalog.kind.value}, {len(catalog.content)} keys)")
    return catalog


def iter_catalog_paths(directory: Path, exclude: Optional[str] = None, recursive: bool = False) -> List[Path]:
    """List the JSON files of a language directory in a stable order."""
    directory = Path(directory)
    if not directory.is_dir():
        return []

    pattern = "**/*.json" if recursive else "*.json"
    paths = sorted(p for p in directory.glob(pattern) if p.is_file())

    if exclude:
        paths = [p for p in paths if not p.relative_to(directory).match(exclude)]

    return paths


def load_translations(
    directory: Path,
    file_type: FileType = FileType.AUTO,
    with_arrays: bool = False,
    exclude: Optional[str] = None,
    recursive: bool = False,
    errors: Optional[List[LoadError]] = None,
) -> List[Catalog]:
    """
    Load every translation file of a language directory.

    Args:
        directory: Language directory
        file_type: Forced file type, or AUTO to detect per file
        with_arrays: Flatten arrays into indexed keys
        exclude: Glob pattern of files to skip
        recursive: Include JSON files in subdirectories
        errors: When given, files that fail to load are appended here and
            skipped; otherwise the first LoadError is raised

    Returns:
        List of catalogs, one per file
    """
    directory = Path(directory)
    catalogs = []

    for path in iter_catalog_paths(directory, exclude, recursive):
        try:
            catalogs.append(load_catalog(path, directory, file_type, with_arrays))
        except LoadError as e:
            if errors is None:
                raise
            logger.error(str(e))
            errors.append(e)

    return catalogs


def find_inconsistent_keys(catalog: Catalog) -> List[str]:
    """Keys of a natural catalog whose value is not the key itself."""
    if catalog.kind != FileType.NATURAL:
        return []
    return [key for key, value in catalog.content.items() if key != value]


def fix_inconsistencies(catalog: Catalog) -> Catalog:
    """Return a copy of a natural catalog with every value set to its key."""
    fixed = {key: key for key in catalog.content}
    return Catalog(name=catalog.name, kind=catalog.kind, content=fixed, original=dict(fixed))


def find_invalid_keys(catalog: Catalog) -> List[str]:
    """Top-level keys of a key-based catalog that contain spaces, a sign of a natural-language file."""
    if catalog.kind != FileType.KEY_BASED:
        return []
    return [key for key, value in catalog.original.items() if isinstance(value, str) and ' ' in key]


def check_key_based(catalog: Catalog):
    """
    Raises:
        InvalidKeysError: If a key-based catalog contains natural-language keys
    """
    invalid_keys = find_invalid_keys(catalog)
    if invalid_keys:
        raise InvalidKeysError(catalog.name, invalid_keys)
