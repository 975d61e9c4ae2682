"""
Directory layout of translation files.

Two structures are supported:
- default: one directory per language, holding any number of JSON files
  (locales/en/common.json, locales/de/common.json)
- ngx-translate: one JSON file per language (i18n/en.json, i18n/de.json)

The cache directory mirrors the same structure per target language.
"""

from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional

from autotranslate.core.catalog import Catalog, FileType, load_catalog, load_translations
from autotranslate.exceptions import LoadError
from autotranslate.language_codes import get_language_file_name


class DirectoryStructure(str, Enum):
    DEFAULT = 'default'
    NGX_TRANSLATE = 'ngx-translate'


def available_languages(
    input_dir: Path,
    structure: DirectoryStructure = DirectoryStructure.DEFAULT,
    ignore: Iterable[Path] = (),
) -> List[str]:
    """
    List the language codes present in the input directory.

    Hidden entries are skipped, as are the paths in `ignore` (typically the
    cache directory when it lives inside the input directory).
    """
    input_dir = Path(input_dir)
    ignored = {Path(p).resolve() for p in ignore}

    if DirectoryStructure(structure) == DirectoryStructure.NGX_TRANSLATE:
        entries = [p for p in input_dir.glob("*.json") if p.is_file()]
        names = [p.stem for p in entries if p.resolve() not in ignored and not p.name.startswith('.')]
    else:
        entries = [p for p in input_dir.iterdir() if p.is_dir()]
        names = [p.name for p in entries if p.resolve() not in ignored and not p.name.startswith('.')]

    return sorted(names)


def language_path(input_dir: Path, language: str, structure: DirectoryStructure = DirectoryStructure.DEFAULT) -> Path:
    """Directory (default) or file (ngx-translate) holding a language's translations."""
    if DirectoryStructure(structure) == DirectoryStructure.NGX_TRANSLATE:
        return Path(input_dir) / get_language_file_name(language)
    return Path(input_dir) / language


def catalog_path(
    root: Path,
    language: str,
    structure: DirectoryStructure,
    name: str,
) -> Path:
    """
    Path of a catalog for a language under root.

    In the ngx-translate structure a language has a single file, so the
    catalog name is not part of the path.
    """
    if DirectoryStructure(structure) == DirectoryStructure.NGX_TRANSLATE:
        return language_path(root, language, structure)
    return language_path(root, language, structure) / name


def cache_file_path(cache_dir: Path, language: str, structure: DirectoryStructure, name: str) -> Path:
    """Where the source snapshot used for a target language's catalog is kept."""
    return catalog_path(cache_dir, language, structure, name)


def load_language(
    input_dir: Path,
    language: str,
    structure: DirectoryStructure = DirectoryStructure.DEFAULT,
    file_type: FileType = FileType.AUTO,
    with_arrays: bool = False,
    exclude: Optional[str] = None,
    recursive: bool = False,
    errors: Optional[List[LoadError]] = None,
) -> List[Catalog]:
    """
    Load the catalogs of one language.

    A language that has no translations yet yields an empty list.
    """
    path = language_path(input_dir, language, structure)

    if DirectoryStructure(structure) == DirectoryStructure.DEFAULT:
        return load_translations(path, file_type, with_arrays, exclude, recursive, errors)

    if not path.is_file():
        return []

    try:
        return [load_catalog(path, path.parent, file_type, with_arrays)]
    except LoadError as e:
        if errors is None:
            raise
        errors.append(e)
        return []
