"""
Core module - Catalog loading, layout, diffing and writing

This module provides:
- catalog: Loading and flattening JSON translation files
- layout: Default and ngx-translate directory structures
- diff: Changed and unused keys against the cache snapshot
- writer: Atomic JSON writes
"""

from autotranslate.core.catalog import (
    Catalog,
    FileType,
    build_catalog,
    check_key_based,
    detect_file_type,
    find_inconsistent_keys,
    find_invalid_keys,
    fix_inconsistencies,
    flatten_json,
    load_catalog,
    load_translations,
    read_json_file,
    unflatten_content,
)

from autotranslate.core.layout import (
    DirectoryStructure,
    available_languages,
    cache_file_path,
    catalog_path,
    language_path,
    load_language,
)

from autotranslate.core.diff import (
    changed_keys,
    load_snapshot,
    unused_keys,
)

from autotranslate.core.writer import (
    delete_catalog_file,
    write_catalog_file,
)
