"""Tests for catalog loading, layout, diffing and writing."""
import pytest

from autotranslate.core import (
    Catalog,
    DirectoryStructure,
    FileType,
    available_languages,
    build_catalog,
    cache_file_path,
    catalog_path,
    changed_keys,
    check_key_based,
    delete_catalog_file,
    detect_file_type,
    find_inconsistent_keys,
    find_invalid_keys,
    fix_inconsistencies,
    flatten_json,
    load_language,
    load_snapshot,
    load_translations,
    unflatten_content,
    unused_keys,
    write_catalog_file,
)
from autotranslate.exceptions import InvalidKeysError, LoadError, PersistError
from tests.conftest import write_json


# === Flattening ===

class TestFlatten:
    def test_nested(self):
        data = {"home": {"title": "Hello", "menu": {"open": "Open"}}, "count": 1}
        assert flatten_json(data) == {"home.title": "Hello", "home.menu.open": "Open", "count": 1}

    def test_arrays_are_leaves_by_default(self):
        assert flatten_json({"tags": ["a", "b"]}) == {"tags": ["a", "b"]}

    def test_arrays_with_indices(self):
        data = {"tags": ["a", {"label": "b"}]}
        assert flatten_json(data, with_arrays=True) == {"tags.0": "a", "tags.1.label": "b"}

    def test_empty_containers_are_leaves(self):
        assert flatten_json({"empty": {}, "none": []}, with_arrays=True) == {"empty": {}, "none": []}

    def test_unflatten(self):
        flat = {"home.title": "Hello", "home.menu.open": "Open", "count": 1}
        assert unflatten_content(flat) == {"home": {"title": "Hello", "menu": {"open": "Open"}}, "count": 1}

    def test_unflatten_lists(self):
        flat = {"tags.0": "a", "tags.1.label": "b", "codes.1": "y", "codes.0": "x"}
        result = unflatten_content(flat, with_arrays=True)
        assert result == {"tags": ["a", {"label": "b"}], "codes": ["x", "y"]}

    def test_unflatten_keeps_sparse_digit_keys_with_arrays(self):
        flat = {"errors.404": "Not found", "errors.500": "Server error", "steps.1": "b", "steps.2": "c"}
        assert unflatten_content(flat, with_arrays=True) == {
            "errors": {"404": "Not found", "500": "Server error"},
            "steps": {"1": "b", "2": "c"},
        }

    def test_unflatten_keeps_digit_keys_without_arrays(self):
        assert unflatten_content({"errors.404": "Not found"}) == {"errors": {"404": "Not found"}}


# === Catalogs ===

class TestCatalog:
    def test_detect_natural(self):
        assert detect_file_type({"Hello world": "Hello world"}) == FileType.NATURAL
        assert detect_file_type({"Done.": "Done."}) == FileType.NATURAL

    def test_detect_key_based(self):
        assert detect_file_type({"home": {"some title": "x"}, "save": "Save"}) == FileType.KEY_BASED

    def test_natural_content_is_not_flattened(self):
        catalog = build_catalog('app.json', {"Hello world.": "Hello world."})
        assert catalog.kind == FileType.NATURAL
        assert catalog.content == {"Hello world.": "Hello world."}
        assert catalog.source_text("Hello world.") == "Hello world."

    def test_translatable(self):
        catalog = build_catalog('a.json', {"a": "Text", "b": "", "c": 3, "d": ["x"], "e": "  "})
        assert [key for key in catalog.content if catalog.is_translatable(key)] == ["a"]

    def test_load_translations(self, tmp_path):
        write_json(tmp_path / 'en' / 'b.json', {"b": "B"})
        write_json(tmp_path / 'en' / 'a.json', {"a": {"x": "A"}})
        catalogs = load_translations(tmp_path / 'en')
        assert [c.name for c in catalogs] == ['a.json', 'b.json']
        assert catalogs[0].content == {"a.x": "A"}

    def test_load_error_raised(self, tmp_path):
        (tmp_path / 'en').mkdir()
        (tmp_path / 'en' / 'broken.json').write_text('{"a": ', encoding='utf-8')
        with pytest.raises(LoadError) as exc_info:
            load_translations(tmp_path / 'en')
        assert 'broken.json' in str(exc_info.value)

    def test_load_errors_collected(self, tmp_path):
        write_json(tmp_path / 'en' / 'good.json', {"a": "A"})
        write_json(tmp_path / 'en' / 'list.json', ["not", "an", "object"])
        errors = []
        catalogs = load_translations(tmp_path / 'en', errors=errors)
        assert [c.name for c in catalogs] == ['good.json']
        assert len(errors) == 1
        assert errors[0].path.name == 'list.json'

    def test_exclude_and_recursive(self, tmp_path):
        write_json(tmp_path / 'en' / 'app.json', {"a": "A"})
        write_json(tmp_path / 'en' / 'app.draft.json', {"b": "B"})
        write_json(tmp_path / 'en' / 'admin' / 'users.json', {"c": "C"})
        assert [c.name for c in load_translations(tmp_path / 'en', exclude='*.draft.json')] == ['app.json']
        names = [c.name for c in load_translations(tmp_path / 'en', recursive=True)]
        assert names == ['admin/users.json', 'app.draft.json', 'app.json']

    def test_missing_directory(self, tmp_path):
        assert load_translations(tmp_path / 'missing') == []

    def test_inconsistencies(self):
        catalog = build_catalog('app.json', {"Hello world.": "Hello world.", "Save file": "Save"})
        assert find_inconsistent_keys(catalog) == ["Save file"]
        fixed = fix_inconsistencies(catalog)
        assert fixed.content == {"Hello world.": "Hello world.", "Save file": "Save file"}
        assert find_inconsistent_keys(fixed) == []

    def test_invalid_keys(self):
        catalog = build_catalog('app.json', {"hello world": "Hi", "ok": "OK"}, FileType.KEY_BASED)
        assert find_invalid_keys(catalog) == ["hello world"]
        with pytest.raises(InvalidKeysError):
            check_key_based(catalog)

    def test_natural_catalog_has_no_invalid_keys(self):
        check_key_based(build_catalog('app.json', {"hello world": "hello world"}))


# === Layout ===

class TestLayout:
    def test_default_languages(self, tmp_path):
        for name in ('en', 'de', '.git', 'cache'):
            (tmp_path / name).mkdir()
        (tmp_path / 'README.json').write_text('{}', encoding='utf-8')
        assert available_languages(tmp_path, ignore=[tmp_path / 'cache']) == ['de', 'en']

    def test_ngx_languages(self, tmp_path):
        write_json(tmp_path / 'en.json', {})
        write_json(tmp_path / 'pt-BR.json', {})
        (tmp_path / 'de').mkdir()
        assert available_languages(tmp_path, DirectoryStructure.NGX_TRANSLATE) == ['en', 'pt-BR']

    def test_paths(self, tmp_path):
        assert catalog_path(tmp_path, 'de', DirectoryStructure.DEFAULT, 'a/b.json') == tmp_path / 'de' / 'a' / 'b.json'
        assert catalog_path(tmp_path, 'de', DirectoryStructure.NGX_TRANSLATE, 'en.json') == tmp_path / 'de.json'
        assert cache_file_path(tmp_path, 'de', 'default', 'b.json') == tmp_path / 'de' / 'b.json'

    def test_load_language_ngx(self, tmp_path):
        write_json(tmp_path / 'de.json', {"a": {"b": "B"}})
        catalogs = load_language(tmp_path, 'de', DirectoryStructure.NGX_TRANSLATE)
        assert [(c.name, c.content) for c in catalogs] == [('de.json', {"a.b": "B"})]
        assert load_language(tmp_path, 'fr', DirectoryStructure.NGX_TRANSLATE) == []


# === Diff ===

class TestDiff:
    def test_changed_keys(self):
        assert changed_keys({"a": 1, "b": 3, "c": 4}, {"a": 1, "b": 2}) == {"b", "c"}

    def test_no_snapshot_means_everything_changed(self):
        assert changed_keys({"a": 1, "b": 2}, None) == {"a", "b"}

    def test_removals_not_reported(self):
        assert changed_keys({"a": 1}, {"a": 1, "gone": 2}) == set()

    def test_unused_keys(self):
        assert unused_keys({"a": 1}, {"z": 0, "a": 1, "y": 2}) == ["z", "y"]

    def test_load_snapshot(self, tmp_path):
        path = write_json(tmp_path / 'snap.json', {"home": {"title": "Hi"}})
        assert load_snapshot(path, FileType.KEY_BASED) == {"home.title": "Hi"}
        assert load_snapshot(tmp_path / 'missing.json', FileType.KEY_BASED) is None

    def test_corrupt_snapshot_ignored(self, tmp_path):
        path = tmp_path / 'snap.json'
        path.write_text('nope', encoding='utf-8')
        assert load_snapshot(path, FileType.KEY_BASED) is None


# === Writer ===

class TestWriter:
    def test_format(self, tmp_path):
        path = tmp_path / 'de' / 'app.json'
        write_catalog_file(path, {"greeting": "Grüß dich", "nested": {"a": 1}})
        assert path.read_text(encoding='utf-8') == (
            '{\n  "greeting": "Grüß dich",\n  "nested": {\n    "a": 1\n  }\n}\n'
        )
        assert list(path.parent.iterdir()) == [path]

    def test_write_error(self, tmp_path):
        (tmp_path / 'blocker').write_text('', encoding='utf-8')
        with pytest.raises(PersistError):
            write_catalog_file(tmp_path / 'blocker' / 'app.json', {})

    def test_delete(self, tmp_path):
        path = write_json(tmp_path / 'old.json', {})
        delete_catalog_file(path)
        assert not path.exists()
        delete_catalog_file(path)
