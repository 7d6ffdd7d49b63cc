"""Unit tests for the JSON key/value store."""

from pathlib import Path

import pytest
import pytest_check as check

from kbase.storage.store import JSONStore


class TestJSONStore:
    def test_round_trips_structured_data(self, tmp_path: Path) -> None:
        store = JSONStore(tmp_path)
        data = [{"id": "nb-1", "document_ids": ["a", "b"]}, {"id": "nb-2", "document_ids": []}]

        check.is_true(store.set("notebooks", data))
        check.equal(store.get("notebooks"), data)

    def test_missing_key_returns_none(self, tmp_path: Path) -> None:
        assert JSONStore(tmp_path).get("missing") is None

    def test_persists_across_instances(self, tmp_path: Path) -> None:
        JSONStore(tmp_path).set_string("llm_api_key", "sk-1")

        assert JSONStore(tmp_path).get_string("llm_api_key") == "sk-1"

    def test_get_string_ignores_non_strings(self, tmp_path: Path) -> None:
        store = JSONStore(tmp_path)
        store.set("count", 3)

        assert store.get_string("count") is None

    def test_has_and_remove(self, tmp_path: Path) -> None:
        store = JSONStore(tmp_path)
        store.set("documents", [])

        check.is_true(store.has("documents"))
        check.is_true(store.remove("documents"))
        check.is_false(store.has("documents"))
        check.is_true(store.remove("documents"))

    def test_clear_removes_every_key(self, tmp_path: Path) -> None:
        store = JSONStore(tmp_path)
        store.set("a", 1)
        store.set("b", 2)

        assert store.clear()
        assert list(tmp_path.glob("*.json")) == []

    def test_corrupt_file_reads_as_none(self, tmp_path: Path) -> None:
        (tmp_path / "documents.json").write_text("{not json", encoding="utf-8")

        assert JSONStore(tmp_path).get("documents") is None

    def test_unserializable_value_is_rejected(self, tmp_path: Path) -> None:
        store = JSONStore(tmp_path)
        circular: list = []
        circular.append(circular)
        assert store.set("circular", circular) is False

    def test_unsafe_keys_are_rejected(self, tmp_path: Path) -> None:
        store = JSONStore(tmp_path)

        check.is_false(store.set("../escape/key", "x"))
        check.is_false(store.set(".hidden", "x"))
        check.is_none(store.get("../escape/key"))
        check.is_false(store.has("a/b"))
        check.equal(list(tmp_path.iterdir()), [])

    def test_similar_keys_do_not_collide(self, tmp_path: Path) -> None:
        store = JSONStore(tmp_path)
        store.set("a_b", 1)

        check.is_false(store.set("a/b", 2))
        check.equal(store.get("a_b"), 1)

    def test_failed_write_keeps_previous_value(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        store = JSONStore(tmp_path)
        store.set("documents", [{"id": "doc-1"}])

        def fail_replace(src: str, dst: str) -> None:
            raise OSError("disk full")

        monkeypatch.setattr("kbase.storage.store.os.replace", fail_replace)

        check.is_false(store.set("documents", [{"id": "doc-2"}]))
        check.equal(store.get("documents"), [{"id": "doc-1"}])
        check.equal([path.name for path in tmp_path.iterdir()], ["documents.json"])

    def test_creates_data_directory(self, tmp_path: Path) -> None:
        data_dir = tmp_path / "nested" / "data"
        store = JSONStore(data_dir)

        check.is_true(store.enabled)
        check.is_true(data_dir.is_dir())


class TestDisabledStore:
    def test_writes_fail_and_reads_are_empty(self) -> None:
        store = JSONStore(None)

        check.is_false(store.enabled)
        check.is_false(store.set("key", 1))
        check.is_none(store.get("key"))
        check.is_false(store.has("key"))
        check.is_false(store.remove("key"))
        check.is_false(store.clear())
