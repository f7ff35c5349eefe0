"""Tests for the apps/contents to blob storage migration."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from appgallery.backend.app.services.catalog_service import save_collection
from appgallery.backend.migrations import blob_migration
from appgallery.backend.migrations.blob_migration import migrate_to_blob
from appgallery.backend.storage.blob_store import BlobStoreError, InMemoryBlobStore


class RecordingSaver:
    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.calls: list[tuple[str, list[Any]]] = []

    def __call__(self, kind: str, items: list[Any]) -> bool:
        self.calls.append((kind, items))
        return self.result


def _write(data_dir: Path, name: str, content: str) -> None:
    data_dir.joinpath(name).write_text(content, encoding="utf-8")


def test_absent_contents_file_sends_only_apps(tmp_path: Path) -> None:
    apps = [{"id": str(index)} for index in range(3)]
    _write(tmp_path, "apps.json", json.dumps(apps))
    saver = RecordingSaver()

    report = migrate_to_blob(tmp_path, saver)

    assert saver.calls == [("apps", apps)]
    assert report.counts == {"apps": 3, "contents": 0}
    assert report.succeeded


def test_empty_collections_are_not_sent(tmp_path: Path) -> None:
    _write(tmp_path, "apps.json", '[{"id":1,"name":"A"}]')
    _write(tmp_path, "contents.json", "[]")
    saver = RecordingSaver()

    migrate_to_blob(tmp_path, saver)

    assert saver.calls == [("apps", [{"id": 1, "name": "A"}])]


def test_missing_files_never_raise(tmp_path: Path) -> None:
    saver = RecordingSaver()

    report = migrate_to_blob(tmp_path, saver)

    assert saver.calls == []
    assert report.error is None


@pytest.mark.parametrize("broken", ["apps.json", "contents.json"])
def test_malformed_json_aborts_before_any_save(
    tmp_path: Path, broken: str, caplog: pytest.LogCaptureFixture
) -> None:
    _write(tmp_path, "apps.json", '[{"id": 1}]')
    _write(tmp_path, "contents.json", '[{"id": 2}]')
    _write(tmp_path, broken, "[{oops")
    saver = RecordingSaver()

    with caplog.at_level(logging.ERROR):
        report = migrate_to_blob(tmp_path, saver)

    assert saver.calls == []
    assert report.error is not None
    assert "Migration aborted" in caplog.text


def test_non_array_document_aborts(tmp_path: Path) -> None:
    _write(tmp_path, "apps.json", '{"apps": []}')
    saver = RecordingSaver()

    report = migrate_to_blob(tmp_path, saver)

    assert saver.calls == []
    assert "JSON array" in (report.error or "")


def test_failed_saves_are_reported_not_raised(tmp_path: Path) -> None:
    _write(tmp_path, "apps.json", '[{"id": 1}]')
    _write(tmp_path, "contents.json", '[{"id": 2}]')
    saver = RecordingSaver(result=False)

    report = migrate_to_blob(tmp_path, saver)

    assert [kind for kind, _ in saver.calls] == ["apps", "contents"]
    assert report.saved == {"apps": False, "contents": False}
    assert not report.succeeded


def test_save_exceptions_are_logged_not_raised(tmp_path: Path) -> None:
    _write(tmp_path, "apps.json", '[{"id": 1}]')

    def exploding_save(kind: str, items: list[Any]) -> bool:
        raise BlobStoreError("no token", code="missing_token")

    report = migrate_to_blob(tmp_path, exploding_save)

    assert report.error == "no token"


def test_rerun_resends_the_same_payload(tmp_path: Path) -> None:
    _write(tmp_path, "contents.json", '[{"id": "c1", "type": "news"}]')
    store = InMemoryBlobStore()

    def save(kind: str, items: list[Any]) -> bool:
        return save_collection(store, kind, items)

    migrate_to_blob(tmp_path, save)
    migrate_to_blob(tmp_path, save)

    assert store.stored_objects == {"contents.json": [{"id": "c1", "type": "news"}]}


def test_main_without_token_exits_cleanly(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(blob_migration, "HttpBlobStore", _TokenlessStore)
    _write(tmp_path, "apps.json", '[{"id": 1}]')

    assert blob_migration.main(["--data-dir", str(tmp_path)]) == 0


class _TokenlessStore:
    @classmethod
    def from_environment(cls, **_: Any) -> "_TokenlessStore":
        raise BlobStoreError("BLOB_READ_WRITE_TOKEN missing", code="missing_token")


class _UnreachableStore:
    @classmethod
    def from_environment(cls, **_: Any) -> "_UnreachableStore":
        raise AssertionError("blob client must not be built with invalid settings")


@pytest.mark.parametrize("timeout", ["0", "soon"])
def test_main_logs_invalid_settings_instead_of_raising(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
    timeout: str,
) -> None:
    monkeypatch.setenv("APPGALLERY_BLOB_TIMEOUT", timeout)
    monkeypatch.setattr(blob_migration, "HttpBlobStore", _UnreachableStore)
    _write(tmp_path, "apps.json", '[{"id": 1}]')

    with caplog.at_level(logging.ERROR):
        assert blob_migration.main(["--data-dir", str(tmp_path)]) == 0

    assert "Migration aborted" in caplog.text
    assert "Settings validation failed" in caplog.text
