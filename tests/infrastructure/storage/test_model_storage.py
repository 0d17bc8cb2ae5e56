"""Tests for the model storage plugins."""

import os

import pytest
import pytest_asyncio

from perfect_validator.core.exceptions import ModelNotFoundError, StorageError, VersionConflictError
from perfect_validator.infrastructure.storage import (
    InMemoryModelStorage,
    JsonModelStorage,
    SqliteModelStorage,
    create_storage,
)


@pytest.fixture(params=["memory", "json", "sqlite"])
def storage_type(request):
    """Fixture providing every storage backend name."""
    return request.param


@pytest_asyncio.fixture
async def storage(storage_type, tmp_path):
    """Fixture providing an initialized storage plugin."""
    plugin = create_storage(storage_type, str(tmp_path / "data"))
    await plugin.initialize()
    yield plugin
    await plugin.cleanup()


@pytest.mark.asyncio
async def test_put_and_get(storage):
    """Test storing and reading versions."""
    stored = await storage.put("users", '{"name": "S"}', 1)
    assert stored.version == 1
    await storage.put("users", '{"name": "S", "age": "N"}', 2)

    assert (await storage.get_version("users", 1)).model == '{"name": "S"}'
    assert (await storage.get_latest_version("users")).version == 2
    assert await storage.get("users") == '{"name": "S", "age": "N"}'
    assert await storage.get("users", 1) == '{"name": "S"}'
    assert await storage.get("missing") is None
    assert await storage.get_version("users", 3) is None


@pytest.mark.asyncio
async def test_versions_are_append_only(storage):
    """Test that an existing version cannot be overwritten."""
    await storage.put("users", "{}", 1)
    with pytest.raises(VersionConflictError):
        await storage.put("users", '{"x": "S"}', 1)
    assert await storage.get("users", 1) == "{}"


@pytest.mark.asyncio
async def test_invalid_version_numbers(storage):
    """Test that version numbers start at one."""
    with pytest.raises(StorageError):
        await storage.put("users", "{}", 0)


@pytest.mark.asyncio
async def test_next_version_and_listing(storage):
    """Test version numbering and listing order."""
    assert await storage.next_version("users") == 1
    await storage.put("users", "{}", 1)
    await storage.put("users", "{}", 2)
    assert await storage.next_version("users") == 3
    assert await storage.list_versions("users") == [2, 1]
    assert await storage.list_versions("missing") == []


@pytest.mark.asyncio
async def test_delete_model(storage):
    """Test deleting every version of a model."""
    await storage.put("users", "{}", 1)
    await storage.put("orders", "{}", 1)
    await storage.delete_model("users")
    assert await storage.list_versions("users") == []
    assert await storage.get("orders") == "{}"
    with pytest.raises(ModelNotFoundError):
        await storage.delete_model("users")


@pytest.mark.asyncio
async def test_json_storage_persists(tmp_path):
    """Test that the JSON document survives a new plugin instance."""
    storage_dir = str(tmp_path)
    first = JsonModelStorage(storage_dir)
    await first.initialize()
    await first.put("users", '{"name": "S"}', 1)
    await first.put("users", '{"name": "S"}', 2)

    second = JsonModelStorage(storage_dir)
    await second.initialize()
    assert await second.list_versions("users") == [2, 1]
    assert os.path.exists(os.path.join(storage_dir, "models.json.bak"))


@pytest.mark.asyncio
async def test_sqlite_storage_persists(tmp_path):
    """Test that rows survive a new plugin instance."""
    first = SqliteModelStorage(str(tmp_path))
    await first.initialize()
    await first.put("users", '{"name": "S"}', 1)

    second = SqliteModelStorage(str(tmp_path))
    await second.initialize()
    found = await second.get_latest_version("users")
    assert found.model == '{"name": "S"}'
    assert found.created_at is not None


@pytest.mark.asyncio
async def test_json_backup_and_restore(tmp_path):
    """Test restoring the JSON document from a backup directory."""
    storage = JsonModelStorage(str(tmp_path / "data"))
    await storage.initialize()
    await storage.put("users", "{}", 1)
    await storage.backup(str(tmp_path / "backup"))

    await storage.put("users", "{}", 2)
    await storage.restore_from_backup(str(tmp_path / "backup"))
    assert await storage.list_versions("users") == [1]


@pytest.mark.asyncio
async def test_json_restore_without_backup(tmp_path):
    """Test that restoring from an empty directory fails."""
    storage = JsonModelStorage(str(tmp_path / "data"))
    await storage.initialize()
    with pytest.raises(StorageError, match="Backup restoration failed"):
        await storage.restore_from_backup(str(tmp_path / "nothing"))


@pytest.mark.asyncio
async def test_sqlite_backup_and_restore(tmp_path):
    """Test restoring the database from a backup directory."""
    storage = SqliteModelStorage(str(tmp_path / "data"))
    await storage.initialize()
    await storage.put("users", "{}", 1)
    await storage.backup(str(tmp_path / "backup"))

    await storage.put("users", "{}", 2)
    await storage.restore_from_backup(str(tmp_path / "backup"))
    assert await storage.list_versions("users") == [1]


@pytest.mark.asyncio
async def test_json_storage_rejects_corrupted_file(tmp_path):
    """Test that an unreadable document is reported as a storage error."""
    (tmp_path / "models.json").write_text("{not json")
    storage = JsonModelStorage(str(tmp_path))
    with pytest.raises(StorageError, match="Storage loading failed"):
        await storage.initialize()


@pytest.mark.asyncio
async def test_memory_storage_has_no_backups(tmp_path):
    """Test that the in-memory plugin refuses backups."""
    storage = InMemoryModelStorage()
    with pytest.raises(StorageError):
        await storage.backup(str(tmp_path))


def test_create_storage_errors():
    """Test backend selection errors."""
    with pytest.raises(ValueError, match="Unsupported storage type"):
        create_storage("redis", "data")
    with pytest.raises(ValueError, match="storage directory is required"):
        create_storage("sqlite", None)
    assert isinstance(create_storage("memory", None), InMemoryModelStorage)
