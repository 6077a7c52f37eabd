from kblookup.config.settings import Settings
from kblookup.container import build_store, configure_container
from kblookup.core.services.query_service import QueryService
from kblookup.core.services.sync_service import SyncService
from kblookup.infrastructure.storage import JsonFileKeyValueStore, MemoryKeyValueStore


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("CHUNK_SIZE", "500")
    monkeypatch.setenv("STORAGE_BACKEND", "memory")

    settings = Settings()

    assert settings.chunk_size == 500
    assert settings.storage_backend == "memory"
    assert settings.name_match_weight == 20


def test_build_store_backends(tmp_path):
    assert isinstance(build_store(Settings(storage_backend="memory")), MemoryKeyValueStore)
    store = build_store(Settings(storage_backend="file", storage_path=str(tmp_path)))
    assert isinstance(store, JsonFileKeyValueStore)


def test_configure_container_wires_services():
    settings = Settings(
        storage_backend="memory",
        drive_root_folder_id="https://drive.google.com/drive/folders/1RooT",
    )

    container = configure_container(settings)
    container.reset()

    sync_service = container.resolve(SyncService)
    assert isinstance(container.resolve(QueryService), QueryService)
    assert container.resolve(SyncService) is sync_service
    assert sync_service._default_root_id == "1RooT"
