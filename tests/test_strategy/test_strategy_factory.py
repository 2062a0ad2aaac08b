"""Tests for create_strategy and NullCacheStrategy."""

from __future__ import annotations

from pathlib import Path

from conftest import make_request, make_response
from privcache.models import CacheConfig, StorageBackend
from privcache.storage import FileStorage, InMemoryStorage
from privcache.strategy import NullCacheStrategy, PrivateCacheStrategy, create_strategy


class TestCreateStrategy:
    def test_disabled_config_gives_null_strategy(self) -> None:
        assert isinstance(create_strategy(CacheConfig(enabled=False)), NullCacheStrategy)

    def test_memory_backend(self) -> None:
        strategy = create_strategy(CacheConfig(backend=StorageBackend.MEMORY))
        assert isinstance(strategy, PrivateCacheStrategy)
        assert isinstance(strategy.storage, InMemoryStorage)

    def test_file_backend(self, tmp_path: Path) -> None:
        strategy = create_strategy(CacheConfig(directory=str(tmp_path)))
        assert isinstance(strategy, PrivateCacheStrategy)
        assert isinstance(strategy.storage, FileStorage)


class TestNullCacheStrategy:
    def test_never_caches(self) -> None:
        strategy = NullCacheStrategy()
        request = make_request()
        response = make_response(headers=[("Cache-Control", "max-age=60")])
        assert strategy.cache(request, response) is False
        assert strategy.fetch(request) is None
        assert strategy.delete(request) is True
