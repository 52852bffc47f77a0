"""Tests for pubflow.core.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from pubflow.core.config import (
    DEFAULT_BUILDS_DIR,
    DEFAULT_DOMAIN,
    DEFAULT_FUNCTIONS_URL,
    DEFAULT_LIST_LIMIT,
    DEFAULT_STORAGE_BUCKET,
    Config,
    StorageConfig,
    load_config,
    load_config_or_default,
)
from pubflow.core.result import Err, Ok


class TestDefaults:
    def test_empty_config(self) -> None:
        config = Config()
        assert config.project.name is None
        assert config.project.builds_dir == DEFAULT_BUILDS_DIR
        assert config.creator.handle is None
        assert config.hosting.domain == DEFAULT_DOMAIN
        assert config.hosting.list_limit == DEFAULT_LIST_LIMIT
        assert config.storage.functions_url == DEFAULT_FUNCTIONS_URL
        assert config.build.command == ()
        assert config.build.prebuilt is None

    def test_frozen(self) -> None:
        config = Config()
        with pytest.raises(AttributeError):
            config.project = None  # type: ignore[misc,assignment]


class TestStorageConfig:
    def test_placeholder_bucket_falls_back(self) -> None:
        assert StorageConfig(bucket="setup-required").effective_bucket == DEFAULT_STORAGE_BUCKET
        assert StorageConfig(bucket="  ").effective_bucket == DEFAULT_STORAGE_BUCKET

    def test_configured_bucket(self) -> None:
        assert StorageConfig(bucket="my-bucket").effective_bucket == "my-bucket"


class TestFromDict:
    def test_full(self) -> None:
        config = Config.from_dict(
            {
                "project": {"name": "My Game", "builds_dir": "out"},
                "creator": {"handle": "alice"},
                "hosting": {"domain": "example.com", "list_limit": 10},
                "storage": {"bucket": "b", "functions_url": "https://fn.example.com/"},
                "build": {"command": ["make", "{output}"], "prebuilt": "dist"},
            }
        )
        assert config.project.name == "My Game"
        assert config.project.builds_dir == "out"
        assert config.creator.handle == "alice"
        assert config.hosting.domain == "example.com"
        assert config.hosting.list_limit == 10
        assert config.storage.bucket == "b"
        assert config.storage.functions_url == "https://fn.example.com"
        assert config.build.command == ("make", "{output}")
        assert config.build.prebuilt == "dist"

    def test_non_positive_list_limit(self) -> None:
        with pytest.raises(ValueError, match="list_limit"):
            Config.from_dict({"hosting": {"list_limit": 0}})

    def test_bad_command(self) -> None:
        with pytest.raises(ValueError, match="build.command"):
            Config.from_dict({"build": {"command": "make web"}})


class TestLoadConfig:
    def test_loads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "pubflow.toml"
        path.write_text('[creator]\nhandle = "alice"\n', encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Ok)
        assert result.value.creator.handle == "alice"

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "pubflow.toml")
        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "pubflow.toml"
        path.write_text("[creator\n", encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message
        assert result.error.path == path

    def test_invalid_structure(self, tmp_path: Path) -> None:
        path = tmp_path / "pubflow.toml"
        path.write_text("[hosting]\nlist_limit = -1\n", encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "Invalid config structure" in result.error.message

    def test_or_default_missing_file(self, tmp_path: Path) -> None:
        result = load_config_or_default(tmp_path / "pubflow.toml")
        assert result == Ok(Config())
