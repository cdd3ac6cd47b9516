"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from termbbs.config.settings import (
    SecurityConfig,
    ServerConfig,
    Settings,
    StoreConfig,
    load_settings,
    read_banner,
)


class TestSettings:
    """Test configuration models and loading."""

    def test_default_settings(self) -> None:
        """Default Settings should be valid."""
        settings = Settings()
        assert settings.server.hostname == "127.0.0.1"
        assert settings.server.port == 1981
        assert settings.server.welcome_msg == "Welcome to this BBS!"
        assert settings.display.prompt == "> "

    def test_store_config_defaults(self) -> None:
        config = StoreConfig()
        assert config.users_file == Path("users.json")
        assert config.messages_file == Path("messages.json")

    def test_security_config_defaults(self) -> None:
        config = SecurityConfig()
        assert config.max_login_attempts == 3
        assert config.bcrypt_rounds == 12

    def test_invalid_port_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ServerConfig(port=70000)

    def test_zero_login_attempts_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SecurityConfig(max_login_attempts=0)

    def test_load_settings_missing_file(self, tmp_path: Path) -> None:
        """load_settings with missing file should return defaults."""
        settings = load_settings(tmp_path / "nonexistent.yaml")
        assert settings.server.port == 1981

    def test_load_settings_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "termbbs.yaml"
        path.write_text(
            "server:\n"
            "  hostname: 0.0.0.0\n"
            "  port: 2323\n"
            "security:\n"
            "  max_login_attempts: 5\n"
        )
        settings = load_settings(path)
        assert settings.server.hostname == "0.0.0.0"
        assert settings.server.port == 2323
        assert settings.security.max_login_attempts == 5
        assert settings.store.users_file == Path("users.json")

    def test_load_settings_empty_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        settings = load_settings(path)
        assert settings.server.port == 1981


class TestReadBanner:
    def test_no_banner_configured(self) -> None:
        assert read_banner(ServerConfig()) is None

    def test_banner_file_read(self, tmp_path: Path) -> None:
        banner = tmp_path / "banner.txt"
        banner.write_text("*** BBS ***\n")
        assert read_banner(ServerConfig(banner_file=banner)) == "*** BBS ***\n"

    def test_missing_banner_file(self, tmp_path: Path) -> None:
        assert read_banner(ServerConfig(banner_file=tmp_path / "missing.txt")) is None
