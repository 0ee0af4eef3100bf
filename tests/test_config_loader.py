"""Tests for iaas_client.config_loader and Config.

Tests cover:
- Defaults matching the bundled config file
- YAML loading with ${ENV_VAR} substitution
- Validation failures surfaced as ConfigError
- Installing and loading the user config file
- QY_* environment overrides
"""

from pathlib import Path

import pytest

from iaas_client.config_loader import (
    DEFAULT_CONFIG_FILE_CONTENT,
    config_from_content,
    config_from_env,
    default_config,
    install_default_user_config,
    load_config,
    load_user_config,
)
from iaas_client.errors import ConfigError
from iaas_client.models import Config


class TestDefaults:
    def test_default_values(self):
        config = default_config()
        assert config.host == "api.qingcloud.com"
        assert config.port == 443
        assert config.protocol == "https"
        assert config.uri == "/iaas"
        assert config.connection_retries == 3
        assert config.connection_timeout == 30
        assert config.log_level == "warn"
        assert config.access_key_id == ""
        assert not config.has_credentials

    def test_endpoint_and_path(self):
        config = Config(host="api.example.com", port=8080, protocol="http", uri="//iaas//v1/")
        assert config.endpoint == "http://api.example.com:8080"
        assert config.request_path == "/iaas/v1/"

    def test_retry_policy(self):
        config = Config(connection_retries=5)
        assert config.retry_policy.max_retries == 5
        assert config.retry_policy.backoff == config.retry

    def test_secret_hidden_from_repr(self):
        config = Config(qy_access_key_id="AK", qy_secret_access_key="SK")
        assert "SK" not in repr(config)


class TestConfigFromContent:
    def test_file_keys(self):
        config = config_from_content(
            "qy_access_key_id: 'AK'\n"
            "qy_secret_access_key: 'SK'\n"
            "zone: 'pek3a'\n"
            "log_level: 'DEBUG'\n"
            "retry:\n"
            "  base: 0.5\n"
        )
        assert config.access_key_id == "AK"
        assert config.secret_access_key == "SK"
        assert config.zone == "pek3a"
        assert config.log_level == "debug"
        assert config.retry.base == 0.5
        assert config.has_credentials
        # Unset keys keep their defaults
        assert config.host == "api.qingcloud.com"

    def test_empty_content(self):
        assert config_from_content("") == default_config()

    def test_overrides_win(self):
        config = config_from_content("zone: 'pek3a'", overrides={"zone": "gd2"})
        assert config.zone == "gd2"

    def test_env_substitution(self, monkeypatch):
        monkeypatch.setenv("TEST_QY_SECRET", "from-env")
        config = config_from_content("qy_secret_access_key: '${TEST_QY_SECRET}'")
        assert config.secret_access_key == "from-env"

    def test_missing_env_var(self, monkeypatch):
        monkeypatch.delenv("TEST_QY_UNSET", raising=False)
        with pytest.raises(ConfigError, match="TEST_QY_UNSET"):
            config_from_content("host: '${TEST_QY_UNSET}'")

    @pytest.mark.parametrize(
        "content",
        [
            "port: 0",
            "protocol: 'ftp'",
            "log_level: 'verbose'",
            "signature_method: 'HmacMD5'",
            "unknown_key: 1",
            "connection_timeout: -1",
        ],
    )
    def test_invalid_values(self, content):
        with pytest.raises(ConfigError, match="Invalid config"):
            config_from_content(content)

    def test_invalid_yaml(self):
        with pytest.raises(ConfigError, match="Invalid YAML"):
            config_from_content("host: [unclosed")

    def test_not_a_mapping(self):
        with pytest.raises(ConfigError, match="mapping"):
            config_from_content("- a\n- b\n")


class TestFiles:
    def test_load_config(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("qy_access_key_id: 'AK'\nport: 8443\n", encoding="utf-8")
        config = load_config(path)
        assert config.access_key_id == "AK"
        assert config.port == 8443

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.yaml")

    def test_install_default(self, tmp_path: Path):
        path = tmp_path / "nested" / "config.yaml"
        install_default_user_config(path)
        assert path.read_text(encoding="utf-8") == DEFAULT_CONFIG_FILE_CONTENT

    def test_load_user_config_installs_when_missing(self, tmp_path: Path):
        path = tmp_path / ".qingcloud" / "config.yaml"
        config = load_user_config(path)
        assert path.exists()
        assert config == default_config()

    def test_load_user_config_keeps_existing(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("zone: 'sh1a'\n", encoding="utf-8")
        assert load_user_config(path).zone == "sh1a"
        assert path.read_text(encoding="utf-8") == "zone: 'sh1a'\n"


class TestEnvironment:
    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("QY_ACCESS_KEY_ID", "ENVAK")
        monkeypatch.setenv("QY_SECRET_ACCESS_KEY", "ENVSK")
        monkeypatch.setenv("QY_ZONE", "ap2a")
        config = config_from_env()
        assert config.access_key_id == "ENVAK"
        assert config.secret_access_key == "ENVSK"
        assert config.zone == "ap2a"

    def test_base_kept_when_unset(self, monkeypatch):
        for name in ("QY_ACCESS_KEY_ID", "QY_SECRET_ACCESS_KEY", "QY_ZONE"):
            monkeypatch.delenv(name, raising=False)
        base = Config(qy_access_key_id="AK", zone="pek3a", port=8443)
        assert config_from_env(base) == base
