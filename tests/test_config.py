"""Tests for configuration loading."""

import pytest

from app.services.config_service import load_config


@pytest.mark.unit
class TestConfig:
    """Test config.yaml parsing and environment overrides."""

    def test_defaults_without_file(self, tmp_path):
        config = load_config(tmp_path / "missing.yaml", environ={})

        assert config.app.port == 5000
        assert config.auth.secret_key is None
        assert config.auth.token_expiry_hours == 24
        assert config.auth.default_username == "admin"
        assert config.wol.broadcast_address == "255.255.255.255"
        assert config.wol.port == 9
        assert config.app.is_development is False

    def test_yaml_values(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "app:\n"
            "  environment: development\n"
            "auth:\n"
            "  secret_key: from-file\n"
            "  token_expiry_hours: 12\n"
            "wol:\n"
            "  broadcast_address: 192.168.1.255\n"
            "  port: 7\n"
        )

        config = load_config(config_file, environ={})

        assert config.app.is_development is True
        assert config.auth.secret_key == "from-file"
        assert config.auth.token_expiry_hours == 12
        assert config.wol.broadcast_address == "192.168.1.255"
        assert config.wol.port == 7

    def test_environment_overrides_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("auth:\n  secret_key: from-file\nwol:\n")

        config = load_config(
            config_file,
            environ={
                "HOMELAB_SECRET_KEY": "from-env",
                "HOMELAB_PORT": "8080",
                "HOMELAB_WOL_PORT": "7",
                "HOMELAB_DEFAULT_PASSWORD": "seed-pass",
                "HOMELAB_ENVIRONMENT": "development",
            },
        )

        assert config.auth.secret_key == "from-env"
        assert config.auth.default_password == "seed-pass"
        assert config.app.port == 8080
        assert config.wol.port == 7
        assert config.app.is_development is True

    def test_config_path_from_environment(self, tmp_path):
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("app:\n  title: Custom\n")

        config = load_config(environ={"HOMELAB_CONFIG": str(config_file)})
        assert config.app.title == "Custom"
