# =============================================================================
# tests/test_config.py - Settings Tests
# =============================================================================
# Tests for app/config.py, one per precedence boundary:
#   defaults < Default.toml < <Environment>.toml < .env < environment variables
# plus environment name matching.
#
# Run with: pytest tests/test_config.py -v
# =============================================================================

import pytest

from app.config import Environment, Settings


@pytest.fixture
def config_env(tmp_path, monkeypatch):
    """
    Point the loader at an empty config directory.

    SERVER_ENV is cleared so each test chooses its own environment.
    """
    config = tmp_path / "config"
    config.mkdir()
    monkeypatch.setenv("CONFIG_DIR", str(config))
    monkeypatch.delenv("SERVER_ENV", raising=False)
    for name in ("ENV", "SERVER__PORT", "SERVER__URL", "AUTORELOAD_TEMPLATES", "TICKETMASTER__TOKEN"):
        monkeypatch.delenv(name, raising=False)
    return config


def load(**kwargs) -> Settings:
    # Ignore any .env file in the working directory
    return Settings(_env_file=None, **kwargs)


class TestEnvironmentNames:
    """Tests for Environment.from_name."""

    @pytest.mark.parametrize("name, expected", [
        ("Development", Environment.DEVELOPMENT),
        ("dev", Environment.DEVELOPMENT),
        ("DEVELOPMENT", Environment.DEVELOPMENT),
        ("testing", Environment.TESTING),
        ("Test", Environment.TESTING),
        ("prod", Environment.PRODUCTION),
        (" Production ", Environment.PRODUCTION),
    ])
    def test_known_names(self, name, expected):
        assert Environment.from_name(name) is expected

    @pytest.mark.parametrize("name", ["staging", "", "Prodution"])
    def test_unknown_names_raise(self, name):
        """Test that typos fail instead of silently selecting Testing."""
        with pytest.raises(ValueError):
            Environment.from_name(name)


class TestSettingsPrecedence:
    """Tests for each layer of configuration."""

    def test_defaults(self, config_env):
        """Test values with no files and no environment overrides."""
        settings = load()

        assert settings.env is Environment.DEVELOPMENT
        assert settings.autoreload_templates is True
        assert settings.server.url == "127.0.0.1"
        assert settings.server.port == 3000
        assert settings.ticketmaster.timeout_seconds == 10.0
        assert settings.rate_limit.burst_size == 8
        assert settings.cors_origins == ["*"]

    def test_base_file_overrides_defaults(self, config_env):
        (config_env / "Default.toml").write_text(
            "autoreload_templates = false\n[server]\nport = 4000\n"
        )

        settings = load()

        assert settings.server.port == 4000
        assert settings.autoreload_templates is False
        # Untouched values keep their defaults
        assert settings.server.url == "127.0.0.1"

    def test_environment_file_overrides_base_file(self, config_env):
        (config_env / "Default.toml").write_text("[server]\nport = 4000\nurl = \"10.0.0.1\"\n")
        (config_env / "Development.toml").write_text("[server]\nport = 5000\n")

        settings = load()

        assert settings.server.port == 5000
        assert settings.server.url == "10.0.0.1"

    def test_environment_variables_override_files(self, config_env, monkeypatch):
        (config_env / "Default.toml").write_text("[server]\nport = 4000\n")
        (config_env / "Development.toml").write_text("[server]\nport = 5000\n")
        monkeypatch.setenv("SERVER__PORT", "6000")
        monkeypatch.setenv("TICKETMASTER__TOKEN", "from-env")

        settings = load()

        assert settings.server.port == 6000
        assert settings.ticketmaster.token == "from-env"

    def test_server_env_selects_environment_file(self, config_env, monkeypatch):
        (config_env / "Development.toml").write_text("[server]\nport = 5000\n")
        (config_env / "Production.toml").write_text("autoreload_templates = false\n[server]\nport = 8000\n")
        monkeypatch.setenv("SERVER_ENV", "prod")

        settings = load()

        assert settings.env is Environment.PRODUCTION
        assert settings.server.port == 8000
        assert settings.autoreload_templates is False

    def test_dotenv_file_overrides_files(self, config_env, tmp_path):
        (config_env / "Development.toml").write_text("[server]\nport = 5000\n")
        dotenv = tmp_path / ".env"
        dotenv.write_text("SERVER__PORT=7000\nTICKETMASTER__TOKEN=from-dotenv\n")

        settings = Settings(_env_file=dotenv)

        assert settings.server.port == 7000
        assert settings.ticketmaster.token == "from-dotenv"

    def test_environment_variables_override_dotenv_file(self, config_env, tmp_path, monkeypatch):
        dotenv = tmp_path / ".env"
        dotenv.write_text("SERVER__PORT=7000\n")
        monkeypatch.setenv("SERVER__PORT", "6000")

        settings = Settings(_env_file=dotenv)

        assert settings.server.port == 6000

    def test_bare_env_variable_is_ignored(self, config_env, monkeypatch):
        """Test that only SERVER_ENV names the environment."""
        (config_env / "Development.toml").write_text("[server]\nport = 5000\n")
        monkeypatch.setenv("ENV", "Production")

        settings = load()

        assert settings.env is Environment.DEVELOPMENT
        assert settings.server.port == 5000

    def test_shell_startup_env_variable_does_not_break_loading(self, config_env, monkeypatch):
        monkeypatch.setenv("ENV", "/etc/profile")

        assert load().env is Environment.DEVELOPMENT

    def test_server_env_wins_over_init_value(self, config_env, monkeypatch):
        monkeypatch.setenv("SERVER_ENV", "Testing")

        assert load(env="Production").env is Environment.TESTING

    def test_unknown_server_env_raises(self, config_env, monkeypatch):
        monkeypatch.setenv("SERVER_ENV", "Stagin")

        with pytest.raises(ValueError):
            load()

    def test_invalid_value_raises(self, config_env):
        (config_env / "Default.toml").write_text("[server]\nport = 70000\n")

        with pytest.raises(ValueError):
            load()


class TestSettingsProperties:
    """Tests for computed properties."""

    def test_debug_outside_production(self, config_env, monkeypatch):
        monkeypatch.setenv("SERVER_ENV", "Testing")

        settings = load()

        assert settings.env is Environment.TESTING
        assert settings.is_production is False
        assert settings.debug is True

    def test_no_debug_in_production(self, config_env, monkeypatch):
        monkeypatch.setenv("SERVER_ENV", "Production")

        settings = load()

        assert settings.is_production is True
        assert settings.debug is False

    def test_log_level_normalized(self, config_env):
        (config_env / "Default.toml").write_text("[log]\nlevel = \"debug\"\n")

        assert load().log.level == "DEBUG"


class TestProjectConfigFiles:
    """Tests for the config files shipped in config/."""

    def test_testing_profile(self, monkeypatch):
        monkeypatch.delenv("CONFIG_DIR", raising=False)
        monkeypatch.setenv("SERVER_ENV", "Testing")

        settings = load()

        assert settings.env is Environment.TESTING
        assert settings.autoreload_templates is False
        assert settings.ticketmaster.token == "test-token"
        assert settings.template_dir.joinpath("index.j2").is_file()
