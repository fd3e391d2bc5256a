"""
Tests for moveitup.config.loader module.

Tests settings loading and merging including:
- Built-in defaults
- YAML settings files
- Environment and .env layering
- Explicit overrides
- Error handling
"""

from __future__ import annotations

import pytest

from moveitup.config import DEFAULT_BASE_URL, Settings, load_settings
from moveitup.exceptions import ConfigError


class TestDefaults:
    """Tests for settings without any input."""

    def test_defaults(self):
        """Test that the built-in defaults apply."""
        settings = load_settings(use_dotenv=False)

        assert settings.base_url == DEFAULT_BASE_URL == "https://mobile-1.moveitcloud.com/"
        assert settings.timeout == 60.0
        assert settings.user_agent.startswith("moveitup/")
        assert settings.username is None
        assert settings.password is None

    def test_dataclass_defaults_match_loader(self):
        """Test that Settings() and load_settings() agree."""
        assert Settings() == load_settings(use_dotenv=False)

    def test_direct_base_url_gets_trailing_slash(self):
        """Test that Settings normalises a base URL given without "/"."""
        settings = Settings(base_url="https://host/moveit")

        assert settings.base_url == "https://host/moveit/"
        assert Settings(base_url="https://host/moveit/").base_url == "https://host/moveit/"

    def test_repr_masks_password(self):
        """Test that the password never appears in repr."""
        settings = Settings(username="alice", password="hunter2")

        assert "hunter2" not in repr(settings)
        assert "alice" in repr(settings)


class TestSettingsFile:
    """Tests for YAML settings files."""

    def test_file_overrides_defaults(self, create_yaml_file):
        """Test that file values replace defaults."""
        path = create_yaml_file(
            "moveitup.yaml",
            {"base_url": "https://files.example.com", "timeout": 10, "username": "alice"},
        )

        settings = load_settings(path, use_dotenv=False)

        assert settings.base_url == "https://files.example.com/"
        assert settings.timeout == 10.0
        assert settings.username == "alice"

    def test_empty_file_is_allowed(self, tmp_test_dir):
        """Test that an empty settings file changes nothing."""
        path = tmp_test_dir / "empty.yaml"
        path.write_text("")

        assert load_settings(path, use_dotenv=False) == Settings()

    def test_missing_file_raises(self, tmp_test_dir):
        """Test that a missing settings file raises ConfigError."""
        with pytest.raises(ConfigError, match="settings file not found"):
            load_settings(tmp_test_dir / "nope.yaml", use_dotenv=False)

    def test_invalid_yaml_raises(self, tmp_test_dir):
        """Test that a YAML syntax error raises ConfigError."""
        path = tmp_test_dir / "bad.yaml"
        path.write_text("base_url: [unclosed\n")

        with pytest.raises(ConfigError, match="Error parsing YAML"):
            load_settings(path, use_dotenv=False)

    def test_non_mapping_raises(self, create_yaml_file):
        """Test that a top-level list is rejected."""
        path = create_yaml_file("list.yaml", ["base_url"])

        with pytest.raises(ConfigError, match="must be a mapping"):
            load_settings(path, use_dotenv=False)

    def test_unknown_key_raises(self, create_yaml_file):
        """Test that typos in keys are reported."""
        path = create_yaml_file("typo.yaml", {"base_ulr": "https://x.example.com"})

        with pytest.raises(ConfigError, match="base_ulr"):
            load_settings(path, use_dotenv=False)

    @pytest.mark.parametrize("timeout", [-1, "soon", True])
    def test_invalid_timeout_raises(self, create_yaml_file, timeout):
        """Test that nonsensical timeouts are rejected."""
        path = create_yaml_file("t.yaml", {"timeout": timeout})

        with pytest.raises(ConfigError, match="timeout"):
            load_settings(path, use_dotenv=False)

    @pytest.mark.parametrize("timeout", [0, None, "none"])
    def test_timeout_can_be_disabled(self, create_yaml_file, timeout):
        """Test that 0, null and "none" disable the timeout."""
        path = create_yaml_file("t.yaml", {"timeout": timeout})

        assert load_settings(path, use_dotenv=False).timeout is None

    def test_non_string_username_raises(self, create_yaml_file):
        """Test that credentials must be strings."""
        path = create_yaml_file("u.yaml", {"username": 1234})

        with pytest.raises(ConfigError, match="username must be a string"):
            load_settings(path, use_dotenv=False)


class TestEnvironment:
    """Tests for MOVEIT_* variables and .env files."""

    def test_environment_overrides_file(self, create_yaml_file, monkeypatch):
        """Test that environment variables win over the settings file."""
        path = create_yaml_file("s.yaml", {"base_url": "https://file.example.com/"})
        monkeypatch.setenv("MOVEIT_BASE_URL", "https://env.example.com")
        monkeypatch.setenv("MOVEIT_TIMEOUT", "2.5")
        monkeypatch.setenv("MOVEIT_PASSWORD", "from-env")

        settings = load_settings(path, use_dotenv=False)

        assert settings.base_url == "https://env.example.com/"
        assert settings.timeout == 2.5
        assert settings.password == "from-env"

    def test_dotenv_file_is_loaded(self, tmp_test_dir):
        """Test that a .env file in the working directory is read."""
        (tmp_test_dir / ".env").write_text(
            "MOVEIT_USERNAME=dotenv-user\nMOVEIT_PASSWORD=dotenv pass\n"
        )

        settings = load_settings()

        assert settings.username == "dotenv-user"
        assert settings.password == "dotenv pass"

    def test_real_environment_beats_dotenv(self, tmp_test_dir, monkeypatch):
        """Test that variables already set are not replaced by .env."""
        (tmp_test_dir / ".env").write_text("MOVEIT_USERNAME=dotenv-user\n")
        monkeypatch.setenv("MOVEIT_USERNAME", "shell-user")

        assert load_settings().username == "shell-user"

    def test_invalid_timeout_variable_raises(self, monkeypatch):
        """Test that MOVEIT_TIMEOUT must be numeric."""
        monkeypatch.setenv("MOVEIT_TIMEOUT", "ten")

        with pytest.raises(ConfigError, match="timeout"):
            load_settings(use_dotenv=False)


class TestOverrides:
    """Tests for keyword overrides."""

    def test_override_wins(self, monkeypatch):
        """Test that explicit overrides beat every other layer."""
        monkeypatch.setenv("MOVEIT_BASE_URL", "https://env.example.com/")

        settings = load_settings(use_dotenv=False, base_url="https://cli.example.com")

        assert settings.base_url == "https://cli.example.com/"

    def test_none_override_is_ignored(self, monkeypatch):
        """Test that None overrides leave lower layers in place."""
        monkeypatch.setenv("MOVEIT_BASE_URL", "https://env.example.com/")

        settings = load_settings(use_dotenv=False, base_url=None)

        assert settings.base_url == "https://env.example.com/"

    def test_unknown_override_raises(self):
        """Test that unknown keyword overrides are rejected."""
        with pytest.raises(ConfigError, match="unknown settings key"):
            load_settings(use_dotenv=False, proxy="http://proxy")

    def test_empty_base_url_raises(self):
        """Test that a blank base URL is rejected."""
        with pytest.raises(ConfigError, match="base_url"):
            load_settings(use_dotenv=False, base_url="  ")
