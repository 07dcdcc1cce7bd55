"""Tests for mongowrap.core.config."""

import pytest
from pydantic import BaseModel, SecretStr

from mongowrap.core.config import Config, CoreConfig, CoreSettings
from mongowrap.core.config.config import load_ini_as_dict


class TestLoadIni:
    def test_missing_file_returns_empty_dict(self, tmp_path):
        assert load_ini_as_dict(tmp_path / "missing.ini") == {}

    def test_sections_and_keys_are_uppercased(self, tmp_path):
        ini = tmp_path / "settings.ini"
        ini.write_text("[mongo]\ntimeout_ms = 250\nroot = ~/data\nlogs = ${root}/logs\n")

        loaded = load_ini_as_dict(ini)

        assert loaded["MONGO"]["TIMEOUT_MS"] == "250"
        assert not loaded["MONGO"]["ROOT"].startswith("~")
        assert loaded["MONGO"]["LOGS"].endswith("/data/logs")


class TestCoreConfig:
    def test_packaged_defaults(self):
        config = CoreConfig()

        assert config.MONGOWRAP_MONGO.DEFAULT_COLLECTION == "documents"
        assert config.MONGOWRAP_MONGO.DEFAULT_DB == "mongowrap"
        assert int(config.MONGOWRAP_MONGO.SERVER_SELECTION_TIMEOUT_MS) > 0

    def test_default_uri_is_masked(self):
        config = CoreConfig()

        assert config.MONGOWRAP_MONGO.DEFAULT_URI == "********"
        assert config.get_secret("MONGOWRAP_MONGO", "DEFAULT_URI").startswith("mongodb://")
        assert "MONGOWRAP_MONGO.DEFAULT_URI" in config.secret_paths()

    def test_environment_overrides_ini(self, monkeypatch):
        monkeypatch.setenv("MONGOWRAP_MONGO__DEFAULT_COLLECTION", "events")

        assert CoreConfig().MONGOWRAP_MONGO.DEFAULT_COLLECTION == "events"

    def test_overrides_take_precedence(self, monkeypatch):
        monkeypatch.setenv("MONGOWRAP_MONGO__DEFAULT_COLLECTION", "events")

        config = CoreConfig({"MONGOWRAP_MONGO": {"DEFAULT_COLLECTION": "audit"}})

        assert config.MONGOWRAP_MONGO.DEFAULT_COLLECTION == "audit"
        # untouched keys in the same section survive the merge
        assert config.MONGOWRAP_MONGO.DEFAULT_DB == "mongowrap"

    def test_secret_override_stays_masked(self):
        config = CoreConfig({"MONGOWRAP_MONGO": {"DEFAULT_URI": "mongodb://app:hunter2@db:27017/app"}})

        assert config.MONGOWRAP_MONGO.DEFAULT_URI == "********"
        assert config.get_secret("MONGOWRAP_MONGO", "DEFAULT_URI") == "mongodb://app:hunter2@db:27017/app"

    def test_typed_settings(self):
        settings = CoreSettings()

        assert isinstance(settings.MONGOWRAP_MONGO.DEFAULT_URI, SecretStr)
        assert isinstance(settings.MONGOWRAP_LOGGER.USE_STRUCTLOG, bool)


class TestConfig:
    def test_values_are_stringified(self):
        config = Config({"SECTION": {"COUNT": 3, "ENABLED": True}}, apply_env=False)

        assert config.SECTION.COUNT == "3"
        assert config["SECTION"]["ENABLED"] == "True"

    def test_model_secret_fields_are_masked(self):
        class Credentials(BaseModel):
            USER: str
            PASSWORD: SecretStr

        class Settings(BaseModel):
            CREDENTIALS: Credentials

        config = Config(Settings(CREDENTIALS=Credentials(USER="app", PASSWORD=SecretStr("pw"))), apply_env=False)

        assert config.CREDENTIALS.USER == "app"
        assert config.CREDENTIALS.PASSWORD == "********"
        assert config.get_secret("CREDENTIALS", "PASSWORD") == "pw"

    def test_env_only_overlays_known_sections(self, monkeypatch):
        monkeypatch.setenv("SECTION__KEY", "from-env")
        monkeypatch.setenv("UNRELATED__KEY", "ignored")

        config = Config({"SECTION": {"KEY": "from-dict"}})

        assert config.SECTION.KEY == "from-env"
        assert "UNRELATED" not in config

    def test_missing_attribute_raises(self):
        config = Config({"SECTION": {"KEY": "value"}}, apply_env=False)

        with pytest.raises(AttributeError):
            _ = config.MISSING
        with pytest.raises(AttributeError):
            _ = config.SECTION.MISSING
