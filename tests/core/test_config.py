"""Tests for configuration loading."""

from pathlib import Path

import pytest

from cloud_minion.core import config as config_module
from cloud_minion.core.config import (
    Config,
    SoundCloudConfig,
    get_config_dir,
    get_data_dir,
    get_log_file,
    load_config,
)


@pytest.fixture
def config_home(tmp_path, monkeypatch) -> Path:
    """Isolate config lookup to a temporary XDG config dir."""
    monkeypatch.setattr(config_module, "_find_project_config", lambda: None)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("SOUNDCLOUD_CLIENT_ID", raising=False)
    monkeypatch.delenv("SOUNDCLOUD_CLIENT_SECRET", raising=False)
    return tmp_path / "config" / "cloud-minion"


def write_config(config_home: Path, content: str) -> None:
    config_home.mkdir(parents=True, exist_ok=True)
    (config_home / "config.toml").write_text(content)


class TestDirectories:
    """Tests for XDG directory resolution."""

    def test_config_dir_from_env(self, config_home) -> None:
        assert get_config_dir() == config_home

    def test_data_dir_from_env(self, config_home, tmp_path) -> None:
        assert get_data_dir() == tmp_path / "data" / "cloud-minion"

    def test_default_log_file(self, config_home, tmp_path) -> None:
        assert get_log_file(Config()) == tmp_path / "data" / "cloud-minion" / "cloud-minion.log"


class TestLoadConfig:
    """Tests for load_config()."""

    def test_creates_default_file(self, config_home) -> None:
        """A missing config file is created with defaults."""
        config = load_config()

        assert (config_home / "config.toml").exists()
        assert config.soundcloud == SoundCloudConfig()
        assert config.logging.level == "INFO"

    def test_default_file_parses_to_defaults(self, config_home) -> None:
        load_config()
        config = load_config()
        assert config.soundcloud.page_size == 50
        assert config.soundcloud.request_timeout == 30

    def test_reads_soundcloud_section(self, config_home) -> None:
        write_config(
            config_home,
            '[soundcloud]\nclient_id = "abc"\nclient_secret = "shh"\npage_size = 25\n',
        )
        config = load_config()

        assert config.soundcloud.client_id == "abc"
        assert config.soundcloud.client_secret == "shh"
        assert config.soundcloud.page_size == 25

    def test_reads_logging_section(self, config_home) -> None:
        write_config(config_home, '[logging]\nlevel = "debug"\nconsole_output = true\n')
        config = load_config()

        assert config.logging.level == "DEBUG"
        assert config.logging.console_output is True

    def test_env_overrides_credentials(self, config_home, monkeypatch) -> None:
        write_config(config_home, '[soundcloud]\nclient_id = "from-file"\n')
        monkeypatch.setenv("SOUNDCLOUD_CLIENT_ID", "from-env")
        monkeypatch.setenv("SOUNDCLOUD_CLIENT_SECRET", "secret-env")

        config = load_config()

        assert config.soundcloud.client_id == "from-env"
        assert config.soundcloud.client_secret == "secret-env"

    def test_invalid_values_fall_back(self, config_home) -> None:
        """Out-of-range paging falls back to defaults."""
        write_config(config_home, '[soundcloud]\nclient_id = "abc"\npage_size = 500\n')
        config = load_config()

        assert config.soundcloud.client_id == "abc"
        assert config.soundcloud.page_size == 50

    def test_wrong_type_values_fall_back(self, config_home) -> None:
        """A quoted number does not crash loading."""
        write_config(config_home, '[soundcloud]\nclient_id = "abc"\npage_size = "50"\n')
        config = load_config()

        assert config.soundcloud.client_id == "abc"
        assert config.soundcloud.page_size == 50

    def test_unparseable_file_uses_defaults(self, config_home) -> None:
        write_config(config_home, "[soundcloud\nclient_id = ")
        config = load_config()
        assert config.soundcloud == SoundCloudConfig()


class TestSoundCloudConfigValidate:
    """Tests for SoundCloudConfig.validate()."""

    def test_defaults_valid(self) -> None:
        SoundCloudConfig().validate()

    @pytest.mark.parametrize("page_size", [0, 201])
    def test_page_size_range(self, page_size: int) -> None:
        with pytest.raises(ValueError, match="page_size"):
            SoundCloudConfig(page_size=page_size).validate()

    def test_timeout_positive(self) -> None:
        with pytest.raises(ValueError, match="request_timeout"):
            SoundCloudConfig(request_timeout=0).validate()
