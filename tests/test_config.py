"""
Tests for the TOML configuration.
"""

import tomlkit

from aptwrap.core.config import Configuration, get_config, set_config_path


class TestConfiguration:

    def test_creates_default_file(self, tmp_path):
        path = tmp_path / "sub" / "aptwrap.toml"
        cfg = Configuration(path, create=True)

        assert path.exists()
        text = path.read_text()
        assert "# aptwrap configuration file" in text
        assert cfg.privilege_backend == "sudo"
        assert cfg.non_interactive is True
        assert cfg.log_level == "INFO"
        assert cfg.paths == {"dpkg": "dpkg", "apt-get": "apt-get"}
        assert cfg.confnew is False

    def test_reads_values(self, tmp_path):
        path = tmp_path / "aptwrap.toml"
        path.write_text(
            '[global]\nprivilege_backend = "doas"\nnon_interactive = false\nlog_level = "DEBUG"\n'
            '[paths]\ndpkg = "/opt/dpkg"\n"apt-get" = "/opt/apt-get"\n'
            "[install]\nconfnew = true\n"
        )
        cfg = Configuration(path)

        assert cfg.privilege_backend == "doas"
        assert cfg.non_interactive is False
        assert cfg.log_level == "DEBUG"
        assert cfg.paths == {"dpkg": "/opt/dpkg", "apt-get": "/opt/apt-get"}
        assert cfg.confnew is True
        assert cfg.get("paths.apt-get") == "/opt/apt-get"
        assert cfg.get("paths.missing", "fallback") == "fallback"

    def test_missing_options_are_added(self, tmp_path):
        path = tmp_path / "aptwrap.toml"
        path.write_text('# keep me\n[global]\nprivilege_backend = "none"\n')
        cfg = Configuration(path, create=True)

        assert cfg.privilege_backend == "none"
        assert cfg.non_interactive is True

        saved = tomlkit.parse(path.read_text())
        assert saved["global"]["privilege_backend"] == "none"
        assert saved["global"]["log_level"] == "INFO"
        assert saved["paths"]["apt-get"] == "apt-get"
        assert saved["install"]["confnew"] is False
        assert "# keep me" in path.read_text()

    def test_corrupt_file_is_backed_up(self, tmp_path):
        path = tmp_path / "aptwrap.toml"
        path.write_text("[global\nthis is = = not toml")
        cfg = Configuration(path, create=True)

        backups = list(tmp_path.glob("aptwrap.toml.*.old"))
        assert len(backups) == 1
        assert backups[0].read_text() == "[global\nthis is = = not toml"
        assert cfg.privilege_backend == "sudo"

    def test_setter_persists(self, tmp_path):
        path = tmp_path / "aptwrap.toml"
        Configuration(path).privilege_backend = "pkexec"
        assert Configuration(path).privilege_backend == "pkexec"


class TestReadOnlyConfiguration:
    """Without create the file is read but never written."""

    def test_missing_file_gives_defaults(self, tmp_path):
        path = tmp_path / "sub" / "aptwrap.toml"
        cfg = Configuration(path)

        assert cfg.privilege_backend == "sudo"
        assert cfg.paths == {"dpkg": "dpkg", "apt-get": "apt-get"}
        assert not path.exists()
        assert not path.parent.exists()

    def test_missing_options_are_not_written(self, tmp_path):
        path = tmp_path / "aptwrap.toml"
        path.write_text('[global]\nprivilege_backend = "none"\n')
        cfg = Configuration(path)

        assert cfg.privilege_backend == "none"
        assert cfg.confnew is False
        assert path.read_text() == '[global]\nprivilege_backend = "none"\n'

    def test_corrupt_file_is_left_alone(self, tmp_path):
        path = tmp_path / "aptwrap.toml"
        path.write_text("[global\nthis is = = not toml")
        cfg = Configuration(path)

        assert cfg.privilege_backend == "sudo"
        assert list(tmp_path.glob("*.old")) == []
        assert path.read_text() == "[global\nthis is = = not toml"

    def test_home_is_a_regular_file(self, tmp_path, monkeypatch):
        home = tmp_path / "not-a-dir"
        home.write_text("")
        monkeypatch.setenv("HOME", str(home))

        cfg = Configuration()

        assert cfg.config_path == home / ".config" / "aptwrap" / "aptwrap.toml"
        assert cfg.privilege_backend == "sudo"

    def test_create_with_unusable_directory_falls_back(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        cfg = Configuration(blocker / "aptwrap.toml", create=True)

        assert cfg.non_interactive is True
        assert blocker.read_text() == ""


class TestGlobalInstance:

    def test_get_config_is_cached(self, isolated_config):
        assert get_config() is get_config()
        assert get_config().config_path == isolated_config

    def test_set_config_path_resets(self, tmp_path):
        first = get_config()
        set_config_path(tmp_path / "other.toml")
        second = get_config()
        assert first is not second
        assert second.config_path == tmp_path / "other.toml"

    def test_library_lookup_creates_nothing(self, isolated_config):
        assert get_config().privilege_backend == "sudo"
        assert not isolated_config.exists()

    def test_create_writes_file(self, isolated_config):
        get_config(create=True)
        assert isolated_config.exists()
