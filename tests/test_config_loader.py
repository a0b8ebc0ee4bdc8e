"""Tests for run configuration and skip list loading."""
import pytest
import yaml

from gcp_secret_purge.secrets.domains.config_loader import (
    ConfigError,
    MissingConfiguration,
    load_config,
    load_skip_list,
    normalize_scope,
    require_env,
)


@pytest.fixture
def sa_file(tmp_path):
    """Dummy service account key."""
    path = tmp_path / "sa.json"
    path.write_text('{"type": "service_account"}')
    return path


@pytest.fixture
def base_env(sa_file):
    return {
        "GOOGLE_APPLICATION_CREDENTIALS": str(sa_file),
        "PROJECT": "my-project",
    }


@pytest.fixture
def in_tmp(tmp_path, monkeypatch):
    """Run from an empty directory so ./skip.txt is under test control."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestRequireEnv:

    def test_returns_value(self):
        assert require_env("PROJECT", {"PROJECT": "p"}) == "p"

    def test_missing_variable_raises(self):
        with pytest.raises(MissingConfiguration) as exc_info:
            require_env("PROJECT", {})

        assert exc_info.value.name == "PROJECT"
        assert "PROJECT" in str(exc_info.value)

    def test_empty_variable_raises(self):
        with pytest.raises(MissingConfiguration):
            require_env("PROJECT", {"PROJECT": ""})

    @pytest.mark.parametrize("value", ["   ", "\t", "\n"])
    def test_blank_variable_raises(self, value):
        with pytest.raises(MissingConfiguration):
            require_env("PROJECT", {"PROJECT": value})

    def test_value_is_stripped(self):
        assert require_env("PROJECT", {"PROJECT": "  p \n"}) == "p"

    def test_reads_process_environment_by_default(self, monkeypatch):
        monkeypatch.setenv("SOME_PURGE_VAR", "value")
        assert require_env("SOME_PURGE_VAR") == "value"

    def test_missing_configuration_is_config_error(self):
        assert issubclass(MissingConfiguration, ConfigError)


class TestLoadSkipList:

    def test_missing_file_returns_empty_list(self, tmp_path):
        assert load_skip_list(str(tmp_path / "skip.txt")) == []

    def test_trims_and_drops_blank_lines(self, tmp_path):
        skip = tmp_path / "skip.txt"
        skip.write_text("alpha\n\n  beta  \n\t\ngamma\r\n")

        assert load_skip_list(str(skip)) == ["alpha", "beta", "gamma"]

    def test_keeps_order_and_duplicates(self, tmp_path):
        skip = tmp_path / "skip.txt"
        skip.write_text("b\na\nb\n")

        assert load_skip_list(str(skip)) == ["b", "a", "b"]

    def test_undecodable_file_raises_config_error(self, tmp_path):
        skip = tmp_path / "skip.txt"
        skip.write_bytes(b"api-key\n\xff\xfe\n")

        with pytest.raises(ConfigError) as exc_info:
            load_skip_list(str(skip))

        assert "Failed to read skip file" in str(exc_info.value)

    def test_defaults_to_skip_txt_in_working_directory(self, in_tmp):
        (in_tmp / "skip.txt").write_text("keep-me\n")

        assert load_skip_list() == ["keep-me"]


class TestNormalizeScope:

    def test_bare_project_id(self):
        assert normalize_scope("my-project") == "projects/my-project"

    def test_full_parent_is_kept(self):
        assert normalize_scope("projects/my-project") == "projects/my-project"

    def test_trailing_slash_removed(self):
        assert normalize_scope("projects/my-project/") == "projects/my-project"


class TestLoadConfig:

    def test_success_from_environment(self, base_env, in_tmp):
        (in_tmp / "skip.txt").write_text("db-password\n")

        config = load_config(environ=base_env)

        assert config.project == "projects/my-project"
        assert config.dry_run is False
        assert config.skip_file == "skip.txt"
        assert config.skip_list == ("db-password",)

    def test_missing_credentials_fails_first(self, in_tmp):
        with pytest.raises(MissingConfiguration) as exc_info:
            load_config(environ={"PROJECT": "p"})

        assert exc_info.value.name == "GOOGLE_APPLICATION_CREDENTIALS"

    def test_missing_project(self, sa_file, in_tmp):
        with pytest.raises(MissingConfiguration) as exc_info:
            load_config(environ={"GOOGLE_APPLICATION_CREDENTIALS": str(sa_file)})

        assert exc_info.value.name == "PROJECT"

    def test_blank_project_fails_before_building_scope(self, sa_file, in_tmp):
        env = {"GOOGLE_APPLICATION_CREDENTIALS": str(sa_file), "PROJECT": "   "}

        with pytest.raises(MissingConfiguration) as exc_info:
            load_config(environ=env)

        assert exc_info.value.name == "PROJECT"

    def test_skip_list_cannot_be_mutated(self, base_env, in_tmp):
        (in_tmp / "skip.txt").write_text("a\n")

        config = load_config(environ=base_env)

        with pytest.raises(AttributeError):
            config.skip_list.append("x")
        assert config.skip_list == ("a",)

    def test_credentials_file_must_exist(self, in_tmp):
        env = {"GOOGLE_APPLICATION_CREDENTIALS": "/nonexistent/sa.json", "PROJECT": "p"}

        with pytest.raises(ConfigError) as exc_info:
            load_config(environ=env)

        assert "Service account file not found" in str(exc_info.value)

    @pytest.mark.parametrize("value, expected", [
        ("true", True),
        ("True", False),
        ("1", False),
        ("", False),
    ])
    def test_dry_run_requires_literal_true(self, base_env, in_tmp, value, expected):
        env = dict(base_env, DRY_RUN=value)

        assert load_config(environ=env).dry_run is expected

    def test_dry_run_argument_wins(self, base_env, in_tmp):
        env = dict(base_env, DRY_RUN="false")

        assert load_config(dry_run=True, environ=env).dry_run is True

    def test_skip_file_argument(self, base_env, in_tmp):
        custom = in_tmp / "keep.txt"
        custom.write_text("a\nb\n")

        config = load_config(skip_file=str(custom), environ=base_env)

        assert config.skip_file == str(custom)
        assert config.skip_list == ("a", "b")


class TestSettingsFile:

    def _write(self, path, content):
        with open(path, 'w') as f:
            yaml.dump(content, f)
        return path

    def test_settings_provide_defaults(self, base_env, in_tmp):
        (in_tmp / "keep.txt").write_text("api-key\n")
        settings = self._write(in_tmp / "purge.yml", {
            "skip_file": "keep.txt",
            "dry_run": True,
        })

        config = load_config(config_path=str(settings), environ=base_env)

        assert config.project == "projects/my-project"
        assert config.skip_list == ("api-key",)
        assert config.dry_run is True

    def test_settings_cannot_replace_project_variable(self, sa_file, in_tmp):
        settings = self._write(in_tmp / "purge.yml", {"project": "projects/from-file"})
        env = {"GOOGLE_APPLICATION_CREDENTIALS": str(sa_file)}

        with pytest.raises(MissingConfiguration) as exc_info:
            load_config(config_path=str(settings), environ=env)

        assert exc_info.value.name == "PROJECT"

    def test_project_key_is_rejected(self, base_env, in_tmp):
        settings = self._write(in_tmp / "purge.yml", {"project": "from-file"})

        with pytest.raises(ConfigError) as exc_info:
            load_config(config_path=str(settings), environ=base_env)

        assert "PROJECT" in str(exc_info.value)

    def test_environment_overrides_settings(self, base_env, in_tmp):
        settings = self._write(in_tmp / "purge.yml", {"dry_run": True})
        env = dict(base_env, DRY_RUN="false")

        config = load_config(config_path=str(settings), environ=env)

        assert config.dry_run is False

    def test_path_from_environment_variable(self, base_env, in_tmp):
        settings = self._write(in_tmp / "purge.yml", {"dry_run": True})
        env = dict(base_env, SECRET_PURGE_CONFIG=str(settings))

        assert load_config(environ=env).dry_run is True

    def test_missing_settings_file(self, base_env, in_tmp):
        with pytest.raises(ConfigError) as exc_info:
            load_config(config_path=str(in_tmp / "nope.yml"), environ=base_env)

        assert "not found" in str(exc_info.value)

    def test_invalid_yaml(self, base_env, in_tmp):
        settings = in_tmp / "purge.yml"
        settings.write_text("invalid: yaml: content: [")

        with pytest.raises(ConfigError) as exc_info:
            load_config(config_path=str(settings), environ=base_env)

        assert "parse" in str(exc_info.value).lower()

    def test_non_mapping_document(self, base_env, in_tmp):
        settings = in_tmp / "purge.yml"
        settings.write_text("- a\n- b\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config(config_path=str(settings), environ=base_env)

        assert "mapping" in str(exc_info.value)

    def test_dry_run_must_be_boolean(self, base_env, in_tmp):
        settings = self._write(in_tmp / "purge.yml", {"dry_run": "yes please"})

        with pytest.raises(ConfigError):
            load_config(config_path=str(settings), environ=base_env)

    def test_empty_settings_file_is_ignored(self, base_env, in_tmp):
        settings = in_tmp / "purge.yml"
        settings.write_text("")

        config = load_config(config_path=str(settings), environ=base_env)

        assert config.project == "projects/my-project"

    def test_settings_are_read_fresh_each_time(self, base_env, in_tmp):
        settings = self._write(in_tmp / "purge.yml", {"dry_run": True})
        assert load_config(config_path=str(settings), environ=base_env).dry_run is True

        self._write(settings, {"dry_run": False})
        assert load_config(config_path=str(settings), environ=base_env).dry_run is False
