import json
from pathlib import Path

import pytest

from try_picker import constants
from try_picker.config import (
    TryConfig,
    config_path,
    load_config,
    prompt_for_setup,
    resolve_base_path,
    resolve_shell,
    save_config,
)
from try_picker.exceptions import ConfigError


@pytest.fixture(autouse=True)
def config_dir(tmp_path, monkeypatch):
    """Point the config file at a temp dir and clear env overrides."""
    d = tmp_path / "cfg"
    monkeypatch.setenv("TRY_CONFIG_DIR", str(d))
    monkeypatch.delenv("TRY_PATH", raising=False)
    return d


def test_config_path_honors_override(config_dir):
    assert config_path() == config_dir / "config"


def test_config_path_default(monkeypatch, tmp_path):
    monkeypatch.delenv("TRY_CONFIG_DIR")
    monkeypatch.setattr(constants, "CONFIG_DIR", tmp_path / "home-cfg")
    assert config_path() == tmp_path / "home-cfg" / "config"


class TestLoadConfig:
    def test_missing_file_gives_defaults(self):
        assert load_config() == TryConfig()

    def test_reads_json(self, config_dir):
        config_dir.mkdir()
        (config_dir / "config").write_text(json.dumps({"path": "/x/tries", "shell": "/bin/zsh"}))
        assert load_config() == TryConfig(path="/x/tries", shell="/bin/zsh")

    def test_ignores_unknown_keys(self, config_dir):
        config_dir.mkdir()
        (config_dir / "config").write_text(json.dumps({"path": "/x", "theme": "dark"}))
        assert load_config().path == "/x"

    @pytest.mark.parametrize("raw,expected", [
        ("/home/me/tries\n", "/home/me/tries"),
        ("  ~/src/tries  ", "~/src/tries"),
        ("", ""),
        ("{not json", ""),
    ])
    def test_legacy_plain_text(self, config_dir, raw, expected):
        config_dir.mkdir()
        (config_dir / "config").write_text(raw)
        assert load_config() == TryConfig(path=expected)

    def test_unreadable_raises(self, config_dir):
        (config_dir / "config").mkdir(parents=True)
        with pytest.raises(ConfigError):
            load_config()


def test_save_then_load(config_dir):
    written = save_config(TryConfig(path="/data/tries", shell="fish"))
    assert written == config_dir / "config"
    assert json.loads(written.read_text()) == {"path": "/data/tries", "shell": "fish"}
    assert not (config_dir / "config.tmp").exists()
    assert load_config() == TryConfig(path="/data/tries", shell="fish")


def test_save_failure_raises(config_dir):
    config_dir.parent.mkdir(exist_ok=True)
    config_dir.write_text("a file, not a directory")
    with pytest.raises(ConfigError):
        save_config(TryConfig(path="/x"))


class TestResolveBasePath:
    def test_env_wins(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TRY_PATH", str(tmp_path / "env"))
        assert resolve_base_path(TryConfig(path="/stored")) == tmp_path / "env"

    def test_stored_path_expands_user(self):
        assert resolve_base_path(TryConfig(path="~/tries")) == Path.home() / "tries"

    @pytest.mark.parametrize("config", [None, TryConfig()])
    def test_first_run(self, config):
        assert resolve_base_path(config) is None


@pytest.mark.parametrize("config,env_shell,expected", [
    (TryConfig(shell="/bin/zsh"), "/bin/fish", "/bin/zsh"),
    (TryConfig(), "/bin/fish", "/bin/fish"),
    (None, None, constants.DEFAULT_SHELL),
])
def test_resolve_shell(monkeypatch, config, env_shell, expected):
    if env_shell:
        monkeypatch.setenv("SHELL", env_shell)
    else:
        monkeypatch.delenv("SHELL", raising=False)
    assert resolve_shell(config) == expected


def test_prompt_for_setup_saves_choice(config_dir, tmp_path, monkeypatch):
    answers = iter([str(tmp_path / "exp"), ""])
    monkeypatch.setattr("try_picker.config.click.prompt", lambda *a, **kw: next(answers))

    config = prompt_for_setup()

    assert config == TryConfig(path=str((tmp_path / "exp").resolve()))
    assert load_config() == config


def test_prompt_for_setup_rejects_unknown_shell(config_dir, tmp_path, monkeypatch):
    answers = iter([str(tmp_path / "exp"), "no-such-shell-xyz"])
    monkeypatch.setattr("try_picker.config.click.prompt", lambda *a, **kw: next(answers))
    monkeypatch.setattr("try_picker.config.shutil.which", lambda name: None)

    assert prompt_for_setup().shell == ""
