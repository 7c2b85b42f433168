"""
Tests for configuration loading, layering and validation.
"""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from git_copyright.config import loader
from git_copyright.config.loader import ENV_CONFIG, ENV_HOLDER, load_config, load_defaults
from git_copyright.config.schema import DEFAULT_MAX_PARALLEL, EffectiveConfig, FileConfig
from git_copyright.errors import ConfigurationError


@pytest.fixture
def repo_root(tmp_path, clean_env, monkeypatch):
    root = tmp_path / "repo"
    root.mkdir()
    # keep a developer's own user config out of the tests
    monkeypatch.setattr(loader, "user_config_file", lambda: tmp_path / "no-user-config.yaml")
    return root


def _write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaults:
    def test_defaults_load(self):
        defaults = load_defaults()
        assert defaults.holder is None
        assert defaults.comment_styles["py"] == "#"
        assert defaults.comment_styles["css"] == ("/*", "*/")
        assert "*.txt" in defaults.ignore_files
        assert "vendor/" in defaults.ignore_dirs

    def test_effective_defaults(self, repo_root):
        cfg = load_config(repo_root, holder="Acme Ltd.")
        assert cfg.holder == "Acme Ltd."
        assert cfg.repo_root == repo_root
        assert cfg.max_parallel == DEFAULT_MAX_PARALLEL
        assert cfg.ref == "HEAD"
        assert not cfg.check
        assert not cfg.ignore_uncommitted
        assert "*.md" in cfg.ignore_patterns


class TestHolderPrecedence:
    def test_missing_holder(self, repo_root):
        with pytest.raises(ConfigurationError, match="holder is not configured"):
            load_config(repo_root)

    def test_environment(self, repo_root, monkeypatch):
        monkeypatch.setenv(ENV_HOLDER, "Env Corp.")
        assert load_config(repo_root).holder == "Env Corp."

    def test_cli_beats_environment(self, repo_root, monkeypatch):
        monkeypatch.setenv(ENV_HOLDER, "Env Corp.")
        assert load_config(repo_root, holder="Cli Corp.").holder == "Cli Corp."

    def test_dotenv_in_repository_root(self, repo_root):
        _write(repo_root / ".env", f"{ENV_HOLDER}=Dotenv Corp.\n")
        assert load_config(repo_root).holder == "Dotenv Corp."

    def test_environment_beats_dotenv(self, repo_root, monkeypatch):
        _write(repo_root / ".env", f"{ENV_HOLDER}=Dotenv Corp.\n")
        monkeypatch.setenv(ENV_HOLDER, "Env Corp.")
        assert load_config(repo_root).holder == "Env Corp."

    def test_environment_beats_config_file(self, repo_root, tmp_path, monkeypatch):
        cfg_file = _write(tmp_path / "c.yaml", "holder: File Corp.\n")
        assert load_config(repo_root, config_path=cfg_file).holder == "File Corp."
        monkeypatch.setenv(ENV_HOLDER, "Env Corp.")
        assert load_config(repo_root, config_path=cfg_file).holder == "Env Corp."

    def test_holder_is_stripped(self, repo_root):
        assert load_config(repo_root, holder="  Acme Ltd.  ").holder == "Acme Ltd."

    @pytest.mark.parametrize("holder", ["Evil */ Corp", "Evil --> Corp", "Line\nBreak"])
    def test_holder_that_would_break_a_comment(self, repo_root, holder):
        with pytest.raises(ConfigurationError, match="holder name"):
            load_config(repo_root, holder=holder)


class TestConfigFile:
    def test_layers_on_top_of_defaults(self, repo_root, tmp_path):
        cfg_file = _write(
            tmp_path / "c.yaml",
            "comment_styles:\n  foo: '//'\n  py: ';'\nignore_files:\n  - 'generated/*'\nmax_parallel: 3\n",
        )
        cfg = load_config(repo_root, holder="Acme", config_path=cfg_file)
        assert cfg.comment_styles["foo"] == "//"
        assert cfg.comment_styles["py"] == ";"
        assert cfg.comment_styles["rs"] == "//"
        assert "generated/*" in cfg.ignore_patterns
        assert "*.md" in cfg.ignore_patterns
        assert cfg.max_parallel == 3

    def test_cli_jobs_beat_config_file(self, repo_root, tmp_path):
        cfg_file = _write(tmp_path / "c.yaml", "max_parallel: 3\n")
        assert load_config(repo_root, holder="Acme", config_path=cfg_file, max_parallel=5).max_parallel == 5

    def test_comment_sign_map_alias(self, repo_root, tmp_path):
        cfg_file = _write(
            tmp_path / "c.yaml",
            "comment_sign_map:\n  ml: ['(*', '*)']\n",
        )
        cfg = load_config(repo_root, holder="Acme", config_path=cfg_file)
        assert cfg.comment_styles["ml"] == ("(*", "*)")

    def test_inherit_defaults_false(self, repo_root, tmp_path):
        cfg_file = _write(
            tmp_path / "c.yaml",
            "inherit_defaults: false\ncomment_styles:\n  py: '#'\nignore_dirs:\n  - 'build/'\n",
        )
        cfg = load_config(repo_root, holder="Acme", config_path=cfg_file)
        assert cfg.comment_styles == {"py": "#"}
        assert cfg.ignore_patterns == ("build/",)

    def test_config_from_environment_variable(self, repo_root, tmp_path, monkeypatch):
        cfg_file = _write(tmp_path / "c.yaml", "holder: Env File Corp.\n")
        monkeypatch.setenv(ENV_CONFIG, str(cfg_file))
        assert load_config(repo_root).holder == "Env File Corp."

    def test_missing_file(self, repo_root, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(repo_root, holder="Acme", config_path=tmp_path / "nope.yaml")

    def test_invalid_yaml(self, repo_root, tmp_path):
        cfg_file = _write(tmp_path / "c.yaml", "comment_styles: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config(repo_root, holder="Acme", config_path=cfg_file)

    def test_non_mapping_root(self, repo_root, tmp_path):
        cfg_file = _write(tmp_path / "c.yaml", "- a\n- b\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(repo_root, holder="Acme", config_path=cfg_file)

    def test_unknown_key(self, repo_root, tmp_path):
        cfg_file = _write(tmp_path / "c.yaml", "holdr: typo\n")
        with pytest.raises(ConfigurationError, match="Invalid config"):
            load_config(repo_root, holder="Acme", config_path=cfg_file)

    @pytest.mark.parametrize(
        "styles",
        ["  '.py': '#'\n", "  py: ''\n", "  css: ['/*']\n"],
    )
    def test_invalid_comment_styles(self, repo_root, tmp_path, styles):
        cfg_file = _write(tmp_path / "c.yaml", "comment_styles:\n" + styles)
        with pytest.raises(ConfigurationError):
            load_config(repo_root, holder="Acme", config_path=cfg_file)

    def test_empty_file_is_accepted(self, repo_root, tmp_path):
        cfg_file = _write(tmp_path / "c.yaml", "")
        assert load_config(repo_root, holder="Acme", config_path=cfg_file).holder == "Acme"


class TestUserConfig:
    def test_user_config_layer(self, repo_root, tmp_path, monkeypatch):
        user_file = _write(tmp_path / "user.yaml", "holder: User Corp.\nmax_parallel: 2\n")
        monkeypatch.setattr(loader, "user_config_file", lambda: user_file)
        cfg = load_config(repo_root)
        assert cfg.holder == "User Corp."
        assert cfg.max_parallel == 2

    def test_explicit_file_beats_user_config(self, repo_root, tmp_path, monkeypatch):
        user_file = _write(tmp_path / "user.yaml", "holder: User Corp.\n")
        cfg_file = _write(tmp_path / "c.yaml", "holder: File Corp.\n")
        monkeypatch.setattr(loader, "user_config_file", lambda: user_file)
        assert load_config(repo_root, config_path=cfg_file).holder == "File Corp."

    def test_user_config_can_be_disabled(self, repo_root, tmp_path, monkeypatch):
        user_file = _write(tmp_path / "user.yaml", "holder: User Corp.\n")
        monkeypatch.setattr(loader, "user_config_file", lambda: user_file)
        with pytest.raises(ConfigurationError):
            load_config(repo_root, use_user_config=False)


class TestSchema:
    def test_effective_config_is_frozen(self, tmp_path):
        cfg = EffectiveConfig(repo_root=tmp_path, holder="Acme")
        with pytest.raises(ValidationError):
            cfg.holder = "Other"

    def test_max_parallel_must_be_positive(self):
        with pytest.raises(ValidationError):
            FileConfig(max_parallel=0)

    def test_effective_config_rejects_unknown_fields(self, tmp_path):
        with pytest.raises(ValidationError):
            EffectiveConfig(repo_root=tmp_path, holder="Acme", colour="blue")
