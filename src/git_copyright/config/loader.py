# Copyright (C) 2025 Francesca Falcone and Mattia Tagliente
# All Rights Reserved

# git_copyright/config/loader.py
"""
Configuration loading with layered merge and .env support.

Layers (lowest to highest precedence):
1. Built-in defaults shipped as package data (defaults.yaml)
2. User config at the platform-specific location:
   - Windows: %LOCALAPPDATA%/git-copyright/git-copyright/config.yaml
   - Linux: ~/.config/git-copyright/config.yaml
   - macOS: ~/Library/Application Support/git-copyright/config.yaml
3. Explicit config file (--config, or GIT_COPYRIGHT_CONFIG)
4. .env file in the repository root (loaded into os.environ, existing
   variables win), then the GIT_COPYRIGHT_HOLDER environment variable
5. CLI flags

Comment styles and ignore patterns accumulate across layers unless a layer sets
`inherit_defaults: false`. Scalar values are overridden by higher layers.
Any problem is reported as ConfigurationError before files are touched.
"""
from __future__ import annotations

import logging
import os
from importlib.resources import files
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from platformdirs import user_config_path
from pydantic import ValidationError

from git_copyright.config.schema import CommentSign, EffectiveConfig, FileConfig
from git_copyright.errors import ConfigurationError

logger = logging.getLogger(__name__)

APP_NAME = "git-copyright"
DEFAULTS_RESOURCE = "defaults.yaml"
USER_CONFIG_FILENAME = "config.yaml"
DOTENV_FILENAME = ".env"
ENV_HOLDER = "GIT_COPYRIGHT_HOLDER"
ENV_CONFIG = "GIT_COPYRIGHT_CONFIG"


def _parse_yaml(text: str, source: str) -> dict[str, Any]:
    """
    Parse YAML text whose root must be a mapping.

    Raises:
        ConfigurationError: invalid YAML or a non-mapping root.
    """
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {source}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"YAML root must be a mapping: {source}")
    return data


def _to_file_config(data: dict[str, Any], source: str) -> FileConfig:
    try:
        return FileConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config at {source}: {e}") from e


def load_config_file(path: Path) -> FileConfig:
    """Read one YAML config layer from disk."""
    if not path.is_file():
        raise ConfigurationError(f"Config file not found: {path}")
    text = path.read_text(encoding="utf-8")
    return _to_file_config(_parse_yaml(text, str(path)), str(path))


def load_defaults() -> FileConfig:
    """Built-in defaults bundled with the package."""
    resource = files("git_copyright.config").joinpath(DEFAULTS_RESOURCE)
    text = resource.read_text(encoding="utf-8")
    return _to_file_config(_parse_yaml(text, DEFAULTS_RESOURCE), DEFAULTS_RESOURCE)


def user_config_file() -> Path:
    return user_config_path(appname=APP_NAME) / USER_CONFIG_FILENAME


def _load_user_config() -> FileConfig | None:
    path = user_config_file()
    if not path.is_file():
        return None
    logger.info("Using user config %s", path)
    return load_config_file(path)


def _load_dotenv(repo_root: Path) -> bool:
    """
    Load .env from the repository root if it exists.

    Returns:
        True if a .env file was found and loaded, False otherwise.
    """
    dotenv_path = repo_root / DOTENV_FILENAME
    if dotenv_path.exists():
        # override=False: variables already set in the environment win
        load_dotenv(dotenv_path, override=False)
        return True
    return False


def merge_layers(layers: list[FileConfig]) -> tuple[dict[str, CommentSign], list[str], str | None, int | None]:
    """
    Fold config layers, lowest precedence first.

    Returns:
        (comment_styles, ignore_patterns, holder, max_parallel)
    """
    styles: dict[str, CommentSign] = {}
    ignores: list[str] = []
    holder: str | None = None
    max_parallel: int | None = None

    for layer in layers:
        if not layer.inherit_defaults:
            styles, ignores = {}, []
        styles.update(layer.comment_styles)
        for pattern in [*layer.ignore_files, *layer.ignore_dirs]:
            if pattern not in ignores:
                ignores.append(pattern)
        if layer.holder is not None:
            holder = layer.holder
        if layer.max_parallel is not None:
            max_parallel = layer.max_parallel

    return styles, ignores, holder, max_parallel


def load_config(
    repo_root: Path,
    holder: str | None = None,
    config_path: Path | None = None,
    ignore_uncommitted: bool = False,
    max_parallel: int | None = None,
    check: bool = False,
    ref: str = "HEAD",
    use_user_config: bool = True,
) -> EffectiveConfig:
    """
    Public entry point used by the CLI.

    Args:
        repo_root: Worktree root (already resolved by GitRepo.open).
        holder: Holder name from the command line, highest precedence.
        config_path: Explicit YAML config; falls back to GIT_COPYRIGHT_CONFIG.
        ignore_uncommitted: Bypass the change-safety gate.
        max_parallel: Worker pool size override.
        check: Report only, never write.
        ref: Ref whose tree lists the candidate files.
        use_user_config: Read the per-user config file.

    Returns:
        A frozen EffectiveConfig.

    Raises:
        ConfigurationError: invalid YAML/schema, missing explicit config file,
            or no usable holder name.
    """
    # .env first so its values are visible to the environment lookups below
    if _load_dotenv(repo_root):
        logger.debug("Loaded %s", repo_root / DOTENV_FILENAME)

    layers = [load_defaults()]
    if use_user_config:
        user_cfg = _load_user_config()
        if user_cfg is not None:
            layers.append(user_cfg)

    if config_path is None and os.environ.get(ENV_CONFIG, "").strip():
        config_path = Path(os.environ[ENV_CONFIG].strip())
    if config_path is not None:
        logger.info("Using config %s", config_path)
        layers.append(load_config_file(Path(config_path)))
    else:
        logger.info("Using default configuration")

    styles, ignores, file_holder, file_parallel = merge_layers(layers)

    final_holder = holder or os.environ.get(ENV_HOLDER, "").strip() or file_holder
    if not final_holder:
        raise ConfigurationError(
            "Copyright holder is not configured. Please set one of:\n"
            " 1. the --name option\n"
            f" 2. environment variable {ENV_HOLDER} (or a .env file in the repository root)\n"
            " 3. 'holder:' in the config file"
        )

    values: dict[str, Any] = {
        "repo_root": Path(repo_root),
        "holder": final_holder,
        "comment_styles": styles,
        "ignore_patterns": tuple(ignores),
        "ignore_uncommitted": ignore_uncommitted,
        "check": check,
        "ref": ref,
    }
    if max_parallel is not None or file_parallel is not None:
        values["max_parallel"] = max_parallel if max_parallel is not None else file_parallel

    try:
        return EffectiveConfig(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
