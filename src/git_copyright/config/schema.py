# Copyright (C) 2025 Francesca Falcone and Mattia Tagliente
# All Rights Reserved

# git_copyright/config/schema.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# "#" for line comments, ["/*", "*/"] for block comments
CommentSign = Union[str, Tuple[str, str]]

DEFAULT_MAX_PARALLEL = 8

# Would terminate a block comment early if they appeared in the holder name
_FORBIDDEN_HOLDER_TOKENS = ("*/", "-->", "-}", "*)")


def _check_sign(sign: CommentSign) -> CommentSign:
    parts = (sign,) if isinstance(sign, str) else sign
    for part in parts:
        if not part or part != part.strip():
            raise ValueError(f"Comment sign must be non-empty without surrounding blanks: {sign!r}")
    return sign


class FileConfig(BaseModel):
    """One YAML configuration layer (built-in defaults, user file or --config file)."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    holder: Optional[str] = Field(
        default=None, description="Copyright holder written into every notice."
    )
    comment_styles: Dict[str, CommentSign] = Field(
        default_factory=dict,
        alias="comment_sign_map",
        description="Extension (or full file name) -> comment sign.",
    )
    ignore_files: List[str] = Field(default_factory=list)
    ignore_dirs: List[str] = Field(default_factory=list)
    inherit_defaults: bool = Field(
        default=True,
        description="Merge on top of lower layers; False starts from an empty mapping.",
    )
    max_parallel: Optional[int] = Field(default=None, gt=0)

    @field_validator("comment_styles")
    @classmethod
    def _validate_styles(cls, styles: Dict[str, CommentSign]) -> Dict[str, CommentSign]:
        for key, sign in styles.items():
            if not key or key.startswith("."):
                raise ValueError(f"Style key must be an extension without dot or a file name: {key!r}")
            _check_sign(sign)
        return styles


class EffectiveConfig(BaseModel):
    """
    Fully-resolved, immutable run configuration after merging:
    defaults -> user config -> --config file -> .env/environment -> CLI flags.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    repo_root: Path
    holder: str = Field(..., description="Copyright holder, required and non-empty.")
    comment_styles: Dict[str, CommentSign] = Field(default_factory=dict)
    ignore_patterns: Tuple[str, ...] = ()
    ignore_uncommitted: bool = False
    max_parallel: int = Field(default=DEFAULT_MAX_PARALLEL, gt=0)
    check: bool = False
    ref: str = "HEAD"

    @field_validator("holder")
    @classmethod
    def _validate_holder(cls, holder: str) -> str:
        holder = holder.strip()
        if not holder:
            raise ValueError("holder name must not be empty")
        if "\n" in holder or "\r" in holder:
            raise ValueError("holder name must be a single line")
        for token in _FORBIDDEN_HOLDER_TOKENS:
            if token in holder:
                raise ValueError(f"holder name must not contain {token!r}")
        return holder
