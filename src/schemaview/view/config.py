"""
Configuration for the schemaview.view module.

Defines ViewSettings, a frozen dataclass carrying the configured defaults of a
table view. Defaults are sourced from schemaview.core.constants (the single source
of truth); `reset()` on a store restores the state these settings describe.

Source of truth
- schemaview.core.constants.DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS, MAX_VISIBLE_PAGES

Import DAG discipline
- Depends only on stdlib and schemaview.core.
- Does not import the store or selectors.

Notes
- Precedence when loading: environment > TOML > defaults.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from schemaview.core.constants import (
    DEFAULT_PAGE_SIZE,
    MAX_VISIBLE_PAGES,
    PAGE_SIZE_OPTIONS,
)

from .errors import InvalidPageSizeError, ViewConfigError

__all__ = ["ViewSettings"]

_TRUE = {"1", "true", "t", "yes", "y", "on"}


def _bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        return v.strip().lower() in _TRUE
    return False


def _int_tuple(v: Any) -> tuple[int, ...] | None:
    if isinstance(v, str):
        parts = [p.strip() for p in v.split(",") if p.strip()]
    elif isinstance(v, (list, tuple)):
        parts = list(v)
    else:
        return None
    try:
        return tuple(int(p) for p in parts)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class ViewSettings:
    """
    Configured defaults for a table view.

    Attributes:
        page_size (int): Initial rows per page (>= 1).
        page_size_options (tuple[int, ...]): Page sizes offered to pickers.
        max_visible_pages (int): Page numbers planned in a pagination strip.
        multi_sort (bool): Treat every sort action as additive (multi-column sort).
        prune_selection (bool): Drop selected keys missing from a replaced dataset.

    Examples:
        >>> from schemaview.view import ViewSettings
        >>> ViewSettings(page_size=25).page_size
        25
    """

    page_size: int = DEFAULT_PAGE_SIZE
    page_size_options: tuple[int, ...] = PAGE_SIZE_OPTIONS
    max_visible_pages: int = MAX_VISIBLE_PAGES
    multi_sort: bool = False
    prune_selection: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.page_size, int) or self.page_size <= 0:
            raise InvalidPageSizeError(self.page_size)
        if not self.page_size_options or any(
            not isinstance(n, int) or n <= 0 for n in self.page_size_options
        ):
            raise ViewConfigError(
                f"page_size_options must be positive integers, got {self.page_size_options!r}"
            )
        if self.max_visible_pages < 1:
            raise ViewConfigError(f"max_visible_pages must be >= 1, got {self.max_visible_pages}")

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: ViewSettings, cfg: dict[str, Any] | None) -> ViewSettings:
        """Apply a loose config mapping onto ViewSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        if "page_size" in cfg:
            try:
                s = replace(s, page_size=int(cfg["page_size"]))
            except (TypeError, ValueError):
                pass

        if "page_size_options" in cfg:
            options = _int_tuple(cfg["page_size_options"])
            if options:
                try:
                    s = replace(s, page_size_options=options)
                except ValueError:
                    pass

        if "max_visible_pages" in cfg:
            try:
                s = replace(s, max_visible_pages=int(cfg["max_visible_pages"]))
            except (TypeError, ValueError):
                pass

        if "multi_sort" in cfg:
            s = replace(s, multi_sort=_bool(cfg["multi_sort"]))

        if "prune_selection" in cfg:
            s = replace(s, prune_selection=_bool(cfg["prune_selection"]))

        return s

    @classmethod
    def from_env(
        cls, base: ViewSettings | None = None, prefix: str = "SCHEMAVIEW_"
    ) -> ViewSettings:
        """
        Build ViewSettings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - SCHEMAVIEW_PAGE_SIZE
            - SCHEMAVIEW_PAGE_SIZE_OPTIONS (comma separated, e.g. "10,25,50")
            - SCHEMAVIEW_MAX_VISIBLE_PAGES
            - SCHEMAVIEW_MULTI_SORT (1/0/true/false/yes/no/on/off)
            - SCHEMAVIEW_PRUNE_SELECTION (1/0/true/false/yes/no/on/off)
        """
        s = base or cls()

        mapping: dict[str, Any] = {}
        for key in (
            "page_size",
            "page_size_options",
            "max_visible_pages",
            "multi_sort",
            "prune_selection",
        ):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v

        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> ViewSettings:
        """
        Build ViewSettings from a TOML file.

        Search order when `path` is None:
            1) ./schemaview.toml (with either a top-level [view] table or direct keys)
            2) ./pyproject.toml under [tool.schemaview.view]

        Returns defaults if no file is present or it cannot be parsed.
        """
        s = cls()

        def _load_toml(p: Path) -> dict[str, Any] | None:
            try:
                with p.open("rb") as fh:
                    return tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError):
                return None

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "schemaview.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            data = _load_toml(p)
            if not isinstance(data, dict):
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                section = tool.get("schemaview", {}) if isinstance(tool, dict) else {}
                cfg = section.get("view") if isinstance(section, dict) else None
            elif isinstance(data.get("view"), dict):
                cfg = data["view"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> ViewSettings:
        """
        Load ViewSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults
                (schemaview.toml, pyproject.toml).

        Returns:
            ViewSettings
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s
