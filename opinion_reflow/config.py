from __future__ import annotations

import os
import pathlib
import warnings
from dataclasses import dataclass, fields, replace
from functools import reduce
from importlib import import_module
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator

yaml = cast(Any, import_module("yaml"))

ENV_PREFIX = "OPINION_REFLOW_"

# Surname as rendered in small caps -> display name.
DEFAULT_AUTHORS: Mapping[str, str] = MappingProxyType(
    {
        "ROBERTS": "Roberts",
        "THOMAS": "Thomas",
        "ALITO": "Alito",
        "SOTOMAYOR": "Sotomayor",
        "KAGAN": "Kagan",
        "GORSUCH": "Gorsuch",
        "KAVANAUGH": "Kavanaugh",
        "BARRETT": "Barrett",
        "JACKSON": "Jackson",
    }
)


class AuthorRegistry(BaseModel):
    """Fixed roster of opinion authors used for header and small-caps repair.

    The roster is frozen; a different bench is a different registry, built
    from ``pipeline.yaml`` rather than mutated in place.
    """

    model_config = ConfigDict(frozen=True)

    roster: tuple[tuple[str, str], ...] = tuple(DEFAULT_AUTHORS.items())

    @field_validator("roster", mode="before")
    @classmethod
    def _coerce_roster(cls, value: Any) -> tuple[tuple[str, str], ...]:
        items = value.items() if isinstance(value, Mapping) else value
        return tuple((str(k).strip().upper(), str(v).strip()) for k, v in items)

    @classmethod
    def from_mapping(cls, authors: Mapping[str, str] | None) -> "AuthorRegistry":
        return cls(roster=authors) if authors else DEFAULT_REGISTRY

    @property
    def names(self) -> Mapping[str, str]:
        return MappingProxyType(dict(self.roster))

    def surnames(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.roster)

    def display_name(self, surname: str) -> str | None:
        return self.names.get(surname)

    def __contains__(self, surname: object) -> bool:
        return surname in self.names


DEFAULT_REGISTRY = AuthorRegistry()


@dataclass(frozen=True)
class LayoutConfig:
    """Page-geometry thresholds, in PDF points unless noted.

    Coordinates use a bottom-left origin with y increasing upward.
    """

    header_band_low: float = 0.80  # fraction of page height
    header_band_high: float = 0.84  # fraction of page height
    footer_cutoff: float = 60.0
    top_margin: float = 60.0
    line_gap: float = 2.0
    small_caps_delta: float = 0.5
    body_font_min_count: int = 5
    separator_font_delta: float = 1.0
    separator_clearance: float = 2.0
    superscript_font_delta: float = 2.5
    superscript_window: int = 10
    superscript_line_tolerance: float = 2.0
    body_font_tolerance: float = 1.5
    centered_indent: float = 50.0
    paragraph_indent: float = 5.0
    footnote_number_font_delta: float = 3.0

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None) -> "LayoutConfig":
        known = {f.name for f in fields(cls)}
        updates = {k: v for k, v in (options or {}).items() if k in known and v is not None}
        return replace(cls(), **updates) if updates else DEFAULT_LAYOUT


DEFAULT_LAYOUT = LayoutConfig()


class PipelineSpec(BaseModel):
    """Declarative pipeline specification."""

    pipeline: List[str] = Field(default_factory=list)
    options: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    authors: Dict[str, str] | None = None


def _read_yaml(path: str | os.PathLike | None) -> Dict[str, Any]:
    """Return a dict from YAML or {} if path is None/missing/empty."""
    if not path:
        return {}
    p = pathlib.Path(path)
    if not p.exists():
        return {}
    data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise TypeError("pipeline.yaml must contain a top-level mapping")
    return data


def _env_overrides(environ: Mapping[str, str] | None = None) -> Dict[str, Dict[str, Any]]:
    """
    Map OPINION_REFLOW_STEP__key=value -> options[step][key]=value.
    Values are YAML-coerced (so 'true', '42' etc. become bool/int).
    """
    out: Dict[str, Dict[str, Any]] = {}
    for k, v in (os.environ if environ is None else environ).items():
        if not k.startswith(ENV_PREFIX) or "__" not in k:
            continue
        step, key = k[len(ENV_PREFIX) :].lower().split("__", 1)
        try:
            val = yaml.safe_load(v)
        except yaml.YAMLError:
            val = v
        out.setdefault(step, {})[key] = val
    return out


def _merge_options(
    base: Dict[str, Dict[str, Any]], override: Dict[str, Dict[str, Any]]
) -> Dict[str, Dict[str, Any]]:
    """Shallow-merge per-step options; override wins."""
    sources = set(base) | set(override)
    return {s: {**base.get(s, {}), **override.get(s, {})} for s in sources}


def _warn_unknown_options(pipeline: Iterable[str], opts: Mapping[str, Any]) -> None:
    unknown = [step for step in opts if step not in pipeline]
    if unknown:
        warnings.warn(
            f"Unknown pipeline options: {', '.join(sorted(unknown))}",
            stacklevel=2,
        )


def load_spec(
    path: str | os.PathLike | None = "pipeline.yaml",
    overrides: Dict[str, Dict[str, Any]] | None = None,
) -> PipelineSpec:
    """Load YAML + env/CLI overrides into a validated PipelineSpec."""
    data = _read_yaml(path)
    opts = data.get("options") or {}
    sources: Iterable[Dict[str, Dict[str, Any]]] = (
        d for d in (opts, _env_overrides(), overrides) if d
    )
    acc: Dict[str, Dict[str, Any]] = {}
    merged = reduce(_merge_options, sources, acc)

    pipeline = data.get("pipeline") or []
    if pipeline:
        _warn_unknown_options(pipeline, merged)
    return PipelineSpec.model_validate({**data, "pipeline": pipeline, "options": merged})
