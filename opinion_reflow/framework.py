"""Pass registry and the artifact handed from one stage to the next.

A pass is any object with ``name``/``input_type``/``output_type`` and a
``__call__(Artifact) -> Artifact``. Passes register themselves at import
time; :mod:`opinion_reflow.core` looks them up by name when it builds a run.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from types import MappingProxyType
from typing import Any, Dict, Mapping, Protocol, Sequence, Type, runtime_checkable


@dataclass(frozen=True)
class Artifact:
    """Document payload plus run metadata (``meta["metrics"][pass_name]``)."""

    payload: Any
    meta: Dict[str, Any] | None = None


@runtime_checkable
class Pass(Protocol):
    name: str
    input_type: Type
    output_type: Type

    def __call__(self, a: Artifact) -> Artifact:
        ...


_REGISTRY: Mapping[str, Pass] = MappingProxyType({})


def register(p: Pass) -> Pass:
    """Add ``p`` under its name, replacing any pass already registered there."""
    global _REGISTRY
    _REGISTRY = MappingProxyType({**_REGISTRY, p.name: p})
    return p


def registry() -> Dict[str, Pass]:
    return dict(_REGISTRY)


def run_step(name: str, a: Artifact) -> Artifact:
    return _REGISTRY[name](a)


def run_pipeline(steps: Sequence[str], a: Artifact) -> Artifact:
    """Apply the named registered passes to ``a`` in order."""
    return reduce(lambda acc, step: run_step(step, acc), steps, a)


def metrics(a: Artifact) -> Dict[str, Dict[str, Any]]:
    """Per-pass counters recorded on ``a`` so far."""
    return dict((a.meta or {}).get("metrics") or {})


def with_metrics(meta: Mapping[str, Any] | None, name: str, **counts: Any) -> Dict[str, Any]:
    """Return a copy of ``meta`` with ``counts`` merged into ``metrics[name]``."""
    recorded = dict((meta or {}).get("metrics") or {})
    recorded[name] = {**recorded.get(name, {}), **counts}
    return {**(meta or {}), "metrics": recorded}
