from __future__ import annotations

import json
import logging
import sys
import time
from collections.abc import Callable, Iterator, Mapping
from importlib import import_module
from pathlib import Path
from typing import Any

import typer

from opinion_reflow.config import load_spec
from opinion_reflow.framework import metrics

logger = logging.getLogger(__name__)

_ADAPTERS: Mapping[str, str] = {
    ".pdf": "opinion_reflow.adapters.io_pdf",
    ".json": "opinion_reflow.adapters.io_json",
}


def _spec_path_candidates(path: str | Path) -> Iterator[Path]:
    """Yield potential spec locations without hitting the filesystem."""
    candidate = Path(path)
    pkg_dir = Path(__file__).resolve().parent
    yield from (
        candidate,
        pkg_dir.parent / candidate,
        pkg_dir / candidate,
    )


def _resolve_spec_path(path: str | Path) -> Path:
    """Pick the first existing pipeline spec from candidate locations."""
    return next((p for p in _spec_path_candidates(path) if p.exists()), Path(path))


def _format_timings(timings: Mapping[str, float]) -> str:
    """Return ``timings`` as newline-delimited ``name: seconds`` strings."""
    return "\n".join(f"{n}: {t:.3f}s" for n, t in timings.items())


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _exit_with_error(exc: Exception) -> None:
    """Print ``exc`` to stderr and exit with status 1."""
    print(f"error: {exc}", file=sys.stderr)
    raise typer.Exit(1)


def _safe(func: Callable[[], None]) -> None:
    """Invoke ``func`` and exit non-zero on any exception."""
    try:
        func()
    except Exception as exc:
        _exit_with_error(exc)


def _adapter_for(path: Path) -> Any:
    module = _ADAPTERS.get(path.suffix.lower())
    if module is None:
        raise ValueError(f"unsupported input type: {path.suffix or path.name}")
    return import_module(module)


def _run_parse(
    input_path: Path,
    out: Path | None,
    source_url: str,
    max_pages: int | None,
    spec: str,
    verbose: bool,
) -> None:
    from opinion_reflow.adapters import emit_json
    from opinion_reflow.core import run_parse

    _configure_logging(verbose)
    s = load_spec(_resolve_spec_path(spec))
    payload = _adapter_for(input_path).read(str(input_path), max_pages=max_pages)
    doc, artifact, timings = run_parse(payload, source_url, s, max_pages, timer=time.perf_counter)
    logger.debug("pass metrics: %s", metrics(artifact))
    emit_json.write(doc, str(out) if out else None)
    if verbose:
        print(_format_timings(timings), file=sys.stderr)


def _run_inspect() -> None:
    from opinion_reflow.core import run_inspect

    print(json.dumps(run_inspect(), indent=2))


app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.command()
def parse(
    input_path: Path = typer.Argument(..., dir_okay=False),
    out: Path | None = typer.Option(None, "--out"),
    source_url: str = typer.Option("", "--source-url"),
    max_pages: int | None = typer.Option(None, "--max-pages", min=1),
    spec: str = typer.Option("pipeline.yaml", "--spec"),
    verbose: bool = typer.Option(False, "--verbose"),
) -> None:
    """Parse a slip opinion (.pdf or pre-extracted .json) into chapters."""
    _safe(lambda: _run_parse(input_path, out, source_url, max_pages, spec, verbose))


@app.command()
def inspect() -> None:
    """List registered passes."""
    _run_inspect()


if __name__ == "__main__":
    app()
