"""Document I/O — declaration and graph documents in, rendered output out.

Declaration documents are the extractor's JSON: either a bare array of
declaration records or an object with a ``declarations`` array.  Graph
documents are the JSON written by ``digraphctl build --format json``.
Every failure surfaces as :class:`DocumentError` with a readable message.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from digraphctl.domain.types import Graph


class DocumentError(ValueError):
    """A document could not be read, decoded, or written."""


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


def parse_document(text: str, *, source: str = "<input>") -> Any:
    """Decode JSON *text*; *source* names the origin in error messages."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON in {source}: {exc.msg} (line {exc.lineno}, column {exc.colno})"
        raise DocumentError(msg) from exc


def read_document(path: Path) -> Any:
    """Read and decode the JSON document at *path*."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read {path}: {exc.strerror or exc}"
        raise DocumentError(msg) from exc
    return parse_document(text, source=str(path))


def declarations_from_document(document: Any) -> list[Any]:
    """Return the declaration records held by a decoded declaration document.

    Records are returned as-is; their contents are validated by the graph
    builder, not here.
    """
    if isinstance(document, list):
        return document
    if isinstance(document, dict) and isinstance(document.get("declarations"), list):
        return document["declarations"]
    msg = "Declaration document must be an array or an object with a 'declarations' array"
    raise DocumentError(msg)


def graph_from_document(document: Any) -> Graph:
    """Validate a decoded graph document into a :class:`Graph`."""
    if not isinstance(document, dict):
        raise DocumentError("Graph document must be an object")
    try:
        return Graph.model_validate(document)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        msg = f"Invalid graph document: {problems}"
        raise DocumentError(msg) from exc


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def write_output(path: Path, content: str) -> None:
    """Write rendered output to *path*.

    Creates parent directories if they don't exist.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        msg = f"Failed to write output file {path}: {exc.strerror or exc}"
        raise DocumentError(msg) from exc
