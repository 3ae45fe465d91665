"""Backends for definitions output (WebIDL, TypeScript)."""

from enum import Enum

from defgen.model import ExportGraph

from .typescript import TSDBuilder, generate_typescript
from .webidl import WebIDLBuilder, generate_webidl


class DefinitionsFormat(Enum):
    """Supported output formats."""
    WEBIDL = "webidl"
    TYPESCRIPT = "typescript"


def generate_definitions(graph: ExportGraph, fmt: DefinitionsFormat = DefinitionsFormat.TYPESCRIPT) -> str:
    """
    Generate definitions text for a graph in the requested format.

    Every call renders with fresh builder state.
    """
    if fmt == DefinitionsFormat.WEBIDL:
        return generate_webidl(graph)
    return generate_typescript(graph)


def save_definitions_file(
    graph: ExportGraph,
    filename: str,
    fmt: DefinitionsFormat = DefinitionsFormat.TYPESCRIPT,
) -> None:
    """
    Generate definitions and save to file.

    Args:
        graph: Export graph to render
        filename: Output file path (.webidl / .d.ts recommended)
        fmt: Output format
    """
    text = generate_definitions(graph, fmt=fmt)
    with open(filename, "w", encoding="utf-8") as f:
        f.write(text)


__all__ = [
    "DefinitionsFormat",
    "TSDBuilder",
    "WebIDLBuilder",
    "generate_definitions",
    "generate_typescript",
    "generate_webidl",
    "save_definitions_file",
]
