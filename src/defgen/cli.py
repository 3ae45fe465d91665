"""
Command line entry point.

    defgen module.yaml -f typescript -o module.d.ts
    defgen module.json -f webidl --64bit

Reads a serialized export graph (.json, .yaml or .yml), renders it and
writes the definitions to a file or stdout.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from defgen import __version__
from defgen.backends import DefinitionsFormat, generate_definitions
from defgen.model import ExportGraph
from defgen.serialization import GraphFormatError, graph_from_json, graph_from_yaml
from defgen.walker import DefinitionsError


logger = logging.getLogger("defgen")


def load_graph(path: Path) -> ExportGraph:
    """Load a graph, choosing the decoder by file extension."""
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return graph_from_json(text)
    return graph_from_yaml(text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="defgen",
        description="Generate WebIDL or TypeScript definitions from a module export graph",
    )
    parser.add_argument("graph", help="Path to the export graph (.json, .yaml, .yml)")
    parser.add_argument(
        "-f", "--format",
        choices=[f.value for f in DefinitionsFormat],
        default=DefinitionsFormat.TYPESCRIPT.value,
        help="Output format (default: typescript)",
    )
    parser.add_argument("-o", "--output", help="Output file (default: stdout)")
    parser.add_argument("--64bit", dest="is_64bit", action="store_true",
                        help="Force 64-bit representation of pointer-sized types")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        graph = load_graph(Path(args.graph))
        if args.is_64bit:
            graph.is_64bit = True
        text = generate_definitions(graph, DefinitionsFormat(args.format))
        if args.output:
            Path(args.output).write_text(text, encoding="utf-8")
            logger.info("Wrote %s definitions to %s", args.format, args.output)
        else:
            sys.stdout.write(text)
    except (DefinitionsError, GraphFormatError, OSError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
