from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from pydantic import ValidationError

from .compiler import compile_graph
from .config import GraphConfig
from .database import FmecaDatabase
from .errors import FmecaGraphError

logger = logging.getLogger("fmeca_graph")


def _load_json(path: Optional[str]) -> Any:
    if not path:
        return None
    return json.loads(Path(path).read_text(encoding="utf-8"))


def _load_config(config_path: Optional[str]) -> GraphConfig:
    cfg = GraphConfig().from_environment()
    if config_path:
        cfg = cfg.from_file(config_path)
    return cfg


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fmeca-graph", description="Compile an FMECA database into a styled graph")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("compile", help="Compile a database (JSON) into a graph")
    p.add_argument("database", type=str, help="FMECA database JSON file")
    p.add_argument("--values", type=str, default=None, help="JSON object {node: value or [values]}")
    p.add_argument("--config", type=str, default=None, help="JSON object of GraphConfig fields")
    p.add_argument("--weights", type=str, default=None, help="'auto' or a JSON file {node: weight}")
    p.add_argument("--names", type=str, default=None)
    p.add_argument("--placeholders", type=str, default=None)
    p.add_argument("--terminal-nodes", type=str, default=None)
    p.add_argument("--output", type=str, default=None, help="Write the compiled graph JSON here (default: stdout)")
    p.add_argument("--html", type=str, default=None, help="Also render the graph to an HTML file")
    p.add_argument("--title", type=str, default=None)
    return parser


def _compile(args: argparse.Namespace) -> int:
    cfg = _load_config(args.config)
    weights = args.weights
    if weights is not None and weights.strip().lower() != "auto":
        weights = _load_json(weights)

    graph = compile_graph(
        FmecaDatabase.from_source(args.database),
        _load_json(args.values),
        config=cfg,
        weights=weights,
        names=_load_json(args.names),
        placeholders=_load_json(args.placeholders),
        terminal_nodes=_load_json(args.terminal_nodes),
    )

    if args.output:
        graph.to_json(args.output)
        logger.info("compiled graph written to %s", args.output)
    else:
        sys.stdout.write(graph.to_json() + "\n")

    if args.html:
        # Deferred import: plotly figure building is only needed here
        from .render import PlotlyRenderer

        PlotlyRenderer(title=args.title).render(graph, path=args.html)
        logger.info("figure written to %s", args.html)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose > 1 else logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        if args.command == "compile":
            return _compile(args)
    except (FmecaGraphError, ValidationError, TypeError) as e:
        sys.stderr.write(f"error: {e}\n")
        return 2
    except (OSError, json.JSONDecodeError) as e:
        sys.stderr.write(f"error: cannot read input: {e}\n")
        return 2
    parser.error(f"unknown command {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
