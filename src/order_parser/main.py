"""Command line interface for the order text parser."""

from __future__ import annotations

import argparse
import json
import logging
import subprocess
import sys
from pathlib import Path
from typing import Iterable, Optional

from .config import Settings
from .core.pipeline import OrderService
from .core.review import confidence_level
from .core.utils import dump_json


LOGGER = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")


def load_settings(config_path: str) -> Settings:
    return Settings.load(config_path)


def read_text(source: Optional[str]) -> str:
    if not source or source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def command_parse(args: argparse.Namespace) -> None:
    service = OrderService(load_settings(args.config))
    result = service.parse(read_text(args.file))
    payload = result.to_dict()

    if args.output:
        dump_json(Path(args.output), payload)
        LOGGER.info("Parse result written to %s", args.output)

    if args.json:
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    metadata = result.metadata
    print(f"Date:     {metadata.date or '-'}")
    print(f"Name:     {metadata.name or '-'}")
    print(f"Phone:    {metadata.phone or '-'}")
    print(f"Address:  {metadata.address or '-'}")
    if metadata.matched_customer:
        print(f"Customer: {metadata.matched_customer.name} (#{metadata.matched_customer.id})")
    print()
    for item in result.items:
        if item.match is None:
            print(f"  {item.quantity} x {item.searched_name!r}: NOT FOUND")
            continue
        match = item.match
        print(
            f"  {item.quantity} x {match.product.name} "
            f"[{match.match_type}, {match.confidence:.0%} {confidence_level(match.confidence)}]"
        )
        for alternative in match.alternatives:
            print(f"      or {alternative.product.name} ({alternative.confidence:.0%})")
    print()
    print(f"Estimated total: {result.estimated_total()}")
    if result.unmatched:
        print(f"{len(result.unmatched)} line(s) need manual review")


def command_search(args: argparse.Namespace) -> None:
    service = OrderService(load_settings(args.config))
    results = service.search(args.query, limit=args.limit)
    if not results:
        print("No products found.")
        return
    for result in results:
        product = result.product
        print(f"{product.id}\t{product.name}\t{product.category}\t{product.price}\t{result.confidence:.2f}")


def command_api(args: argparse.Namespace) -> None:
    from .api.server import create_app

    settings = load_settings(args.config)
    app = create_app(settings)
    import uvicorn

    uvicorn.run(app, host=args.host, port=args.port)


def command_ui(args: argparse.Namespace) -> None:
    settings_path = Path(args.config).expanduser().resolve()
    dashboard_path = Path(__file__).resolve().parent / "ui" / "dashboard.py"
    cmd = [
        sys.executable,
        "-m",
        "streamlit",
        "run",
        str(dashboard_path),
        "--",
        "--config",
        str(settings_path),
    ]
    subprocess.run(cmd, check=False)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Order text parser")
    parser.add_argument("--config", default="config.yaml", help="Path to the configuration YAML file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_parser = subparsers.add_parser("parse", help="Parse an order message")
    parse_parser.add_argument("file", nargs="?", default="-", help="Text file with the message (stdin when omitted)")
    parse_parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parse_parser.add_argument("--output", default=None, help="Also write the JSON result to this file")
    parse_parser.set_defaults(func=command_parse)

    search_parser = subparsers.add_parser("search", help="Search the product catalog")
    search_parser.add_argument("query")
    search_parser.add_argument("--limit", type=int, default=None)
    search_parser.set_defaults(func=command_search)

    api_parser = subparsers.add_parser("api", help="Start the FastAPI server")
    api_parser.add_argument("--host", default="127.0.0.1")
    api_parser.add_argument("--port", type=int, default=8000)
    api_parser.set_defaults(func=command_api)

    ui_parser = subparsers.add_parser("ui", help="Launch the review dashboard")
    ui_parser.set_defaults(func=command_ui)

    return parser


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    configure_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
