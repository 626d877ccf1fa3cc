"""Translate a search string from the command line and print the backend request.

Example:
    python -m src.search.cli "u16 football near me" --lat 19.07 --lng 72.87 --trace
"""

from __future__ import annotations

import argparse
import json
import logging

from dotenv import load_dotenv

from src.app import create_app
from src.config.logging import configure_logging
from src.config.settings import load_settings
from src.query.schema import QueryInput

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Translate a search query into a backend request.")
    parser.add_argument("query", help="Free-form search text, e.g. 'coach under 100 per session'.")
    parser.add_argument("--lat", type=float, default=None, help="User latitude.")
    parser.add_argument("--lng", type=float, default=None, help="User longitude.")
    parser.add_argument("--page", type=int, default=None)
    parser.add_argument("--hits-per-page", type=int, default=None)
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Also print the rules that fired.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""

    args = _build_parser().parse_args(argv)

    load_dotenv(".env")
    settings = load_settings()
    configure_logging(settings.log_level)
    app = create_app(settings)

    query = QueryInput.from_body(
        {
            "q": args.query,
            "lat": args.lat,
            "lng": args.lng,
            "page": args.page,
            "hitsPerPage": args.hits_per_page,
        }
    )
    result = app.translate(query)
    output: dict[str, object] = {
        "request": app.search_request(query, result).to_multi_search_body(),
    }
    if args.trace:
        output["trace"] = list(result.trace)
    logger.debug("cli translated query=%r", args.query)

    print(json.dumps(output, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
