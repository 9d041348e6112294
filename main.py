"""
Command-line entry point: summarize a saved end-of-game payload.

    python main.py payload.json --viewer "Faker#KR1" --clutch clutch.json
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from src.config.settings import get_settings
from src.core.errors import MalformedPayloadError
from src.core.observability import (
    clear_correlation_id,
    configure_stdlib_json_logging,
    set_correlation_id,
)
from src.core.scoring import parse_clutch_stats, summarize_match

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_MALFORMED = 2


def setup_logging(log_file: str | None = None) -> None:
    """Set up structured JSON logging on stderr (stdout carries the summary)."""
    settings = get_settings()
    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
    configure_stdlib_json_logging(
        level="DEBUG" if settings.app_debug else settings.app_log_level,
        file_target=log_file,
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Summarize a League of Legends end-of-game stats payload"
    )
    parser.add_argument("payload", type=Path, help="End-of-game JSON payload")
    parser.add_argument(
        "--viewer",
        default=None,
        help="Viewing player's display name (defaults to MY_SUMMONER_NAME)",
    )
    parser.add_argument("--clutch", type=Path, default=None, help="Clutch stats JSON file")
    parser.add_argument("--output", type=Path, default=None, help="Write summary JSON here")
    parser.add_argument("--log-file", default=None, help="Also append logs to this file")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_file)
    logger = logging.getLogger(__name__)
    settings = get_settings()

    try:
        raw_payload = args.payload.read_bytes()
        clutch = (
            parse_clutch_stats(json.loads(args.clutch.read_text(encoding="utf-8")))
            if args.clutch
            else None
        )
    except (OSError, json.JSONDecodeError) as e:
        logger.error("input_unreadable: %s", e)
        print(f"Cannot read input: {e}", file=sys.stderr)
        return EXIT_USAGE

    set_correlation_id(args.payload.stem)
    try:
        summary = summarize_match(
            raw_payload,
            thresholds=settings.afk_thresholds,
            viewer_name=args.viewer if args.viewer is not None else settings.viewer_summoner_name,
            clutch_stats=clutch,
        )
    except MalformedPayloadError as e:
        print(f"Malformed payload: {e}", file=sys.stderr)
        return EXIT_MALFORMED
    finally:
        clear_correlation_id()

    if summary is None:
        print("Nothing to summarize: the match has no participants.")
        return EXIT_OK

    rendered = json.dumps(summary.to_payload(), indent=2, ensure_ascii=False)
    if args.output:
        args.output.write_text(rendered + "\n", encoding="utf-8")
        logger.info("summary_written", extra={"path": str(args.output)})
    else:
        print(rendered)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
