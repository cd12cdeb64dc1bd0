# Copyright (C) 2025 Check Mate Contributors
#
# This file is part of Check Mate Engine.
#
# Check Mate Engine is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# SPDX-License-Identifier: AGPL-3.0-or-later
"""
Check Mate CLI Commands

Commands:
- segment: Print the claims extracted from a text
- check: Fact-check a text against the Sonar oracle
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import NoReturn


def _read_text(args: argparse.Namespace) -> str:
    if args.text == "-":
        return sys.stdin.read()
    return args.text


def cmd_segment(args: argparse.Namespace) -> int:
    """Print one extracted claim per line."""
    from checkmate_core.analysis.claim_segmenter import segment

    claims = segment(_read_text(args))
    if not claims:
        print("No factual claims found.", file=sys.stderr)
        return 1

    for claim in claims:
        print(claim)
    return 0


async def _run_check(args: argparse.Namespace) -> int:
    from checkmate_core.adapters.memory import EnvSettingsStore
    from checkmate_core.config import CheckMateConfig
    from checkmate_core.engine import CheckMateEngine
    from checkmate_core.presentation.badge import badge_for
    from checkmate_core.presentation.share_text import format_results
    from checkmate_core.schema.messages import AnalysisRequest

    config = CheckMateConfig()
    settings = EnvSettingsStore(key_var=args.key_env, threshold=args.threshold)

    async with CheckMateEngine(config, settings=settings) as engine:
        request = AnalysisRequest(request_id=args.request_id, text=_read_text(args))
        signal = await engine.handle_request(request)

        if not signal.success:
            print(f"✗ {signal.error}", file=sys.stderr)
            return 1

        result = engine.results.get(request.request_id)
        if args.json:
            print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        else:
            print(format_results(result, with_citations=args.citations))
            badge = badge_for(result.status)
            print(f"\nStatus: {result.status.value} {badge.text}".rstrip())
        return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Fact-check a text and print the verdicts."""
    return asyncio.run(_run_check(args))


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="checkmate",
        description="Extract factual claims from text and fact-check them",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # segment command
    segment_parser = subparsers.add_parser(
        "segment",
        help="Print the claims extracted from TEXT",
    )
    segment_parser.add_argument(
        "text",
        help="Text to segment ('-' reads stdin)",
    )
    segment_parser.set_defaults(func=cmd_segment)

    # check command
    check_parser = subparsers.add_parser(
        "check",
        help="Fact-check TEXT against the Sonar oracle",
    )
    check_parser.add_argument(
        "text",
        help="Text to check ('-' reads stdin)",
    )
    check_parser.add_argument(
        "--threshold", "-t",
        type=float,
        help="Confidence threshold (clamped to 0.5-0.9, default 0.7)",
    )
    check_parser.add_argument(
        "--key-env",
        default="CHECKMATE_API_KEY",
        help="Environment variable holding the API key (default: CHECKMATE_API_KEY)",
    )
    check_parser.add_argument(
        "--request-id",
        default="cli",
        help="Request identifier stored with the result",
    )
    check_parser.add_argument(
        "--citations",
        action="store_true",
        help="List citations under each claim",
    )
    check_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full result as JSON",
    )
    check_parser.set_defaults(func=cmd_check)

    return parser


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        exit_code = args.func(args)
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
