#!/usr/bin/env python3
"""
Command line entry point: analyze one domain and print the result.

Usage:
    python -m domain_analysis.main example.com [--no-stream] [--config PATH]
"""

from __future__ import annotations

import argparse
import asyncio
import sys

import structlog
import yaml

from .config import Configuration
from .llm.client import StreamingAnalysisClient
from .llm.exceptions import LLMError
from .llm.models import UpdateSnapshot
from .logging_utils import operation_context, setup_logging

logger = structlog.get_logger(__name__)


class TerminalRenderer:
    """Writes only the text added since the previous snapshot."""

    def __init__(self, stream=None) -> None:
        self.stream = stream or sys.stdout
        self._reasoning_len = 0
        self._final_len = 0
        self._answer_started = False

    def __call__(self, snapshot: UpdateSnapshot) -> None:
        new_reasoning = snapshot.reasoning_content[self._reasoning_len:]
        if new_reasoning:
            self.stream.write(new_reasoning)
        self._reasoning_len = len(snapshot.reasoning_content)

        new_final = snapshot.final_content[self._final_len:]
        if new_final:
            if not self._answer_started:
                self.stream.write("\n\n")
                self._answer_started = True
            self.stream.write(new_final)
        self._final_len = len(snapshot.final_content)

        self.stream.flush()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Analyze a domain name.")
    parser.add_argument("domain", help="Domain to analyze, e.g. example.com")
    parser.add_argument(
        "--no-stream",
        action="store_true",
        help="Wait for the complete answer instead of streaming it",
    )
    parser.add_argument("--config", help="Path to a YAML configuration file")
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    """Main entry point - returns the process exit code."""
    args = parse_args(argv)

    try:
        config = Configuration(args.config)
        setup_logging(config.get_logging_config().get("level", "INFO"))
        client_config = config.build_client_config()
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error("Invalid configuration", error=str(e))
        return 2

    async with StreamingAnalysisClient(client_config) as client:
        try:
            async with operation_context(
                "cli_analysis", context={"domain": args.domain}
            ):
                if args.no_stream:
                    print(await client.analyze(args.domain))
                else:
                    await client.analyze(args.domain, TerminalRenderer())
                    print()
        except LLMError as e:
            logger.error("Analysis failed", error=str(e))
            return 1

    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
