"""CLI for the metasearch answering agent.

Thin interface layer: parse args, build the use case via the composition
root, render the event stream.
"""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence

from metasearch_agent.application.dto.answer_dto import AnswerRequest
from metasearch_agent.config import composition
from metasearch_agent.config.prompts import FOCUS_MODES
from metasearch_agent.config.settings import AppSettings
from metasearch_agent.domain.events import (
    EndEvent,
    ErrorEvent,
    ResponseEvent,
    SourcesEvent,
    is_terminal,
)
from metasearch_agent.domain.types import OptimizationMode


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        "metasearch-agent", description="Answer a question from web search results"
    )
    parser.add_argument("--query", required=True, help="Question to answer")
    parser.add_argument("--focus", choices=sorted(FOCUS_MODES), default="web")
    parser.add_argument(
        "--mode", choices=[m.value for m in OptimizationMode], default="balanced"
    )
    parser.add_argument(
        "--file-id", action="append", default=[], dest="file_ids", help="Uploaded file id"
    )
    parser.add_argument("--max-sources", type=int, default=None)
    parser.add_argument("--max-tokens", type=int, default=None)
    parser.add_argument("--include-images", action="store_true")
    parser.add_argument("--include-videos", action="store_true")
    parser.add_argument("--system-instructions", default="")
    parser.add_argument("--log-level", default=None, help="Defaults to LOG_LEVEL")
    parser.add_argument("--json", action="store_true", help="One JSON object per event")
    return parser


async def run(args: argparse.Namespace, settings: AppSettings) -> int:
    agent = composition.build_answer_use_case(args.focus, settings)
    request = AnswerRequest(
        message=args.query,
        optimization_mode=OptimizationMode.parse(args.mode),
        file_ids=tuple(args.file_ids),
        system_instructions=args.system_instructions,
        max_sources=args.max_sources,
        max_tokens=args.max_tokens,
        include_images=args.include_images,
        include_videos=args.include_videos,
    )

    exit_code = 0
    async for event in agent.stream(request):
        if args.json:
            print(json.dumps(event.to_dict(), ensure_ascii=False), flush=True)
        elif isinstance(event, SourcesEvent):
            print("=" * 80)
            print("SOURCES:")
            print("=" * 80)
            for i, doc in enumerate(event.documents, 1):
                print(f"[{i}] {doc.title} ({doc.url})")
            print()
        elif isinstance(event, ResponseEvent):
            print(event.text, end="", flush=True)
        elif isinstance(event, EndEvent):
            print()
        if isinstance(event, ErrorEvent):
            if not args.json:
                print(f"\n[ERROR] {event.error_type}: {event.message}", file=sys.stderr)
            exit_code = 1
        if is_terminal(event):
            break
    return exit_code


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = AppSettings()
    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(run(args, settings))
    except ValueError as ex:
        print(f"[ERROR] {ex}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
