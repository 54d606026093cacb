# src/main.py - v1
"""CLI entry point: upload, get, list, analyze, wordcloud commands.

Usage:
    textscope upload <file>
    textscope get <id> [-o path]
    textscope list
    textscope info <id>
    textscope analyze <id> [--json]
    textscope wordcloud <id> -o cloud.png
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from textscope.api.facade import TextScope
from textscope.api.models import Outcome
from textscope.config.settings import Settings
from textscope.core.models import AnalysisReport
from textscope.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from textscope.config.settings import load_settings
    from textscope.logging.logger import setup_logging

    settings = load_settings()
    setup_logging(
        level="DEBUG" if args.verbose else settings.log_level,
        log_format="text",
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )

    try:
        return asyncio.run(_dispatch(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="textscope",
        description=f"textscope v{__version__} - deduplicating text store and analyzer",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    p_upload = subparsers.add_parser("upload", help="Store a text file")
    p_upload.add_argument("file", type=Path, help="Path to file")
    p_upload.add_argument("--name", default=None, help="Display name (default: file name)")
    p_upload.set_defaults(func=_cmd_upload)

    p_get = subparsers.add_parser("get", help="Fetch a stored file")
    p_get.add_argument("document_id", help="Document id")
    p_get.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Write content here (default: stdout)",
    )
    p_get.set_defaults(func=_cmd_get)

    p_list = subparsers.add_parser("list", help="List stored files")
    p_list.set_defaults(func=_cmd_list)

    p_info = subparsers.add_parser("info", help="Show a stored file's name and creation time")
    p_info.add_argument("document_id", help="Document id")
    p_info.set_defaults(func=_cmd_info)

    p_analyze = subparsers.add_parser("analyze", help="Analyze a stored file")
    p_analyze.add_argument("document_id", help="Document id")
    p_analyze.add_argument("--json", action="store_true", help="Print the report as JSON")
    p_analyze.set_defaults(func=_cmd_analyze)

    p_cloud = subparsers.add_parser("wordcloud", help="Render a word cloud image")
    p_cloud.add_argument("document_id", help="Document id")
    p_cloud.add_argument(
        "-o", "--output", type=Path, default=Path("wordcloud.png"),
        help="Image path (default: ./wordcloud.png)",
    )
    p_cloud.set_defaults(func=_cmd_wordcloud)

    return parser


async def _dispatch(args: argparse.Namespace, settings: Settings) -> int:
    scope = TextScope.from_settings(settings)
    try:
        return await args.func(scope, args)
    finally:
        await scope.aclose()


async def _cmd_upload(scope: TextScope, args: argparse.Namespace) -> int:
    file_path: Path = args.file
    if not file_path.is_file():
        logger.error("File not found: %s", file_path)
        return 1
    outcome = await scope.upload(args.name or file_path.name, file_path.read_bytes())
    if not outcome.ok:
        return _report_failure(outcome)
    result = outcome.value
    status = "already stored" if result.deduplicated else "stored"
    print(f"{result.id}  {result.name}  ({status} at {result.location})")
    return 0


async def _cmd_get(scope: TextScope, args: argparse.Namespace) -> int:
    outcome = await scope.get_document(args.document_id)
    if not outcome.ok:
        return _report_failure(outcome)
    doc = outcome.value
    if args.output is None:
        sys.stdout.buffer.write(doc.content)
        sys.stdout.flush()
    else:
        args.output.write_bytes(doc.content)
        print(f"Wrote {len(doc.content)} bytes to {args.output} (sha256 {doc.hash})")
    return 0


async def _cmd_list(scope: TextScope, args: argparse.Namespace) -> int:
    outcome = await scope.list_documents()
    if not outcome.ok:
        return _report_failure(outcome)
    for summary in outcome.value:
        print(f"{summary.id}  {summary.created_at.isoformat()}  {summary.name}")
    return 0


async def _cmd_info(scope: TextScope, args: argparse.Namespace) -> int:
    outcome = await scope.describe_document(args.document_id)
    if not outcome.ok:
        return _report_failure(outcome)
    summary = outcome.value
    print(f"{summary.id}  {summary.created_at.isoformat()}  {summary.name}")
    return 0


async def _cmd_analyze(scope: TextScope, args: argparse.Namespace) -> int:
    outcome = await scope.analyze(args.document_id)
    if not outcome.ok:
        return _report_failure(outcome)
    if args.json:
        print(outcome.value.model_dump_json(indent=2))
    else:
        _print_report(outcome.value)
    return 0


async def _cmd_wordcloud(scope: TextScope, args: argparse.Namespace) -> int:
    outcome = await scope.get_word_cloud(args.document_id)
    if not outcome.ok:
        return _report_failure(outcome)
    args.output.write_bytes(outcome.value.content)
    print(f"Wrote {outcome.value.content_type} word cloud to {args.output}")
    return 0


def _report_failure(outcome: Outcome) -> int:
    """Print the error kind and detail, return exit code 1."""
    error = outcome.error.value if outcome.error else "unknown"
    print(json.dumps({"error": error, "detail": outcome.detail}), file=sys.stderr)
    return 1


def _print_report(report: AnalysisReport) -> None:
    """Print a human-readable summary of an AnalysisReport."""
    print(f"\nAnalysis of {report.name}:")
    print(f"  Document ID:  {report.id}")
    print(f"  SHA-256:      {report.hash}")
    print(f"  Words:        {report.word_count}")
    print(f"  Characters:   {report.character_count}")
    if report.top_words:
        print("  Top words:")
        for wf in report.top_words:
            print(f"    {wf.word:<20} {wf.count}")
    if report.similar_documents:
        print("  Similar documents:")
        for sim in report.similar_documents:
            print(f"    {sim.similarity_percentage:6.2f}%  {sim.document_id}  {sim.document_name}")
    else:
        print("  Similar documents: none")


if __name__ == "__main__":
    sys.exit(main())
