# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""ContentMap CLI: run the pipeline on saved HTML files.

Usage:
    contentmap extract FILE --url URL [--max-length N] [--preview] [--json] [--log-level L] [--log-json]
    contentmap inspect FILE --url URL [--log-level L] [--log-json]

FILE may be ``-`` to read from stdin. Fetching pages is not part of this tool.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from contentmap.config import ExtractionConfig
from contentmap.errors import ConfigError, DocumentParseError
from contentmap.logging_config import configure


def _require_cli_deps() -> None:
    """Check that CLI optional dependencies are installed."""
    try:
        from tabulate import tabulate  # noqa: F401
    except ImportError as e:
        print(
            f"Missing CLI dependency: {e.name}\nInstall with: pip install contentmap[cli]",
            file=sys.stderr,
        )
        sys.exit(1)


def _read_html(path_str: str) -> str:
    if path_str == "-":
        return sys.stdin.read()
    path = Path(path_str)
    if not path.is_file():
        print(f"Error: file not found: {path}", file=sys.stderr)
        sys.exit(1)
    return path.read_text(encoding="utf-8", errors="replace")


def _load(args: argparse.Namespace):
    """Read input, validate it parses, build config. Exits on user errors."""
    from contentmap.dom import Document

    try:
        config = ExtractionConfig.from_env()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    html = _read_html(args.file)
    try:
        doc = Document.parse(html, strict=True)
    except DocumentParseError as e:
        print(f"Error: {args.file} is not usable HTML: {e}", file=sys.stderr)
        sys.exit(1)
    if doc.is_empty:
        print(f"Warning: {args.file} has no visible body content", file=sys.stderr)
    return html, doc, config


def _shorten(value: object, width: int = 70) -> str:
    text = "" if value is None else str(value)
    return text if len(text) <= width else text[: width - 3] + "..."


def cmd_extract(args: argparse.Namespace) -> None:
    from contentmap.pipeline import ContentPipeline
    from contentmap.serializer import to_json

    html, _, config = _load(args)
    max_length = args.max_length
    if max_length is None and args.preview:
        max_length = config.preview_max_length
    if max_length is not None and max_length <= 0:
        print("Error: --max-length must be a positive integer.", file=sys.stderr)
        sys.exit(2)

    content, suggestions = ContentPipeline(config).process_with_advice(html, args.url, max_length)

    if args.json:
        print(to_json(content))
        return

    _require_cli_deps()
    from tabulate import tabulate

    meta = content.metadata
    analysis = meta.content_analysis
    rows = [
        ("Title", _shorten(meta.title)),
        ("Description", _shorten(meta.description)),
        ("Canonical URL", _shorten(meta.canonical_url)),
        ("Language", meta.language),
        ("Author", meta.author.name if meta.author else ""),
        ("Published", meta.publish_date or ""),
        ("Modified", meta.modified_date or ""),
        ("Publisher", meta.business.name if meta.business else ""),
        ("Sections", len(meta.article_sections)),
        ("Tags", _shorten(", ".join(meta.tags))),
        ("Type", analysis.type.value),
        ("Words", analysis.word_count),
        ("Reading time", f"{analysis.reading_time} min"),
        ("Length", f"{content.original_length:,} -> {content.processed_length:,} chars"),
        ("Tokens (est.)", f"~{content.token_estimate:,}"),
    ]
    print(tabulate(rows, tablefmt="simple"))

    if suggestions:
        print("\nSuggestions:")
        print(tabulate([(s.code.value, s.message) for s in suggestions], headers=["code", "message"]))

    print("\nClean text:\n")
    print(content.clean_text)


def cmd_inspect(args: argparse.Namespace) -> None:
    _require_cli_deps()
    from tabulate import tabulate

    from contentmap.metadata.resolver import MetadataResolver

    _, doc, config = _load(args)
    trace: list = []
    MetadataResolver(config).resolve(doc, args.url, trace=trace)
    rows = [(field, source or "(unresolved)") for field, source in trace]
    print(tabulate(rows, headers=["field", "source"], tablefmt="simple"))


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("file", metavar="FILE", help="Saved HTML file, or - for stdin")
    p.add_argument("--url", required=True, metavar="URL", help="Source URL the HTML was fetched from")
    p.add_argument("--log-level", default="WARNING", help="Log level (default: WARNING)")
    p.add_argument("--log-json", action="store_true", help="Emit logs as JSON lines")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ContentMap CLI", prog="contentmap")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_extract = subparsers.add_parser(
        "extract",
        help="Run the pipeline and print the result",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
examples:
  %(prog)s page.html --url https://example.com/blog/post          Human report
  %(prog)s page.html --url https://example.com/blog/post --json   JSON result
  %(prog)s - --url https://example.com --preview < page.html      Preview budget""",
    )
    _add_common(p_extract)
    p_extract.add_argument("--max-length", type=int, metavar="N", help="Truncation budget in characters")
    p_extract.add_argument("--preview", action="store_true", help="Use the preview budget instead of the default")
    p_extract.add_argument("--json", action="store_true", help="Print the JSON result")

    p_inspect = subparsers.add_parser("inspect", help="Show which source resolved each metadata field")
    _add_common(p_inspect)
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure(json_output=args.log_json, level=args.log_level)

    commands = {"extract": cmd_extract, "inspect": cmd_inspect}
    try:
        commands[args.command](args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
