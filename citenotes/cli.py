"""Render a document's citation markers and reference lists.

Local/offline helper:
- reads a document containing <ref> and <references> tags
- renders it with a fresh citation processor
- writes the result to stdout or --output
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from typing import List, Optional

from loguru import logger

from citenotes.citations.cache import FileRenderCache
from citenotes.citations.markup import TagHost
from citenotes.citations.processor import CiteProcessor, ProcessorOptions
from citenotes.utils.validation import validate_document_path, validate_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render citation markers and reference lists")
    parser.add_argument("input", help="Path to the document to render")
    parser.add_argument("--output", help="Write the rendered document here (default: stdout)")
    parser.add_argument("--page-id", default="0", help="Document identifier used in cache keys (default: 0)")
    parser.add_argument(
        "--cache-dir",
        help="Cache rendered reference lists in this directory (enables caching)",
    )
    parser.add_argument("--no-groups", action="store_true", help="Reject the group attribute")
    parser.add_argument(
        "--section-preview",
        action="store_true",
        help="Render as a partial preview; unrendered groups and region errors are not reported",
    )
    parser.add_argument(
        "--auto-render-default-group",
        action="store_true",
        help="Append the default group's list at the end instead of reporting it as missing",
    )
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level to stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logger.remove()
        logger.add(sys.stderr, level="DEBUG")

    try:
        source = validate_document_path(args.input)
        cache_dir = validate_path(args.cache_dir, must_be_dir=True) if args.cache_dir else None
        out_path = validate_path(args.output) if args.output else None
        document = source.read_text(encoding="utf-8")
    except (ValueError, FileNotFoundError, UnicodeDecodeError) as e:
        print(str(e), file=sys.stderr)
        return 2

    options = ProcessorOptions()
    if args.no_groups:
        options = replace(options, allow_groups=False)
    if args.auto_render_default_group:
        options = replace(options, auto_render_default_group=True)

    cache = None
    if cache_dir is not None:
        cache = FileRenderCache(str(cache_dir))
        options = replace(options, cache_references=True)

    host = TagHost(page_id=args.page_id, section_preview=args.section_preview)
    processor = CiteProcessor(options, cache=cache).install(host)

    rendered = host.render(document)

    if out_path is not None:
        out_path.write_text(rendered, encoding="utf-8")
        logger.info(f"Rendered {source} -> {out_path} ({processor.registry.call_count} citation calls)")
    else:
        sys.stdout.write(rendered)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
