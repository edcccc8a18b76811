#!/usr/bin/env python3
"""CLI helper to look up review references and run reference-guided reviews."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Sequence

from review_refs import Category, InvalidCategory, ReferenceSelector, infer_categories

EXIT_MISSING_FILE = 1
EXIT_INVALID_CATEGORY = 2


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Look up C/C++ review references or run a review.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List categories and their reference documents.")

    show = subparsers.add_parser("show", help="Print the reference bundle for a category.")
    show.add_argument("category", help="One of: " + ", ".join(category.value for category in Category))
    show.add_argument(
        "--template-only",
        action="store_true",
        help="Print only the severity-tagged output template.",
    )

    infer = subparsers.add_parser("infer", help="Show which categories a request maps to.")
    infer.add_argument("request", nargs="+", help="Free-text review request.")

    review = subparsers.add_parser("review", help="Review a source file with the configured LLM provider.")
    review.add_argument("file", help="Path to the C/C++ source file to review.")
    review.add_argument(
        "--category",
        dest="categories",
        action="append",
        default=None,
        help="Reference category to apply (repeatable). Inferred from --request when omitted.",
    )
    review.add_argument("--request", default=None, help="Free-text review request.")
    review.add_argument(
        "--no-record",
        action="store_true",
        help="Do not append the finished review to the report log.",
    )

    history = subparsers.add_parser("history", help="List recorded reviews of a source file.")
    history.add_argument("file", help="Source file whose reports to list.")
    history.add_argument("--log", default=None, help="Report log to read. Defaults to REVIEW_REPORT_PATH.")
    return parser.parse_args(argv)


def _print_categories(selector: ReferenceSelector) -> None:
    for category in Category:
        doc_ids = ", ".join(document.doc_id for document in selector.select(category)) or "(none)"
        print(f"{category.value}: {doc_ids}")  # noqa: T201


def _run_review(args: argparse.Namespace) -> None:
    from review_agent import ReviewAgent

    path = Path(args.file)
    code = path.read_text(encoding="utf-8")
    agent = ReviewAgent()
    result = agent.review(code, request=args.request, categories=args.categories, filename=path.name)
    print(result.render())  # noqa: T201

    if result.clarifying_question or args.no_record:
        return
    report_id = agent.record_report(result, code=code, filename=path.name)
    print(f"\nReport recorded with id {report_id}")  # noqa: T201


def _print_history(args: argparse.Namespace) -> None:
    from review_agent import ReviewReportReader
    from review_agent.agent import DEFAULT_REPORT_PATH

    log_path = args.log or os.getenv("REVIEW_REPORT_PATH", DEFAULT_REPORT_PATH)
    filename = Path(args.file).name
    entries = ReviewReportReader(log_path).for_file(filename)
    if not entries:
        print(f"No reports recorded for {filename}")  # noqa: T201
        return
    for entry in entries:
        highest = entry.highest_severity()
        label = highest.value if highest else "clean"
        print(f"{entry.created_at} {entry.report_id} [{label}] {len(entry.findings)} finding(s)")  # noqa: T201


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "list":
            _print_categories(ReferenceSelector())
        elif args.command == "show":
            selector = ReferenceSelector()
            text = selector.template(args.category) if args.template_only else selector.render(args.category)
            print(text)  # noqa: T201
        elif args.command == "infer":
            categories = infer_categories(" ".join(args.request))
            print(", ".join(category.value for category in categories))  # noqa: T201
        elif args.command == "review":
            _run_review(args)
        elif args.command == "history":
            _print_history(args)
    except InvalidCategory as exc:
        print(f"error: {exc}", file=sys.stderr)  # noqa: T201
        return EXIT_INVALID_CATEGORY
    except FileNotFoundError as exc:
        print(f"error: {exc}", file=sys.stderr)  # noqa: T201
        return EXIT_MISSING_FILE
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
