from __future__ import annotations

import argparse
import logging
import sys
from html import escape
from pathlib import Path

from cv_analyzer.widget import RelayClient, UploadController, UploadedDocument
from cv_analyzer.widget.client import DEFAULT_RELAY_URL

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>CV Analysis: {title}</title>
<link rel="stylesheet" href="{server}/styles.css">
</head>
<body>
<main class="results-content">
{body}
</main>
</body>
</html>
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Analyze a CV through the relay and render the result as HTML.")
    parser.add_argument("file", help="CV file (.pdf, .txt or .docx)")
    parser.add_argument("--position", default=None, help="Target role to tailor the analysis to")
    parser.add_argument("--requirements", default=None, help="Path to a text file with job requirements")
    parser.add_argument("--server", default=DEFAULT_RELAY_URL, help="Relay base URL")
    parser.add_argument("--out", default=None, help="Write a standalone HTML page here instead of stdout")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log request details")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(message)s")

    path = Path(args.file)
    if not path.is_file():
        print(f"error: file not found: {path}", file=sys.stderr)
        return 2

    requirements_path = Path(args.requirements) if args.requirements else None
    if requirements_path is not None and not requirements_path.is_file():
        print(f"error: file not found: {requirements_path}", file=sys.stderr)
        return 2

    with RelayClient(args.server) as relay:
        controller = UploadController(relay)
        if not controller.select_file(UploadedDocument.from_path(path)):
            print(f"error: {controller.state.error}", file=sys.stderr)
            return 2
        controller.set_position(args.position)
        if requirements_path is not None:
            controller.set_job_requirements(requirements_path.read_text(encoding="utf-8"))

        if not controller.analyze():
            print(f"error: {controller.state.error}", file=sys.stderr)
            return 1

    fragment = controller.state.result_html or ""
    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        page = PAGE_TEMPLATE.format(title=escape(path.name), server=args.server.rstrip("/"), body=fragment)
        out_path.write_text(page, encoding="utf-8")
    else:
        print(fragment)
    return 0


if __name__ == "__main__":
    sys.exit(main())
