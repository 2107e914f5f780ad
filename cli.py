from __future__ import annotations

import argparse
import logging
import os
import sys
import traceback
from typing import List

import uvicorn

from ideation.config import load_config
from ideation.engine import IdeationEngine
from ideation.errors import IdeationError
from ideation.log import configure_logging
from ideation.model import Suggestion, Summary
from ideation.summarize import summarize_suggestion


def print_summary(summary: Summary) -> None:
	print("\nAnalysis Summary\n")
	print(f"Total Issues: {summary.total}\n")
	print("By Severity:")
	for severity, count in summary.by_severity.items():
		print(f"  {severity.capitalize():<10}{count}")
	print("\nBy Category:")
	labels = {"security": "Security", "performance": "Performance", "docs": "Documentation", "debt": "Tech Debt"}
	for category, count in summary.by_category.items():
		print(f"  {labels[category]:<15}{count}")


def print_top(suggestions: List[Suggestion]) -> None:
	print(f"\nTop {len(suggestions)} Recommendations\n")
	for idx, s in enumerate(suggestions, start=1):
		print(f"{idx}. {summarize_suggestion(s)}\n")


def _engine(args: argparse.Namespace) -> IdeationEngine:
	config = load_config(
		focus=args.focus,
		max_files=args.max_files,
		workers=args.workers,
		extra_ignore=args.ignore,
	)
	return IdeationEngine(os.path.abspath(args.path), config=config)


def cmd_analyze(args: argparse.Namespace) -> None:
	engine = _engine(args)
	result = engine.analyze_codebase()
	print_summary(engine.get_summary())

	default_name = "INSIGHTS.json" if args.format == "json" else "INSIGHTS.md"
	output = args.output or os.path.join(engine.project_root, default_name)
	engine.generate_report(output, args.format)
	print(f"\nAnalysis complete! Found {len(result.suggestions)} issues.")
	print(f"Report saved to: {output}")

	if result.suggestions:
		print_top(result.suggestions[:5])


def cmd_stats(args: argparse.Namespace) -> None:
	engine = _engine(args)
	engine.analyze_codebase()
	print_summary(engine.get_summary())


def cmd_serve(args: argparse.Namespace) -> None:
	uvicorn.run("api:app", host=args.host, port=args.port, reload=args.reload)


def _add_scan_options(p: argparse.ArgumentParser) -> None:
	p.add_argument("path", nargs="?", default=".", help="Path to project root")
	p.add_argument("--focus", help="security, performance, docs or debt (default: all)")
	p.add_argument("--max-files", type=int, dest="max_files")
	p.add_argument("--ignore", action="append", help="Extra glob to exclude, added to the defaults; repeatable")
	p.add_argument("--workers", type=int, help="Run analyzers on a thread pool of this size")
	p.add_argument("--debug", action="store_true")


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="ideate")
	sub = parser.add_subparsers(dest="cmd", required=True)

	pa = sub.add_parser("analyze", help="Analyze a project and write an insights report")
	_add_scan_options(pa)
	pa.add_argument("--output", "-o", help="Report path (default: PATH/INSIGHTS.md)")
	pa.add_argument("--format", choices=["markdown", "json"], default="markdown")
	pa.set_defaults(func=cmd_analyze)

	pst = sub.add_parser("stats", help="Print finding counts only")
	_add_scan_options(pst)
	pst.set_defaults(func=cmd_stats)

	ps = sub.add_parser("serve", help="Run FastAPI server")
	ps.add_argument("--host", default="127.0.0.1")
	ps.add_argument("--port", type=int, default=8000)
	ps.add_argument("--reload", action="store_true")
	ps.add_argument("--debug", action="store_true")
	ps.set_defaults(func=cmd_serve)
	return parser


def main(argv: List[str] | None = None) -> None:
	args = build_parser().parse_args(argv)
	configure_logging(logging.DEBUG if args.debug else logging.INFO)
	try:
		args.func(args)
	except (IdeationError, ValueError) as exc:
		print(f"Error running ideation analysis: {exc}", file=sys.stderr)
		if args.debug:
			traceback.print_exc()
		sys.exit(1)


if __name__ == "__main__":
	main()
