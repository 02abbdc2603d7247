from __future__ import annotations

import argparse
import json
import logging
import os

import uvicorn

from codefacts.config import get_settings
from codefacts.dispatcher import analyze_path, analyze_tree
from codefacts.run import AnalysisRun


def cmd_analyze(args: argparse.Namespace) -> None:
	target = os.path.abspath(args.path)
	with AnalysisRun(get_settings()) as run:
		if os.path.isdir(target):
			payload = analyze_tree(target, run).model_dump()
		else:
			payload = analyze_path(target, run, args.language).model_dump()
	print(json.dumps(payload, indent=args.indent))


def cmd_serve(args: argparse.Namespace) -> None:
	uvicorn.run("api:app", host=args.host, port=args.port, reload=args.reload)


def main() -> None:
	parser = argparse.ArgumentParser(prog="codefacts")
	sub = parser.add_subparsers(dest="cmd", required=True)

	pa = sub.add_parser("analyze", help="Analyze a file or a directory tree and print facts JSON")
	pa.add_argument("path", help="Source file or repository root")
	pa.add_argument("--language", help="Language name or extension; inferred from the path by default")
	pa.add_argument("--indent", type=int, default=2)
	pa.set_defaults(func=cmd_analyze)

	ps = sub.add_parser("serve", help="Run FastAPI server")
	ps.add_argument("--host", default="127.0.0.1")
	ps.add_argument("--port", type=int, default=8000)
	ps.add_argument("--reload", action="store_true")
	ps.set_defaults(func=cmd_serve)

	args = parser.parse_args()
	logging.basicConfig(
		level=get_settings().log_level.upper(),
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)
	args.func(args)


if __name__ == "__main__":
	main()
