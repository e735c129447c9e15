from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from tsvast.errors import ConfigError
from tsvast.logs import configure_logging
from tsvast.model import SummarizerSettings
from tsvast.output import dump_document, summarize


logger = logging.getLogger("tsvast.cli")


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(
		prog="tsvast",
		description="Summarize a TypeScript project into a vast JSON tree",
	)
	parser.add_argument("path", nargs="?", help="Project dir")
	parser.add_argument("-p", "--project", help="Project dir")
	parser.add_argument("-d", "--debug", action="store_true", help="Debug logging")
	parser.add_argument("--add-unnamed-leafs", action="store_true", help="Keep leaf nodes that have no name")
	parser.add_argument(
		"--expand-functions",
		action="store_true",
		help="Descend into loops, calls, function expressions and blocks",
	)
	parser.add_argument("--flat", action="store_true", help="Name files by relative path instead of nesting dir nodes")
	parser.add_argument("--no-colors", action="store_true", help="Omit the color table from the output")
	parser.add_argument(
		"--drop-external-deps",
		action="store_true",
		help="Omit deps that leave the project root or point into node_modules",
	)
	return parser


def settings_from_args(args: argparse.Namespace) -> SummarizerSettings:
	settings = SummarizerSettings(
		expand_functions=args.expand_functions,
		add_unnamed_leafs=args.add_unnamed_leafs,
		flat_paths=args.flat,
		drop_external_deps=args.drop_external_deps,
	)
	if args.no_colors:
		settings.colors = None
	return settings


def cmd_summarize(args: argparse.Namespace) -> int:
	project = args.project or args.path
	settings = settings_from_args(args)
	try:
		document = summarize(project, settings)
	except ConfigError as exc:
		print(f"tsvast: {exc}", file=sys.stderr)
		return 1
	logger.debug("summary built for %s", project)
	print(dump_document(document))
	return 0


def main(argv: Optional[List[str]] = None) -> int:
	parser = build_parser()
	args = parser.parse_args(argv)
	if not (args.project or args.path):
		parser.print_help()
		return 0
	configure_logging(args.debug)
	return cmd_summarize(args)


if __name__ == "__main__":
	sys.exit(main())
