from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import tree_sitter as ts
import tree_sitter_typescript as tsts

from .fs_scan import to_posix
from .model import BATCH_FILES, CompilerOptions
from .resolver import resolve_module


logger = logging.getLogger(__name__)

TS_LANGUAGE = ts.Language(tsts.language_typescript())
TSX_LANGUAGE = ts.Language(tsts.language_tsx())
# Plain JavaScript may contain JSX, which only the TSX grammar accepts.
TSX_EXTENSIONS = (".tsx", ".jsx", ".js", ".mjs", ".cjs")
EXCLUDED_FILEPATHS = re.compile(r"(^|/)node_modules/")

_parsers: Dict[str, ts.Parser] = {}


def _get_parser(file_name: str) -> ts.Parser:
	key = "tsx" if file_name.lower().endswith(TSX_EXTENSIONS) else "typescript"
	parser = _parsers.get(key)
	if parser is None:
		parser = ts.Parser(TSX_LANGUAGE if key == "tsx" else TS_LANGUAGE)
		_parsers[key] = parser
	return parser


@dataclass
class SourceFile:
	"""One parsed file plus the files its imports resolved to."""

	file_name: str
	source: bytes
	tree: ts.Tree
	resolved_modules: Dict[str, str] = field(default_factory=dict)

	@property
	def root_node(self) -> ts.Node:
		return self.tree.root_node


def parse_source(file_name: str, text: str) -> SourceFile:
	source = text.encode("utf-8")
	return SourceFile(file_name=file_name, source=source, tree=_get_parser(file_name).parse(source))


def string_value(node: ts.Node) -> str:
	text = node.text.decode("utf-8", "replace")
	if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"`":
		return text[1:-1]
	return text


def module_specifier(node: ts.Node) -> Optional[str]:
	"""Return the string specifier of an import or re-export statement, if any."""
	source = node.child_by_field_name("source")
	if source is None:
		for child in node.named_children:
			if child.type == "import_require_clause":
				source = child.child_by_field_name("source")
				break
	if source is None or source.type != "string":
		return None
	return string_value(source)


def import_specifiers(root: ts.Node) -> List[str]:
	specifiers: List[str] = []
	for node in root.named_children:
		if node.type not in ("import_statement", "export_statement"):
			continue
		specifier = module_specifier(node)
		if specifier and specifier not in specifiers:
			specifiers.append(specifier)
	return specifiers


def create_program(file_names: Sequence[str], options: CompilerOptions) -> List[SourceFile]:
	"""Parse ``file_names`` in order and resolve each file's imports."""
	program: List[SourceFile] = []
	cache: Dict[Tuple[str, str], Optional[str]] = {}
	for file_name in file_names:
		if EXCLUDED_FILEPATHS.search(to_posix(file_name)):
			continue
		with open(file_name, "r", encoding="utf-8", errors="replace", newline="") as fh:
			source_file = parse_source(file_name, fh.read())
		for specifier in import_specifiers(source_file.root_node):
			key = (os.path.dirname(file_name), specifier)
			if key not in cache:
				cache[key] = resolve_module(specifier, file_name, options)
			if cache[key]:
				source_file.resolved_modules[specifier] = cache[key]
		program.append(source_file)
	return program


def iter_batches(file_names: Sequence[str], batch_size: int = BATCH_FILES) -> Iterator[Sequence[str]]:
	for start in range(0, len(file_names), batch_size):
		yield file_names[start:start + batch_size]


def compile_batches(
	file_names: Sequence[str],
	options: CompilerOptions,
	batch_size: int = BATCH_FILES,
) -> Iterator[List[SourceFile]]:
	"""Parse files a batch at a time so only one batch of trees is alive at once."""
	for index, batch in enumerate(iter_batches(file_names, batch_size)):
		logger.debug("processing batch: %d (%d files)", index, len(batch))
		yield create_program(batch, options)
