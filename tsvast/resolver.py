from __future__ import annotations

import json
import logging
import os
from typing import Dict, List, Optional, Sequence, Tuple

from .fs_scan import supported_extensions
from .model import CompilerOptions


logger = logging.getLogger(__name__)

PACKAGE_ENTRY_FIELDS = ("types", "typings", "main")
DECLARATION_FIRST = (".d.ts", ".ts", ".tsx")
JS_SPECIFIER_EXTENSIONS = (".js", ".jsx", ".mjs", ".cjs")


def is_relative_specifier(specifier: str) -> bool:
	return specifier.startswith(("./", "../", "/")) or specifier in (".", "..")


def _probe_file(base: str, extensions: Sequence[str]) -> Optional[str]:
	if os.path.isfile(base) and base.lower().endswith(tuple(extensions)):
		return base
	for ext in extensions:
		if os.path.isfile(base + ext):
			return base + ext
	# "./foo.js" written in a TypeScript source points at foo.ts.
	stem, ext = os.path.splitext(base)
	if ext.lower() in JS_SPECIFIER_EXTENSIONS:
		for candidate in DECLARATION_FIRST:
			if os.path.isfile(stem + candidate):
				return stem + candidate
	return None


def _read_package_entry(directory: str) -> Optional[str]:
	manifest = os.path.join(directory, "package.json")
	if not os.path.isfile(manifest):
		return None
	try:
		with open(manifest, "r", encoding="utf-8") as fh:
			payload = json.load(fh)
	except (OSError, ValueError) as exc:
		logger.debug("ignoring unreadable %s: %s", manifest, exc)
		return None
	if not isinstance(payload, dict):
		return None
	for field in PACKAGE_ENTRY_FIELDS:
		entry = payload.get(field)
		if isinstance(entry, str) and entry:
			return entry
	return None


def _probe_directory(base: str, extensions: Sequence[str]) -> Optional[str]:
	if not os.path.isdir(base):
		return None
	entry = _read_package_entry(base)
	if entry:
		target = os.path.normpath(os.path.join(base, entry))
		found = _probe_file(target, extensions) or _probe_index(target, extensions)
		if found:
			return found
	return _probe_index(base, extensions)


def _probe_index(base: str, extensions: Sequence[str]) -> Optional[str]:
	if not os.path.isdir(base):
		return None
	for ext in extensions:
		candidate = os.path.join(base, "index" + ext)
		if os.path.isfile(candidate):
			return candidate
	return None


def _load_as_file_or_directory(base: str, extensions: Sequence[str]) -> Optional[str]:
	return _probe_file(base, extensions) or _probe_directory(base, extensions)


def match_path_alias(specifier: str, paths: Dict[str, List[str]]) -> List[str]:
	"""Expand a specifier through tsconfig ``paths``, longest prefix first."""
	matches: List[Tuple[int, List[str]]] = []
	for pattern, targets in paths.items():
		if "*" in pattern:
			prefix, suffix = pattern.split("*", 1)
			if not (specifier.startswith(prefix) and specifier.endswith(suffix)):
				continue
			if len(specifier) < len(prefix) + len(suffix):
				continue
			token = specifier[len(prefix):len(specifier) - len(suffix)]
			matches.append((len(prefix), [t.replace("*", token, 1) for t in targets]))
		elif pattern == specifier:
			matches.append((len(pattern) + 1, list(targets)))
	matches.sort(key=lambda item: item[0], reverse=True)
	return [target for _, targets in matches for target in targets]


def _types_package_name(specifier: str) -> str:
	# @scope/name is published as @types/scope__name.
	if specifier.startswith("@") and "/" in specifier:
		scope, rest = specifier[1:].split("/", 1)
		return f"{scope}__{rest}"
	return specifier


def _resolve_node_modules(specifier: str, importer_dir: str) -> Optional[str]:
	# Typed entry points (including @types) win over plain JavaScript anywhere up the tree.
	for extensions in (DECLARATION_FIRST, JS_SPECIFIER_EXTENSIONS):
		directory = importer_dir
		while True:
			node_modules = os.path.join(directory, "node_modules")
			if os.path.isdir(node_modules):
				found = _load_as_file_or_directory(os.path.join(node_modules, specifier), extensions)
				if found:
					return found
				if extensions is DECLARATION_FIRST:
					types_dir = os.path.join(node_modules, "@types", _types_package_name(specifier))
					found = _load_as_file_or_directory(types_dir, DECLARATION_FIRST)
					if found:
						return found
			parent = os.path.dirname(directory)
			if parent == directory:
				break
			directory = parent
	return None


def resolve_module(specifier: str, importer: str, options: CompilerOptions) -> Optional[str]:
	"""Map an import specifier written in ``importer`` to an absolute file path.

	Returns None when nothing on disk matches.
	"""
	extensions = supported_extensions(options.allow_js)
	importer_dir = os.path.dirname(os.path.abspath(importer))

	if is_relative_specifier(specifier):
		base = os.path.normpath(os.path.join(importer_dir, specifier))
		found = _load_as_file_or_directory(base, extensions)
		return os.path.abspath(found) if found else None

	if options.paths:
		paths_base = options.base_url or options.paths_base_path or importer_dir
		for target in match_path_alias(specifier, options.paths):
			found = _load_as_file_or_directory(os.path.normpath(os.path.join(paths_base, target)), extensions)
			if found:
				return os.path.abspath(found)

	if options.base_url:
		found = _load_as_file_or_directory(os.path.normpath(os.path.join(options.base_url, specifier)), extensions)
		if found:
			return os.path.abspath(found)

	found = _resolve_node_modules(specifier, importer_dir)
	return os.path.abspath(found) if found else None
