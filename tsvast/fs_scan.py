from __future__ import annotations

import os
import re
from typing import Iterable, List, Optional, Sequence, Tuple

import pathspec


TS_EXTENSIONS: Tuple[str, ...] = (".ts", ".tsx", ".d.ts")
JS_EXTENSIONS: Tuple[str, ...] = (".js", ".jsx")
# Extensions picked up when a project has no tsconfig.json.
GLOB_EXTENSIONS: Tuple[str, ...] = (".js", ".ts")

IGNORED_DIRS = {".git", "node_modules", "bower_components", "jspm_packages"}
WILDCARD_CHARS = ("*", "?", "[")


def supported_extensions(allow_js: bool) -> Tuple[str, ...]:
	if allow_js:
		return TS_EXTENSIONS + JS_EXTENSIONS
	return TS_EXTENSIONS


def has_extension(filename: str, extensions: Sequence[str]) -> bool:
	return filename.lower().endswith(tuple(extensions))


def to_posix(path: str) -> str:
	return path.replace(os.sep, "/")


def relative_path(path: str, start: str) -> str:
	return to_posix(os.path.relpath(path, start))


def walk_files(root: str) -> Iterable[str]:
	"""Yield files below ``root`` in a stable order, skipping package folders."""
	for dirpath, dirnames, filenames in os.walk(root):
		dirnames[:] = sorted(d for d in dirnames if d not in IGNORED_DIRS)
		for filename in sorted(filenames):
			yield os.path.join(dirpath, filename)


def scan_sources(root: str, extensions: Sequence[str] = GLOB_EXTENSIONS) -> List[str]:
	return [path for path in walk_files(root) if has_extension(path, extensions)]


def split_pattern(base_dir: str, pattern: str) -> Tuple[str, str]:
	"""Split a tsconfig glob into the literal directory it starts from and the rest.

	``src/**/*.ts`` relative to ``/p`` becomes ``("/p/src", "**/*.ts")``.
	"""
	parts = [p for p in to_posix(pattern).split("/") if p not in ("", ".")]
	fixed: List[str] = []
	for part in parts[:-1]:
		if any(ch in part for ch in WILDCARD_CHARS):
			break
		fixed.append(part)
	rest = "/".join(parts[len(fixed):]) or "**/*"
	return os.path.normpath(os.path.join(base_dir, *fixed)), rest


def _anchor(pattern: str) -> str:
	# tsconfig globs are anchored at their base directory.
	pattern = to_posix(pattern)
	while pattern.startswith("./"):
		pattern = pattern[2:]
	return "/" + pattern.lstrip("/")


def compile_patterns(patterns: Sequence[str]) -> pathspec.PathSpec:
	"""Exclude patterns: a match on a directory also drops everything below it."""
	return pathspec.GitIgnoreSpec.from_lines([_anchor(p) for p in patterns])


def expand_implicit_glob(pattern: str) -> str:
	"""``src`` means every file below ``src``; ``src/*`` and ``src/a.ts`` do not."""
	pattern = to_posix(pattern).rstrip("/")
	last = pattern.rsplit("/", 1)[-1]
	if last == "**":
		return pattern + "/*"
	if not any(ch in last for ch in ".*?"):
		return pattern + "/**/*" if pattern else "**/*"
	return pattern


def include_regex(pattern: str) -> re.Pattern:
	"""Compile a relative include glob; ``*`` and ``?`` never cross a ``/``."""
	parts = [p for p in to_posix(pattern).split("/") if p not in ("", ".")]
	regex = ""
	for i, part in enumerate(parts):
		if part == "**":
			regex += "(?:[^/]+/)*"
			continue
		for ch in part:
			if ch == "*":
				regex += "[^/]*"
			elif ch == "?":
				regex += "[^/]"
			else:
				regex += re.escape(ch)
		if i < len(parts) - 1:
			regex += "/"
	return re.compile("^" + regex + "$")


def match_files(
	base_dir: str,
	include: Sequence[str],
	extensions: Sequence[str],
	exclude_base: Optional[str] = None,
	exclude: Sequence[str] = (),
) -> List[str]:
	"""Expand tsconfig ``include`` patterns below ``base_dir``.

	Results keep walk order within each pattern and never repeat a path.
	"""
	exclude_spec = compile_patterns(exclude) if exclude else None
	exclude_base = exclude_base or base_dir

	roots: List[Tuple[str, List[re.Pattern]]] = []
	for pattern in include:
		root, rest = split_pattern(base_dir, expand_implicit_glob(pattern))
		for known_root, rests in roots:
			if known_root == root:
				rests.append(include_regex(rest))
				break
		else:
			roots.append((root, [include_regex(rest)]))

	seen = set()
	files: List[str] = []
	for root, rests in roots:
		for path in walk_files(root):
			if path in seen or not has_extension(path, extensions):
				continue
			rel = relative_path(path, root)
			if not any(regex.match(rel) for regex in rests):
				continue
			if exclude_spec is not None:
				rel = relative_path(path, exclude_base)
				if not rel.startswith("../") and exclude_spec.match_file(rel):
					continue
			seen.add(path)
			files.append(path)
	return files
