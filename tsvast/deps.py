from __future__ import annotations

from typing import List, Optional

from .compiler import SourceFile, module_specifier
from .fs_scan import relative_path
from .model import SummarizerSettings


def is_external(relpath: str) -> bool:
	"""True for targets outside the analyzed root or inside an installed package."""
	return relpath == ".." or relpath.startswith("../") or "node_modules/" in relpath


def get_imports(
	source_file: SourceFile,
	root_dir: str,
	settings: Optional[SummarizerSettings] = None,
) -> Optional[List[str]]:
	"""Root-relative paths of the files imported by ``source_file``.

	Specifiers that did not resolve are left out. Returns None when no import
	resolved, so callers can omit the field entirely.
	"""
	drop_external = settings is not None and settings.drop_external_deps
	deps: List[str] = []
	for node in source_file.root_node.named_children:
		if node.type != "import_statement":
			continue
		specifier = module_specifier(node)
		if specifier is None:
			continue
		full_path = source_file.resolved_modules.get(specifier)
		if not full_path:
			continue
		relpath = relative_path(full_path, root_dir)
		if drop_external and is_external(relpath):
			continue
		deps.append(relpath)
	return deps or None
