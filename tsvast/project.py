from __future__ import annotations

import logging
import os
from typing import Optional, Set

from .compiler import compile_batches
from .deps import get_imports
from .errors import TsVastError
from .model import PROGRAM, SummarizerSettings, TreeNode
from .tree import build_file_node, insert_file_node
from .tsconfig import load_project_config


logger = logging.getLogger(__name__)


def canonical_project_dir(project_dir: str) -> str:
	path = os.path.normpath(os.path.abspath(project_dir))
	return path if path.endswith(os.sep) else path + os.sep


def project_name(project_dir: str) -> str:
	return os.path.basename(project_dir.rstrip(os.sep)) or project_dir


def parse_project(
	project_dir: str,
	settings: SummarizerSettings,
	visited: Optional[Set[str]] = None,
	root_dir: Optional[str] = None,
	config_file: Optional[str] = None,
) -> Optional[TreeNode]:
	"""Summarize a project and, recursively, the projects it references.

	``visited`` holds canonical directories already summarized during this
	run; a project seen before yields None, which keeps cyclic and diamond
	reference graphs finite.
	"""
	if visited is None:
		visited = set()
	project_dir = canonical_project_dir(project_dir)
	if project_dir in visited:
		logger.debug("tsproject already parsed: %s", project_dir)
		return None
	visited.add(project_dir)
	logger.debug("tsproject: %s", project_dir)

	root_dir = root_dir or project_dir
	config = load_project_config(project_dir, config_file=config_file)
	tree = TreeNode(name=project_name(project_dir), type=PROGRAM, children=[])

	for batch in compile_batches(config.file_names, config.options, settings.batch_size):
		for source_file in batch:
			relpath, node = build_file_node(source_file, project_dir, settings)
			deps = get_imports(source_file, root_dir, settings)
			if deps:
				node.deps = deps
			if settings.flat_paths:
				tree.children.append(node)
			else:
				insert_file_node(tree, node, relpath)

	for reference in config.project_references:
		subtree = parse_project(reference.path, settings, visited, root_dir, reference.config_file)
		if subtree is not None:
			tree.children.append(subtree)

	return tree


def summarize_project(project_dir: str, settings: Optional[SummarizerSettings] = None) -> TreeNode:
	tree = parse_project(project_dir, settings or SummarizerSettings(), visited=set())
	if tree is None:
		raise TsVastError(f"{project_dir}: project produced no tree")
	return tree
