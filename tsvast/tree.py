from __future__ import annotations

from typing import List, Tuple

import tree_sitter as ts

from .classify import classify, is_composite, iter_members, span_node
from .compiler import SourceFile
from .fs_scan import relative_path
from .model import DIR, SummarizerSettings, TreeNode


LEADING_KINDS = frozenset({"comment", "decorator"})


def _full_start(node: ts.Node) -> int:
	# Leading trivia (whitespace and comments) and decorators belong to the
	# node: start where the previous sibling of any other kind ends.
	node = span_node(node)
	while node.parent is not None:
		previous = node.prev_sibling
		while previous is not None and previous.type in LEADING_KINDS:
			previous = previous.prev_sibling
		if previous is not None:
			return previous.end_byte
		node = node.parent
	return 0


def node_size(node: ts.Node, source: bytes) -> int:
	"""Length in characters of the node's full text, leading trivia included."""
	if node.parent is None:
		return len(source.decode("utf-8", "replace"))
	end = span_node(node).end_byte
	return len(source[_full_start(node):end].decode("utf-8", "replace"))


def inspect_children(root: ts.Node, source: bytes, settings: SummarizerSettings) -> List[TreeNode]:
	treenodes: List[TreeNode] = []
	for node in iter_members(root, settings.expand_functions):
		node_type, name = classify(node)
		deep = is_composite(node, node_type, settings.expand_functions)
		children = inspect_children(node, source, settings) if deep else []
		if name or deep or settings.add_unnamed_leafs:
			treenodes.append(
				TreeNode(name=name, type=node_type, size=node_size(node, source), children=children)
			)
	return treenodes


def build_file_node(source_file: SourceFile, project_dir: str, settings: SummarizerSettings) -> Tuple[str, TreeNode]:
	"""Summarize one parsed file; returns its project-relative path and node."""
	root = source_file.root_node
	node_type, file_name = classify(root, source_file.file_name)
	relpath = relative_path(file_name, project_dir)
	name = relpath if settings.flat_paths else relpath.split("/")[-1]
	node = TreeNode(
		name=name,
		type=node_type,
		size=node_size(root, source_file.source),
		children=inspect_children(root, source_file.source, settings),
	)
	return relpath, node


def insert_file_node(tree: TreeNode, node: TreeNode, relpath: str) -> None:
	"""Place ``node`` under ``tree``, creating one ``dir`` node per path segment."""
	if tree.children is None:
		tree.children = []
	i = relpath.find("/")
	if i < 0:
		tree.children.append(node)
		return

	dirname = relpath[:i]
	dirnode = next((x for x in tree.children if x.type == DIR and x.name == dirname), None)
	if dirnode is None:
		dirnode = TreeNode(name=dirname, type=DIR, children=[])
		tree.children.append(dirnode)

	insert_file_node(dirnode, node, relpath[i + 1:])
