from __future__ import annotations

import json
import logging
from textwrap import dedent
from typing import Callable, Dict, Iterator, List, Union

import pytest

from tsvast.logs import LOGGER_NAME
from tsvast.model import TreeNode


def write_files(root, files: Dict[str, Union[str, dict]]) -> None:
	for rel_path, content in files.items():
		path = root / rel_path
		path.parent.mkdir(parents=True, exist_ok=True)
		if isinstance(content, dict):
			content = json.dumps(content)
		path.write_text(dedent(content), encoding="utf-8")


@pytest.fixture
def make_project(tmp_path) -> Callable:
	def _make(files: Dict[str, Union[str, dict]], name: str = "proj"):
		root = tmp_path / name
		root.mkdir(parents=True, exist_ok=True)
		write_files(root, files)
		return root

	return _make


def shape(nodes: List[TreeNode]) -> list:
	"""(type, name, children) triples, ignoring sizes and deps."""
	return [(n.type, n.name, shape(n.children or [])) for n in nodes]


def walk(node: TreeNode) -> Iterator[TreeNode]:
	yield node
	for child in node.children or []:
		yield from walk(child)


@pytest.fixture(autouse=True)
def reset_logging():
	yield
	logger = logging.getLogger(LOGGER_NAME)
	for handler in list(logger.handlers):
		logger.removeHandler(handler)
	logger.setLevel(logging.NOTSET)
	logger.propagate = True
