from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from .model import SummarizerSettings, TreeNode, VastDocument
from .project import summarize_project


VAST_FORMAT = "vast"
VAST_VERSION = "1.0.0"


def format_timestamp(now: Optional[datetime] = None) -> str:
	now = now or datetime.now(timezone.utc)
	return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def assemble(
	tree: TreeNode,
	source: str,
	settings: Optional[SummarizerSettings] = None,
	now: Optional[datetime] = None,
) -> VastDocument:
	settings = settings or SummarizerSettings()
	return VastDocument(
		format=VAST_FORMAT,
		version=VAST_VERSION,
		source=source,
		colors=dict(settings.colors) if settings.colors is not None else None,
		timestamp=format_timestamp(now),
		vast=tree,
	)


def dump_document(document: VastDocument) -> str:
	return document.model_dump_json(indent=2, exclude_none=True)


def summarize(project_dir: str, settings: Optional[SummarizerSettings] = None) -> VastDocument:
	"""Summarize ``project_dir`` and wrap the tree in a vast document."""
	settings = settings or SummarizerSettings()
	return assemble(summarize_project(project_dir, settings), project_dir, settings)
