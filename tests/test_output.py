import json
from datetime import datetime, timedelta, timezone

from tsvast.model import DEFAULT_COLORS, SummarizerSettings, TreeNode
from tsvast.output import assemble, dump_document, format_timestamp, summarize
from tsvast.tree import insert_file_node


def _tree():
	tree = TreeNode(name="p", type="program", children=[])
	insert_file_node(tree, TreeNode(name="a.ts", type="file", size=12, children=[]), "src/a.ts")
	return tree


def test_timestamp_is_utc_iso():
	local = datetime(2024, 1, 2, 5, 4, 5, 678000, tzinfo=timezone(timedelta(hours=2)))
	assert format_timestamp(local) == "2024-01-02T03:04:05.678Z"


def test_envelope_fields():
	now = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
	document = assemble(_tree(), "./proj", SummarizerSettings(), now=now)
	payload = json.loads(dump_document(document))

	assert list(payload) == ["format", "version", "source", "colors", "timestamp", "vast"]
	assert payload["format"] == "vast"
	assert payload["version"] == "1.0.0"
	assert payload["source"] == "./proj"
	assert payload["colors"] == DEFAULT_COLORS
	assert payload["timestamp"] == "2024-01-02T03:04:05.000Z"

	src = payload["vast"]["children"][0]
	assert src == {"name": "src", "type": "dir", "children": [{"name": "a.ts", "type": "file", "size": 12, "children": []}]}


def test_colors_can_be_omitted():
	document = assemble(_tree(), "p", SummarizerSettings(colors=None))
	assert "colors" not in json.loads(dump_document(document))


def test_settings_colors_are_copied():
	settings = SummarizerSettings()
	document = assemble(_tree(), "p", settings)
	document.colors["file"] = "#123"
	assert settings.colors["file"] == DEFAULT_COLORS["file"]


def test_runs_differ_only_in_timestamp(make_project):
	root = make_project({"src/a.ts": "export class A { m() {} }\n"})
	first = summarize(str(root)).model_dump(exclude={"timestamp"})
	second = summarize(str(root)).model_dump(exclude={"timestamp"})
	assert first == second
