import os

import pytest

from tsvast.errors import ConfigError
from tsvast.fs_scan import expand_implicit_glob, include_regex
from tsvast.tsconfig import (
	load_project_config,
	strip_json_comments,
	strip_trailing_commas,
)


def _rel(root, config):
	return [os.path.relpath(p, root).replace(os.sep, "/") for p in config.file_names]


def test_strip_comments_and_trailing_commas():
	text = '{\n  // line\n  "a": "http://x", /* block */\n  "b": [1, 2,],\n}\n'
	assert strip_trailing_commas(strip_json_comments(text)).split() == [
		"{",
		'"a":',
		'"http://x",',
		'"b":',
		"[1,",
		"2]",
		"}",
	]


def test_include_and_exclude(make_project):
	root = make_project(
		{
			"tsconfig.json": """
			{
				// comments are fine
				"compilerOptions": {"strict": true,},
				"include": ["src"],
				"exclude": ["src/**/*.spec.ts"],
			}
			""",
			"src/a.ts": "",
			"src/a.spec.ts": "",
			"src/types.d.ts": "",
			"src/d.js": "",
			"other/c.ts": "",
		}
	)
	config = load_project_config(str(root))
	assert _rel(root, config) == ["src/a.ts", "src/types.d.ts"]
	assert config.config_path == str(root / "tsconfig.json")
	assert config.options.allow_js is False
	assert config.project_references == []


def test_star_include_stays_in_its_directory(make_project):
	root = make_project(
		{
			"tsconfig.json": {"include": ["src/*", "lib/**/*.ts", "pkg"]},
			"src/a.ts": "",
			"src/sub/b.ts": "",
			"lib/x.ts": "",
			"lib/deep/y.ts": "",
			"pkg/inner/z.ts": "",
		}
	)
	assert _rel(root, load_project_config(str(root))) == [
		"src/a.ts",
		"lib/x.ts",
		"lib/deep/y.ts",
		"pkg/inner/z.ts",
	]


def test_include_globs():
	assert expand_implicit_glob("src") == "src/**/*"
	assert expand_implicit_glob("src/") == "src/**/*"
	assert expand_implicit_glob("src/*") == "src/*"
	assert expand_implicit_glob("src/a.ts") == "src/a.ts"
	assert expand_implicit_glob("src/**") == "src/**/*"

	star = include_regex("*.ts")
	assert star.match("a.ts")
	assert not star.match("sub/a.ts")
	deep = include_regex("**/*.ts")
	assert deep.match("a.ts")
	assert deep.match("x/y/a.ts")
	assert not deep.match("x/a.js")
	assert include_regex("a?.ts").match("ab.ts")
	assert not include_regex("a?.ts").match("a/.ts")


def test_default_include_skips_node_modules_and_out_dir(make_project):
	root = make_project(
		{
			"tsconfig.json": {"compilerOptions": {"outDir": "dist", "allowJs": True}},
			"index.ts": "",
			"lib/x.js": "",
			"dist/index.js": "",
			"node_modules/pkg/index.d.ts": "",
		}
	)
	config = load_project_config(str(root))
	assert _rel(root, config) == ["index.ts", "lib/x.js"]
	assert config.options.out_dir == str(root / "dist")


def test_files_keep_declared_order(make_project):
	root = make_project(
		{
			"tsconfig.json": {"files": ["b.ts", "a.ts"]},
			"a.ts": "",
			"b.ts": "",
			"c.ts": "",
		}
	)
	assert _rel(root, load_project_config(str(root))) == ["b.ts", "a.ts"]


def test_extends_merges_options_and_patterns(make_project):
	root = make_project(
		{
			"configs/base.json": {
				"compilerOptions": {"allowJs": True, "baseUrl": "..", "lib": ["es2020"]},
				"include": ["../lib"],
			},
			"tsconfig.json": {"extends": "./configs/base", "compilerOptions": {"lib": ["dom"]}},
			"lib/a.ts": "",
			"lib/b.js": "",
			"src/c.ts": "",
		}
	)
	config = load_project_config(str(root))
	assert _rel(root, config) == ["lib/a.ts", "lib/b.js"]
	assert config.options.allow_js is True
	assert config.options.lib == ["dom"]
	assert config.options.base_url == str(root)


def test_extends_from_node_modules(make_project):
	root = make_project(
		{
			"node_modules/@tsconfig/strict/tsconfig.json": {"compilerOptions": {"allowJs": True}},
			"tsconfig.json": {"extends": "@tsconfig/strict"},
			"a.js": "",
		}
	)
	config = load_project_config(str(root))
	assert _rel(root, config) == ["a.js"]


def test_references(make_project):
	root = make_project(
		{
			"tsconfig.json": {
				"files": [],
				"references": [{"path": "./core"}, {"path": "./ui/tsconfig.build.json"}],
			},
		}
	)
	refs = load_project_config(str(root)).project_references
	assert refs[0].path == str(root / "core")
	assert refs[0].config_file is None
	assert refs[1].path == str(root / "ui")
	assert refs[1].config_file == str(root / "ui" / "tsconfig.build.json")


def test_missing_config_falls_back_to_glob(make_project):
	root = make_project(
		{
			"a.ts": "",
			"b.js": "",
			"c.tsx": "",
			"src/d.ts": "",
			"node_modules/x/index.ts": "",
		}
	)
	config = load_project_config(str(root))
	assert config.config_path is None
	assert _rel(root, config) == ["a.ts", "b.js", "src/d.ts"]
	assert config.options.allow_js is True
	assert config.options.lib == ["es2017"]
	assert config.options.no_implicit_any is False
	assert config.project_references == []


@pytest.mark.parametrize(
	"content",
	[
		"{ not json",
		"[1, 2, 3]",
		'{"compilerOptions": []}',
		'{"compilerOptions": {"allowJs": "maybe"}}',
		'{"include": "src"}',
		'{"extends": "./missing.json"}',
		'{"references": [{"nopath": true}]}',
	],
)
def test_malformed_config_is_fatal(make_project, content):
	root = make_project({"tsconfig.json": content})
	with pytest.raises(ConfigError) as excinfo:
		load_project_config(str(root))
	assert excinfo.value.path.endswith("tsconfig.json")


def test_circular_extends(make_project):
	root = make_project(
		{
			"tsconfig.json": {"extends": "./other.json"},
			"other.json": {"extends": "./tsconfig.json"},
		}
	)
	with pytest.raises(ConfigError, match="circularity"):
		load_project_config(str(root))
