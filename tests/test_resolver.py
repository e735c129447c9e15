from tsvast.model import CompilerOptions, default_compiler_options
from tsvast.resolver import match_path_alias, resolve_module


def test_relative_specifiers(make_project):
	root = make_project(
		{
			"src/a.ts": "",
			"src/b.ts": "",
			"src/c.ts": "",
			"src/lib/index.ts": "",
			"src/legacy.js": "",
		}
	)
	importer = str(root / "src/a.ts")
	ts_only = CompilerOptions()

	assert resolve_module("./b", importer, ts_only) == str(root / "src/b.ts")
	assert resolve_module("./c.js", importer, ts_only) == str(root / "src/c.ts")
	assert resolve_module("./lib", importer, ts_only) == str(root / "src/lib/index.ts")
	assert resolve_module("../src/b.ts", importer, ts_only) == str(root / "src/b.ts")
	assert resolve_module("./legacy", importer, ts_only) is None
	assert resolve_module("./legacy", importer, default_compiler_options()) == str(root / "src/legacy.js")
	assert resolve_module("./missing", importer, ts_only) is None


def test_paths_and_base_url(make_project):
	root = make_project(
		{
			"src/app/main.ts": "",
			"src/shared/util.ts": "",
			"src/models/user.ts": "",
		}
	)
	options = CompilerOptions(
		base_url=str(root / "src"),
		paths={"@shared/*": ["shared/*"]},
	)
	importer = str(root / "src/app/main.ts")

	assert resolve_module("@shared/util", importer, options) == str(root / "src/shared/util.ts")
	assert resolve_module("models/user", importer, options) == str(root / "src/models/user.ts")
	assert resolve_module("@shared/none", importer, options) is None


def test_paths_without_base_url_use_config_dir(make_project):
	root = make_project({"lib/x.ts": "", "src/a.ts": ""})
	options = CompilerOptions(paths={"~/*": ["lib/*"]}, paths_base_path=str(root))
	assert resolve_module("~/x", str(root / "src/a.ts"), options) == str(root / "lib/x.ts")


def test_node_modules(make_project):
	root = make_project(
		{
			"src/a.ts": "",
			"node_modules/typed/package.json": '{"types": "dist/main.d.ts"}',
			"node_modules/typed/dist/main.d.ts": "",
			"node_modules/plain/index.d.ts": "",
			"node_modules/@types/untyped/index.d.ts": "",
			"node_modules/@types/scope__pkg/index.d.ts": "",
			"node_modules/untyped/index.js": "",
		}
	)
	importer = str(root / "src/a.ts")
	options = CompilerOptions()

	assert resolve_module("typed", importer, options) == str(root / "node_modules/typed/dist/main.d.ts")
	assert resolve_module("plain", importer, options) == str(root / "node_modules/plain/index.d.ts")
	assert resolve_module("@scope/pkg", importer, options) == str(root / "node_modules/@types/scope__pkg/index.d.ts")
	assert resolve_module("untyped", importer, options) == str(root / "node_modules/@types/untyped/index.d.ts")
	assert resolve_module("nowhere", importer, options) is None


def test_match_path_alias_prefers_longest_prefix():
	paths = {
		"*": ["fallback/*"],
		"@app/*": ["app/*"],
		"@app/core/*": ["core/*"],
		"exact": ["exact/index"],
	}
	assert match_path_alias("@app/core/x", paths) == ["core/x", "app/core/x", "fallback/@app/core/x"]
	assert match_path_alias("exact", paths) == ["exact/index", "fallback/exact"]
