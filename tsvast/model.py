from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


PROGRAM = "program"
DIR = "dir"
FILE = "file"
MODULE = "module"
MODULE_BLOCK = "module-block"
CLASS = "class"
INTERFACE = "interface"
CONSTRUCTOR = "constructor"
METHOD = "method"
FUNCTION = "function"
TEXT = "text"

NODE_TYPES = (
	PROGRAM,
	DIR,
	FILE,
	MODULE,
	MODULE_BLOCK,
	CLASS,
	INTERFACE,
	CONSTRUCTOR,
	METHOD,
	FUNCTION,
	TEXT,
)

BATCH_FILES = 256

DEFAULT_COLORS: Dict[str, str] = {
	PROGRAM: "#f0f",
	DIR: "#0ff",
	FILE: "#00f",
	MODULE: "#00c",
	INTERFACE: "#0c0",
	CLASS: "#0f0",
	CONSTRUCTOR: "#800",
	METHOD: "#c00",
	FUNCTION: "#f00",
}


class TreeNode(BaseModel):
	name: str = ""
	# One of NODE_TYPES, or "<kind>:<kind_id>" for unrecognized syntax nodes.
	type: str
	size: Optional[int] = None
	deps: Optional[List[str]] = None
	children: Optional[List[TreeNode]] = None


class VastDocument(BaseModel):
	format: Literal["vast"] = "vast"
	version: str
	source: str
	colors: Optional[Dict[str, str]] = None
	timestamp: str
	vast: TreeNode


class CompilerOptions(BaseModel):
	"""The subset of tsconfig ``compilerOptions`` the summarizer reads.

	Unknown options are kept as extra fields so a parsed config round-trips.
	Path-valued options are absolute once loaded.
	"""

	model_config = ConfigDict(extra="allow", populate_by_name=True)

	allow_js: bool = Field(False, alias="allowJs")
	base_url: Optional[str] = Field(None, alias="baseUrl")
	paths: Dict[str, List[str]] = Field(default_factory=dict)
	paths_base_path: Optional[str] = Field(None, alias="pathsBasePath")
	lib: List[str] = Field(default_factory=list)
	no_implicit_any: Optional[bool] = Field(None, alias="noImplicitAny")
	out_dir: Optional[str] = Field(None, alias="outDir")
	root_dir: Optional[str] = Field(None, alias="rootDir")


def default_compiler_options() -> CompilerOptions:
	return CompilerOptions(lib=["es2017"], allow_js=True, no_implicit_any=False)


class ProjectReference(BaseModel):
	path: str
	config_file: Optional[str] = None


class ProjectConfig(BaseModel):
	file_names: List[str]
	options: CompilerOptions
	project_references: List[ProjectReference] = []
	config_path: Optional[str] = None


class SummarizerSettings(BaseModel):
	expand_functions: bool = False
	add_unnamed_leafs: bool = False
	flat_paths: bool = False
	batch_size: int = Field(BATCH_FILES, gt=0)
	colors: Optional[Dict[str, str]] = Field(default_factory=lambda: dict(DEFAULT_COLORS))
	# Drop import edges that leave the analyzed root or point into node_modules.
	drop_external_deps: bool = False
