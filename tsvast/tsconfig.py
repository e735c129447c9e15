from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from .errors import ConfigError
from .fs_scan import match_files, relative_path, scan_sources, supported_extensions
from .model import (
	CompilerOptions,
	ProjectConfig,
	ProjectReference,
	default_compiler_options,
)


logger = logging.getLogger(__name__)

TSCONFIG_FILENAME = "tsconfig.json"
DEFAULT_INCLUDE = ["**/*"]
DEFAULT_EXCLUDE = ["node_modules", "bower_components", "jspm_packages"]
# Options holding paths relative to the config file that declares them.
PATH_OPTIONS = ("baseUrl", "outDir", "rootDir")


def strip_json_comments(text: str) -> str:
	"""Remove // and /* */ comments from JSON-like text."""
	out: List[str] = []
	in_str = False
	escape = False
	idx = 0
	while idx < len(text):
		ch = text[idx]
		if in_str:
			out.append(ch)
			if escape:
				escape = False
			elif ch == "\\":
				escape = True
			elif ch == '"':
				in_str = False
			idx += 1
			continue
		if ch == '"':
			in_str = True
			out.append(ch)
			idx += 1
			continue
		if ch == "/" and idx + 1 < len(text):
			nxt = text[idx + 1]
			if nxt == "/":
				idx = text.find("\n", idx + 2)
				if idx == -1:
					break
				continue
			if nxt == "*":
				end = text.find("*/", idx + 2)
				if end == -1:
					break
				idx = end + 2
				continue
		out.append(ch)
		idx += 1
	return "".join(out)


def strip_trailing_commas(text: str) -> str:
	"""Drop commas that directly precede a closing brace or bracket."""
	out: List[str] = []
	in_str = False
	escape = False
	for idx, ch in enumerate(text):
		if in_str:
			if escape:
				escape = False
			elif ch == "\\":
				escape = True
			elif ch == '"':
				in_str = False
		elif ch == '"':
			in_str = True
		elif ch == ",":
			nxt = idx + 1
			while nxt < len(text) and text[nxt].isspace():
				nxt += 1
			if nxt < len(text) and text[nxt] in "}]":
				continue
		out.append(ch)
	return "".join(out)


def read_config_file(path: str) -> Dict[str, Any]:
	try:
		with open(path, "r", encoding="utf-8-sig") as fh:
			raw = fh.read()
	except OSError as exc:
		raise ConfigError(path, f"cannot read file ({exc.strerror or exc})") from exc
	try:
		payload = json.loads(strip_trailing_commas(strip_json_comments(raw)))
	except json.JSONDecodeError as exc:
		raise ConfigError(path, f"invalid JSON: {exc}") from exc
	if not isinstance(payload, dict):
		raise ConfigError(path, "expected a JSON object")
	return payload


@dataclass
class _RawConfig:
	"""A tsconfig with its ``extends`` chain flattened.

	File patterns are stored together with the directory they are relative to.
	"""

	compiler_options: Dict[str, Any] = field(default_factory=dict)
	files: Optional[Tuple[List[str], str]] = None
	include: Optional[Tuple[List[str], str]] = None
	exclude: Optional[Tuple[List[str], str]] = None
	references: List[Any] = field(default_factory=list)


def _find_extended_config(specifier: str, config_dir: str) -> Optional[str]:
	if specifier.startswith(("./", "../")) or os.path.isabs(specifier):
		path = os.path.normpath(os.path.join(config_dir, specifier))
		for candidate in (path, path + ".json"):
			if os.path.isfile(candidate):
				return candidate
		return None

	directory = config_dir
	while True:
		base = os.path.join(directory, "node_modules", specifier)
		for candidate in (base, base + ".json", os.path.join(base, TSCONFIG_FILENAME)):
			if os.path.isfile(candidate):
				return candidate
		parent = os.path.dirname(directory)
		if parent == directory:
			return None
		directory = parent


def _string_list(path: str, payload: Dict[str, Any], key: str) -> Optional[List[str]]:
	value = payload.get(key)
	if value is None:
		return None
	if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
		raise ConfigError(path, f"'{key}' must be a list of strings")
	return value


def _absolutize_options(options: Dict[str, Any], config_dir: str, path: str) -> Dict[str, Any]:
	options = dict(options)
	for key in PATH_OPTIONS:
		value = options.get(key)
		if value is None:
			continue
		if not isinstance(value, str):
			raise ConfigError(path, f"compilerOptions.{key} must be a string")
		options[key] = os.path.normpath(os.path.join(config_dir, value))
	if "paths" in options:
		options["pathsBasePath"] = config_dir
	return options


def _load_raw_config(path: str, chain: Tuple[str, ...] = ()) -> _RawConfig:
	path = os.path.normpath(os.path.abspath(path))
	if path in chain:
		raise ConfigError(path, "circularity detected while resolving 'extends'")
	payload = read_config_file(path)
	config_dir = os.path.dirname(path)

	extends = payload.get("extends")
	if extends is None:
		bases: List[str] = []
	elif isinstance(extends, str):
		bases = [extends]
	elif isinstance(extends, list) and all(isinstance(item, str) for item in extends):
		bases = extends
	else:
		raise ConfigError(path, "'extends' must be a string or a list of strings")

	raw = _RawConfig()
	for specifier in bases:
		base_path = _find_extended_config(specifier, config_dir)
		if base_path is None:
			raise ConfigError(path, f"cannot find extended config '{specifier}'")
		logger.debug("%s extends %s", path, base_path)
		base = _load_raw_config(base_path, chain + (path,))
		raw.compiler_options.update(base.compiler_options)
		for key in ("files", "include", "exclude"):
			if getattr(base, key) is not None:
				setattr(raw, key, getattr(base, key))

	options = payload.get("compilerOptions", {})
	if not isinstance(options, dict):
		raise ConfigError(path, "'compilerOptions' must be an object")
	raw.compiler_options.update(_absolutize_options(options, config_dir, path))

	for key in ("files", "include", "exclude"):
		values = _string_list(path, payload, key)
		if values is not None:
			setattr(raw, key, (values, config_dir))

	references = payload.get("references", [])
	if not isinstance(references, list):
		raise ConfigError(path, "'references' must be a list")
	raw.references = references
	return raw


def _parse_references(path: str, references: List[Any]) -> List[ProjectReference]:
	config_dir = os.path.dirname(path)
	parsed: List[ProjectReference] = []
	for entry in references:
		if not isinstance(entry, dict) or not isinstance(entry.get("path"), str):
			raise ConfigError(path, "each reference needs a 'path' string")
		target = os.path.normpath(os.path.join(config_dir, entry["path"]))
		if target.lower().endswith(".json"):
			parsed.append(ProjectReference(path=os.path.dirname(target), config_file=target))
		else:
			parsed.append(ProjectReference(path=target))
	return parsed


def _collect_file_names(project_dir: str, raw: _RawConfig, options: CompilerOptions) -> List[str]:
	extensions = supported_extensions(options.allow_js)
	file_names: List[str] = []

	if raw.files is not None:
		patterns, base_dir = raw.files
		for name in patterns:
			path = os.path.normpath(os.path.join(base_dir, name))
			if os.path.isfile(path):
				file_names.append(path)
			else:
				logger.warning("file listed in 'files' not found: %s", path)

	if raw.include is not None:
		include, include_base = raw.include
	elif raw.files is None:
		include, include_base = DEFAULT_INCLUDE, project_dir
	else:
		include, include_base = [], project_dir

	if include:
		if raw.exclude is not None:
			exclude, exclude_base = raw.exclude
		else:
			exclude, exclude_base = list(DEFAULT_EXCLUDE), project_dir
			if options.out_dir:
				exclude.append(relative_path(options.out_dir, exclude_base))
		listed = set(file_names)
		for path in match_files(include_base, include, extensions, exclude_base, exclude):
			if path not in listed:
				file_names.append(path)
	return file_names


def parse_ts_config(config_path: str, project_dir: Optional[str] = None) -> ProjectConfig:
	"""Parse a tsconfig file into a concrete file list, options and references."""
	config_path = os.path.normpath(os.path.abspath(config_path))
	project_dir = project_dir or os.path.dirname(config_path)
	logger.debug("parsing %s", config_path)

	raw = _load_raw_config(config_path)
	try:
		options = CompilerOptions.model_validate(raw.compiler_options)
	except ValidationError as exc:
		raise ConfigError(config_path, f"invalid compilerOptions: {exc}") from exc

	file_names = _collect_file_names(project_dir, raw, options)
	logger.debug("%d ts files found", len(file_names))
	return ProjectConfig(
		file_names=file_names,
		options=options,
		project_references=_parse_references(config_path, raw.references),
		config_path=config_path,
	)


def generate_ts_config(project_dir: str) -> ProjectConfig:
	"""Stand-in config for a directory without tsconfig.json: glob for sources."""
	logger.debug("searching for **/*.{js,ts} in %s", project_dir)
	files = scan_sources(project_dir)
	logger.debug("%d files found", len(files))
	return ProjectConfig(
		file_names=files,
		options=default_compiler_options(),
		project_references=[],
	)


def load_project_config(project_dir: str, config_file: Optional[str] = None) -> ProjectConfig:
	project_dir = os.path.normpath(os.path.abspath(project_dir))
	config_path = config_file or os.path.join(project_dir, TSCONFIG_FILENAME)
	if not os.path.isfile(config_path):
		logger.debug("%s doesn't exist", config_path)
		return generate_ts_config(project_dir)
	return parse_ts_config(config_path, project_dir)
