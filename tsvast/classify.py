"""Mapping from tree-sitter TypeScript nodes to summary node types.

Every syntax node is classified by its kind through a single dispatch table
(``CLASSIFIERS``); kinds without an entry get a ``<kind>:<kind_id>`` label.
Traversal is governed by three fixed sets:

- ``NOISE_KINDS``: never emitted, children never visited.
- ``TRANSPARENT_KINDS``: never emitted, children are treated as if they were
  children of the enclosing node (``export``/``declare`` wrappers, class and
  interface bodies). ``export * from`` style declarations and
  ``declare global`` are summarized as nodes of their own instead.
- ``COMPOSITE_TYPES`` / ``EXPANDED_COMPOSITE_KINDS``: recursed into.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterator, List, Tuple

import tree_sitter as ts

from .compiler import string_value
from .model import (
	CLASS,
	CONSTRUCTOR,
	FILE,
	FUNCTION,
	INTERFACE,
	METHOD,
	MODULE,
	MODULE_BLOCK,
	TEXT,
)


NOISE_KINDS = frozenset(
	{
		"comment",
		"hash_bang_line",
		# imports and type aliases
		"import_statement",
		"import_alias",
		"type_alias_declaration",
		"decorator",
		# bare identifiers
		"identifier",
		"property_identifier",
		"private_property_identifier",
		"shorthand_property_identifier",
		"type_identifier",
		"nested_identifier",
		"this",
		# signatures that are not methods
		"index_signature",
		"property_signature",
		"call_signature",
		"construct_signature",
		# modifiers
		"accessibility_modifier",
		"override_modifier",
		# heritage clauses
		"class_heritage",
		"extends_clause",
		"implements_clause",
		"extends_type_clause",
		# property declarations
		"public_field_definition",
		# type parameters and annotations
		"type_parameters",
		"type_parameter",
		"type_annotation",
		"opting_type_annotation",
		"omitting_type_annotation",
		"asserts_annotation",
		"type_predicate_annotation",
		"formal_parameters",
		# plain statements
		"lexical_declaration",
		"variable_declaration",
		"empty_statement",
		"return_statement",
		"throw_statement",
		"break_statement",
		"continue_statement",
		"debugger_statement",
		# conditional statements
		"if_statement",
		"switch_statement",
	}
)

# Noise unless statement-level detail is requested.
STATEMENT_KINDS = frozenset({"expression_statement"})

TRANSPARENT_KINDS = frozenset(
	{
		"export_statement",
		"ambient_declaration",
		"class_body",
		"interface_body",
		"object_type",
		"arguments",
	}
)

# Wrappers whose source text belongs to the declaration they contain.
SPAN_WRAPPER_KINDS = frozenset({"export_statement", "ambient_declaration"})

MODULE_KINDS = frozenset({"internal_module", "module"})

# Anonymous declarations allowed after ``export default``; other default
# exports are export assignments and are skipped.
DEFAULT_EXPORT_KINDS = frozenset({"function_expression", "function", "class"})

COMPOSITE_TYPES = frozenset({MODULE, MODULE_BLOCK, CLASS, INTERFACE})

EXPANDED_COMPOSITE_KINDS = frozenset(
	{
		"while_statement",
		"do_statement",
		"for_in_statement",
		"for_statement",
		"expression_statement",
		"call_expression",
		"function_expression",
		"function",
		"arrow_function",
		"function_declaration",
		"statement_block",
	}
)


def node_text(node: ts.Node) -> str:
	return node.text.decode("utf-8", "replace")


def _name(node: ts.Node) -> str:
	name = node.child_by_field_name("name")
	if name is None:
		return ""
	if name.type == "string":
		return string_value(name)
	return node_text(name)


def _is_global_augmentation(node: ts.Node) -> bool:
	# `declare global { ... }` has no module node of its own.
	return node.type == "ambient_declaration" and any(child.type == "global" for child in node.children)


def _is_export_declaration(node: ts.Node) -> bool:
	# `export * from "x"` and `export { a }`, as opposed to `export = a`.
	return (
		node.type == "export_statement"
		and node.child_by_field_name("declaration") is None
		and node.child_by_field_name("value") is None
		and not any(child.type == "=" for child in node.children)
	)


def _is_default_export(node: ts.Node) -> bool:
	return node.parent is not None and node.parent.type == "export_statement"


def _method(node: ts.Node) -> Tuple[str, str]:
	name = _name(node)
	in_class = node.parent is not None and node.parent.type == "class_body"
	if in_class and name == "constructor":
		return CONSTRUCTOR, ""
	return METHOD, name


def _function(node: ts.Node) -> Tuple[str, str]:
	return FUNCTION, _name(node)


def _anonymous_function(node: ts.Node) -> Tuple[str, str]:
	if _is_default_export(node):
		return FUNCTION, _name(node)
	return fallback(node)


def _interface(node: ts.Node) -> Tuple[str, str]:
	return INTERFACE, _name(node)


def _class(node: ts.Node) -> Tuple[str, str]:
	return CLASS, _name(node)


def _class_expression(node: ts.Node) -> Tuple[str, str]:
	if _is_default_export(node):
		return CLASS, _name(node)
	return fallback(node)


def _module(node: ts.Node) -> Tuple[str, str]:
	return MODULE, _name(node)


def _ambient(node: ts.Node) -> Tuple[str, str]:
	if _is_global_augmentation(node):
		return MODULE, "global"
	return fallback(node)


def _block(node: ts.Node) -> Tuple[str, str]:
	parent = node.parent
	if parent is not None and (parent.type in MODULE_KINDS or _is_global_augmentation(parent)):
		return MODULE_BLOCK, ""
	return fallback(node)


def _string(node: ts.Node) -> Tuple[str, str]:
	return TEXT, string_value(node)


def fallback(node: ts.Node) -> Tuple[str, str]:
	return f"{node.type}:{node.kind_id}", ""


CLASSIFIERS: Dict[str, Callable[[ts.Node], Tuple[str, str]]] = {
	"method_definition": _method,
	"method_signature": _method,
	"abstract_method_signature": _method,
	"function_declaration": _function,
	"generator_function_declaration": _function,
	"function_signature": _function,
	"function_expression": _anonymous_function,
	"function": _anonymous_function,
	"interface_declaration": _interface,
	"class_declaration": _class,
	"abstract_class_declaration": _class,
	"class": _class_expression,
	"internal_module": _module,
	"module": _module,
	"ambient_declaration": _ambient,
	"statement_block": _block,
	"string": _string,
}


def classify(node: ts.Node, file_name: str = "") -> Tuple[str, str]:
	"""Return the ``(type, name)`` pair for a syntax node."""
	if node.parent is None and node.type == "program":
		return FILE, file_name
	handler = CLASSIFIERS.get(node.type)
	if handler is None:
		return fallback(node)
	return handler(node)


def is_noise(node: ts.Node, expand: bool = False) -> bool:
	if node.type in NOISE_KINDS:
		return True
	return not expand and node.type in STATEMENT_KINDS


def _wraps_module(node: ts.Node) -> bool:
	# ``namespace A {}`` at statement level parses as an expression statement.
	return (
		node.type == "expression_statement"
		and node.named_child_count == 1
		and node.named_children[0].type in MODULE_KINDS
	)


def is_transparent(node: ts.Node) -> bool:
	if _is_export_declaration(node) or _is_global_augmentation(node):
		return False
	return node.type in TRANSPARENT_KINDS or _wraps_module(node)


def is_composite(node: ts.Node, node_type: str, expand: bool = False) -> bool:
	if node_type in COMPOSITE_TYPES:
		return True
	return expand and node.type in EXPANDED_COMPOSITE_KINDS


def _direct_members(node: ts.Node) -> List[ts.Node]:
	if node.type == "export_statement":
		declaration = node.child_by_field_name("declaration")
		if declaration is not None:
			return [declaration]
		value = node.child_by_field_name("value")
		if value is not None and value.type in DEFAULT_EXPORT_KINDS:
			return [value]
		return []
	name = node.child_by_field_name("name")
	return [child for child in node.named_children if name is None or child != name]


def iter_members(node: ts.Node, expand: bool = False) -> Iterator[ts.Node]:
	"""Yield the children of ``node`` that may appear in the summary, in source order."""
	for child in _direct_members(node):
		if is_transparent(child):
			yield from iter_members(child, expand)
		elif not is_noise(child, expand):
			yield child


def _is_span_wrapper(node: ts.Node) -> bool:
	if _is_global_augmentation(node):
		return False
	return node.type in SPAN_WRAPPER_KINDS or _wraps_module(node)


def span_node(node: ts.Node) -> ts.Node:
	"""The outermost wrapper whose text belongs to ``node``."""
	while node.parent is not None and _is_span_wrapper(node.parent):
		node = node.parent
	return node
