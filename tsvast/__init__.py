"""Summarize TypeScript projects into a declaration tree ("vast" documents).

Modules:
- tsconfig.py: tsconfig.json discovery, parsing and the glob fallback.
- fs_scan.py: Filesystem walking and include/exclude pattern matching.
- resolver.py: Import specifier resolution.
- compiler.py: tree-sitter parsing in memory-bounded batches.
- classify.py: Syntax node classification and traversal rules.
- tree.py: Summary tree construction and directory reconstruction.
- deps.py: Import dependency extraction.
- project.py: Walking a project and its referenced projects.
- output.py: The vast document envelope.
- model.py: Data structures for trees, documents and settings.
"""

__all__ = [
	"tsconfig",
	"fs_scan",
	"resolver",
	"compiler",
	"classify",
	"tree",
	"deps",
	"project",
	"output",
	"model",
]
