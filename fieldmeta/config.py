"""
Configuration constants for C++ record/field metadata extraction.

Defines the tree-sitter node type strings used while walking declarations,
plus the rendering and output defaults.
"""

from typing import Dict, Set

# Record kinds we collect (class / struct / union definitions)
RECORD_TYPES: Set[str] = {
    "class_specifier",
    "struct_specifier",
    "union_specifier",
}

# Keyword used when a record type appears as a member type
RECORD_KEYWORDS: Dict[str, str] = {
    "class_specifier": "class",
    "struct_specifier": "struct",
    "union_specifier": "union",
    "enum_specifier": "enum",
}

# Template wrapper node type
TEMPLATE_WRAPPER: str = "template_declaration"

# Namespace definition node type
NAMESPACE_NODE: str = "namespace_definition"

# Declaration node type (records can be wrapped in this)
DECLARATION_NODE: str = "declaration"

# Type alias wrapper (typedef struct { ... } Name;)
TYPEDEF_NODE: str = "type_definition"

# Data member node type inside a record body
FIELD_DECLARATION: str = "field_declaration"

# Container types whose children we scan
CONTAINER_TYPES: Set[str] = {
    "translation_unit",
    "declaration_list",
}

# Wrapper types that should be treated as transparent
TRANSPARENT_WRAPPERS: Set[str] = {
    "linkage_specification",  # extern "C" { ... }
}

# Preprocessor directives that may contain code we need to traverse
PREPROCESSOR_CONTAINERS: Set[str] = {
    "preproc_ifdef",
    "preproc_ifndef",
    "preproc_if",
    "preproc_elif",
    "preproc_else",
}

# Declarator nodes that name a member (leaf of a declarator chain)
MEMBER_NAME_NODES: Set[str] = {
    "field_identifier",
    "identifier",
}

# Storage classes that make a member a non-field (static data member)
NON_FIELD_STORAGE: Set[str] = {
    "static",
}

# C / C++ file extensions
CPP_EXTENSIONS: Set[str] = {
    ".cpp",
    ".cc",
    ".cxx",
    ".c",
    ".h",
    ".hh",
    ".hpp",
    ".hxx",
}

# Directories skipped during recursive discovery
SKIPPED_DIRECTORIES: Set[str] = {
    "build",
    "cmake-build-debug",
    "cmake-build-release",
    "node_modules",
    "venv",
    "__pycache__",
    "dist",
    "out",
}

# Compilation database file name
COMPDB_FILENAME: str = "compile_commands.json"

# Rendering defaults
DEFAULT_INDENT_STEP: int = 4

# Output destination meaning "write to standard output"
STDOUT_SENTINEL: str = "-"

# Analysis policy defaults
DEFAULT_ALLOW_PARSE_ERRORS: bool = False
