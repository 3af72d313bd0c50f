"""
Record/field metadata extraction

Tree-sitter-based C++ analyzer that collects class, struct and union
definitions with their typed data members and renders them as an indented
JSON document.
"""

from fieldmeta.models import FieldRecord, TypeRecord, MetadataDatabase
from fieldmeta.filters import should_include
from fieldmeta.parser import create_parser, parse_file, parse_bytes, count_error_nodes
from fieldmeta.traversal import DeclaredMember, DeclaredType, iter_declared_types
from fieldmeta.sources import (
    AnalysisError,
    discover_source_files,
    load_compdb_sources,
    resolve_compdb_path,
    resolve_inputs,
)
from fieldmeta.collector import (
    AnalysisStats,
    analyze_file,
    analyze_sources,
    collect_types,
)
from fieldmeta.renderer import render_document, write_document
from fieldmeta.output import OutputDestinationError, emit_document

__all__ = [
    # Metadata model
    "FieldRecord",
    "TypeRecord",
    "MetadataDatabase",
    # Filter
    "should_include",
    # Low-level parsing
    "create_parser",
    "parse_file",
    "parse_bytes",
    "count_error_nodes",
    # Declaration discovery
    "DeclaredMember",
    "DeclaredType",
    "iter_declared_types",
    # Inputs
    "AnalysisError",
    "discover_source_files",
    "load_compdb_sources",
    "resolve_compdb_path",
    "resolve_inputs",
    # Orchestration
    "AnalysisStats",
    "analyze_file",
    "analyze_sources",
    "collect_types",
    # Rendering and output
    "render_document",
    "write_document",
    "OutputDestinationError",
    "emit_document",
]
