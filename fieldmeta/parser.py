"""
Tree-sitter parser initialization and file parsing utilities.

This module provides functions to initialize the C++ parser, parse source
files and measure how much of a tree failed to parse.
"""

import logging
from typing import Tuple
import tree_sitter_cpp as tscpp
from tree_sitter import Language, Parser, Tree

logger = logging.getLogger(__name__)

# Module-level language constant
CPP_LANGUAGE = Language(tscpp.language())


def create_parser() -> Parser:
    """Create a tree-sitter parser configured for C++.

    Example:
        >>> parser = create_parser()
        >>> tree = parser.parse(b"struct Point { int x; };")
    """
    parser = Parser(CPP_LANGUAGE)
    logger.debug("Created tree-sitter C++ parser")
    return parser


def parse_bytes(source: bytes) -> Tree:
    """Parse raw bytes of C++ source code.

    Args:
        source: UTF-8 encoded bytes of C++ source code.

    Returns:
        A Tree object representing the parsed AST.

    Raises:
        TypeError: If source is not bytes.

    Example:
        >>> tree = parse_bytes(b"struct S { int a; };")
        >>> tree.root_node.type
        'translation_unit'
    """
    if not isinstance(source, bytes):
        raise TypeError(f"Source must be bytes, got {type(source).__name__}")

    tree = create_parser().parse(source)
    logger.debug("Parsed %d bytes of C++ code", len(source))
    return tree


def parse_file(file_path: str) -> Tuple[Tree, bytes]:
    """Parse a C++ source file from disk.

    Args:
        file_path: Path to a .cpp, .cc, .h, .hpp (etc.) file.

    Returns:
        A tuple of (Tree, source_bytes).

    Raises:
        FileNotFoundError: If the file does not exist.
        OSError: If the file cannot be read.
    """
    try:
        with open(file_path, "rb") as f:
            source_bytes = f.read()
    except FileNotFoundError:
        logger.error("File not found: %s", file_path)
        raise
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise

    tree = parse_bytes(source_bytes)
    logger.debug("Parsed file: %s", file_path)
    return tree, source_bytes


def count_error_nodes(tree: Tree) -> int:
    """Count ERROR and MISSING nodes in a parsed tree.

    Returns:
        Zero for a clean parse, otherwise the number of error sites.
    """
    root = tree.root_node
    if not root.has_error:
        return 0

    count = 0
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            count += 1
            # An ERROR subtree counts once
            continue
        if node.has_error:
            stack.extend(node.children)
    return count
