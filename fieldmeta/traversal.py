"""
AST traversal producing record declarations and their data members.

This module walks a tree-sitter C++ tree and yields one ``DeclaredType`` per
class/struct/union definition, in source pre-order (an enclosing record
comes before the records nested in it). The sequence is lazy and can only
be consumed once.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple
from tree_sitter import Node, Tree

from core.naming import normalize_cpp_entity_name, normalize_type_description, qualify
from fieldmeta.config import (
    RECORD_TYPES,
    RECORD_KEYWORDS,
    TEMPLATE_WRAPPER,
    NAMESPACE_NODE,
    DECLARATION_NODE,
    TYPEDEF_NODE,
    FIELD_DECLARATION,
    CONTAINER_TYPES,
    TRANSPARENT_WRAPPERS,
    PREPROCESSOR_CONTAINERS,
    MEMBER_NAME_NODES,
    NON_FIELD_STORAGE,
)

logger = logging.getLogger(__name__)

_IGNORED_QUALIFIERS = {"constexpr", "constinit", "consteval", "mutable"}


@dataclass(frozen=True)
class DeclaredMember:
    """A non-static data member as seen by the analyzer."""

    type_description: str
    qualified_name: str


@dataclass(frozen=True)
class DeclaredType:
    """A record definition and its data members in declaration order.

    Attributes:
        qualified_name: Scope-qualified record name (e.g. ``ns::Outer::Inner``).
        kind: One of ``class``, ``struct``, ``union``.
        members: Data members in declaration order.
        start_line: 1-indexed line of the record head.
    """

    qualified_name: str
    kind: str
    members: Tuple[DeclaredMember, ...]
    start_line: int


def _node_text(node: Node, source_bytes: bytes) -> str:
    return source_bytes[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def extract_record_name(node: Node, source_bytes: bytes) -> Optional[str]:
    """Extract the written name of a class/struct/union specifier.

    Returns:
        The name, or None for anonymous records.
    """
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None
    return normalize_cpp_entity_name(_node_text(name_node, source_bytes))


def extract_namespace_name(node: Node, source_bytes: bytes) -> Optional[str]:
    """Extract the name of a namespace, or None for anonymous namespaces.

    Nested namespace definitions (``namespace a::b``) return ``a::b``.
    """
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None
    return normalize_cpp_entity_name(_node_text(name_node, source_bytes))


def is_record_definition(node: Node) -> bool:
    """Check if a record specifier has a body (not a forward declaration)."""
    if node.type not in RECORD_TYPES:
        return False
    return node.child_by_field_name("body") is not None


def _typedef_name(wrapper: Node, source_bytes: bytes) -> Optional[str]:
    """Name given to an anonymous record by ``typedef struct { } Name;``."""
    if wrapper.type != TYPEDEF_NODE:
        return None
    declarator = wrapper.child_by_field_name("declarator")
    if declarator is not None and declarator.type == "type_identifier":
        return _node_text(declarator, source_bytes)
    return None


def _find_member_name(declarator: Node) -> Optional[Node]:
    """Descend a declarator chain to the identifier it declares.

    Returns None when the declarator declares a method (a function
    declarator applied directly to the name) or has no plain name.
    """
    node = declarator
    while node is not None:
        if node.type in MEMBER_NAME_NODES:
            return node
        if node.type == "function_declarator":
            inner = node.child_by_field_name("declarator")
            if inner is None or inner.type != "parenthesized_declarator":
                return None
            node = inner
            continue
        inner = node.child_by_field_name("declarator")
        if inner is None:
            # reference_declarator and parenthesized_declarator have no field name
            inner = next(
                (c for c in node.named_children if c.type not in ("type_qualifier", "attribute_declaration")),
                None,
            )
        node = inner
    return None


def abstract_declarator(declarator: Node, name_node: Node, source_bytes: bytes) -> str:
    """Return the declarator text with the declared name removed.

    ``*ptr`` gives ``*``, ``values[4]`` gives ``[4]``, ``(*cb)(int)`` gives
    ``(*)(int)`` and a bare name gives an empty string.
    """
    head = source_bytes[declarator.start_byte:name_node.start_byte]
    tail = source_bytes[name_node.end_byte:declarator.end_byte]
    return normalize_type_description((head + tail).decode("utf-8", errors="replace"))


def _is_static_member(node: Node, source_bytes: bytes) -> bool:
    return any(
        child.type == "storage_class_specifier"
        and _node_text(child, source_bytes) in NON_FIELD_STORAGE
        for child in node.children
    )


def _base_type_description(
    field_node: Node,
    type_node: Node,
    source_bytes: bytes,
    scope: List[str],
) -> str:
    """Render the declared type of a field declaration without declarators."""
    if type_node.type in RECORD_KEYWORDS and type_node.child_by_field_name("body") is not None:
        keyword = RECORD_KEYWORDS[type_node.type]
        name = extract_record_name(type_node, source_bytes)
        base = f"{keyword} {qualify(scope, name)}" if name else f"{keyword} (anonymous)"
    else:
        base = _node_text(type_node, source_bytes)

    qualifiers = [
        _node_text(child, source_bytes)
        for child in field_node.children
        if child.type == "type_qualifier"
    ]
    qualifiers = [q for q in qualifiers if q not in _IGNORED_QUALIFIERS]
    return normalize_type_description(" ".join(qualifiers + [base]))


def extract_members(
    field_node: Node,
    source_bytes: bytes,
    scope: List[str],
) -> List[DeclaredMember]:
    """Extract the data members declared by one ``field_declaration``.

    Args:
        field_node: A field_declaration node inside a record body.
        source_bytes: The raw source file bytes.
        scope: Qualified scope of the owning record (its name included).

    Returns:
        Zero or more members; ``int a, b;`` yields two. Static members and
        method prototypes yield none. The members of an anonymous union or
        struct member belong to the enclosing record, so they are returned
        in place, qualified with ``scope``.
    """
    if field_node.type != FIELD_DECLARATION:
        return []
    if _is_static_member(field_node, source_bytes):
        logger.debug("Skipping static member at line %d", field_node.start_point.row + 1)
        return []

    type_node = field_node.child_by_field_name("type")
    if type_node is None:
        return []
    declarators = field_node.children_by_field_name("declarator")
    if not declarators:
        if is_record_definition(type_node) and extract_record_name(type_node, source_bytes) is None:
            return _collect_record_members(
                type_node.child_by_field_name("body"), source_bytes, scope
            )
        return []

    base = _base_type_description(field_node, type_node, source_bytes, scope)
    members = []
    for declarator in declarators:
        name_node = _find_member_name(declarator)
        if name_node is None:
            logger.debug(
                "Skipping non-data declarator at line %d", declarator.start_point.row + 1
            )
            continue
        suffix = abstract_declarator(declarator, name_node, source_bytes)
        type_description = f"{base} {suffix}" if suffix else base
        members.append(
            DeclaredMember(
                type_description=type_description,
                qualified_name=qualify(scope, _node_text(name_node, source_bytes)),
            )
        )
    return members


def _collect_record_members(
    body: Node,
    source_bytes: bytes,
    scope: List[str],
) -> List[DeclaredMember]:
    members: List[DeclaredMember] = []
    for child in body.named_children:
        if child.type == FIELD_DECLARATION:
            members.extend(extract_members(child, source_bytes, scope))
        elif child.type in PREPROCESSOR_CONTAINERS:
            members.extend(_collect_record_members(child, source_bytes, scope))
    return members


def _visit_record(
    node: Node,
    source_bytes: bytes,
    scope: List[str],
    wrapper: Optional[Node] = None,
) -> Iterator[DeclaredType]:
    """Yield a record definition followed by the records nested in it."""
    if not is_record_definition(node):
        logger.debug("Skipping forward declaration at line %d", node.start_point.row + 1)
        return

    name = extract_record_name(node, source_bytes)
    if name is None and wrapper is not None:
        name = _typedef_name(wrapper, source_bytes)
    if not name:
        logger.debug("Skipping anonymous %s at line %d", node.type, node.start_point.row + 1)
        # Records declared inside an anonymous record live in the enclosing scope
        yield from _scan(node.child_by_field_name("body"), source_bytes, scope)
        return

    qualified_name = qualify(scope, name)
    record_scope = list(scope) + [name]
    body = node.child_by_field_name("body")

    declared = DeclaredType(
        qualified_name=qualified_name,
        kind=RECORD_KEYWORDS[node.type],
        members=tuple(_collect_record_members(body, source_bytes, record_scope)),
        start_line=node.start_point.row + 1,
    )
    logger.debug(
        "Found %s %s with %d members at line %d",
        declared.kind,
        declared.qualified_name,
        len(declared.members),
        declared.start_line,
    )
    yield declared

    yield from _scan(body, source_bytes, record_scope)


def _scan(node: Node, source_bytes: bytes, scope: List[str]) -> Iterator[DeclaredType]:
    """Scan the children of a container node for record definitions."""
    for child in node.children:
        if not child.is_named:
            continue

        if child.type in RECORD_TYPES:
            yield from _visit_record(child, source_bytes, scope)

        # Records wrapped in declarations: `struct P { } p;`, typedefs,
        # and nested records inside another record's body.
        elif child.type in (DECLARATION_NODE, TYPEDEF_NODE, FIELD_DECLARATION):
            type_node = child.child_by_field_name("type")
            if type_node is not None and type_node.type in RECORD_TYPES:
                yield from _visit_record(type_node, source_bytes, scope, wrapper=child)

        elif child.type == NAMESPACE_NODE:
            ns_name = extract_namespace_name(child, source_bytes)
            new_scope = scope + ns_name.split("::") if ns_name else list(scope)
            body = child.child_by_field_name("body")
            if body is not None:
                yield from _scan(body, source_bytes, new_scope)

        elif (
            child.type == TEMPLATE_WRAPPER
            or child.type in TRANSPARENT_WRAPPERS
            or child.type in PREPROCESSOR_CONTAINERS
            or child.type in CONTAINER_TYPES
        ):
            yield from _scan(child, source_bytes, scope)


def iter_declared_types(tree: Tree, source_bytes: bytes) -> Iterator[DeclaredType]:
    """Lazily yield every record definition in a parsed C++ tree.

    This is the main entry point for declaration discovery.

    Args:
        tree: The parsed AST tree.
        source_bytes: The raw source file bytes.

    Yields:
        DeclaredType entries in source pre-order.
    """
    yield from _scan(tree.root_node, source_bytes, [])
