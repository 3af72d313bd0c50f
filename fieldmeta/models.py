"""
Metadata model for extracted records and their data members.

Two-level, append-only collection: a ``MetadataDatabase`` owns ordered
``TypeRecord`` entries, each of which owns ordered ``FieldRecord`` entries.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterator, List, Tuple


@dataclass(frozen=True)
class FieldRecord:
    """A single data member of a record.

    Attributes:
        type: Declared type description as rendered by the analyzer
            (e.g. ``const char *``, ``std::vector<int>``, ``int [4]``).
        variable: Fully qualified member name (e.g. ``ns::Point::x``).
    """

    type: str
    variable: str

    def to_dict(self) -> Dict[str, str]:
        """Convert the field to a dictionary in rendering order."""
        return asdict(self)


class TypeRecord:
    """A declared record type and its data members in declaration order."""

    __slots__ = ("_name", "_fields")

    def __init__(self, name: str):
        self._name = name
        self._fields: List[FieldRecord] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def fields(self) -> Tuple[FieldRecord, ...]:
        return tuple(self._fields)

    def add_field(self, type: str, variable: str) -> FieldRecord:
        """Append a new member and return it.

        The returned record is fully populated and immutable.
        """
        field_record = FieldRecord(type=type, variable=variable)
        self._fields.append(field_record)
        return field_record

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[FieldRecord]:
        return iter(tuple(self._fields))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self._name,
            "fields": [f.to_dict() for f in self._fields],
        }

    def __repr__(self) -> str:
        return f"TypeRecord(name={self._name!r}, fields={len(self._fields)})"


class MetadataDatabase:
    """Ordered aggregation of every record accepted during traversal.

    Populated once (append-only) while declarations are visited, then read
    once by the renderer. Duplicate names are kept as distinct entries.
    """

    def __init__(self):
        self._types: List[TypeRecord] = []

    @property
    def types(self) -> Tuple[TypeRecord, ...]:
        return tuple(self._types)

    def add_type(self, name: str) -> TypeRecord:
        """Append a new, empty record named ``name`` and return it."""
        type_record = TypeRecord(name)
        self._types.append(type_record)
        return type_record

    def merge(self, other: "MetadataDatabase") -> None:
        """Append all records of ``other`` after the existing ones.

        Used to combine per-file shards in input order.
        """
        if other is self:
            raise ValueError("Cannot merge a database into itself")
        self._types.extend(other._types)

    def field_count(self) -> int:
        return sum(len(t) for t in self._types)

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[TypeRecord]:
        return iter(tuple(self._types))

    def to_list(self) -> List[Dict[str, Any]]:
        """Convert the database to plain lists/dicts suitable for JSON."""
        return [t.to_dict() for t in self._types]

    def __repr__(self) -> str:
        return f"MetadataDatabase(types={len(self._types)}, fields={self.field_count()})"
