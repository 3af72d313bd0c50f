"""
Name-based inclusion filter consulted for every visited record.
"""

from typing import Sequence


def should_include(qualified_name: str, patterns: Sequence[str]) -> bool:
    """Decide whether a record should be recorded.

    Args:
        qualified_name: Fully qualified record name (e.g. ``ns::FooBar``).
        patterns: Literal substrings; an empty sequence means "everything".

    Returns:
        True if ``patterns`` is empty or any pattern occurs in the name.

    Example:
        >>> should_include("ns::FooBar", ["Foo"])
        True
        >>> should_include("ns::Baz", ["Foo"])
        False
    """
    if not patterns:
        return True
    return any(pattern in qualified_name for pattern in patterns)
