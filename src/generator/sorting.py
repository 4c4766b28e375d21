"""
Deep key sorting for canonical, diffable output.
"""

from typing import Any


def sort_alphabetically(source: Any) -> Any:
    """
    Sort dictionary keys recursively.

    Lists keep their order; their members are sorted in turn. Scalars are
    returned unchanged. Sorting an already sorted value is a no-op.
    """
    if isinstance(source, dict):
        return {key: sort_alphabetically(source[key]) for key in sorted(source, key=str)}
    if isinstance(source, list):
        return [sort_alphabetically(item) for item in source]
    return source
