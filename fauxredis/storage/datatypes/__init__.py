"""
FauxRedis Data Types Module

Value representations for the five Redis kinds:

- String: StringCell, a single mutable slot
- List: CursorList, head/tail cursors over a slot dict
- Hash: plain dict (field -> value)
- Set: plain set of members
- Sorted Set: SortedSet, score dict plus sorted (score, member) list
"""

from .string import StringCell
from .list import CursorList
from .zset import SortedSet

__all__ = [
    'StringCell',
    'CursorList',
    'SortedSet',
]
