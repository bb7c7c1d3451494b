"""
Storage backend module for FauxRedis.

Provides the in-memory storage engine and the value representations it
hands out to command implementations.
"""

from fauxredis.storage.engine import (
    Storage, TYPE_STRING, TYPE_HASH, TYPE_LIST, TYPE_SET, TYPE_ZSET, TYPE_NAMES
)

__all__ = [
    'Storage',
    'TYPE_STRING',
    'TYPE_HASH',
    'TYPE_LIST',
    'TYPE_SET',
    'TYPE_ZSET',
    'TYPE_NAMES',
]
