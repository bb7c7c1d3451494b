"""
FauxRedis - An in-process Redis data model for tests and embedding.

FauxRedis reproduces the key/value semantics of a Redis server without any
network layer: five value kinds, WRONGTYPE errors, bounded integer
coercion, empty-key cleanup and glob-based key lookup.

Usage:
    from fauxredis import Storage, TYPE_LIST

    storage = Storage()
    items = storage.write('queue', TYPE_LIST)
    items.rpush('job-1')
    items.lpop()
    storage.cleanup('queue')
"""

from fauxredis.config import Config, get_config, init_config
from fauxredis.exceptions import (
    RedisError, WrongTypeError, NotIntegerError, NotFloatError,
    ArgumentError, WrongArityError, NoSuchKeyError, OutOfMemoryError,
    IncoherentError,
)
from fauxredis.storage import (
    Storage, TYPE_STRING, TYPE_HASH, TYPE_LIST, TYPE_SET, TYPE_ZSET, TYPE_NAMES
)
from fauxredis.utils import (
    to_int, to_float, to_str, char_bitcount, require_int, require_float,
    check_arg, get_args, check_args, get_args_as_map, fixed_arity,
    compile_pattern, glob_match,
)

__version__ = '1.0.0'
__all__ = [
    '__version__',
    'Config', 'get_config', 'init_config',
    'RedisError', 'WrongTypeError', 'NotIntegerError', 'NotFloatError',
    'ArgumentError', 'WrongArityError', 'NoSuchKeyError', 'OutOfMemoryError',
    'IncoherentError',
    'Storage', 'TYPE_STRING', 'TYPE_HASH', 'TYPE_LIST', 'TYPE_SET',
    'TYPE_ZSET', 'TYPE_NAMES',
    'to_int', 'to_float', 'to_str', 'char_bitcount', 'require_int',
    'require_float', 'check_arg', 'get_args', 'check_args',
    'get_args_as_map', 'fixed_arity', 'compile_pattern', 'glob_match',
]
