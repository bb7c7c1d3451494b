"""
FauxRedis Storage Engine Module

Dict-based, in-process storage engine reproducing the Redis data model.

Keys map to one of five kinds of value. Command bodies never touch the
dictionaries directly; they go through two typed accessors:

- read(key, kind): type-checked view, absent keys read as an empty default
  without being created
- write(key, kind): type-checked live value, created on first use

and call cleanup(key) after any operation that can leave a value empty,
so that no key is ever observable with an empty value.

Memory Layout:
- _data: {str: value} - actual data storage
- _types: {str: int} - kind of every stored key
"""

import random
import threading

from fauxredis.config import get_config
from fauxredis.exceptions import (
    WrongTypeError, NoSuchKeyError, OutOfMemoryError, IncoherentError
)
from fauxredis.storage.datatypes import StringCell, CursorList, SortedSet
from fauxredis.utils import (
    check_arg, get_args, fixed_arity, compile_pattern, log
)

# Storage type constants
TYPE_STRING = 0
TYPE_HASH = 1
TYPE_LIST = 2
TYPE_SET = 3
TYPE_ZSET = 4

# Type name mappings
TYPE_NAMES = {
    TYPE_STRING: 'string',
    TYPE_HASH: 'hash',
    TYPE_LIST: 'list',
    TYPE_SET: 'set',
    TYPE_ZSET: 'zset',
}


class Storage:
    """
    Main storage engine for FauxRedis.

    Single-threaded by contract. A host that runs commands from several
    threads must hold `lock` for a command's whole read-modify-write
    sequence (accessor, mutation, cleanup); the generic key commands take
    it themselves.
    """

    __slots__ = ('_data', '_types', '_config', 'lock')

    def __init__(self, config=None):
        """
        Initialize empty storage engine.

        Args:
            config: Config | None - Configuration (default: global config)
        """
        self._data = {}      # Main data storage: key -> value
        self._types = {}     # Type tracking: key -> TYPE_*
        self._config = config if config is not None else get_config()
        self.lock = threading.RLock()

    # =========================================================================
    # Typed Access
    # =========================================================================

    @staticmethod
    def default_value(kind):
        """
        Build the empty representation of a kind.

        Args:
            kind: int - TYPE_* constant

        Returns:
            A fresh empty value

        Raises:
            ValueError: If kind is not a TYPE_* constant
        """
        if kind == TYPE_STRING:
            return StringCell()
        if kind == TYPE_LIST:
            return CursorList()
        if kind == TYPE_HASH:
            return {}
        if kind == TYPE_SET:
            return set()
        if kind == TYPE_ZSET:
            return SortedSet()
        raise ValueError(f'unknown kind {kind!r}')

    def _value_is_empty(self, key):
        kind = self._types[key]
        value = self._data[key]

        if kind in (TYPE_HASH, TYPE_SET):
            return not value
        if kind == TYPE_ZSET:
            try:
                return value.is_empty()
            except IncoherentError as e:
                log('warning', f'Sorted set at {key!r} is incoherent: {value!r}', self._config)
                raise IncoherentError(key) from e
        # StringCell and CursorList
        return value.is_empty()

    def read(self, key, kind):
        """
        Get the value of a key for reading.

        An absent key reads as the kind's default value; nothing is created.
        For a present key the stored object itself is returned, not a copy:
        callers must treat it as read-only and use write() to mutate.

        Args:
            key: str - key to read
            kind: int - TYPE_* constant the caller expects

        Returns:
            The stored value, or a fresh default if the key is absent

        Raises:
            WrongTypeError: If the key holds another kind
        """
        key = check_arg(key)
        default = self.default_value(kind)

        if key not in self._data:
            return default

        if self._types[key] != kind:
            raise WrongTypeError()

        return self._data[key]

    def write(self, key, kind):
        """
        Get the live value of a key for mutation, creating it if needed.

        The returned object is owned by the store; callers mutate it in
        place during the current command and must not keep it afterwards.
        An existing entry whose value is empty is replaced by a fresh
        default of the requested kind.

        Args:
            key: str - key to write
            kind: int - TYPE_* constant the caller expects

        Returns:
            The mutable stored value

        Raises:
            WrongTypeError: If the key holds a non-empty value of another kind
            OutOfMemoryError: If creating the key would exceed 'maxkeys'
        """
        key = check_arg(key)
        default = self.default_value(kind)

        if key in self._data and not self._value_is_empty(key):
            if self._types[key] != kind:
                raise WrongTypeError()
            return self._data[key]

        self._check_can_create_key(key)
        self._data[key] = default
        self._types[key] = kind
        log('debug', f'Created {TYPE_NAMES[kind]} key {key!r}', self._config)
        return default

    def replace(self, key, kind):
        """
        Install a fresh default entry of `kind`, whatever the key held.

        Used by overwriting commands (SET, SORT ... STORE, *STORE variants).

        Returns:
            The new mutable value
        """
        key = check_arg(key)
        default = self.default_value(kind)
        self._check_can_create_key(key)
        self._data[key] = default
        self._types[key] = kind
        return default

    def _check_can_create_key(self, key):
        """
        Check if a new key can be created ('maxkeys' limit).

        Raises:
            OutOfMemoryError: If the limit would be exceeded
        """
        maxkeys = self._config.get('maxkeys')
        if maxkeys and key not in self._data and len(self._data) >= maxkeys:
            log('warning', f'Rejected key {key!r}: maxkeys limit ({maxkeys}) reached', self._config)
            raise OutOfMemoryError()

    def is_empty(self, key):
        """
        Check whether a key's value is empty (absent keys are empty).

        Raises:
            IncoherentError: If a sorted set's two parts disagree
        """
        key = check_arg(key)
        if key not in self._data:
            return True
        return self._value_is_empty(key)

    def cleanup(self, key):
        """
        Delete a key if its value became empty.

        Must be called by every command that can shrink a value (pops,
        member removals, ...).

        Returns:
            bool: True if the key was deleted
        """
        key = check_arg(key)
        if key in self._data and self._value_is_empty(key):
            del self._data[key]
            del self._types[key]
            return True
        return False

    # =========================================================================
    # Key Operations
    # =========================================================================

    @fixed_arity(1)
    def exists(self, key):
        """
        Check whether a key exists.

        Args:
            key: str - key to check

        Returns:
            bool: True if the key is present
        """
        with self.lock:
            return key in self._data

    def delete(self, *keys):
        """
        Delete one or more keys.

        Args:
            *keys: str - keys to delete (at least one)

        Returns:
            int: number of keys that existed
        """
        keys = get_args(*keys)
        count = 0
        with self.lock:
            for key in keys:
                if key in self._data:
                    del self._data[key]
                    del self._types[key]
                    count += 1
        return count

    @fixed_arity(1)
    def keys(self, pattern):
        """
        Find all keys matching a glob pattern.

        Args:
            pattern: str - glob pattern (* ? [abc] \\x)

        Returns:
            list[str]: matching keys, sorted unless 'sort_keys' is off
        """
        matches = compile_pattern(pattern)
        with self.lock:
            result = [key for key in self._data if matches(key)]
        if self._config.get('sort_keys'):
            result.sort()
        return result

    @fixed_arity(1)
    def type(self, key):
        """
        Get type of key.

        Returns:
            str: type name (string, hash, list, set, zset, none)
        """
        with self.lock:
            if key not in self._data:
                return 'none'
            return TYPE_NAMES[self._types[key]]

    @fixed_arity(2)
    def rename(self, key, newkey):
        """
        Rename a key, overwriting the destination.

        Args:
            key: str - source key
            newkey: str - destination key

        Returns:
            bool: True if renamed

        Raises:
            NoSuchKeyError: If source key doesn't exist
        """
        with self.lock:
            if key not in self._data:
                raise NoSuchKeyError()
            if key == newkey:
                return True

            self._data[newkey] = self._data.pop(key)
            self._types[newkey] = self._types.pop(key)

        log('debug', f'Renamed {key!r} to {newkey!r}', self._config)
        return True

    @fixed_arity(2)
    def renamenx(self, key, newkey):
        """
        Rename a key only if new key doesn't exist.

        Returns:
            bool: True if renamed, False if dest already exists

        Raises:
            NoSuchKeyError: If source key doesn't exist
        """
        with self.lock:
            if key not in self._data:
                raise NoSuchKeyError()
            if newkey in self._data:
                return False
            return self.rename(key, newkey)

    def randomkey(self):
        """
        Get a random existing key.

        Returns:
            str | None: a key, or None if the store is empty
        """
        with self.lock:
            if not self._data:
                return None
            return random.choice(list(self._data))

    def dbsize(self):
        """Number of keys in the store."""
        with self.lock:
            return len(self._data)

    def __len__(self):
        return self.dbsize()

    def flushdb(self):
        """
        Remove every key.

        Returns:
            bool: True
        """
        with self.lock:
            count = len(self._data)
            self._data.clear()
            self._types.clear()
        log('notice', f'Flushed {count} keys', self._config)
        return True
