"""
Test suite for the FauxRedis storage engine.

Covers typed read/write access, auto-vivification, type stability,
empty-key cleanup, sorted set coherence and the generic key commands.
"""

import sys
import os
import threading

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from fauxredis.config import Config
from fauxredis.exceptions import (
    WrongTypeError, ArgumentError, WrongArityError, NoSuchKeyError,
    OutOfMemoryError, IncoherentError
)
from fauxredis.storage.datatypes import StringCell, CursorList, SortedSet
from fauxredis.storage.engine import (
    Storage, TYPE_STRING, TYPE_HASH, TYPE_LIST, TYPE_SET, TYPE_ZSET
)

ALL_KINDS = (TYPE_STRING, TYPE_HASH, TYPE_LIST, TYPE_SET, TYPE_ZSET)


def make_storage(**options):
    """Create a quiet storage engine."""
    config = {'loglevel': 'warning'}
    config.update(options)
    return Storage(Config(config))


def expect_error(exception_type, func, *args):
    """Call func and return the exception_type it raised."""
    try:
        func(*args)
    except exception_type as e:
        return e
    raise AssertionError(f'expected {exception_type.__name__}')


def populate(storage, key, kind):
    """Store a one-element value of the given kind."""
    value = storage.write(key, kind)
    if kind == TYPE_STRING:
        value.value = 'v'
    elif kind == TYPE_HASH:
        value['field'] = 'v'
    elif kind == TYPE_LIST:
        value.rpush('v')
    elif kind == TYPE_SET:
        value.add('v')
    elif kind == TYPE_ZSET:
        value.add('v', 1.0)
    return value


def drain(storage, key, kind):
    """Remove the element stored by populate()."""
    value = storage.write(key, kind)
    if kind == TYPE_STRING:
        value.value = None
    elif kind == TYPE_HASH:
        del value['field']
    elif kind == TYPE_LIST:
        value.lpop()
    elif kind == TYPE_SET:
        value.discard('v')
    elif kind == TYPE_ZSET:
        value.remove('v')


def test_default_values():
    """Test empty representations of each kind."""
    assert Storage.default_value(TYPE_STRING) == StringCell()
    assert Storage.default_value(TYPE_HASH) == {}
    assert Storage.default_value(TYPE_SET) == set()

    items = Storage.default_value(TYPE_LIST)
    assert isinstance(items, CursorList)
    assert items.head == 0 and items.tail == 0

    zset = Storage.default_value(TYPE_ZSET)
    assert isinstance(zset, SortedSet)
    assert zset.scores == {} and zset.ordered == []

    # Fresh object every time
    assert Storage.default_value(TYPE_HASH) is not Storage.default_value(TYPE_HASH)

    expect_error(ValueError, Storage.default_value, 99)

    print("[OK] Default values")


def test_read_absent_does_not_create():
    """Test that reads of absent keys never materialize entries."""
    storage = make_storage()

    for kind in ALL_KINDS:
        value = storage.read('missing', kind)
        assert value == Storage.default_value(kind)

    assert storage.exists('missing') is False
    assert storage.dbsize() == 0

    print("[OK] Read of absent key")


def test_write_auto_vivifies():
    """Test that write() creates and returns the live value."""
    storage = make_storage()

    fields = storage.write('h', TYPE_HASH)
    fields['f'] = 'v'

    assert storage.exists('h') is True
    assert storage.read('h', TYPE_HASH) is fields
    assert storage.write('h', TYPE_HASH) is fields
    assert storage.type('h') == 'hash'

    print("[OK] Write auto-vivification")


def test_type_mismatch():
    """Test WRONGTYPE errors leave the store unchanged."""
    storage = make_storage()
    populate(storage, 'h', TYPE_HASH)

    e = expect_error(WrongTypeError, storage.write, 'h', TYPE_LIST)
    assert str(e) == 'WRONGTYPE Operation against a key holding the wrong kind of value'
    assert e.to_resp() == b'-WRONGTYPE Operation against a key holding the wrong kind of value\r\n'
    expect_error(WrongTypeError, storage.read, 'h', TYPE_STRING)

    assert storage.read('h', TYPE_HASH) == {'field': 'v'}
    assert storage.type('h') == 'hash'

    print("[OK] Type mismatch")


def test_type_stability():
    """Test every pair of distinct kinds conflicts until the key is gone."""
    for kind in ALL_KINDS:
        storage = make_storage()
        populate(storage, 'k', kind)

        for other in ALL_KINDS:
            if other == kind:
                continue
            expect_error(WrongTypeError, storage.read, 'k', other)
            expect_error(WrongTypeError, storage.write, 'k', other)

        storage.delete('k')
        for other in ALL_KINDS:
            storage.read('k', other)

    print("[OK] Type stability")


def test_cleanup_removes_empty_keys():
    """Test that draining any kind and cleaning up removes the key."""
    for kind in ALL_KINDS:
        storage = make_storage()
        populate(storage, 'k', kind)
        assert storage.cleanup('k') is False
        assert storage.exists('k') is True

        drain(storage, 'k', kind)
        assert storage.is_empty('k') is True
        assert storage.cleanup('k') is True
        assert storage.exists('k') is False
        assert storage.keys('*') == []

    print("[OK] Cleanup of empty keys")


def test_cleanup_untouched_write():
    """Test that an unmutated write handle is cleaned up."""
    storage = make_storage()
    storage.write('s', TYPE_SET)
    assert storage.is_empty('s') is True
    assert storage.cleanup('s') is True
    assert storage.exists('s') is False

    # Absent keys are empty and cleanup is a no-op
    assert storage.is_empty('nope') is True
    assert storage.cleanup('nope') is False

    print("[OK] Cleanup of unmutated write")


def test_empty_placeholder_replaced():
    """Test that write() replaces an empty entry of another kind."""
    storage = make_storage()
    storage.write('k', TYPE_SET)

    fields = storage.write('k', TYPE_HASH)
    fields['f'] = 'v'
    assert storage.type('k') == 'hash'

    print("[OK] Empty placeholder replaced")


def test_empty_string_is_a_value():
    """Test that '' is stored, only None counts as an empty cell."""
    storage = make_storage()
    cell = storage.write('s', TYPE_STRING)
    cell.value = ''

    assert storage.is_empty('s') is False
    assert storage.cleanup('s') is False
    assert storage.read('s', TYPE_STRING).value == ''

    print("[OK] Empty string is a value")


def test_list_cursors_through_store():
    """Test list push/pop through the store with cleanup."""
    storage = make_storage()

    items = storage.write('q', TYPE_LIST)
    items.rpush('a')
    items.rpush('b')
    items.lpush('z')
    assert list(storage.read('q', TYPE_LIST)) == ['z', 'a', 'b']

    items = storage.write('q', TYPE_LIST)
    assert items.lpop() == 'z'
    assert items.rpop() == 'b'
    storage.cleanup('q')
    assert storage.exists('q') is True

    assert items.lpop() == 'a'
    storage.cleanup('q')
    assert storage.exists('q') is False

    print("[OK] List through store")


def test_incoherent_zset():
    """Test that a zset whose parts disagree aborts emptiness checks."""
    storage = make_storage(loglevel='warning')

    zset = storage.write('z', TYPE_ZSET)
    zset.scores['m'] = 1.0   # bypass add(): ordering left empty

    e = expect_error(IncoherentError, storage.is_empty, 'z')
    assert e.key == 'z'
    expect_error(IncoherentError, storage.cleanup, 'z')
    assert storage.exists('z') is True

    other = storage.write('y', TYPE_ZSET)
    other.ordered.append((1.0, 'm'))
    expect_error(IncoherentError, storage.is_empty, 'y')

    # Not a user-facing error
    assert not isinstance(e, ArgumentError)

    print("[OK] Incoherent zset")


def test_replace():
    """Test whole-entry replacement across kinds."""
    storage = make_storage()
    populate(storage, 'k', TYPE_HASH)

    cell = storage.replace('k', TYPE_STRING)
    cell.value = 'plain'
    assert storage.type('k') == 'string'
    assert storage.read('k', TYPE_STRING).value == 'plain'

    print("[OK] Replace")


def test_failed_normalization_has_no_effect():
    """Test that bad arguments are rejected before touching the store."""
    storage = make_storage()

    expect_error(ArgumentError, storage.write, None, TYPE_HASH)
    expect_error(ArgumentError, storage.write, b'k', TYPE_HASH)
    expect_error(ArgumentError, storage.delete)
    assert storage.dbsize() == 0

    # Numeric keys are normalized
    storage.write(7, TYPE_SET).add('m')
    assert storage.exists('7') is True
    assert storage.exists(7) is True

    print("[OK] Failed normalization has no effect")


def test_delete_accounting():
    """Test DEL counts only keys that existed."""
    storage = make_storage()
    populate(storage, 'a', TYPE_STRING)

    assert storage.delete('a', 'b') == 1
    assert storage.exists('a') is False
    assert storage.delete('a') == 0

    populate(storage, 'x', TYPE_LIST)
    populate(storage, 'y', TYPE_ZSET)
    assert storage.delete('x', 'y', 'x') == 2
    assert storage.dbsize() == 0

    print("[OK] Delete accounting")


def test_keys():
    """Test KEYS pattern filtering."""
    storage = make_storage()
    for key in ('user:2', 'user:1', 'account:1'):
        populate(storage, key, TYPE_STRING)

    assert storage.keys('user:*') == ['user:1', 'user:2']
    assert storage.keys('*') == ['account:1', 'user:1', 'user:2']
    assert storage.keys('*:1') == ['account:1', 'user:1']
    assert storage.keys('nothing*') == []

    expect_error(WrongArityError, storage.keys)

    unsorted = make_storage(sort_keys=False)
    for key in ('b', 'a', 'c'):
        populate(unsorted, key, TYPE_SET)
    assert sorted(unsorted.keys('*')) == ['a', 'b', 'c']

    print("[OK] Keys")


def test_type():
    """Test TYPE for every kind."""
    storage = make_storage()
    names = {
        TYPE_STRING: 'string',
        TYPE_HASH: 'hash',
        TYPE_LIST: 'list',
        TYPE_SET: 'set',
        TYPE_ZSET: 'zset',
    }
    for kind, name in names.items():
        populate(storage, name, kind)
        assert storage.type(name) == name

    assert storage.type('missing') == 'none'

    print("[OK] Type")


def test_rename():
    """Test RENAME and RENAMENX."""
    storage = make_storage()
    populate(storage, 'src', TYPE_LIST)
    populate(storage, 'dst', TYPE_HASH)

    assert storage.rename('src', 'dst') is True
    assert storage.exists('src') is False
    assert storage.type('dst') == 'list'
    assert list(storage.read('dst', TYPE_LIST)) == ['v']

    assert storage.rename('dst', 'dst') is True
    assert storage.type('dst') == 'list'

    expect_error(NoSuchKeyError, storage.rename, 'src', 'dst')
    expect_error(NoSuchKeyError, storage.renamenx, 'src', 'dst')

    populate(storage, 'other', TYPE_SET)
    assert storage.renamenx('other', 'dst') is False
    assert storage.type('other') == 'set'
    assert storage.renamenx('other', 'fresh') is True
    assert storage.type('fresh') == 'set'

    print("[OK] Rename")


def test_randomkey_dbsize_flush():
    """Test RANDOMKEY, DBSIZE and FLUSHDB."""
    storage = make_storage()
    assert storage.randomkey() is None

    for key in ('a', 'b', 'c'):
        populate(storage, key, TYPE_STRING)

    assert storage.randomkey() in ('a', 'b', 'c')
    assert storage.dbsize() == 3
    assert len(storage) == 3

    assert storage.flushdb() is True
    assert storage.dbsize() == 0
    assert storage.keys('*') == []

    print("[OK] RANDOMKEY / DBSIZE / FLUSHDB")


def test_maxkeys_limit():
    """Test the key limit on auto-vivification."""
    storage = make_storage(maxkeys=2)
    populate(storage, 'a', TYPE_STRING)
    populate(storage, 'b', TYPE_STRING)

    expect_error(OutOfMemoryError, storage.write, 'c', TYPE_HASH)
    expect_error(OutOfMemoryError, storage.replace, 'c', TYPE_HASH)
    assert storage.exists('c') is False

    # Existing keys stay writable
    storage.write('a', TYPE_STRING).value = 'again'
    storage.replace('b', TYPE_SET).add('m')

    storage.delete('a')
    populate(storage, 'c', TYPE_HASH)
    assert storage.dbsize() == 2

    print("[OK] maxkeys limit")


def test_lock_serializes_commands():
    """Test read-modify-write sequences under the store lock."""
    storage = make_storage()

    def worker():
        for _ in range(200):
            with storage.lock:
                cell = storage.write('counter', TYPE_STRING)
                cell.value = str(int(cell.value or '0') + 1)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert storage.read('counter', TYPE_STRING).value == '800'

    print("[OK] Lock serializes commands")


def run_all_tests():
    """Run all storage tests."""
    print("=" * 60)
    print("FauxRedis Storage Tests")
    print("=" * 60)

    test_default_values()
    test_read_absent_does_not_create()
    test_write_auto_vivifies()
    test_type_mismatch()
    test_type_stability()
    test_cleanup_removes_empty_keys()
    test_cleanup_untouched_write()
    test_empty_placeholder_replaced()
    test_empty_string_is_a_value()
    test_list_cursors_through_store()
    test_incoherent_zset()
    test_replace()
    test_failed_normalization_has_no_effect()
    test_delete_accounting()
    test_keys()
    test_type()
    test_rename()
    test_randomkey_dbsize_flush()
    test_maxkeys_limit()
    test_lock_serializes_commands()

    print("\n" + "=" * 60)
    print("All storage tests passed!")
    print("=" * 60)


if __name__ == '__main__':
    run_all_tests()
