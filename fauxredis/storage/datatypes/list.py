"""
FauxRedis List Representation

Lists are stored as a dict of slots addressed by integer positions between
a head and a tail cursor:

    head          tail
     v              v
    [h][h+1]...[t-1]

LPUSH/LPOP move the head cursor, RPUSH/RPOP move the tail cursor, so
pushes and pops at either end never reindex the body. Positions may go
negative; only the cursors' difference matters. The list is empty exactly
when head == tail.
"""


class CursorList:
    """
    Double-ended list addressed through head/tail cursors.
    """

    __slots__ = ('head', 'tail', '_slots')

    def __init__(self, values=None):
        self.head = 0
        self.tail = 0
        self._slots = {}
        if values:
            for value in values:
                self.rpush(value)

    def __len__(self):
        return self.tail - self.head

    def is_empty(self):
        return self.head == self.tail

    def __iter__(self):
        for pos in range(self.head, self.tail):
            yield self._slots[pos]

    def _position(self, index):
        """
        Map a Redis-style index (negative counts from the tail) to a slot.

        Raises:
            IndexError: If index is out of range
        """
        length = self.tail - self.head
        if index < 0:
            index += length
        if index < 0 or index >= length:
            raise IndexError('list index out of range')
        return self.head + index

    def __getitem__(self, index):
        return self._slots[self._position(index)]

    def __setitem__(self, index, value):
        self._slots[self._position(index)] = value

    def lpush(self, value):
        """Insert value before the head."""
        self.head -= 1
        self._slots[self.head] = value

    def rpush(self, value):
        """Append value after the tail."""
        self._slots[self.tail] = value
        self.tail += 1

    def lpop(self):
        """
        Remove and return the first element.

        Returns:
            The element, or None if the list is empty
        """
        if self.head == self.tail:
            return None
        value = self._slots.pop(self.head)
        self.head += 1
        return value

    def rpop(self):
        """
        Remove and return the last element.

        Returns:
            The element, or None if the list is empty
        """
        if self.head == self.tail:
            return None
        self.tail -= 1
        return self._slots.pop(self.tail)

    def range(self, start, stop):
        """
        Get elements between two inclusive Redis-style indices.

        Args:
            start: int - First index (negative counts from the tail)
            stop: int - Last index, inclusive

        Returns:
            list: Elements in range (empty if the range is empty)
        """
        length = self.tail - self.head
        if start < 0:
            start = max(0, length + start)
        if stop < 0:
            stop = length + stop
        stop = min(stop, length - 1)
        if start > stop:
            return []
        return [self._slots[pos] for pos in range(self.head + start, self.head + stop + 1)]

    def replace(self, values):
        """
        Replace the whole body, resetting the cursors.

        Used by operations that remove from the middle (LREM, LTRIM), where
        reindexing is unavoidable anyway.
        """
        self.head = 0
        self.tail = 0
        self._slots = {}
        for value in values:
            self.rpush(value)

    def __eq__(self, other):
        if isinstance(other, CursorList):
            return list(self) == list(other)
        return NotImplemented

    def __repr__(self):
        return f'CursorList({list(self)!r})'
