"""
String cell for FauxRedis.

A string key holds exactly one scalar. The cell exists so command bodies
can mutate a string in place through the same write-handle contract as
the container kinds.
"""


class StringCell:
    """
    Single-slot holder for a string value.

    `value` is None while the cell is unset; an empty string is a real value.
    """

    __slots__ = ('value',)

    def __init__(self, value=None):
        self.value = value

    def is_empty(self):
        return self.value is None

    def __eq__(self, other):
        if isinstance(other, StringCell):
            return self.value == other.value
        return NotImplemented

    def __repr__(self):
        return f'StringCell({self.value!r})'
