"""
FauxRedis Exceptions Module

Defines the exception hierarchy for FauxRedis error handling.
User-facing exceptions map to Redis error replies (prefix + message) so a
hosting layer can render them however its transport requires.
"""


class RedisError(Exception):
    """
    Base exception for all user-facing Redis errors.

    Attributes:
        prefix: str - Error prefix (e.g., 'ERR', 'WRONGTYPE')
    """

    prefix = 'ERR'

    def __init__(self, message=None):
        """
        Initialize Redis error.

        Args:
            message: str - Error message (without prefix)
        """
        self.message = message
        if message:
            super().__init__(f'{self.prefix} {message}')
        else:
            super().__init__(self.prefix)

    def to_resp(self):
        """
        Convert to RESP2 error string.

        Returns:
            bytes: RESP2-encoded error response
        """
        return f'-{str(self)}\r\n'.encode()


class WrongTypeError(RedisError):
    """
    Raised when a key is accessed as a kind it does not hold.

    Example: reading a hash key as a list.
    """

    prefix = 'WRONGTYPE'

    def __init__(self):
        super().__init__('Operation against a key holding the wrong kind of value')


class NotIntegerError(RedisError):
    """
    Raised when a value is not a valid integer.
    """

    def __init__(self):
        super().__init__('value is not an integer or out of range')


class NotFloatError(RedisError):
    """
    Raised when a value is not a valid float.
    """

    def __init__(self):
        super().__init__('value is not a valid float')


class ArgumentError(RedisError):
    """
    Raised when command arguments have the wrong shape or type.

    This is a caller error: the command is rejected before touching storage.
    """

    def __init__(self, message='invalid argument'):
        super().__init__(message)


class WrongArityError(ArgumentError):
    """
    Raised when a command has the wrong number of arguments.
    """

    def __init__(self, command_name):
        super().__init__(f"wrong number of arguments for '{command_name}' command")


class NoSuchKeyError(RedisError):
    """
    Raised when a key doesn't exist but is required.
    """

    def __init__(self):
        super().__init__('no such key')


class OutOfMemoryError(RedisError):
    """
    Raised when the key limit is reached and a new key would be created.

    OOM = Out Of Memory
    """

    prefix = 'OOM'

    def __init__(self):
        super().__init__('command not allowed: max keys limit reached')


class IncoherentError(RuntimeError):
    """
    Raised when the two halves of a sorted set disagree on membership.

    Signals a bug in the store itself, not bad input. Not a RedisError:
    hosts must not report it back to clients as a command failure.
    """

    def __init__(self, key=None):
        if key is None:
            super().__init__('incoherent sorted set')
        else:
            super().__init__(f'incoherent sorted set at key {key!r}')
        self.key = key
