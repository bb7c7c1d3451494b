"""
FauxRedis Utility Functions

Shared helpers used by every command implementation:

- Numeric coercion (bounded integers, floats, canonical strings)
- Argument normalization for variadic commands
- Glob pattern compilation for KEYS-style key matching
- Print-based logging filtered by the configured log level
"""

import functools
import math
import re
from decimal import Decimal

from fauxredis.exceptions import (
    ArgumentError, WrongArityError, NotIntegerError, NotFloatError
)


# Largest magnitude an integer may have without losing precision as a double
MAX_SAFE_INT = 2 ** 53 - 1

LOG_LEVELS = {
    'debug': 0,
    'verbose': 1,
    'notice': 2,
    'warning': 3,
}

_MAX_SAFE_DIGITS = len(str(MAX_SAFE_INT))

# ASCII digits only; \d would also accept other Unicode digits
_INT_RE = re.compile(r'[+-]?[0-9]+')
_DECIMAL_RE = re.compile(r'[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?')

_INFINITIES = {
    'inf': float('inf'),
    '+inf': float('inf'),
    '-inf': float('-inf'),
}


# =============================================================================
# Logging
# =============================================================================

def log(level, message, config=None):
    """
    Print a log line if `level` passes the configured threshold.

    Args:
        level: str - One of LOG_LEVELS
        message: str - Text to print
        config: Config | None - Config to read 'loglevel' from (default: global)
    """
    if config is None:
        from fauxredis.config import get_config
        config = get_config()

    threshold = LOG_LEVELS.get(config.get('loglevel'), LOG_LEVELS['notice'])
    if LOG_LEVELS.get(level, LOG_LEVELS['notice']) >= threshold:
        print(f'[FauxRedis] {message}')


# =============================================================================
# Numeric Coercion
# =============================================================================

def _is_number(x):
    # bool is an int subclass but never a number argument
    return isinstance(x, (int, float)) and not isinstance(x, bool)


def is_bounded_integer(x):
    """
    Check whether x is an integral number within +/-(2^53 - 1).

    Args:
        x: Any - Value to check

    Returns:
        bool: True for ints and integral floats in range
    """
    if not _is_number(x):
        return False
    if isinstance(x, float) and not x.is_integer():
        return False
    return -MAX_SAFE_INT <= x <= MAX_SAFE_INT


def to_int(x):
    """
    Parse a bounded integer from a number or numeric string.

    Decimal and exponent notation is accepted as long as the value is
    integral ('1e3' -> 1000, '2.0' -> 2). Values with a fractional part or
    a magnitude above 2^53 - 1 are rejected, never rounded or wrapped.

    Args:
        x: int, float or str - Value to parse

    Returns:
        int | None: The integer, or None if x is not a valid integer
    """
    if isinstance(x, str):
        if _INT_RE.fullmatch(x):
            # Too many significant digits is out of range; never hand
            # int() a string past its digit limit
            digits = x.lstrip('+-').lstrip('0')
            if len(digits) > _MAX_SAFE_DIGITS:
                return None
            n = int(digits or '0')
            if x[0] == '-':
                n = -n
        elif _DECIMAL_RE.fullmatch(x):
            n = _decimal_to_int(Decimal(x))
            if n is None:
                return None
        else:
            return None
    elif is_bounded_integer(x):
        n = int(x)
    else:
        return None

    if n > MAX_SAFE_INT or n < -MAX_SAFE_INT:
        return None
    return n


def _decimal_to_int(d):
    """
    Convert an exact Decimal literal to int if it is integral and small.

    Works from the digit tuple only, so huge exponents never go through
    context arithmetic.

    Returns:
        int | None: The integer, or None if fractional or too large
    """
    _, digits, exponent = d.as_tuple()
    if not any(digits):
        return 0
    if d.adjusted() >= _MAX_SAFE_DIGITS:
        return None
    if exponent < 0 and any(digits[exponent:]):
        return None
    return int(d)


def to_float(x):
    """
    Parse a float from a number or numeric string.

    Args:
        x: int, float or str - Value to parse ('inf', '+inf', '-inf' allowed)

    Returns:
        float | None: The float, or None if x is not a valid float
    """
    if _is_number(x):
        try:
            f = float(x)
        except OverflowError:
            # int too large for a double
            return None
        # NaN is rejected the same way the string 'nan' is
        return None if math.isnan(f) else f
    if not isinstance(x, str):
        return None
    if x in _INFINITIES:
        return _INFINITIES[x]
    if _DECIMAL_RE.fullmatch(x):
        return float(x)
    return None


def require_int(x):
    """Like to_int(), but raises NotIntegerError on invalid input."""
    n = to_int(x)
    if n is None:
        raise NotIntegerError()
    return n


def require_float(x):
    """Like to_float(), but raises NotFloatError on invalid input."""
    f = to_float(x)
    if f is None:
        raise NotFloatError()
    return f


def to_str(x):
    """
    Render a value in canonical string form.

    Bounded integers (including integral floats) are rendered as exact
    decimals, so 1e15 becomes '1000000000000000' rather than '1e+15'.

    Args:
        x: Any - Value to render

    Returns:
        str: Canonical string form
    """
    if is_bounded_integer(x):
        return '%d' % x
    return str(x)


def char_bitcount(x):
    """
    Count set bits in a single byte value.

    Args:
        x: int - Byte value in [0, 255]

    Returns:
        int: Number of 1-bits

    Raises:
        ArgumentError: If x is not an integer in [0, 255]
    """
    if not isinstance(x, int) or isinstance(x, bool) or not 0 <= x < 256:
        raise ArgumentError('bit count requires a byte value in [0, 255]')

    # Brian Kernighan's algorithm
    n = 0
    while x:
        x &= x - 1
        n += 1
    return n


# =============================================================================
# Argument Normalization
# =============================================================================

def check_arg(x):
    """
    Normalize one command argument to a string.

    Args:
        x: str, int or float - Argument

    Returns:
        str: Normalized argument

    Raises:
        ArgumentError: If x is neither a string nor a number
    """
    if _is_number(x):
        return to_str(x)
    if not isinstance(x, str):
        raise ArgumentError(
            f'argument must be a string or a number, not {type(x).__name__}'
        )
    return x


def get_args(*args):
    """
    Normalize a non-empty list of variadic arguments.

    Returns:
        list[str]: Normalized arguments

    Raises:
        ArgumentError: If no argument is given or one has a bad type
    """
    if not args:
        raise ArgumentError('at least one argument is required')
    return [check_arg(x) for x in args]


def check_args(n, *args):
    """
    Normalize exactly n arguments.

    Args:
        n: int - Expected argument count
        *args: Arguments to normalize

    Returns:
        tuple[str, ...]: Normalized arguments
    """
    if len(args) != n:
        raise ArgumentError(f'expected {n} arguments, got {len(args)}')
    return tuple(check_arg(x) for x in args)


def get_args_as_map(*args):
    """
    Normalize arguments and pair them into a dict.

    Args:
        *args: [key1, val1, key2, val2, ...]

    Returns:
        dict: {key1: val1, key2: val2, ...}; later duplicates win
    """
    args = get_args(*args)
    if len(args) % 2 != 0:
        raise ArgumentError('arguments must come in pairs')
    return {args[i]: args[i + 1] for i in range(0, len(args), 2)}


def fixed_arity(n):
    """
    Decorator for command methods taking exactly n normalized arguments.

    The wrapped method receives its arguments already passed through
    check_arg(); a wrong count raises WrongArityError naming the method.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, *args):
            if len(args) != n:
                raise WrongArityError(func.__name__)
            return func(self, *check_args(n, *args))
        return wrapper
    return decorator


# =============================================================================
# Glob Pattern Compilation
# =============================================================================

def compile_pattern(pattern):
    """
    Compile a glob-style key pattern into a reusable predicate.

    Supports:
    - * : matches any sequence of characters (including empty)
    - ? : matches exactly one character
    - [abc] : matches one character from the set
    - [a-z] : matches one character from the range
    - [^abc] : matches one character NOT in the set
    - \\x : matches x literally

    Malformed syntax degrades to literal text: an unterminated '[' or an
    empty class matches itself, and a trailing backslash matches a
    backslash.

    Args:
        pattern: str - Glob pattern

    Returns:
        callable: matches(key) -> bool
    """
    if not isinstance(pattern, str):
        raise ArgumentError('pattern must be a string')

    regex = re.compile(_translate(pattern), re.DOTALL)

    def matches(key):
        return regex.fullmatch(key) is not None

    matches.pattern = pattern
    return matches


def glob_match(pattern, text):
    """
    Match text against a glob pattern once.

    Prefer compile_pattern() when matching many keys.
    """
    return compile_pattern(pattern)(text)


def _translate(pattern):
    """Translate a glob pattern to regular expression source."""
    parts = []
    i = 0
    plen = len(pattern)

    while i < plen:
        c = pattern[i]

        if c == '*':
            # Consecutive stars are one wildcard
            while i < plen and pattern[i] == '*':
                i += 1
            parts.append('.*')
            continue

        if c == '?':
            parts.append('.')
            i += 1
            continue

        if c == '\\':
            if i + 1 < plen:
                parts.append(re.escape(pattern[i + 1]))
                i += 2
            else:
                parts.append(re.escape(c))
                i += 1
            continue

        if c == '[':
            translated, end = _translate_class(pattern, i)
            if translated is not None:
                parts.append(translated)
                i = end
                continue

        parts.append(re.escape(c))
        i += 1

    return ''.join(parts)


def _translate_class(pattern, start):
    """
    Translate the character class starting at pattern[start] == '['.

    Returns:
        tuple: (regex: str | None, end_position: int)
               regex is None when the class is unterminated or empty,
               in which case the '[' is taken literally
    """
    plen = len(pattern)
    i = start + 1
    negate = i < plen and pattern[i] == '^'
    if negate:
        i += 1
    body_start = i

    # Find closing bracket, skipping escaped characters
    while i < plen and pattern[i] != ']':
        i += 2 if pattern[i] == '\\' and i + 1 < plen else 1
    if i >= plen or i == body_start:
        return None, start
    body_end = i

    items = []
    i = body_start
    while i < body_end:
        lo, i = _class_char(pattern, i, body_end)
        if i + 1 < body_end and pattern[i] == '-':
            hi, i = _class_char(pattern, i + 1, body_end)
            if lo > hi:
                lo, hi = hi, lo
            items.append(f'{re.escape(lo)}-{re.escape(hi)}')
        else:
            items.append(re.escape(lo))

    return '[' + ('^' if negate else '') + ''.join(items) + ']', body_end + 1


def _class_char(pattern, i, end):
    # Returns (literal character, next index), resolving a backslash escape
    if pattern[i] == '\\' and i + 1 < end:
        return pattern[i + 1], i + 2
    return pattern[i], i + 1
