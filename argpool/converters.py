"""
Ready-made conversion callbacks for declarations.

A conversion callback takes the raw string read from the command line and
returns the typed value, raising ConversionError when the string is not
acceptable. Any callable with that shape can be passed as a declaration's
`type`; these cover the common scalar cases.

    BOOLEAN   "1" / "true" → True, anything else → False
    BYTE      signed 8-bit integer
    SHORT     signed 16-bit integer
    INT       signed 32-bit integer
    LONG      signed 64-bit integer
    FLOAT     float
    DOUBLE    float (alias kept for symmetry with FLOAT)
    STRING    the raw string itself

Integers follow int() semantics (optional sign, surrounding whitespace
ignored, base 10).
"""
from .faults import ConversionError
from .utils import rename


@rename("BOOLEAN")
def BOOLEAN(string, /):
    return string == "1" or string == "true"


@rename("STRING")
def STRING(string, /):
    return string


def ranged(bits, /):
    """
    Build a converter for signed integers that fit in `bits` bits.
    """
    if not isinstance(bits, int) or bits < 2:
        raise ValueError("ranged() argument must be an integer greater than 1")

    lower, upper = -(1 << (bits - 1)), (1 << (bits - 1)) - 1

    def converter(string, /):
        try:
            value = int(string, 10)
        except ValueError:
            raise ConversionError("%r is not an integer" % string, input=string) from None
        if not lower <= value <= upper:
            raise ConversionError(
                "%r is out of range for a %d-bit integer" % (string, bits),
                input=string,
                hint="use a value between %d and %d" % (lower, upper),
            )
        return value

    return rename(converter, "int%d" % bits)


BYTE = rename(ranged(8), "BYTE")
SHORT = rename(ranged(16), "SHORT")
INT = rename(ranged(32), "INT")
LONG = rename(ranged(64), "LONG")


@rename("FLOAT")
def FLOAT(string, /):
    try:
        return float(string)
    except ValueError:
        raise ConversionError("%r is not a number" % string, input=string) from None


DOUBLE = FLOAT


__all__ = (
    "BOOLEAN",
    "BYTE",
    "SHORT",
    "INT",
    "LONG",
    "FLOAT",
    "DOUBLE",
    "STRING",
    "ranged",
)
