"""
Argstack arity: how many values a parameter (or the positional group) accepts.

Overview
- Arity: immutable inclusive range [min, max] over non-negative counts.
  The unbounded maximum is INFINITY (math.inf).

Construction
- Arity()            → [0, ∞)   any count, including zero
- Arity(n)           → [n, n]   exactly n
- Arity(a, b)        → [a, b]   InvalidRangeError when b < a
- Arity.exact(n), Arity.between(a, b), Arity.at_least(n), Arity.at_most(n), Arity.any()
- Arity.coerce(x)    → accepts an Arity, an int or an (a, b) pair

Rendering (diagnostics only)
    >>> str(Arity(2)), str(Arity(1, 5)), str(Arity.at_least(1)), str(Arity.at_most(3))
    ('2', '[1..5]', '[1..]', '[..3]')
"""
import math

from .faults import FaultCode, InvalidRangeError, getdoc
from .utils import Representable

INFINITY = math.inf


def _sanitize_bound(bound, role, /, *, infinite=False):
    if isinstance(bound, bool) or not isinstance(bound, int) and not (infinite and bound == INFINITY):
        raise TypeError("arity %r must be a non-negative integer%s" % (role, " or infinity" if infinite else ""))
    if bound < 0:
        raise ValueError("arity %r cannot be negative" % role)
    return bound


class Arity(Representable):
    __slots__ = ("_min", "_max")
    __introspectable__ = ("min", "max")

    def __init__(self, *bounds):
        match bounds:
            case ():
                minimum, maximum = 0, INFINITY
            case (count,):
                minimum = maximum = _sanitize_bound(count, "count")
            case (minimum, maximum):
                minimum = _sanitize_bound(minimum, "from")
                maximum = _sanitize_bound(maximum, "to", infinite=True)
            case _:
                raise TypeError("Arity() takes 0 to 2 arguments but %d were given" % len(bounds))

        if maximum < minimum:
            raise InvalidRangeError(
                '"to" is lower than "from"',
                title="invalid range",
                code=FaultCode.INVALID_RANGE,
                hint="swap the bounds: Arity(%r, %r)" % (maximum, minimum),
                minimum=minimum,
                maximum=maximum,
                docs=getdoc(FaultCode.INVALID_RANGE),
            )

        object.__setattr__(self, "_min", minimum)
        object.__setattr__(self, "_max", maximum)

    @classmethod
    def exact(cls, count, /):
        return cls(count)

    @classmethod
    def between(cls, minimum, maximum, /):
        return cls(minimum, maximum)

    @classmethod
    def at_least(cls, minimum, /):
        return cls(minimum, INFINITY)

    @classmethod
    def at_most(cls, maximum, /):
        return cls(0, maximum)

    @classmethod
    def any(cls):
        return cls()

    @classmethod
    def coerce(cls, object, /):
        """
        normalize an arity-like object: Arity (as-is), int (exact) or (from, to) pair.
        """
        if isinstance(object, Arity):
            return object
        if isinstance(object, int) and not isinstance(object, bool):
            return cls(object)
        if isinstance(object, tuple) and len(object) == 2:
            return cls(*object)
        raise TypeError("arity must be an Arity, an integer or a (from, to) pair")

    @property
    def min(self):
        return self._min

    @property
    def max(self):
        return self._max

    @property
    def bounded(self):
        return self._max != INFINITY

    def includes(self, count, /):
        """
        whether `count` values satisfy this arity.
        """
        return self._min <= count <= self._max

    def __contains__(self, count, /):
        return self.includes(count)

    def __setattr__(self, name, value, /):
        raise AttributeError("arity is immutable")

    def __delattr__(self, name, /):
        raise AttributeError("arity is immutable")

    def __eq__(self, other, /):
        if not isinstance(other, Arity):
            return NotImplemented
        return (self._min, self._max) == (other._min, other._max)

    def __hash__(self):
        return hash((Arity, self._min, self._max))

    def __reduce__(self):
        return type(self), (self._min, self._max)

    def __str__(self):
        if self._min == self._max:
            return str(self._min)
        if not self.bounded:
            return "[%d..]" % self._min
        if not self._min:
            return "[..%d]" % self._max
        return "[%d..%d]" % (self._min, self._max)


__all__ = (
    "INFINITY",
    "Arity",
)
