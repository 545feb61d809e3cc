"""
Argstack utilities (internal helpers, carefully exposed)

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated methods for clean tracebacks.

- fluent(field)
  • Step factory for immutable fluent builders (each step returns a copy.replace()-d builder).

- Representable
  • Mixin giving value types a compact __repr__ and a __rich_repr__ built from the
    names listed in __introspectable__.

Usage guidance
- Prefer Unset for API defaults when None is a meaningful user value; materialize with coalesce().
- Names not in __all__ are internal and may change without notice.
"""
import builtins
import copy
import functools
import operator
import re
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve an internal Unset sentinel to a concrete default.

    Falsey values like None, 0, "", or [] are preserved as-is; only Unset is replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def fluent(field, /, *, extend=False):
    """
    Build a step method for an immutable builder.

    The step returns copy.replace(self, field=value); with extend=True the
    received values are appended to the current tuple instead. Builders must
    implement __replace__ and keep the field under "_" + field.

    Example
    - name = rename(fluent("name"), "name")
    - alias = rename(fluent("aliases", extend=True), "alias")
    """
    if not isinstance(field, str):
        raise TypeError("fluent() argument must be a string")

    def step(self, *values):
        if extend:
            return copy.replace(self, **{field: getattr(self, "_" + field) + values})
        try:
            value, = values
        except ValueError:
            raise TypeError("%s() takes exactly one argument (%d given)" % (step.__name__, len(values))) from None
        return copy.replace(self, **{field: value})

    return rename(step, field)


class Representable:
    """
    Mixin for immutable value types: stable __repr__/__rich_repr__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens,
      lowercased) unless the subclass sets it explicitly.
    - __introspectable__ lists the public attribute names shown by both representations.
    """
    __slots__ = ()
    __introspectable__ = ()

    def __init_subclass__(cls, **options):
        super().__init_subclass__(**options)
        if "__typename__" not in cls.__dict__:
            cls.__typename__ = re.sub(r"(?<!^)(?=[A-Z])", r"-", cls.__name__).lower()

    def __rich_repr__(self):
        """
        Yield (name, object) pairs for pretty printers.
        """
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        """
        Example
        - aliased-parameter(name='--param', arity=arity(min=1, max=5), aliases=('-O',))
        """
        return f"{type(self).__typename__}({
            ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
        })"


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Notes
- Singleton: there is only one Unset instance.
- Falsey: bool(Unset) is False, but it is not equivalent to None or 0.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "fluent",

    # Types
    "UnsetType",
    "Representable",

    # Constants
    "Unset",
)
