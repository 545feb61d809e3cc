"""
Argstack parameter specifications and the registry that resolves them.

Overview
- Parameter: a canonical name plus an Arity.
- AliasedParameter: a Parameter that also answers to an ordered tuple of aliases.
- ParameterBuilder: immutable fluent builder; every step returns a new builder.
- Registry: the ordered collection a parser consults to resolve flag tokens.

Matching
- Exact string equality against the canonical name or any alias (no prefix
  abbreviation, no case folding).
- Registry.find() scans in declaration order and the first match wins. Overlapping
  names are not rejected; a ShadowedParameterWarning points them out instead.

Quick example:
    >>> param = AliasedParameter.builder().name("--param").alias("-O").args((1, 5)).build()
    >>> Registry([param]).find("-O") is param
    True
    >>> str(param)
    'parameter "--param" with [1..5] arguments, aliases: "-O"'
"""
from .arity import Arity
from .faults import FaultCode, ShadowedParameterWarning, UndefinedParameterError, getdoc, trigger
from .utils import Representable, Unset, coalesce, fluent, rename


def _sanitize_name(cls, name, /):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} names must be strings")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
    elif any(char.isspace() for char in name):
        raise ValueError(f"{cls.__typename__} names cannot contain whitespace")
    return name


class Parameter(Representable):
    __slots__ = ("_name", "_arity")
    __introspectable__ = ("name", "arity")

    def __init__(self, name, /, arity=Unset):
        object.__setattr__(self, "_name", _sanitize_name(type(self), name))
        object.__setattr__(self, "_arity", Arity.coerce(coalesce(arity, Arity())))

    @property
    def name(self):
        return self._name

    @property
    def arity(self):
        return self._arity

    @property
    def names(self):
        return (self._name,)

    def matches(self, token, /):
        return token == self._name

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__typename__} is immutable")

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__typename__} is immutable")

    def __eq__(self, other, /):
        if type(self) is not type(other):
            return NotImplemented
        return tuple(self.__rich_repr__()) == tuple(other.__rich_repr__())

    def __hash__(self):
        return hash((type(self), *self.__rich_repr__()))

    def __reduce__(self):
        return type(self), (self._name, self._arity)

    def __str__(self):
        return 'parameter "%s" with %s arguments' % (self._name, self._arity)


class AliasedParameter(Parameter):
    __slots__ = ("_aliases",)
    __introspectable__ = ("name", "arity", "aliases")

    def __init__(self, name, /, arity=Unset, aliases=()):
        super().__init__(name, arity)
        if isinstance(aliases, str):
            raise TypeError(f"{type(self).__typename__} aliases must be an iterable of strings")
        seen = {self._name}
        normalized = []
        for alias in aliases:
            if (alias := _sanitize_name(type(self), alias)) in seen:
                raise ValueError(f"{type(self).__typename__} names cannot contain duplicates")
            seen.add(alias)
            normalized.append(alias)
        object.__setattr__(self, "_aliases", tuple(normalized))

    @classmethod
    def builder(cls):
        return ParameterBuilder()

    @property
    def aliases(self):
        return self._aliases

    @property
    def names(self):
        return (self._name, *self._aliases)

    def matches(self, token, /):
        return token == self._name or token in self._aliases

    def __reduce__(self):
        return type(self), (self._name, self._arity, self._aliases)

    def __str__(self):
        if not self._aliases:
            return super().__str__()
        return "%s, aliases: %s" % (super().__str__(), ", ".join('"%s"' % alias for alias in self._aliases))


class ParameterBuilder:
    """
    immutable, fluent builder for AliasedParameter.

        >>> builder = ParameterBuilder().name("--param")
        >>> builder.alias("-O").build() != builder.build()
        True

    the builder returned by each step is new; earlier builders stay reusable.
    """
    __slots__ = ("_name", "_arity", "_aliases")

    def __init__(self, name=Unset, arity=Unset, aliases=()):
        self._name = name
        self._arity = arity if arity is Unset else Arity.coerce(arity)
        self._aliases = tuple(aliases)

    name = fluent("name")
    args = rename(fluent("arity"), "args")
    alias = rename(fluent("aliases", extend=True), "alias")

    def build(self):
        if self._name is Unset:
            raise TypeError("aliased-parameter must specify a name")
        return AliasedParameter(self._name, self._arity, self._aliases)

    def __replace__(self, /, **changes):
        return type(self)(**{
            "name": self._name,
            "arity": self._arity,
            "aliases": self._aliases,
        } | changes)

    def __repr__(self):
        return "parameter-builder(name=%r, arity=%r, aliases=%r)" % (self._name, self._arity, self._aliases)


class Registry(Representable):
    """
    ordered, immutable collection of AliasedParameter consulted by the parser.

    options are runtime flags (shell, fancy, colorful, ...) used to surface
    shadowing warnings; they are not kept on the registry.
    """
    __slots__ = ("_parameters",)
    __introspectable__ = ("parameters",)

    def __init__(self, parameters=(), /, **options):
        parameters = tuple(parameters)
        for parameter in parameters:
            if not isinstance(parameter, Parameter):
                raise TypeError("registry entries must be parameters")
        object.__setattr__(self, "_parameters", parameters)

        claims = {}
        for parameter in parameters:
            for name in parameter.names:
                if name in claims:
                    trigger(ShadowedParameterWarning(
                        '"%s" of parameter "%s" is already claimed by parameter "%s"' % (
                            name, parameter.name, claims[name].name
                        ),
                        title="shadowed parameter",
                        code=FaultCode.SHADOWED_PARAMETER,
                        token=name,
                        parameter=parameter,
                        shadowing=claims[name],
                        hint="the first declared parameter wins; rename or drop %r" % name,
                        docs=getdoc(FaultCode.SHADOWED_PARAMETER),
                    ), **options)
                    continue
                claims[name] = parameter

    @property
    def parameters(self):
        return self._parameters

    def find(self, token, /):
        """
        resolve a flag token to its parameter (first declared match wins).

        raises UndefinedParameterError when no canonical name or alias equals `token`.
        """
        for parameter in self._parameters:
            if parameter.matches(token):
                return parameter
        raise UndefinedParameterError(
            'undefined parameter: "%s"' % token,
            title="undefined parameter",
            code=FaultCode.UNDEFINED_PARAMETER,
            token=token,
            hint="declared parameters: %s" % (", ".join(
                '"%s"' % name for parameter in self._parameters for name in parameter.names
            ) or "none"),
            docs=getdoc(FaultCode.UNDEFINED_PARAMETER),
        )

    def __setattr__(self, name, value, /):
        raise AttributeError("registry is immutable")

    def __len__(self):
        return len(self._parameters)

    def __iter__(self):
        return iter(self._parameters)

    def __getitem__(self, index, /):
        return self._parameters[index]

    def __eq__(self, other, /):
        if not isinstance(other, Registry):
            return NotImplemented
        return self._parameters == other._parameters

    def __hash__(self):
        return hash((Registry, self._parameters))

    def __reduce__(self):
        return type(self), (self._parameters,)


__all__ = (
    "Parameter",
    "AliasedParameter",
    "ParameterBuilder",
    "Registry",
)
