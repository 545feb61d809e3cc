"""
Argstack parser engine: split a token stream into positionals and parameter invocations.

What this module provides
- Parser: immutable configuration (positional arity, parameter registry, flag prefix,
  runtime flags) plus the single-pass, stack-based parse.
- ParserBuilder: immutable fluent builder producing a Parser.
- ParseResult / Invocation: the structured outcome of a parse.

How a parse works
- A token is a parameter token when it is strictly longer than the prefix and starts
  with it (a bare "-" is a value). Parameter tokens are resolved through the registry
  and open a new frame on top of the stack; frames below stay open.
- A value token goes to the top frame, or to the positionals when the stack is empty.
  When the top frame has already captured its arity maximum it is closed first and the
  same token is retried against the next frame down.
- At end of input the positional count is validated, then each frame still open,
  bottom to top. Frames that pass are flushed in that order.

Faults
- UndefinedParameterError surfaces immediately, scanning stops.
- NotEnoughArgumentsError / TooManyArgumentsError surface at end of input; the first one
  aborts the parse unless the parser is deferred, in which case all of them are raised
  together as a ParserExit.
- In shell mode faults are printed as "Error: <message>" and the process exits with
  the configured status; otherwise they are raised.

Quick start
    from argstack import Arity, AliasedParameter, Parser

    parser = (
        Parser.builder()
        .count(1)
        .param(AliasedParameter.builder().name("--param").alias("-O").args((1, 5)).build())
        .prefix("-")
        .build()
    )
    parser.parse(["input.txt", "--param", "a", "b", "c"])
    # ParseResult(arguments=('input.txt',), parameters=(Invocation(name='--param', values=('a', 'b', 'c')),))
"""
import shlex
import sys
from collections import namedtuple
from collections.abc import Iterable
from types import MappingProxyType

from .arity import Arity
from .faults import *
from .parameters import Registry
from .utils import Representable, Unset, coalesce, fluent, rename


class Invocation(namedtuple("Invocation", ("name", "values"))):
    """
    one parameter occurrence: its canonical name and the values it captured.
    """
    __slots__ = ()


class ParseResult(namedtuple("ParseResult", ("arguments", "parameters"))):
    """
    outcome of Parser.parse(): positional arguments and parameter invocations, both in order.
    """
    __slots__ = ()

    def get(self, name, /):
        """
        values of every invocation of `name` (canonical name), in order.
        """
        return tuple(invocation.values for invocation in self.parameters if invocation.name == name)


class _Frame:
    # a parameter still collecting values; lives for a single parse
    __slots__ = ("token", "parameter", "captured")

    def __init__(self, token, parameter):
        self.token = token
        self.parameter = parameter
        self.captured = []

    @property
    def saturated(self):
        return len(self.captured) == self.parameter.arity.max

    def flush(self):
        return Invocation(self.parameter.name, tuple(self.captured))


def _arity_fault(arity, count, /, **context):
    """
    build the fault for `count` values falling outside `arity`.

    context
    - frame: the open frame being validated; absent for the positional group.
    """
    frame = context.pop("frame", None)
    if frame is None:
        subject = ""
        target = "positional arguments"
    else:
        subject = '"%s"' % frame.token
        if frame.token != frame.parameter.name:
            subject += ' ("%s")' % frame.parameter.name
        target = "parameter %s" % subject
        subject = " for parameter " + subject
        context |= {"token": frame.token, "parameter": frame.parameter, "values": tuple(frame.captured)}

    if count < arity.min:
        exception, code, amount = NotEnoughArgumentsError, FaultCode.NOT_ENOUGH_ARGUMENTS, "not enough"
        hint = "pass at least %d value%s to %s" % (arity.min, "s" * (arity.min != 1), target)
    else:
        exception, code, amount = TooManyArgumentsError, FaultCode.TOO_MANY_ARGUMENTS, "too many"
        hint = "pass at most %d value%s to %s" % (arity.max, "s" * (arity.max != 1), target)

    return exception(
        "%s arguments%s: expected %s, got %d" % (amount, subject, arity, count),
        title="%s arguments" % amount,
        code=code,
        arity=arity,
        count=count,
        hint=hint,
        docs=getdoc(code),
        **context
    )


def _sanitize_tokens(tokens, /):
    if isinstance(tokens, str):
        return shlex.split(tokens)  # Shell-style splitting for a single string
    if not isinstance(tokens, Iterable):
        raise TypeError("parse() argument must be a string or an iterable of strings")
    tokens = list(tokens)
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("parse() argument must be a string or an iterable of strings")
    return tokens


class Parser(Representable):
    __slots__ = ("_arity", "_registry", "_prefix", "_options")
    __introspectable__ = ("arity", "registry", "prefix", "shell", "fancy", "colorful", "deferred", "status")

    def __init__(
            self,
            arity=Unset,
            parameters=(),
            prefix="-",
            *,
            shell=False,
            fancy=False,
            colorful=False,
            deferred=False,
            status=1,
            prog=Unset,
    ):
        if not isinstance(prefix, str):
            raise TypeError("parser 'prefix' must be a string")
        elif not prefix:
            raise ValueError("parser 'prefix' cannot be empty")

        for name, flag in {"shell": shell, "fancy": fancy, "colorful": colorful, "deferred": deferred}.items():
            if not isinstance(flag, bool):
                raise TypeError("parser %r must be a boolean" % name)
        if isinstance(status, bool) or not isinstance(status, int):
            raise TypeError("parser 'status' must be an integer")
        if not isinstance(prog, str | Unset):
            raise TypeError("parser 'prog' must be a string")

        options = MappingProxyType({
            "shell": shell,
            "fancy": fancy,
            "colorful": colorful,
            "deferred": deferred,
            "status": status,
        } | ({"prog": prog} if prog is not Unset else {}))

        object.__setattr__(self, "_arity", Arity.coerce(coalesce(arity, Arity())))
        object.__setattr__(self, "_registry", parameters if isinstance(parameters, Registry) else Registry(parameters, **options))
        object.__setattr__(self, "_prefix", prefix)
        object.__setattr__(self, "_options", options)

    @classmethod
    def builder(cls):
        return ParserBuilder()

    @property
    def arity(self):
        return self._arity

    @property
    def registry(self):
        return self._registry

    @property
    def prefix(self):
        return self._prefix

    @property
    def options(self):
        return self._options

    shell = property(lambda self: self._options["shell"])
    fancy = property(lambda self: self._options["fancy"])
    colorful = property(lambda self: self._options["colorful"])
    deferred = property(lambda self: self._options["deferred"])
    status = property(lambda self: self._options["status"])

    def __setattr__(self, name, value, /):
        raise AttributeError("parser is immutable")

    def isparameter(self, token, /):
        """
        whether `token` names a parameter (strictly longer than the prefix and starting with it).
        """
        return len(token) > len(self._prefix) and token.startswith(self._prefix)

    def find(self, token, /):
        return self._registry.find(token)

    def trigger(self, fault, /, **options):
        """
        surface a fault with this parser's runtime flags merged into its options.
        """
        trigger(fault, **{**options, **self._options})

    def parse(self, tokens, /):
        """
        parse a token stream into a ParseResult.

        parameters
        - tokens: Iterable[str] of pre-split tokens, or a single str split with shlex.split.

        returns
        - ParseResult(arguments, parameters).

        raises
        - UndefinedParameterError, NotEnoughArgumentsError, TooManyArgumentsError
          (ParserExit when deferred); in shell mode these are printed and SystemExit is raised.
        """
        tokens = _sanitize_tokens(tokens)
        try:
            return self._parse(tokens)
        except (ParserException, ParserExit) as fault:
            return self.trigger(fault)

    def parse_argv(self, argv=Unset, /):
        """
        parse a conventional process argument vector, skipping the program-name slot.

        parameters
        - argv: Unset (read sys.argv) or a sequence whose first item is the program name.
        """
        argv = list(sys.argv if argv is Unset else argv)
        return self.parse(argv[1:])

    def _parse(self, tokens):
        arguments = []
        parameters = []
        stack = []

        for token in tokens:
            if self.isparameter(token):
                # frames below stay open (nested/interleaved flags)
                stack.append(_Frame(token, self._registry.find(token)))
                continue
            # a saturated frame closes and the token is retried against the next frame down
            while stack and stack[-1].saturated:
                parameters.append(stack.pop().flush())
            (stack[-1].captured if stack else arguments).append(token)

        faults = []
        for fault in self._validate(arguments, stack):
            if not self.deferred:
                raise fault
            faults.append(fault)
        if faults:
            raise ParserExit(faults)

        parameters.extend(frame.flush() for frame in stack)
        return ParseResult(tuple(arguments), tuple(parameters))

    def _validate(self, arguments, stack):
        """
        yield the arity faults of a finished scan in discovery order:
        positional count first, then every open frame from the bottom of the stack up.
        """
        if not self._arity.includes(count := len(arguments)):
            yield _arity_fault(self._arity, count, arguments=tuple(arguments))
        for frame in stack:
            if not frame.parameter.arity.includes(count := len(frame.captured)):
                yield _arity_fault(frame.parameter.arity, count, frame=frame)


class ParserBuilder:
    """
    immutable, fluent builder for Parser.

        >>> parser = ParserBuilder().count(1).param(parameter).prefix("-").build()

    every step returns a new builder.
    """
    __slots__ = ("_arity", "_parameters", "_prefix", "_options")

    def __init__(self, arity=Unset, parameters=(), prefix="-", options=MappingProxyType({})):
        self._arity = arity if arity is Unset else Arity.coerce(arity)
        self._parameters = tuple(parameters)
        self._prefix = prefix
        self._options = MappingProxyType(dict(options))

    count = rename(fluent("arity"), "count")
    param = rename(fluent("parameters", extend=True), "param")
    prefix = fluent("prefix")

    def options(self, **options):
        return type(self)(self._arity, self._parameters, self._prefix, self._options | options)

    def build(self):
        return Parser(self._arity, self._parameters, self._prefix, **self._options)

    def __replace__(self, /, **changes):
        return type(self)(**{
            "arity": self._arity,
            "parameters": self._parameters,
            "prefix": self._prefix,
            "options": self._options,
        } | changes)

    def __repr__(self):
        return "parser-builder(arity=%r, parameters=%r, prefix=%r, options=%r)" % (
            self._arity, self._parameters, self._prefix, dict(self._options)
        )


__all__ = (
    "Invocation",
    "ParseResult",
    "Parser",
    "ParserBuilder",
)
