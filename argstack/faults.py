"""
Argstack faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues
  (errors and warnings), grouped by domain so logs/searches stay predictable.
- ParserException / ParserWarning: base types that carry message + options and
  know how to render themselves, either as the classic one-liner
  ("Error: <message>") or as a rich panel.
- ParserExit: a group of exceptions collected by a deferred parse.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Output contract
- Plain rendering (neither fancy nor colorful) is one line per fault,
  "Error: " or "Warning: " followed by the message, written to stderr.
- Fancy rendering adds a header ("[ prog — code | title ]") and a hint line.

Integration
- Parsers raise faults with their context as options and surface them with
  trigger(fault, **runtime). In non-shell mode exceptions are raised (and
  warnings go through the warnings module); in shell mode they are rendered
  via rich and the process exits with the configured status.
"""
import copy
import inspect
import os.path
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - construction errors (1110x)
      • INVALID_RANGE
    - scanning errors (1111x)
      • UNDEFINED_PARAMETER
    - arity errors (1112x)
      • NOT_ENOUGH_ARGUMENTS, TOO_MANY_ARGUMENTS
    - warnings (12xxx)
      • SHADOWED_PARAMETER

    normalize() allows the host to remap codes to its own labels through a
    __codes__ mapping in __main__.
    """
    # --- construction errors (11xxx) ---
    INVALID_RANGE               = 11101

    # --- scanning errors (11xxx) ---
    UNDEFINED_PARAMETER         = 11111

    # --- arity errors (11xxx) ---
    NOT_ENOUGH_ARGUMENTS        = 11121
    TOO_MANY_ARGUMENTS          = 11122

    # --- warnings (12xxx) ---
    SHADOWED_PARAMETER          = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        when __main__ provides no __codes__ mapping, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, label, palette):
    # shared by exceptions and warnings, which only differ in label and palette
    main = __import__("__main__")
    options = defaultdict(bool, fault.options)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def styler(style):
        return styles[style] if options["colorful"] else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment if options["colorful"] else Text(fragment.plain)
        return Text(str(fragment), style)

    message = Text.assemble(text(label + ": ", styler("label")), text(fault.message, styler("message")))

    if not options["fancy"]:
        return message

    prog = getattr(main, "__prog__", options["prog"] or os.path.basename(sys.argv[0]) or "argstack")
    code = options["code"]

    header = Text.assemble(
        "[ ",
        text(prog, styler("prog-name")),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "", styler("code")),
        " | ",
        text(str(options["title"] or label).title(), styler("title")),
        " ]"
    )
    body = [message]
    if options["hint"]:
        body.append(Text.assemble(text(" → ", styler("hint-arrow")), text(options["hint"], styler("hint"))))

    try:
        width = int((console.width - 4) * options["ratio"]) if options["ratio"] else None
    except (TypeError, ValueError):
        width = None
    return Panel(Group(*body), title=header, title_align="left", width=width)


class ParserException(Exception):
    """
    base type for every parser error.

    options carry the fault context (title, code, hint, token, arity, count, ...)
    plus the runtime flags merged in by trigger() (shell, fancy, colorful, status).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, "Error", {
            "label": "bold red",
            "message": "#C8C8D0",  # soft light gray message
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self, soft_wrap=True)
        sys.exit(self.options.get("status", 1))

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class InvalidRangeError(ParserException, ValueError): ...
class UndefinedParameterError(ParserException, LookupError): ...
class ArityError(ParserException): ...
class NotEnoughArgumentsError(ArityError): ...
class TooManyArgumentsError(ArityError): ...


class ParserWarning(Warning):
    """
    base type for every parser warning (never fatal).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, "Warning", {
            "label": "bold yellow",
            "message": "#D6D6DE",  # slightly lighter gray body
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self, soft_wrap=True)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ShadowedParameterWarning(ParserWarning): ...


class ParserExit(ExceptionGroup[ParserException]):
    """
    every fault collected by a deferred parse, in discovery order.
    """

    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad exit", tuple(exceptions))

    def __init__(self, exceptions, **options):
        super().__init__("bad exit", tuple(exceptions))
        self.options = MappingProxyType(options)

    def __rich__(self):
        # one renderable per fault, each keeping the group's runtime flags
        renders = [copy.replace(exception, **{**self.options, "ratio": 2/3}) for exception in self.exceptions]
        if not self.options.get("fancy", False):
            return Group(*renders)
        prog = getattr(__import__("__main__"), "__prog__", self.options.get("prog") or os.path.basename(sys.argv[0]))
        return Panel(Group(*renders), title="[ %s — %s ]" % (prog, self.message.title()), title_align="left")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self, soft_wrap=True)
        sys.exit(self.options.get("status", 1))

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})

    def derive(self, exceptions):
        return type(self)(exceptions, **self.options)


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via the rich console (errors then exit);
      otherwise exceptions are raised and warnings are emitted.

    typical options
    - shell, fancy, colorful, status, prog, plus any context the reporter may
      want to show (token, arity, count, parameter, hint, title, code).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ParserException",
    "InvalidRangeError",
    "UndefinedParameterError",
    "ArityError",
    "NotEnoughArgumentsError",
    "TooManyArgumentsError",
    "ParserWarning",
    "ShadowedParameterWarning",
    "ParserExit",
    "trigger",
    "getdoc",
)
