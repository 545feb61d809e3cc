"""
Example program: `python -m argstack input.txt --param a b c`.

Accepts exactly one positional argument and a `--param` (alias `-O`) taking one
to five values, then prints what was parsed:

    Arguments: ["input.txt"]
    Parameter "--param": ["a", "b", "c"]

Faults are printed as "Error: <message>" and the process exits with status 1.
"""
from rich.console import Console
from rich.text import Text

from .parameters import AliasedParameter
from .parser import Parser
from .utils import Unset

console = Console()


def _listing(values, /):
    return "[%s]" % ", ".join('"%s"' % value for value in values)


def main(argv=Unset, /):
    parser = (
        Parser.builder()
        .count(1)
        .param(AliasedParameter.builder().name("--param").alias("-O").args((1, 5)).build())
        .prefix("-")
        .options(shell=True)
        .build()
    )
    result = parser.parse_argv(argv)

    console.print(Text("Arguments: " + _listing(result.arguments)), soft_wrap=True)
    for invocation in result.parameters:
        console.print(Text('Parameter "%s": %s' % (invocation.name, _listing(invocation.values))), soft_wrap=True)


if __name__ == '__main__':
    main()
