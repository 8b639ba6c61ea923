"""
Optscan parser: collect scanned options and positional arguments.

What this module provides
- Parser: binds a Grammar to an argument vector and exposes the results:
  • program: argv[0].
  • options(start=1): dict of every resolved option (last occurrence wins).
  • arguments(): positional arguments, from the first non-option token to the end.
  • faults / report(): diagnostics recorded while scanning.
- parse(short, long, argv): one-call convenience returning (options, arguments).

Values in the options mapping
- True for flags, the string for supplied values, False for a required value
  that was missing. Deciding whether False is fatal is up to the caller.

Presentation
- shell: render faults on stderr with rich (True) or emit them via warnings.warn (False).
- colorful / fancy: styling and panel chrome for shell rendering.

Quick start
    from optscan import Parser

    parser = Parser("vho:", [("id", True), ("verbose", False, "v")])
    options = parser.options()
    arguments = parser.arguments()
"""
import sys

from .faults import trigger
from .grammar import Grammar
from .scanner import Scanner
from .utils import Unset, coalesce


class Parser:
    """
    Command-line parser over a declared option grammar.

    Parameters
    - short: str | Grammar (positional-only)
      Short-option spec string (e.g. "vho:a"), or a prebuilt Grammar (then `long` must be omitted).
    - long: Iterable (positional-only)
      Long option declarations: names, (name, value[, alias]) tuples or LongOption.
    - argv: Unset | Iterable[str]
      Argument vector with the program name first. Unset reads sys.argv.
    - shell, colorful, fancy: bool (keyword-only)
      Presentation of report(); see module docs.

    Raises
    - TypeError: on malformed grammar or argv arguments.
    - ValueError: when argv is empty (there is no program name).
    """

    def __init__(self, short="", long=Unset, /, argv=Unset, *, shell=False, colorful=True, fancy=False):
        if isinstance(short, Grammar):
            if long is not Unset:
                raise TypeError("Parser() long options must be omitted when a grammar is given")
            grammar = short
        else:
            grammar = Grammar(short, coalesce(long, ()))

        argv = coalesce(argv, sys.argv)
        if isinstance(argv, str):
            raise TypeError("Parser() argv must be an iterable of strings")
        argv = tuple(argv)
        if not argv:
            raise ValueError("Parser() argv must contain at least the program name")

        self._grammar = grammar
        # validates argv; replaced on every options() call
        self._scanner = Scanner(grammar, argv)
        self._argv = argv
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)

    grammar = property(lambda self: self._grammar)
    argv = property(lambda self: self._argv)
    program = property(lambda self: self._argv[0])
    optind = property(lambda self: self._scanner.optind)
    shell = property(lambda self: self._shell)
    colorful = property(lambda self: self._colorful)
    fancy = property(lambda self: self._fancy)

    @property
    def faults(self):
        return self._scanner.faults

    def options(self, start=1):
        """
        Scan argv and return the resolved options.

        Parameters
        - start: int
          Index of the first token to scan, to allow 'program command [options] [arguments]'
          by starting past the command. 0 is treated as 1.

        Returns
        - dict[str, str | bool]: identifier → value. When an option occurs more
          than once the last occurrence wins. Unrecognized tokens produce no entry.
        """
        self._scanner = Scanner(self._grammar, self._argv, start=start)
        return dict(self._scanner)

    def arguments(self):
        """
        Return the positional arguments: every token from the cursor to the end.

        Call options() first; before that the cursor is at 1 and every token
        after the program name is returned.
        """
        return list(self._argv[self._scanner.optind:])

    def report(self):
        """
        Surface every recorded fault with this parser's presentation options.

        Returns the number of faults reported.
        """
        faults = self._scanner.faults
        for fault in faults:
            trigger(fault, prog=self.program, shell=self._shell, colorful=self._colorful, fancy=self._fancy)
        return len(faults)

    def __repr__(self):
        return "%s(%r, argv=%r)" % (type(self).__name__, self._grammar, list(self._argv))

    def __rich_repr__(self):
        yield "grammar", self._grammar
        yield "argv", list(self._argv)
        yield "optind", self._scanner.optind


def parse(short="", long=(), argv=Unset, /):
    """
    Scan argv with the given grammar and return (options, arguments).

    Parameters
    - short: str — short-option spec string.
    - long: Iterable — long option declarations.
    - argv: Unset | Iterable[str] — argument vector; Unset reads sys.argv.

    Example
    - parse("vf:", [], ["prog", "-vf", "out.txt", "in.txt"])
      → ({'v': True, 'f': 'out.txt'}, ['in.txt'])
    """
    parser = Parser(short, long, argv)
    return parser.options(), parser.arguments()


__all__ = (
    "Parser",
    "parse",
)
