"""
Optscan scanner: getopt/getopt_long style classification of an argument vector.

What this module provides
- Scanner: a cursor-driven classify/consume loop over argv. Each call to next()
  resolves at most one option and returns its identifier:
  • a short option character ("v"),
  • a long option name ("verbose") or its alias when one is declared,
  • None when the token was not recognized (it is skipped, keep scanning),
  • END when there are no more options to scan.
- END: the end-of-options sentinel.

Classification
- "--..."            → long option ("--name" or "--name=value").
- "-x" / "-xyz"      → short option, possibly grouped; the bare "-" is not an option.
- anything else      → first positional argument; scanning stops for good and
                       the cursor stays on it.

State
- optind: 1-based index of the next token to examine (argv[0] is the program name).
- offset: characters already consumed from the grouped short option at optind.
  Grouped options are consumed one character per call by moving this offset,
  argv itself is never modified.
- optarg: value of the most recently resolved option, reset before every step:
  Unset (nothing resolved), True (flag), False (required value missing) or a string.

Every step moves optind forward or moves offset forward inside the current
token, so repeated calls always reach END.

Faults
- Nothing is raised while scanning. Skipped tokens, missing values and the other
  absorbed conditions are recorded in `faults` (see optscan.faults) in the order
  they were met.

Quick example:
    >>> scanner = Scanner(Grammar("vf:"), ["prog", "-vf", "out.txt", "input"])
    >>> dict(scanner)
    {'v': True, 'f': 'out.txt'}
    >>> scanner.argv[scanner.optind:]
    ('input',)
"""
import difflib
import functools
from collections.abc import Iterable
from typing import final

from .faults import *
from .grammar import Grammar
from .utils import Unset, mirror, ordinal


@final
class EndType:
    """
    Internal sentinel type marking the end of the options in argv.

    Characteristics
    - Boolean-false, printable as "END", non-subclassable.
    - Singleton per process: EndType() always yields the same instance.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "END"

    def __reduce__(self):
        return "END"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'EndType' is not an acceptable base type")


END = EndType()


def islong(token, /):
    """
    Return True when `token` uses long option syntax ("--name", "--name=value").
    """
    return token.startswith("--")


def isshort(token, /):
    """
    Return True when `token` uses short option syntax ("-x", "-xyz"); "-" alone does not.
    """
    return not islong(token) and token.startswith("-") and len(token) > 1


def isoption(token, /):
    return islong(token) or isshort(token)


class Scanner:
    """
    Option scanner over an argument vector.

    Parameters
    - grammar: Grammar (positional-only)
      The declared short and long options.
    - argv: Iterable[str] (positional-only)
      The argument vector; argv[0] is the program name and is never scanned.
    - start: int
      Index of the first token to scan. 0 is treated as 1, so argv[0] is always skipped.

    Raises
    - TypeError: when grammar is not a Grammar, argv holds non-strings, or start is not an int.
    - ValueError: when start is negative.
    """

    def __init__(self, grammar, argv, /, start=1):
        if not isinstance(grammar, Grammar):
            raise TypeError("Scanner() first argument must be a grammar")
        if isinstance(argv, str) or not isinstance(argv, Iterable):
            raise TypeError("Scanner() second argument must be an iterable of strings")
        argv = tuple(argv)
        if not all(isinstance(token, str) for token in argv):
            raise TypeError("Scanner() second argument must be an iterable of strings")
        if not isinstance(start, int) or isinstance(start, bool):
            raise TypeError("Scanner() start must be an integer")
        if start < 0:
            raise ValueError("Scanner() start must be a non-negative integer")

        self._grammar = grammar
        self._argv = argv
        self._optind = start or 1
        self._offset = 0
        self._optarg = Unset
        self._faults = []

    grammar = property(lambda self: self._grammar)
    argv = property(lambda self: self._argv)
    optind = property(lambda self: self._optind)
    offset = property(lambda self: self._offset)
    optarg = property(lambda self: self._optarg)
    faults = mirror("faults")

    def next(self):
        """
        Resolve the next option.

        Returns
        - str: the resolved identifier; its value is available as `optarg`.
        - None: the token was not recognized and was skipped.
        - END: the cursor is past argv or on the first positional argument.
        """
        self._optarg = Unset

        if self._optind >= len(self._argv):
            return END

        token = self._argv[self._optind]

        if islong(token):
            return self._long(token)
        if isshort(token):
            return self._short(token)
        return END

    def __iter__(self):
        """
        Drive next() until END, yielding (identifier, value) for every recognized option.
        """
        while (option := self.next()) is not END:
            if option is not None:
                yield option, self._optarg

    def __repr__(self):
        return "%s(%r, %r, optind=%d, offset=%d)" % (
            type(self).__name__, self._grammar, list(self._argv), self._optind, self._offset
        )

    def _advance(self, steps):
        self._optind += steps
        self._offset = 0

    def _record(self, kind, message, /, **options):
        self._faults.append(kind(message, index=self._optind, **options))

    def _trailing(self, option, token):
        """
        Take the value of a value-taking option from the token after the cursor.

        The following token is the value unless it is missing or looks like an option,
        in which case the value is False and only the option token is consumed.
        """
        following = self._optind + 1
        if following < len(self._argv) and not isoption(self._argv[following]):
            self._optarg = self._argv[following]
            self._advance(2)
            return

        self._optarg = False
        self._record(
            MissingValueWarning,
            "option %r at %s position requires a value" % (option, ordinal(self._optind)),
            title="missing option value",
            code=FaultCode.MISSING_VALUE,
            hint="pass the value right after the option (for example: %s <value>)" % option,
            token=token,
            docs=getdoc(FaultCode.MISSING_VALUE)
        )
        self._advance(1)

    def _long(self, token):
        name, equals, value = token[2:].partition("=")
        option = self._grammar.match(name)

        if option is None:
            suggestions = difflib.get_close_matches(name, [declaration.name for declaration in self._grammar.longs], 5)
            try:
                hint = "did you mean '--%s'?" % suggestions[0]
            except IndexError:
                hint = "check the spelling of the option or remove it"
            self._record(
                UnknownOptionWarning,
                "unknown option %r at %s position" % ("--" + name, ordinal(self._optind)),
                title="unknown option",
                code=FaultCode.UNKNOWN_OPTION,
                hint=hint,
                token=token,
                suggestions=suggestions,
                docs=getdoc(FaultCode.UNKNOWN_OPTION)
            )
            self._advance(1)
            return None

        if not option.value:
            if equals:
                self._record(
                    FlagAssignmentWarning,
                    "option %r at %s position does not take a value" % ("--" + name, ordinal(self._optind)),
                    title="flag cannot take a value",
                    code=FaultCode.FLAG_ASSIGNMENT,
                    hint="remove everything from '=' (for example: --%s)" % name,
                    token=token,
                    docs=getdoc(FaultCode.FLAG_ASSIGNMENT)
                )
            self._optarg = True
            self._advance(1)
        elif equals:
            if not value:
                self._record(
                    EmptyInlineValueWarning,
                    "empty inline value for option %r at %s position" % ("--" + name, ordinal(self._optind)),
                    title="empty inline value",
                    code=FaultCode.EMPTY_INLINE_VALUE,
                    hint="add a value after '=' (for example: --%s=<value>)" % name,
                    token=token,
                    docs=getdoc(FaultCode.EMPTY_INLINE_VALUE)
                )
            self._optarg = value
            self._advance(1)
        else:
            self._trailing("--" + name, token)

        return option.identifier

    def _short(self, token):
        if not self._grammar.shorts:
            self._record(
                UnknownOptionWarning,
                "unknown option %r at %s position" % (token, ordinal(self._optind)),
                title="unknown option",
                code=FaultCode.UNKNOWN_OPTION,
                hint="this program does not accept short options",
                token=token,
                suggestions=[],
                docs=getdoc(FaultCode.UNKNOWN_OPTION)
            )
            self._advance(1)
            return None

        # "-o=value" is not a short option spelling
        if "=" in token:
            self._record(
                MalformedTokenWarning,
                "bad form of option %r at %s position" % (token, ordinal(self._optind)),
                title="malformed option",
                code=FaultCode.MALFORMED_TOKEN,
                hint="pass the value after a space (for example: %s <value>)" % token.partition("=")[0],
                token=token,
                docs=getdoc(FaultCode.MALFORMED_TOKEN)
            )
            self._advance(1)
            return None

        cluster = token[1:]
        if len(cluster) == 1:
            return self._single(cluster, token)
        return self._grouped(cluster, token)

    def _unknown(self, char, token):
        self._record(
            UnknownOptionWarning,
            "unknown option %r at %s position" % ("-" + char, ordinal(self._optind)),
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            hint="declared short options are %s" % ", ".join("-" + short for short in self._grammar.shorts),
            token=token,
            suggestions=[],
            docs=getdoc(FaultCode.UNKNOWN_OPTION)
        )

    def _single(self, char, token):
        requires = self._grammar.lookup(char)

        if requires is Unset:
            self._unknown(char, token)
            self._advance(1)
            return None

        if requires:
            self._trailing("-" + char, token)
        else:
            self._optarg = True
            self._advance(1)
        return char

    def _grouped(self, cluster, token):
        """
        Resolve the next declared character of a grouped short option ("-xyz").

        Only the last character of a group may take a value from the following
        token; a value-taking character anywhere else resolves to False and the
        rest of the group is still scanned on later calls.
        """
        last = len(cluster) - 1

        for index in range(self._offset, len(cluster)):
            char = cluster[index]
            requires = self._grammar.lookup(char)

            if requires is Unset:
                self._unknown(char, token)
                continue

            if not requires:
                self._optarg = True
                if index == last:
                    self._advance(1)
                else:
                    self._offset = index + 1
                return char

            if index < last:
                self._optarg = False
                self._record(
                    MisplacedValueWarning,
                    "option '-%s' in group %r at %s position must be the last of its group to take a value" % (
                        char, token, ordinal(self._optind)
                    ),
                    title="misplaced option value",
                    code=FaultCode.MISPLACED_VALUE,
                    hint="move '%s' to the end of the group (for example: -%s%s <value>)" % (
                        char, cluster[:index] + cluster[index + 1:], char
                    ),
                    token=token,
                    docs=getdoc(FaultCode.MISPLACED_VALUE)
                )
                self._offset = index + 1
                return char

            self._trailing("-" + char, token)
            return char

        # no declared character left in the group
        self._advance(1)
        return None


__all__ = (
    "EndType",
    "END",
    "Scanner",
    "islong",
    "isshort",
    "isoption",
)
