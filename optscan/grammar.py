r"""
Optscan option grammar.

Overview
- LongOption: one long option declaration (name, value, alias).
  • name: the text after "--" that the token must match exactly.
  • value: True when the option requires a value ("--name=value" or "--name value").
  • alias: optional single character reported instead of the name (e.g. "o" for --output).
- Grammar: the short-option spec string plus the long option declarations, in
  the getopt/getopt_long convention.

Short-option spec
- Each allowed character, optionally followed by ':' meaning “requires a value”:
    "vho:a"  → -v, -h and -a are flags; -o takes a value.
- ':' is never an option character; extra colons ("o::") are ignored.
- When a character is declared twice, the first declaration wins.

Long-option declarations
- Accepted shapes (mixable in the same list):
    "verbose"                   → flag
    ("id", True)                → takes a value
    ("verbose", False, "v")     → flag reported as "v"
    LongOption("output", True, "o")
- Matching is by exact name. When a name is declared more than once, the last
  matching declaration decides the identifier and the value handling.

Validation
- Only the shape of each declaration is checked (types, alias length, no '=' in
  names). Conflicts between declarations are not validated.

Quick example:
    >>> grammar = Grammar("vho:a", [("id", True), ("verbose", False, "v")])
    >>> grammar.lookup("o")
    True
    >>> grammar.match("verbose")
    LongOption(name='verbose', value=False, alias='v')
"""
import collections
from collections.abc import Iterable
from types import MappingProxyType

from .utils import Unset


class LongOption(collections.namedtuple("LongOption", ("name", "value", "alias"), defaults=(False, None))):
    """
    Immutable long option declaration.

    Parameters
    - name: str
      Non-empty option name without the leading "--"; must not contain '='.
    - value: bool
      Whether the option requires a value. Defaults to False (flag).
    - alias: str | None
      Optional single-character identifier reported in place of the name.

    Raises
    - TypeError: when a field has the wrong type.
    - ValueError: when the name is empty or contains '=', or the alias is not a single character.
    """
    __slots__ = ()

    def __new__(cls, name, value=False, alias=None):
        if not isinstance(name, str):
            raise TypeError("long option name must be a string")
        if not name:
            raise ValueError("long option name must be a non-empty string")
        if "=" in name:
            raise ValueError("long option name %r must not contain '='" % name)
        if not isinstance(value, bool):
            raise TypeError("long option %r value requirement must be a boolean" % name)
        if alias is not None:
            if not isinstance(alias, str):
                raise TypeError("long option %r alias must be a string" % name)
            if len(alias) != 1:
                raise ValueError("long option %r alias must be a single character" % name)
        return super().__new__(cls, name, value, alias)

    @property
    def identifier(self):
        """
        The key the option is reported under: the alias when declared, else the name.
        """
        return self.alias if self.alias is not None else self.name


def _declare(entry):
    """
    Normalize one long option declaration into a LongOption.
    """
    if isinstance(entry, LongOption):
        return entry
    if isinstance(entry, str):
        return LongOption(entry)
    if isinstance(entry, (tuple, list)):
        if not 1 <= len(entry) <= 3:
            raise ValueError("long option declaration must have 1 to 3 fields but %d were given" % len(entry))
        return LongOption(*entry)
    raise TypeError("long option declaration must be a string, a tuple or a LongOption")


def _compile(spec):
    """
    Turn a short-option spec string into a {character: requires_value} mapping.
    """
    shorts = {}
    for index, char in enumerate(spec):
        if char == ":":
            continue
        shorts.setdefault(char, spec[index + 1:index + 2] == ":")
    return shorts


class Grammar:
    """
    Declared option grammar consumed by the scanner.

    Parameters
    - short: str (positional-only)
      Short-option spec string, e.g. "vf:". Defaults to "" (no short options).
    - long: Iterable (positional-only)
      Long option declarations (see module docs). Defaults to () (no long options).

    Attributes (read-only)
    - spec: the short-option spec string as given.
    - shorts: mapping of declared short characters to their value requirement.
    - longs: tuple of LongOption in declaration order.
    """
    __slots__ = ("_spec", "_shorts", "_longs")

    def __init__(self, short="", long=(), /):
        if not isinstance(short, str):
            raise TypeError("Grammar() short options must be a string")
        if isinstance(long, (str, LongOption)) or not isinstance(long, Iterable):
            raise TypeError("Grammar() long options must be an iterable of declarations")
        self._spec = short
        self._shorts = _compile(short)
        self._longs = tuple(map(_declare, long))

    @property
    def spec(self):
        return self._spec

    @property
    def shorts(self):
        return MappingProxyType(self._shorts)

    @property
    def longs(self):
        return self._longs

    def lookup(self, char, /):
        """
        Return whether the short option `char` requires a value, or Unset when undeclared.
        """
        return self._shorts.get(char, Unset)

    def match(self, name, /):
        """
        Return the long option declared as `name`, or None when there is none.

        Every declaration is examined; with duplicate names the last one wins.
        """
        option = None
        for declaration in self._longs:
            if declaration.name == name:
                option = declaration
        return option

    def __eq__(self, other):
        if not isinstance(other, Grammar):
            return NotImplemented
        return self._spec == other._spec and self._longs == other._longs

    def __hash__(self):
        return hash((self._spec, self._longs))

    def __repr__(self):
        return "%s(%r, %r)" % (type(self).__name__, self._spec, list(self._longs))

    def __rich_repr__(self):
        yield "short", self._spec
        yield "long", list(self._longs)


__all__ = (
    "LongOption",
    "Grammar",
)
