"""
Optscan faults (scan diagnostics) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every condition the
  scanner absorbs while classifying tokens. Codes are grouped by domain to keep
  copy consistent and make logs/searches predictable.
- ScanWarning: base type that carries message + options and knows how to render
  itself in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface a fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Policy
- The scanner never raises while scanning. Unknown options are skipped, missing
  values become False, and `-x=y` tokens are skipped; each of these is recorded
  as a fault so the caller decides what to do with it.
- Faults are warnings: outside shell mode they go through warnings.warn, so a
  host can escalate them with warnings.simplefilter("error").

UX goals
- Position-first messages: every message includes the ordinal position of the
  offending token (“at third position”).
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
"""
import copy
import inspect
import warnings
from abc import ABC
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
    canonical fault codes used across the scanner (stable identifiers).

    grouping
    - tokens (1211x)
      • MALFORMED_TOKEN, UNKNOWN_OPTION
    - values (1212x)
      • MISSING_VALUE, MISPLACED_VALUE, FLAG_ASSIGNMENT, EMPTY_INLINE_VALUE

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- token faults (1211x) ---
    MALFORMED_TOKEN             = 12111
    UNKNOWN_OPTION              = 12112

    # --- value faults (1212x) ---
    MISSING_VALUE               = 12121
    MISPLACED_VALUE             = 12122
    FLAG_ASSIGNMENT             = 12123
    EMPTY_INLINE_VALUE          = 12124

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ScanWarning(ABC, Warning):
    """
    base fault recorded by the scanner.

    options
    - code, title, hint: rendering copy (set where the fault is recorded).
    - token, index: the offending token and its 1-based position in argv.
    - prog, shell, colorful, fancy: runtime presentation (merged by trigger()).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code
            "warning-title": "bold #FFC2E0",  # soft pinky title

            # body
            "warning-message": "#D6D6DE",  # light gray body
            "hint-arrow": "#B8EFAF dim",  # soft green arrow
            "hint": "italic #B8EFAF",  # soft green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", self.options.get("prog", "optscan")), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.options["code"].normalize(), styler("code")),
            " | ",
            text(self.options["title"].title(), styler("warning-title")),
            " ]"
        )
        message = text(self.message, styler("warning-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.options["hint"], styler("hint")))

        if fancy:
            return Panel(Group(message, hint), title=header, title_align="left", width=console.width - 4)

        return Group(header, message, hint)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MalformedTokenWarning(ScanWarning): ...
class UnknownOptionWarning(ScanWarning): ...
class MissingValueWarning(ScanWarning): ...
class MisplacedValueWarning(ScanWarning): ...
class FlagAssignmentWarning(ScanWarning): ...
class EmptyInlineValueWarning(ScanWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ScanWarning).
    - options are merged into the fault via copy.replace(fault, **options).
    - in shell mode, rendering happens via the rich console on stderr; otherwise
      the fault is emitted with warnings.warn.

    typical options
    - prog, shell, fancy, colorful, and any other context the reporter may want
      to show (e.g., token/index).
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
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ScanWarning",
    "MalformedTokenWarning",
    "UnknownOptionWarning",
    "MissingValueWarning",
    "MisplacedValueWarning",
    "FlagAssignmentWarning",
    "EmptyInlineValueWarning",
    "trigger",
    "getdoc",
)
