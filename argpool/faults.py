"""
Argpool faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every parse-time issue
  (errors and warnings). Codes are grouped by kind to keep messages consistent
  and make logs/searches predictable.
- ParsingException / ParsingWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- Kind classes (LexicalError, UnknownDeclarationError, DuplicateAssignmentError,
  ValueContractError, ArityError, ConversionError, ValidationError) so callers
  can catch a whole family with a single except clause.
- UsageError / ResultLookupError: programming mistakes made while building a pool
  or while querying a result set. These are plain ValueError/LookupError
  subclasses; they are never rendered.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages: every parse-time message includes the ordinal position
  of the offending token (“at third position”).
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- The engine raises a fault as soon as the token stream turns out to be invalid;
  OptionParser.parse() routes it through trigger() with its runtime options.
- In non-shell mode, exceptions are raised; in shell mode, they are rendered via
  rich on stderr and the process exits with status 1.
"""
import copy
import inspect
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, UnsetType, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by kind)
    - lexical (211xx)
      • MALFORMED_TOKEN, UNTERMINATED_STRING
    - unknown declarations (212xx)
      • UNKNOWN_OPTION, NO_ARGUMENTS_REGISTERED, NO_SHORT_TOKENS_REGISTERED
    - duplicate assignments (213xx)
      • DUPLICATE_OPTION
    - value contract violations (214xx)
      • MARKER_ONLY_ASSIGNMENT, OPTION_VALUE_REQUIRED, ARGUMENT_VALUE_MISSING
    - arity violations (215xx)
      • MISSING_ARGUMENTS, UNEXPECTED_ARGUMENT
    - delegated failures (216xx)
      • CONVERSION_FAILURE, VALIDATION_FAILURE
    - warnings (221xx)
      • EMPTY_INLINE_VALUE

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- lexical errors (211xx) ---
    MALFORMED_TOKEN             = 21101
    UNTERMINATED_STRING         = 21102

    # --- unknown declarations (212xx) ---
    UNKNOWN_OPTION              = 21201
    NO_ARGUMENTS_REGISTERED     = 21202
    NO_SHORT_TOKENS_REGISTERED  = 21203

    # --- duplicate assignments (213xx) ---
    DUPLICATE_OPTION            = 21301

    # --- value contract violations (214xx) ---
    MARKER_ONLY_ASSIGNMENT      = 21401
    OPTION_VALUE_REQUIRED       = 21402
    ARGUMENT_VALUE_MISSING      = 21403

    # --- arity violations (215xx) ---
    MISSING_ARGUMENTS           = 21501
    UNEXPECTED_ARGUMENT         = 21502

    # --- delegated failures (216xx) ---
    CONVERSION_FAILURE          = 21601
    VALIDATION_FAILURE          = 21602

    # --- warnings (221xx) ---
    EMPTY_INLINE_VALUE          = 22101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, defaults, kind):
    """
    build the rich renderable shared by exceptions and warnings.

    layout
    - plain: "[ prog — code | title ]" header, message line, hint line.
    - fancy: the header becomes a panel title wrapping message and hint.
    """
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", True)
    fancy = options.get("fancy", False)

    styles = defaultdict(str, defaults | getattr(main, "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    code = fault.code
    header = Text.assemble(
        "[ ",
        text(getattr(main, "__prog__", "argpool"), "prog-name"),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "-", "code"),
        " | ",
        text(fault.title.title(), kind + "-title"),
        " ]"
    )
    message = text(fault.message, kind + "-message")
    if fault.hint:
        hint = Text.assemble(text(" → ", "hint-arrow"), text(fault.hint, "hint"))
    else:
        hint = Text("")

    if fancy:
        try:
            width = int((console.width - 4) * options["ratio"])
        except KeyError:
            width = None
        return Panel(Group(message, hint), title=header, title_align="left", width=width)

    return Group(header, message, hint)


class _FaultMixin:
    """
    shared state and accessors for exceptions and warnings.

    every fault carries a message plus a read-only mapping of options. options
    that are not given fall back to class-level defaults (__faultcode__, __title__).
    """
    __faultcode__ = Unset
    __title__ = "fault"

    def __init__(self, message=Unset, /, **options):
        if not isinstance(message, str | UnsetType):
            raise TypeError(f"{type(self).__name__}() message must be a string")
        self.message = coalesce(message, type(self).__title__)
        self.options = MappingProxyType(options)
        super().__init__(self.message)

    @property
    def code(self):
        return self.options.get("code", type(self).__faultcode__)

    @property
    def title(self):
        return self.options.get("title", type(self).__title__)

    @property
    def hint(self):
        return self.options.get("hint")

    @property
    def index(self):
        return self.options.get("index")

    @property
    def input(self):
        return self.options.get("input")

    def __str__(self):
        return self.message

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        replica = type(self)(self.message, **{**self.options, **overrides})
        # Keep the cause chain so delegated failures still show their cause.
        replica.__cause__ = self.__cause__
        replica.__suppress_context__ = self.__suppress_context__
        return replica


class ParsingException(_FaultMixin, Exception):
    """
    base type for every fault raised while parsing a command line.

    options (all optional)
    - code: FaultCode; defaults to the class-level __faultcode__.
    - title: short lowercased title; defaults to the class-level __title__.
    - hint: one actionable sentence shown after an arrow.
    - index: 1-based position of the offending token.
    - input: the offending token text (or option name).
    - docs: optional documentation text from getdoc().
    - shell/fancy/colorful/ratio: rendering flags merged in by trigger().
    """
    __title__ = "parsing error"

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        }, "error")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self
        console.print(self)
        sys.exit(1)


class LexicalError(ParsingException):
    __title__ = "lexical error"


class MalformedTokenError(LexicalError):
    __faultcode__ = FaultCode.MALFORMED_TOKEN
    __title__ = "malformed option token"


class UnterminatedStringError(LexicalError):
    __faultcode__ = FaultCode.UNTERMINATED_STRING
    __title__ = "unterminated string"


class UnknownDeclarationError(ParsingException):
    __title__ = "unknown declaration"


class UnknownOptionError(UnknownDeclarationError):
    __faultcode__ = FaultCode.UNKNOWN_OPTION
    __title__ = "unknown option"


class NoArgumentsRegisteredError(UnknownDeclarationError):
    __faultcode__ = FaultCode.NO_ARGUMENTS_REGISTERED
    __title__ = "no arguments registered"


class NoShortTokensRegisteredError(UnknownDeclarationError):
    __faultcode__ = FaultCode.NO_SHORT_TOKENS_REGISTERED
    __title__ = "no short options registered"


class DuplicateAssignmentError(ParsingException):
    __title__ = "duplicate assignment"


class DuplicateOptionError(DuplicateAssignmentError):
    __faultcode__ = FaultCode.DUPLICATE_OPTION
    __title__ = "duplicated option"


class ValueContractError(ParsingException):
    __title__ = "value contract violation"


class MarkerOnlyAssignmentError(ValueContractError):
    __faultcode__ = FaultCode.MARKER_ONLY_ASSIGNMENT
    __title__ = "marker option cannot take a value"


class OptionValueRequiredError(ValueContractError):
    __faultcode__ = FaultCode.OPTION_VALUE_REQUIRED
    __title__ = "option value required"


class ArgumentValueMissingError(ValueContractError):
    __faultcode__ = FaultCode.ARGUMENT_VALUE_MISSING
    __title__ = "argument value missing"


class ArityError(ParsingException):
    __title__ = "arity violation"


class MissingArgumentsError(ArityError):
    __faultcode__ = FaultCode.MISSING_ARGUMENTS
    __title__ = "missing arguments"


class UnexpectedArgumentError(ArityError):
    __faultcode__ = FaultCode.UNEXPECTED_ARGUMENT
    __title__ = "unexpected argument"


class ConversionError(ParsingException):
    """
    raised by (or on behalf of) a conversion callback that rejects a raw string.

    converters may raise it directly; a ValueError/TypeError escaping a
    converter is wrapped into one by the engine.
    """
    __faultcode__ = FaultCode.CONVERSION_FAILURE
    __title__ = "invalid value"


class ValidationError(ParsingException):
    """
    raised by (or on behalf of) a validator that rejects a converted value.
    """
    __faultcode__ = FaultCode.VALIDATION_FAILURE
    __title__ = "rejected value"


class ParsingWarning(_FaultMixin, Warning):
    __title__ = "parsing warning"

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        }, "warning")

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)


class EmptyInlineValueWarning(ParsingWarning):
    __faultcode__ = FaultCode.EMPTY_INLINE_VALUE
    __title__ = "empty inline value"


class UsageError(ValueError):
    """
    a pool was assembled in a way that can never parse consistently.

    raised synchronously by PoolBuilder calls, before any parse runs.
    """


class DuplicateDeclarationError(UsageError): ...
class VarargPositionError(UsageError): ...
class ArgumentOrderError(UsageError): ...
class DuplicateTokenError(UsageError): ...


class ResultLookupError(LookupError):
    """
    a result set was queried in a way its originating pool does not support.
    """


class ForeignDeclarationError(ResultLookupError): ...
class VarargArgumentError(ResultLookupError): ...
class NotVarargArgumentError(ResultLookupError): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are
      raised and warnings are emitted through the warnings module.

    typical options
    - shell, fancy, colorful, title, code, hint, docs, and any other context the
      reporter may want to show (e.g., input/index).
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

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ParsingException",
    "LexicalError",
    "MalformedTokenError",
    "UnterminatedStringError",
    "UnknownDeclarationError",
    "UnknownOptionError",
    "NoArgumentsRegisteredError",
    "NoShortTokensRegisteredError",
    "DuplicateAssignmentError",
    "DuplicateOptionError",
    "ValueContractError",
    "MarkerOnlyAssignmentError",
    "OptionValueRequiredError",
    "ArgumentValueMissingError",
    "ArityError",
    "MissingArgumentsError",
    "UnexpectedArgumentError",
    "ConversionError",
    "ValidationError",
    "ParsingWarning",
    "EmptyInlineValueWarning",
    "UsageError",
    "DuplicateDeclarationError",
    "VarargPositionError",
    "ArgumentOrderError",
    "DuplicateTokenError",
    "ResultLookupError",
    "ForeignDeclarationError",
    "VarargArgumentError",
    "NotVarargArgumentError",
    "trigger",
    "getdoc",
)
