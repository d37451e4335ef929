r"""
Argpool parsing engine.

The engine walks a CharStream one top-level token at a time and resolves every
token against a Pool:

    --name[=value| value]   long option
    -abc[=value| value]     chain of short options (each one resolved on its own)
    -12 / -1.5              negative number, read as an argument
    --                      end of options (only when `terminator` is enabled)
    anything else           positional argument (quoted strings allowed)

Value attachment
- '=' right after the token: the rest (possibly quoted) is the explicit value;
  marker-only options reject it.
- whitespace after the token: the next string is the explicit value, unless a
  member of the token is marker-only, or a member has a marker and the next
  token starts with '-' (marker options never swallow a following option).
- no explicit value: every option receives its marker; an option without a
  marker is an error.

Faults are raised as soon as the input turns out to be invalid; nothing is
returned for a partial parse. OptionParser.parse() routes every fault through
trigger() so the same parser can raise (library use) or render and exit (shell
use).

Quick example:
    >>> pool = (
    ...     PoolBuilder()
    ...     .argument(source := Argument())
    ...     .option(count := Option("count", "c", type=INT, default=1))
    ...     .build()
    ... )
    >>> results = parse('file.txt -c 3', pool)
    >>> results.get(source), results.get(count)
    ('file.txt', 3)
"""
import difflib
import re
import sys

from .eos import eos
from .faults import *
from .pools import Pool
from .results import ResultSet
from .streams import stream
from .utils import Unset, mirror, ordinal, pluralize


def _equals(char):
    return char == "="


def _counted(number, word):
    return "%d %s" % (number, word if number == 1 else pluralize(word))


class _Walker:
    """
    Internal: per-call parsing state.

    A walker owns its stream and the values collected so far; the pool and the
    parser settings are only read. One walker handles exactly one parse.
    """

    def __init__(self, parser, chars):
        self._parser = parser
        self._pool = parser.pool
        self._chars = chars
        self._values = {}
        self._varargs = []
        self._index = 0  # next argument to fill
        self._position = 0  # 1-based token counter, for messages
        self._terminated = False

    def walk(self):
        while (char := self._chars.current_non_whitespace()) is not eos:
            self._position += 1
            if char == "-" and not self._terminated:
                self._dash()
            else:
                self._argument()
        return self._finish()

    def _where(self):
        return "at %s position" % ordinal(self._position)

    def _dash(self):
        char = self._chars.next()
        if char == "-":
            return self._long()
        if char is eos or char.isspace() or char == "=":
            raise MalformedTokenError(
                "lone '-' %s" % self._where(),
                hint="write an option as -x or --name, or quote the dash if it is a value",
                input="-",
                index=self._position,
                docs=getdoc(FaultCode.MALFORMED_TOKEN),
            )
        return self._short()

    def _long(self):
        token = self._chars.next_literal(_equals)

        if not token:
            # bare "--"
            if self._parser.terminator and self._chars.current != "=":
                self._terminated = True
                return
            raise MalformedTokenError(
                "missing option name after '--' %s" % self._where(),
                hint="write a long option as --name" + (
                    " (or use a lone '--' to end options)" if self._parser.terminator else ""
                ),
                input="--",
                index=self._position,
                docs=getdoc(FaultCode.MALFORMED_TOKEN),
            )

        input = "--" + token
        if not re.fullmatch(r"[A-Za-z0-9]+", token):
            raise MalformedTokenError(
                "bad form of option %r %s" % (input, self._where()),
                hint="option names are made of letters and digits only (e.g., --name=value)",
                input=input,
                index=self._position,
                docs=getdoc(FaultCode.MALFORMED_TOKEN),
            )

        try:
            option = self._pool.long_options[token]
        except KeyError:
            suggestions = difflib.get_close_matches(token, self._pool.long_options.keys(), 5)
            if suggestions:
                hint = "did you mean %r?" % ("--" + suggestions[0])
            elif self._pool.long_options:
                hint = "known options are %s" % ", ".join(map("--{}".format, self._pool.long_options))
            else:
                hint = "this command takes no options"
            raise UnknownOptionError(
                "unknown option %r %s" % (input, self._where()),
                hint=hint,
                input=input,
                suggestions=tuple(suggestions),
                index=self._position,
                docs=getdoc(FaultCode.UNKNOWN_OPTION),
            ) from None

        if option in self._values:
            raise DuplicateOptionError(
                "option %r %s was already given" % (input, self._where()),
                hint="give each option at most once",
                input=input,
                index=self._position,
                docs=getdoc(FaultCode.DUPLICATE_OPTION),
            )

        self._assign((option,), input)

    def _short(self):
        chars = self._chars
        run = chars.current_literal(_equals)

        # negative numbers are arguments, whatever short options exist
        if re.fullmatch(r"[0-9]+(\.[0-9]+)?", run):
            self._require_arguments()
            literal = "-" + run
            if chars.current == "=":
                literal += chars.current_literal()
            return self._store(literal)

        input = "-" + run
        if not re.fullmatch(r"[A-Za-z0-9]+", run):
            raise MalformedTokenError(
                "bad form of option chain %r %s" % (input, self._where()),
                hint="short options are single letters or digits, chained as -abc",
                input=input,
                index=self._position,
                docs=getdoc(FaultCode.MALFORMED_TOKEN),
            )

        if not self._pool.short_options:
            raise NoShortTokensRegisteredError(
                "short option chain %r %s cannot be resolved" % (input, self._where()),
                hint="this command has no short options, use the --name form",
                input=input,
                index=self._position,
                docs=getdoc(FaultCode.NO_SHORT_TOKENS_REGISTERED),
            )

        options = []
        for char in run:
            try:
                option = self._pool.short_options[char]
            except KeyError:
                raise UnknownOptionError(
                    "unknown short option %r in %r %s" % ("-" + char, input, self._where()),
                    hint="known short options are %s" % ", ".join(map("-{}".format, self._pool.short_options)),
                    input="-" + char,
                    index=self._position,
                    docs=getdoc(FaultCode.UNKNOWN_OPTION),
                ) from None
            if option in self._values or any(option is other for other in options):
                raise DuplicateOptionError(
                    "option %r in %r %s was already given" % ("-" + char, input, self._where()),
                    hint="give each option at most once, in any of its forms",
                    input="-" + char,
                    index=self._position,
                    docs=getdoc(FaultCode.DUPLICATE_OPTION),
                )
            options.append(option)

        self._assign(options, input)

    def _assign(self, options, input):
        chars = self._chars
        value = Unset

        if chars.current == "=":
            if any(option.marker_only for option in options):
                raise MarkerOnlyAssignmentError(
                    "%r %s cannot take a value" % (input, self._where()),
                    hint="remove everything from '=' (for example: %s)" % input,
                    input=input,
                    index=self._position,
                    docs=getdoc(FaultCode.MARKER_ONLY_ASSIGNMENT),
                )
            char = chars.next()
            if char is eos or char.isspace():
                self._parser.trigger(EmptyInlineValueWarning(
                    "empty inline value for %r %s" % (input, self._where()),
                    hint="add a value after '=' (for example: %s=<value>)" % input,
                    input=input,
                    index=self._position,
                    docs=getdoc(FaultCode.EMPTY_INLINE_VALUE),
                ))
                value = ""
            else:
                value = self._string()
        elif not any(option.marker_only for option in options):
            char = chars.current_non_whitespace()
            if char is not eos and not (char == "-" and any(option.has_marker for option in options)):
                value = self._string()

        if value is Unset:
            for option in options:
                if not option.has_marker:
                    raise OptionValueRequiredError(
                        "option %r %s requires a value" % (
                            "--" + option.long if input.startswith("--") else "-" + option.short,
                            self._where()
                        ),
                        hint="pass it inline (%s=<value>) or after a space (%s <value>)" % (input, input),
                        input=input,
                        index=self._position,
                        docs=getdoc(FaultCode.OPTION_VALUE_REQUIRED),
                    )
            for option in options:
                self._values[option] = option.marker
        else:
            for option in options:
                self._values[option] = self._convert(option, value, "value of %r" % input)

    def _require_arguments(self):
        if not self._pool.arguments:
            raise NoArgumentsRegisteredError(
                "unexpected value %s" % self._where(),
                hint="this command takes no positional arguments",
                index=self._position,
                docs=getdoc(FaultCode.NO_ARGUMENTS_REGISTERED),
            )

    def _argument(self):
        self._require_arguments()
        self._store(self._string())

    def _string(self):
        try:
            string = self._chars.current_string()
        except UnterminatedStringError as fault:
            raise UnterminatedStringError(
                "unterminated string %s" % self._where(),
                hint=fault.hint,
                input=fault.input,
                index=self._position,
                docs=getdoc(FaultCode.UNTERMINATED_STRING),
            ) from None
        if string is eos:
            raise ArgumentValueMissingError(
                "missing value %s" % self._where(),
                index=self._position,
                docs=getdoc(FaultCode.ARGUMENT_VALUE_MISSING),
            )
        return string

    def _store(self, string):
        arguments = self._pool.arguments
        if self._index >= len(arguments):
            raise UnexpectedArgumentError(
                "unexpected argument %r %s" % (string, self._where()),
                hint="this command takes at most %s" % (
                    _counted(len(arguments), "argument")
                ),
                input=string,
                index=self._position,
                docs=getdoc(FaultCode.UNEXPECTED_ARGUMENT),
            )

        argument = arguments[self._index]
        value = self._convert(argument, string, "%s argument" % ordinal(self._index + 1))
        if self._pool.is_vararg(argument):
            self._varargs.append(value)
        else:
            self._values[argument] = value
            self._index += 1

    def _convert(self, declaration, string, subject):
        try:
            return declaration(string)
        except (ConversionError, ValidationError) as fault:
            raise type(fault)(
                "%s %s: %s" % (subject, self._where(), fault.message),
                **{
                    "input": string,
                    "index": self._position,
                    "docs": getdoc(type(fault).__faultcode__),
                } | dict(fault.options)
            ) from fault

    def _finish(self):
        pool = self._pool
        satisfied = pool.vararg and self._varargs and self._index == len(pool.arguments) - 1
        if self._index < pool.first_optional and not satisfied:
            raise MissingArgumentsError(
                "missing %s argument at end of input (%s position)" % (
                    ordinal(self._index + 1), ordinal(self._position + 1)
                ),
                hint="expected at least %s, got %d" % (
                    _counted(pool.first_optional, "argument"), self._index
                ),
                index=self._position + 1,
                docs=getdoc(FaultCode.MISSING_ARGUMENTS),
            )

        if self._varargs:
            self._values[pool.last] = tuple(self._varargs)
        return ResultSet(pool, self._values)


class OptionParser:
    """
    Parse command lines against a fixed pool.

    Settings
    - terminator: a lone '--' ends option parsing; every later token is an
      argument. Off by default, in which case a lone '--' is malformed.
    - shell: render faults on stderr and exit with status 1 instead of raising.
    - fancy: render faults inside a panel.
    - colorful: style rendered faults.

    A parser keeps no state between calls; the same parser (and pool) can be
    used for any number of parses, from any number of threads.
    """

    pool = mirror("pool")
    terminator = mirror("terminator")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")

    def __init__(self, pool, /, *, terminator=False, shell=False, fancy=False, colorful=True):
        if not isinstance(pool, Pool):
            raise TypeError("OptionParser() argument must be a pool")
        self._pool = pool
        self._terminator = bool(terminator)
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)

    def trigger(self, fault, /, **options):
        """
        Surface `fault` with this parser's rendering settings.
        """
        trigger(fault, **options, shell=self._shell, fancy=self._fancy, colorful=self._colorful)

    def parse(self, source=Unset, /):
        """
        Parse `source` and return a ResultSet.

        `source` may be a command-line string, an iterable of raw argument
        strings (joined first), a CharStream, or omitted to read sys.argv[1:].

        Raises
        - ParsingException (one of its subclasses) on the first invalid token,
          unless the parser runs in shell mode.
        """
        if source is Unset:
            source = sys.argv[1:]
        walker = _Walker(self, stream(source))
        try:
            return walker.walk()
        except ParsingException as fault:
            self.trigger(fault)

    def __repr__(self):
        return "option-parser(%r, terminator=%r, shell=%r)" % (self._pool, self._terminator, self._shell)

    def __rich_repr__(self):
        yield self._pool
        yield "terminator", self._terminator
        yield "shell", self._shell
        yield "fancy", self._fancy
        yield "colorful", self._colorful


def parse(source, pool, /, **settings):
    """
    Shortcut for OptionParser(pool, **settings).parse(source).
    """
    return OptionParser(pool, **settings).parse(source)


__all__ = (
    "OptionParser",
    "parse",
)
