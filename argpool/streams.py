r"""
Argpool character streams.

Overview
- CharStream: lazy, single-pass character cursor over a source. It tracks the
  current character and position, and exposes the literal/string lexing
  primitives the engine is written in terms of.
- StringStream: CharStream over an in-memory string.
- stream(source): wrap a string, an argv-like iterable of strings, or an existing
  stream into a CharStream.
- join(arguments): assemble an argv-like iterable into the single command-line
  string the engine's grammar expects.

Cursor model
- position starts at -1 (“before start”) and current at `eos`.
- next() advances by one character and updates current; past the end, every read
  returns `eos` and current stays `eos` (reads are idempotent, never raising).
- There is no rewind: the only lookback is `current` itself.

Strings
- A literal is a run of non-whitespace characters.
- A quoted string starts and ends with a double quote; inside it, a backslash
  escapes a double quote and nothing else (``\"`` → ``"``, ``\n`` stays ``\n``).
- A quoted string that is never closed raises UnterminatedStringError.

Quick example:
    >>> chars = stream('--name="a \\"b\\" c" rest')
    >>> chars.next(), chars.next()
    ('-', '-')
    >>> chars.next_literal(lambda char: char == "=")
    'name'
    >>> chars.next_string()
    'a "b" c'
"""
from abc import ABC, abstractmethod
from collections.abc import Iterable

from .eos import eos
from .faults import UnterminatedStringError
from .utils import mirror


def _blank(char):
    return char is not eos and char.isspace()


class CharStream(ABC):
    """
    A parsable stream of characters.

    Subclasses implement read(), which must advance the underlying cursor by one
    character and return it, or return `eos` once the source is exhausted.
    Everything else (current tracking, whitespace skipping, literals and quoted
    strings) is implemented here on top of read().

    Properties
    - position: index of the current character (-1 before the first read).
    - current: the current character, or `eos` before the first read and after
      the end of the source.
    """

    position = mirror("position")
    current = mirror("current")

    def __init__(self):
        self._position = -1
        self._current = eos

    @abstractmethod
    def read(self):
        """
        Advance the cursor by one character and return it (or `eos`).
        """

    def next(self):
        """
        Return the next character, or `eos` if the end has been reached.
        """
        self._current = self.read()
        return self._current

    def next_non_whitespace(self):
        """
        Advance until a non-whitespace character (or the end) and return it.
        """
        while _blank(self.next()):
            pass
        return self._current

    def current_non_whitespace(self):
        """
        Return the current character if it is a started, non-whitespace one;
        otherwise behave like next_non_whitespace().
        """
        if self._position != -1 and self._current is not eos and not _blank(self._current):
            return self._current
        return self.next_non_whitespace()

    def current_literal(self, until=None):
        """
        Read a literal starting at the current character.

        The current character is always part of the literal. Reading stops at
        whitespace, at a character accepted by `until`, or at the end; the
        stopping character becomes `current` and is not consumed.

        Returns
        - str: the literal.
        - eos: if the stream has not started or is already exhausted.
        """
        if self._position == -1 or self._current is eos:
            return eos
        chars = [self._current]
        while (char := self.next()) is not eos and not char.isspace() and not (until and until(char)):
            chars.append(char)
        return "".join(chars)

    def next_literal(self, until=None):
        """
        Read a literal starting at the next character (see current_literal()).

        Unlike current_literal(), this may return an empty string when the next
        character already stops the literal.
        """
        chars = []
        while (char := self.next()) is not eos and not char.isspace() and not (until and until(char)):
            chars.append(char)
        return "".join(chars)

    def current_string(self):
        """
        Read a string (quoted or literal) starting at the current character.

        If the current character is a double quote, the quoted string is read up
        to the first unescaped quote, which is consumed. Otherwise a literal is
        read (see current_literal()).

        Returns
        - str: the string contents (without surrounding quotes).
        - eos: if the stream has not started or is already exhausted.

        Raises
        - UnterminatedStringError: the closing quote is missing.
        """
        if self._position == -1 or self._current is eos:
            return eos
        if self._current != '"':
            return self.current_literal()

        start = self._position
        chars = []
        escaped = False
        while True:
            if (char := self.next()) is eos:
                raise UnterminatedStringError(
                    "quoted string opened at offset %d is never closed" % start,
                    hint="close the string with '\"' (escape inner quotes as \\\")",
                    input='"' + "".join(chars),
                )
            if escaped:
                # only a quote can be escaped; any other pair is kept verbatim
                if char != '"':
                    chars.append("\\")
                chars.append(char)
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                break
            else:
                chars.append(char)

        # consume the closing quote
        self.next()
        return "".join(chars)

    def next_string(self):
        """
        Advance once, then read a string from there (see current_string()).

        Returns an empty string when the next character is whitespace, and
        `eos` when the stream is exhausted.
        """
        if (char := self.next()) is eos:
            return eos
        if char.isspace():
            return ""
        return self.current_string()

    def __repr__(self):
        return f"{type(self).__name__}(position={self._position!r}, current={self._current!r})"

    def __rich_repr__(self):
        yield "position", self._position
        yield "current", self._current


class StringStream(CharStream):
    """
    CharStream over an in-memory string.

    The position never moves past len(source); once there, read() keeps
    returning `eos`.
    """

    source = mirror("source")

    def __init__(self, source, /):
        if not isinstance(source, str):
            raise TypeError("StringStream() argument must be a string")
        super().__init__()
        self._source = source

    def read(self):
        if self._position < len(self._source):
            self._position += 1
        if self._position < len(self._source):
            return self._source[self._position]
        return eos

    def __rich_repr__(self):
        yield "source", self._source
        yield from super().__rich_repr__()


def join(arguments, /):
    """
    Join raw argument strings (e.g. sys.argv[1:]) into a single command line.

    Rules
    - elements starting with '-' are kept verbatim (option tokens, negative numbers);
    - every other element is wrapped in double quotes, after dropping one
      surrounding quote on either side and escaping inner quotes as \";
    - elements are separated by a single space.

    Note
    - a quoted element cannot end with a backslash, since the escape would apply
      to the closing quote.
    """
    if isinstance(arguments, str) or not isinstance(arguments, Iterable):
        raise TypeError("join() argument must be an iterable of strings")

    def quote(argument):
        if not isinstance(argument, str):
            raise TypeError("join() argument must be an iterable of strings")
        if argument.startswith("-"):
            return argument
        argument = argument.removeprefix('"').removesuffix('"')
        return '"%s"' % argument.replace('"', '\\"')

    return " ".join(map(quote, arguments))


def stream(source, /):
    """
    Return a CharStream for a string, an iterable of raw argument strings, or
    an existing CharStream (returned unchanged).
    """
    if isinstance(source, CharStream):
        return source
    if isinstance(source, str):
        return StringStream(source)
    if isinstance(source, Iterable):
        return StringStream(join(source))
    raise TypeError("stream() argument must be a string, an iterable of strings, or a stream")


__all__ = (
    "CharStream",
    "StringStream",
    "join",
    "stream",
)
