"""
Argpool declaration pools.

A Pool is the immutable registry of declarations a command line is interpreted
against: an ordered sequence of positional Arguments, plus the Options indexed by
their long and short tokens. Pools are assembled with a PoolBuilder, which checks
every invariant at insertion time so a misconfigured pool fails long before the
first parse:

- a declaration can be added only once (identity based);
- optional arguments form a suffix of the arguments (no required argument after
  an optional one);
- at most one vararg argument, and only in the last position;
- long and short tokens are unique within a pool.

Building does not consume the builder: build() can be called repeatedly and every
call returns an independent, immutable pool. A built pool is never mutated, so it
can be shared freely between threads running independent parses.

Quick example:
    >>> pool = (
    ...     PoolBuilder()
    ...     .argument(source := Argument())
    ...     .vararg(targets := Argument(optional=True))
    ...     .option(force := Option("force", "f", type=BOOLEAN, marker=True))
    ...     .build()
    ... )
    >>> pool.first_optional, pool.vararg
    (1, True)
"""
from .arguments import Argument, Option
from .faults import (
    ArgumentOrderError,
    DuplicateDeclarationError,
    DuplicateTokenError,
    VarargPositionError,
)
from .utils import Unset, coalesce, mirror


class Pool:
    """
    Immutable registry of arguments and options.

    Properties
    - arguments: tuple of Arguments, in positional order.
    - long_options: read-only mapping from long token to Option.
    - short_options: read-only mapping from short token to Option.
    - first_optional: index of the first optional argument (len(arguments)
      when every argument is required).
    - vararg: whether the last argument collects every remaining token.
    - last: the last argument, or None when there are no arguments.
    """

    arguments = mirror("arguments")
    long_options = mirror("long_options")
    short_options = mirror("short_options")
    first_optional = mirror("first_optional")
    vararg = mirror("vararg")

    def __init__(self, arguments, long_options, short_options, first_optional, vararg, /):
        self._arguments = tuple(arguments)
        self._long_options = dict(long_options)
        self._short_options = dict(short_options)
        self._first_optional = first_optional
        self._vararg = bool(vararg)

    @property
    def last(self):
        return self._arguments[-1] if self._arguments else None

    def __contains__(self, declaration):
        if isinstance(declaration, Argument):
            return any(argument is declaration for argument in self._arguments)
        if isinstance(declaration, Option):
            return self._long_options.get(declaration.long) is declaration
        return False

    def index(self, argument, /):
        """
        Return the position of `argument` in this pool.

        Raises ValueError when the argument is not part of the pool.
        """
        for index, candidate in enumerate(self._arguments):
            if candidate is argument:
                return index
        raise ValueError("argument is not in this pool")

    def is_vararg(self, argument, /):
        """
        Return whether `argument` is this pool's trailing vararg argument.
        """
        return self._vararg and self.last is argument

    def __repr__(self):
        return "pool(arguments=%d, options=%d, vararg=%r)" % (
            len(self._arguments), len(self._long_options), self._vararg
        )

    def __rich_repr__(self):
        yield "arguments", self._arguments
        yield "options", tuple(self._long_options.values())
        yield "first_optional", self._first_optional
        yield "vararg", self._vararg


class PoolBuilder:
    """
    Fluent builder for a Pool.

    Every method validates its declaration against what was added so far, raises
    a UsageError subclass on conflict (leaving the builder unchanged), and returns
    the builder itself so calls can be chained.
    """

    def __init__(self):
        self._arguments = []
        self._long_options = {}
        self._short_options = {}
        self._first_optional = Unset
        self._vararg = False

    def _check_argument(self, argument):
        if not isinstance(argument, Argument):
            raise TypeError("expected an argument, got %r" % type(argument).__name__)
        if any(candidate is argument for candidate in self._arguments):
            raise DuplicateDeclarationError("duplicate argument: %r" % argument)
        if self._vararg:
            raise VarargPositionError("a vararg argument may not be followed by other arguments")
        if self._first_optional is not Unset and not argument.optional:
            raise ArgumentOrderError("a required argument must not be preceded by an optional one")

    def argument(self, argument, /):
        """
        Append a positional argument.

        Raises
        - DuplicateDeclarationError: the argument was already added.
        - VarargPositionError: a vararg argument was already added.
        - ArgumentOrderError: a required argument follows an optional one.
        """
        self._check_argument(argument)
        if argument.optional and self._first_optional is Unset:
            self._first_optional = len(self._arguments)
        self._arguments.append(argument)
        return self

    def vararg(self, argument, /):
        """
        Append the trailing vararg argument, which collects every remaining
        positional token. Nothing may be added after it.

        A required vararg argument needs at least one value; an optional one
        may collect none.

        Raises the same errors as argument().
        """
        self._check_argument(argument)
        if argument.optional and self._first_optional is Unset:
            self._first_optional = len(self._arguments)
        self._arguments.append(argument)
        self._vararg = True
        return self

    def option(self, option, /):
        """
        Register an option under its long token and, if any, its short token.

        Raises
        - DuplicateDeclarationError: the option was already added.
        - DuplicateTokenError: its long or short token is already taken.
        """
        if not isinstance(option, Option):
            raise TypeError("expected an option, got %r" % type(option).__name__)
        if self._long_options.get(option.long) is option:
            raise DuplicateDeclarationError("duplicate option: %r" % option)
        if option.long in self._long_options:
            raise DuplicateTokenError("duplicate long option token: %r" % option.long)
        if option.short is not None and option.short in self._short_options:
            raise DuplicateTokenError("duplicate short option token: %r" % option.short)

        self._long_options[option.long] = option
        if option.short is not None:
            self._short_options[option.short] = option
        return self

    def build(self):
        """
        Return a new immutable Pool holding everything added so far.
        """
        return Pool(
            self._arguments,
            self._long_options,
            self._short_options,
            coalesce(self._first_optional, len(self._arguments)),
            self._vararg,
        )


__all__ = (
    "Pool",
    "PoolBuilder",
)
