"""
Argpool result sets.

A ResultSet is what a successful parse returns: the values explicitly given on the
command line, keyed by declaration identity, together with the pool they were
parsed against. It is created once per parse and never mutated afterwards.

Lookups
- get(declaration): the explicit value, or None. Defaults are never returned.
- get_or_default(declaration, fallback=None): the explicit value, else the
  declaration's default, else `fallback`.
- get_vararg_values(argument): the values collected by the trailing vararg
  argument, as a tuple.
- declaration in results: whether an explicit value was given.

Every lookup checks that the declaration belongs to the originating pool
(ForeignDeclarationError otherwise). The trailing vararg argument can only be
read with get_vararg_values() (VarargArgumentError otherwise), and
get_vararg_values() only accepts that argument (NotVarargArgumentError).
"""
from .arguments import Argument, Option
from .faults import ForeignDeclarationError, NotVarargArgumentError, VarargArgumentError
from .utils import mirror


class ResultSet:
    """
    Immutable mapping from declarations to parsed values.

    Scalars are stored for arguments and options; the vararg argument maps to
    the tuple of its values in command-line order.
    """

    pool = mirror("pool")

    def __init__(self, pool, values, /):
        self._pool = pool
        self._values = dict(values)

    def _check(self, declaration):
        if not isinstance(declaration, Argument | Option):
            raise TypeError("expected an argument or an option, got %r" % type(declaration).__name__)
        if declaration not in self._pool:
            raise ForeignDeclarationError("%s is not available for this set: %r" % (
                type(declaration).__typename__, declaration
            ))

    def _check_scalar(self, declaration):
        self._check(declaration)
        if self._pool.is_vararg(declaration):
            raise VarargArgumentError(
                "argument is the vararg argument of this set, use get_vararg_values(): %r" % declaration
            )

    def get(self, declaration, /):
        """
        Return the explicitly set value for `declaration`, or None.

        Note: default values are not explicitly set values.
        """
        self._check_scalar(declaration)
        return self._values.get(declaration)

    def get_or_default(self, declaration, fallback=None, /):
        """
        Return the explicitly set value for `declaration`, its default value if
        it has one, or `fallback`.
        """
        self._check_scalar(declaration)
        if declaration in self._values:
            return self._values[declaration]
        if declaration.has_default:
            return declaration.default
        return fallback

    def get_vararg_values(self, argument, /):
        """
        Return the values collected for the pool's vararg argument.

        Returns
        - the collected values, in command-line order, when any were given;
        - a 1-tuple holding the default value when none were given and the
          argument has a default;
        - an empty tuple otherwise.
        """
        self._check(argument)
        if not self._pool.is_vararg(argument):
            raise NotVarargArgumentError("argument is not a vararg argument for this set: %r" % argument)
        if argument in self._values:
            return tuple(self._values[argument])
        if argument.has_default:
            return (argument.default,)
        return ()

    def __contains__(self, declaration):
        self._check(declaration)
        return declaration in self._values

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return "result-set(%s)" % ", ".join(
            "%s=%r" % (getattr(declaration, "long", None) or "#%d" % self._pool.index(declaration), value)
            for declaration, value in self._values.items()
        )

    def __rich_repr__(self):
        for declaration, value in self._values.items():
            if isinstance(declaration, Option):
                yield "--" + declaration.long, value
            else:
                yield "#%d" % self._pool.index(declaration), value


__all__ = (
    "ResultSet",
)
