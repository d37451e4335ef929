r"""
Argpool declarations: positional arguments and named options.

Overview
- Declarations
  • Argument[_T]: positional, index-resolved value (required or optional).
  • Option[_T]: named value resolved by a long token (--name) and optionally a
    short token (-n), with optional marker semantics.

- Decorators
  • @argument(...): build an Argument and bind the decorated function as its validator.
  • @option(...): build an Option and bind the decorated function as its validator.

- Conversion
  • Calling a declaration with a raw string converts it with `type` and validates
    the result with `validator`: declaration("42") -> 42.
  • ValueError/TypeError escaping a converter is wrapped into ConversionError;
    ValueError escaping a validator is wrapped into ValidationError.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes selected
    fields via read-only properties declared in __introspectable__/__displayable__.

Identity
- Declarations never compare by configuration: two equally configured options are
  two different keys in a pool or a result set.

Metadata (sanitized on construction)
- Shared
  • type: Callable[[str], _T] (converter).
  • validator: Unset | Callable[[_T], object] (raises ValidationError to reject).
  • default: Unset | _T (any value, including None).
  • metavar / descr: Unset | str, non-empty when provided.
- Argument only
  • optional: bool.
- Option only
  • long: non-empty ASCII alphanumeric token (without dashes).
  • short: Unset | single ASCII alphanumeric character.
  • marker: Unset | _T, value used when the option is given without a value.
  • marker_only: bool, option never accepts an explicit value (requires a marker).

Quick example:
    >>> from argpool.arguments import Argument, Option, option
    >>> from argpool.converters import INT
    >>> from argpool.faults import ValidationError
    >>> path = Argument()
    >>> verbose = Option("verbose", "v", marker=True, marker_only=True)
    >>> @option("threads", "t", type=INT, default=1)
    ... def threads(value):
    ...     if value < 1:
    ...         raise ValidationError("threads must be positive")
"""
import functools
import operator
import re

from rich.text import Text

from .faults import ConversionError, ValidationError
from .utils import *


class ArgumentType(type):
    """
    Metaclass that turns declarations into introspectable, sealed value types.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and fault messages.
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Seal classes created with `sealed=True` against subclassing to keep
      semantics predictable.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    - __displayable__ (if set) narrows or extends which properties are shown by
      __rich_repr__; otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - option(long='verbose', short='v', marker=True, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield a sequence of (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        if options.get("sealed", False):
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                """
                Disallow subclassing of sealed declaration classes.
                """
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate metadata shared by every declaration.

    - type: must be callable.
    - validator: must be Unset or callable.
    - metavar / descr: Unset or a string that is non-empty after trimming
      (descr may also be a rich Text).

    Mutates the provided dict in place.
    """
    if not callable(metadata["type"]):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")

    if metadata["validator"] is not Unset and not callable(metadata["validator"]):
        raise TypeError(f"{cls.__typename__} 'validator' must be callable")
    metadata["validator"] = coalesce(metadata["validator"])

    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    metadata["metavar"] = coalesce(metavar)

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


def _sanitize_token_metadata(cls, metadata, /):
    """
    Internal: validate the tokens and marker wiring of an option.

    - long: required, ASCII alphanumeric, given without leading dashes.
    - short: Unset or exactly one ASCII alphanumeric character.
    - marker_only: requires a marker value.

    Mutates the provided dict in place.
    """
    if not isinstance(long := metadata["long"], str):
        raise TypeError(f"{cls.__typename__} long token must be a string")
    elif not re.fullmatch(r"[A-Za-z0-9]+", long):
        raise ValueError(f"{cls.__typename__} long token must be a non-empty alphanumeric string (got {long!r})")

    if not isinstance(short := metadata["short"], str | Unset):
        raise TypeError(f"{cls.__typename__} short token must be a string")
    elif isinstance(short, str) and not re.fullmatch(r"[A-Za-z0-9]", short):
        raise ValueError(f"{cls.__typename__} short token must be a single alphanumeric character (got {short!r})")
    metadata["short"] = coalesce(short)

    if metadata["marker_only"] and metadata["marker"] is Unset:
        raise TypeError(f"marker-only {cls.__typename__} must specify a 'marker' value")


def _convert(self, string, /):
    """
    Convert a raw string with the declaration's `type`, then validate it.

    Returns
    - the converted value.

    Raises
    - ConversionError: the converter rejected the string.
    - ValidationError: the validator rejected the converted value.
    """
    try:
        value = self._type(string)
    except ConversionError:
        raise
    except (ValueError, TypeError) as exception:
        raise ConversionError(
            "cannot convert %r for %s" % (string, type(self).__typename__),
            input=string,
        ) from exception

    if self._validator is not None:
        try:
            self._validator(value)
        except ValidationError:
            raise
        except ValueError as exception:
            raise ValidationError(str(exception) or "value %r was rejected" % (value,), input=string) from exception

    return value


class Argument[_T](metaclass=ArgumentType, sealed=True):
    """
    Positional, value-bearing declaration.

    Argument[_T] declares how a positional value is converted and validated. It
    is resolved by its index in a pool: the n-th positional token of a command
    line belongs to the n-th argument of the pool (the trailing vararg argument,
    if any, collects every remaining token).

    Properties
    - type, optional, validator, metavar, descr: read-only mirrors of the
      sanitized metadata.
    - default / has_default: the default value (None when absent) and whether
      one was configured.
    """

    __introspectable__ = (
        "type",
        "optional",
        "validator",
        "metavar",
        "descr",
    )
    __displayable__ = (
        "type",
        "optional",
        "validator",
        "default",
        "metavar",
        "descr",
    )

    def __new__(
            cls,
            type=str,
            /,
            optional=False,
            validator=Unset,
            default=Unset,
            *,
            metavar=Unset,
            descr=Unset,
    ):
        """
        Construct an Argument declaration.

        Parameters
        - type: Callable[[str], _T]
          Converter applied to the raw token.
        - optional: bool
          Whether the argument may be omitted. Within a pool, optional
          arguments must form a suffix of the declared arguments.
        - validator: Unset | Callable[[_T], object]
          Called with the converted value; raises ValidationError to reject it.
        - default: Any
          Value reported by ResultSet.get_or_default() when the argument is not
          given. Not validated; may be any value, including None.
        - metavar / descr: Unset | str
          Display label and short description.
        """
        metadata = {
            "type": type,
            "optional": bool(optional),
            "validator": validator,
            "default": default,
            "metavar": metavar,
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def default(self):
        return coalesce(self._default)

    @property
    def has_default(self):
        return self._default is not Unset

    __call__ = _convert


class Option[_T](metaclass=ArgumentType, sealed=True):
    """
    Named, value-bearing declaration.

    Option[_T] declares how a named value is recognized (--long, -s), converted,
    and validated. It may carry a marker value, which is used when the option is
    given without an explicit value (e.g. a bare --verbose), and may be marker-only,
    in which case an explicit value is always an error.

    Marker semantics
    - no marker: the option always requires a value (--name=value or --name value).
    - marker: --name alone yields the marker; a following token starting with '-'
      is never swallowed as the value.
    - marker_only: --name alone yields the marker; --name=value is an error and a
      following token is never taken as the value.

    Properties
    - long, short, type, validator, marker_only, metavar, descr: read-only mirrors
      of the sanitized metadata.
    - default / has_default, marker / has_marker: the configured values (None when
      absent) and whether they were configured.
    """

    __introspectable__ = (
        "long",
        "short",
        "type",
        "validator",
        "marker_only",
        "metavar",
        "descr",
    )
    __displayable__ = (
        "long",
        "short",
        "type",
        "validator",
        "default",
        "marker",
        "marker_only",
        "metavar",
        "descr",
    )

    def __new__(
            cls,
            long,
            /,
            short=Unset,
            type=str,
            validator=Unset,
            default=Unset,
            marker=Unset,
            *,
            marker_only=False,
            metavar=Unset,
            descr=Unset,
    ):
        """
        Construct an Option declaration.

        Parameters
        - long: str
          Long token, used as --long. Alphanumeric, unique within a pool.
        - short: Unset | str
          Short token, used as -s and chainable (-abc). Unique within a pool.
        - type: Callable[[str], _T]
          Converter applied to the explicit value.
        - validator: Unset | Callable[[_T], object]
          Called with the converted value; raises ValidationError to reject it.
        - default: Any
          Value reported by ResultSet.get_or_default() when the option is absent.
        - marker: Any
          Value stored when the option is present without an explicit value.
          The marker is stored as-is (neither converted nor validated).
        - marker_only: bool
          The option never accepts an explicit value. Requires a marker.
        - metavar / descr: Unset | str
          Display label and short description.
        """
        metadata = {
            "long": long,
            "short": short,
            "type": type,
            "validator": validator,
            "default": default,
            "marker": marker,
            "marker_only": bool(marker_only),
            "metavar": metavar,
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_token_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def default(self):
        return coalesce(self._default)

    @property
    def has_default(self):
        return self._default is not Unset

    @property
    def marker(self):
        return coalesce(self._marker)

    @property
    def has_marker(self):
        return self._marker is not Unset

    __call__ = _convert


def argument(*args, **kwargs):
    """
    Decorator/factory for declaring a validated positional argument.

    Usage
        @argument(INT, optional=True, default=0)
        def level(value):
            if value > 9:
                raise ValidationError("level must be at most 9")

    Behavior
    - Validates that it decorates a callable and enforces single application.
    - Binds the provided function as the Argument's validator.
    - Returns the configured Argument instance (not the function).
    """
    argument = Argument(*args, **kwargs)

    @rename("argument")
    def wrapper(validator, /):
        if not callable(validator):
            raise TypeError("@argument() must be applied to a callable")
        if argument._validator is not None:
            raise TypeError("@argument() must be applied only once")
        argument._validator = validator
        return argument

    return wrapper


def option(*args, **kwargs):
    """
    Decorator/factory for declaring a validated named option.

    Usage
        @option("threads", "t", type=INT, default=1)
        def threads(value):
            if value < 1:
                raise ValidationError("threads must be positive")

    Behavior
    - Validates that it decorates a callable and enforces single application.
    - Binds the provided function as the Option's validator.
    - Returns the configured Option instance (not the function).
    """
    option = Option(*args, **kwargs)

    @rename("option")
    def wrapper(validator, /):
        if not callable(validator):
            raise TypeError("@option() must be applied to a callable")
        if option._validator is not None:
            raise TypeError("@option() must be applied only once")
        option._validator = validator
        return option

    return wrapper


__all__ = (
    # Classes (declarations)
    "Argument",
    "Option",

    # Decorators (bind validators)
    "argument",
    "option",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
