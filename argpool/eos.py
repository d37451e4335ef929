# python
"""
End-of-stream sentinel for character streams.

This module exposes a single instance: `eos`. A CharStream returns it from every
read past the end of its source, and keeps it as the stream's `current` value
from then on. It is falsy, compares unequal to every character, pretty-prints
as "(eos)", and renders with colors in Rich.

Common patterns
- Loop until the source is exhausted:
    while (char := stream.next()) is not eos: ...
- Guard a lookahead:
    if stream.current is eos or stream.current.isspace(): ...

Notes
- `eos` is a cached singleton (per-process).
- Copying or pickling yields the same object.
"""
from rich.text import Text

# Singleton returned by CharStream reads past the end of the source.
eos = type("eos-type", (), {
    "__module__": None,
    "__slots__": (),
    "__rich__": lambda self: Text.assemble(("(", "yellow"), ("eos", "red"), (")", "yellow")),
    "__repr__": lambda self: "(eos)",
    "__bool__": lambda self: False,
    "__copy__": lambda self: self,
    "__deepcopy__": lambda self, memo: self,
    "__reduce__": lambda self: "eos",
    "__doc__": "end-of-stream marker returned by character streams",
    # Cache the singleton creation so repeated instantiation returns the same object.
    "__new__": __import__("functools").cache(lambda cls: super(type, cls).__new__(cls)),
})()


__all__ = ("eos",)
