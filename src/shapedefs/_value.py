"""Absence sentinel and single value descriptors"""

import typing


__all__ = [
    "Undefined",
    "UndefinedType",
    "Nullable",
    "Optional",
    "Voidable",
    "ValueDef",
    "nullable",
    "optional",
    "voidable",
]


class UndefinedType:
    """Type of the `Undefined` absence sentinel.

    Undefined marks a value that is missing, which is different from a value
    that is present and set to None. There is only ever one instance.
    """

    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "Undefined"

    def __bool__(self):
        return False

    def __reduce__(self):
        return "Undefined"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


Undefined = UndefinedType()


T = typing.TypeVar("T")

# A value that may also be None
Nullable = typing.Union[T, None]

# A value that may also be absent
Optional = typing.Union[T, UndefinedType]

# A function result that may omit its value
Voidable = typing.Union[T, None, UndefinedType]


class ValueDef:
    """Classification of a single value, outside of any shape.

    Args:
        kind: (str) Descriptive name of the value type
        nullable: (bool) Value may be None
        optional: (bool) Value may be Undefined

    Attributes:
        kind: (str) Descriptive name of the value type
        nullable: (bool) Value may be None
        optional: (bool) Value may be Undefined
    """

    __slots__ = ("kind", "nullable", "optional")

    def __init__(self, kind, nullable=False, optional=False):
        self.kind = kind
        self.nullable = nullable
        self.optional = optional

    def __repr__(self):
        suffix = ""
        if self.nullable:
            suffix += " | null"
        if self.optional:
            suffix += " | undefined"
        return f"Value<{self.kind}{suffix}>"

    def __eq__(self, other):
        if not isinstance(other, ValueDef):
            return NotImplemented
        return (self.kind, self.nullable, self.optional) == (
            other.kind, other.nullable, other.optional)

    def __hash__(self):
        return hash((self.kind, self.nullable, self.optional))


def nullable(kind):
    """Describe a value that may also be None."""
    return ValueDef(kind, nullable=True)


def optional(kind):
    """Describe a value that may also be absent."""
    return ValueDef(kind, optional=True)


def voidable(kind):
    """Describe a function result that may omit its value."""
    return ValueDef(kind, nullable=True, optional=True)
