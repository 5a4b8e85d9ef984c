"""Derive shapes from Python class definitions.

Classes are read statically through their annotations and properties; no
instance is ever created.

- TypedDict keys are optional when they are not required, and readonly
  when marked `ReadOnly`.
- Other classes contribute annotated attributes and properties. Names with
  a leading underscore are private, `Final` attributes and properties
  without a setter are readonly, `ClassVar` attributes are skipped and
  frozen dataclasses are entirely readonly.
- A `None` member in an annotation union makes a field nullable, and an
  `UndefinedType` member (the `Optional` alias) makes it optional.
"""

__all__ = ["shape_from_class"]

import dataclasses
import logging
import types
import typing

import shapedefs

from ._field import FieldDef
from ._shape import Shape
from ._value import UndefinedType


logger = logging.getLogger(__name__)

_READONLY = getattr(typing, "ReadOnly", None)


def shape_from_class(cls, name=None):
    """Build a shape from the annotations and properties of a class.

    Args:
        cls: (type) Class to introspect
        name: (str | None) Shape name, defaults to the class name

    Returns:
        (Shape) Shape describing the class fields

    Raises:
        DefinitionError: If annotations cannot be resolved
    """
    if not isinstance(cls, type):
        raise TypeError(f"Expected a class, got {type(cls).__name__}")

    hints = _type_hints(cls)
    if typing.is_typeddict(cls):
        fields = _typeddict_fields(cls, hints)
    else:
        fields = _class_fields(cls, hints)

    logger.debug("Introspected %d fields from %s", len(fields), cls.__qualname__)
    return Shape(name or cls.__name__, fields.values())


def _type_hints(obj):
    try:
        return typing.get_type_hints(obj, include_extras=True)
    except NameError as err:
        raise shapedefs.DefinitionError(
            f"Cannot resolve annotations of {obj.__qualname__}: {err}") from err


def _typeddict_fields(cls, hints):
    optional_keys = getattr(cls, "__optional_keys__", frozenset())
    readonly_keys = getattr(cls, "__readonly_keys__", frozenset())
    fields = {}
    for key, hint in hints.items():
        hint, qualifiers = _unwrap(hint)
        kind, nullable, undefined = _classify_hint(hint)
        fields[key] = FieldDef(
            key,
            kind,
            nullable=nullable,
            optional=key in optional_keys or undefined,
            readonly=key in readonly_keys or "readonly" in qualifiers,
            private=_is_private(key),
        )
    return fields


def _class_fields(cls, hints):
    frozen = dataclasses.is_dataclass(cls) and cls.__dataclass_params__.frozen
    fields = {}
    for key, hint in hints.items():
        hint, qualifiers = _unwrap(hint)
        if "classvar" in qualifiers:
            continue
        kind, nullable, undefined = _classify_hint(hint)
        fields[key] = FieldDef(
            key,
            kind,
            nullable=nullable,
            optional=undefined,
            readonly=frozen or "readonly" in qualifiers,
            private=_is_private(key),
        )

    for klass in reversed(cls.__mro__[:-1]):
        for key, attr in vars(klass).items():
            if not isinstance(attr, property) or attr.fget is None:
                continue
            hint = _type_hints(attr.fget).get("return", typing.Any)
            hint, _ = _unwrap(hint)
            kind, nullable, undefined = _classify_hint(hint)
            fields[key] = FieldDef(
                key,
                kind,
                nullable=nullable,
                optional=undefined,
                readonly=attr.fset is None,
                private=_is_private(key),
            )
    return fields


def _unwrap(hint):
    """Strip qualifier wrappers from an annotation.

    Returns:
        (tuple[object, set[str]]) Bare annotation and qualifier names
    """
    qualifiers = set()
    while True:
        if hint is typing.Final:
            return typing.Any, qualifiers | {"readonly"}
        if hint is typing.ClassVar:
            return typing.Any, qualifiers | {"classvar"}
        origin = typing.get_origin(hint)
        if origin is typing.Annotated:
            hint = hint.__origin__
        elif origin is typing.Final:
            qualifiers.add("readonly")
            hint = typing.get_args(hint)[0]
        elif origin is typing.ClassVar:
            qualifiers.add("classvar")
            hint = typing.get_args(hint)[0]
        elif _READONLY is not None and origin is _READONLY:
            qualifiers.add("readonly")
            hint = typing.get_args(hint)[0]
        elif origin in (typing.Required, typing.NotRequired):
            hint = typing.get_args(hint)[0]
        else:
            return hint, qualifiers


def _classify_hint(hint):
    """Split an annotation into its kind and sentinel flags.

    Returns:
        (tuple[str, bool, bool]) Kind name, nullable, optional
    """
    if typing.get_origin(hint) in (typing.Union, types.UnionType):
        members = typing.get_args(hint)
    else:
        members = (hint,)

    nullable = False
    undefined = False
    kinds = []
    for member in members:
        if member is None or member is type(None):
            nullable = True
        elif member is UndefinedType:
            undefined = True
        else:
            kinds.append(_kind_name(member))
    return " | ".join(kinds) or "any", nullable, undefined


def _kind_name(hint):
    """Declaration text for an annotation, like `dict[str, int | null]`.

    Generic arguments that are not types (literal values, parameter lists,
    ellipsis) are dropped so the text stays parseable.
    """
    if hint is typing.Any:
        return "any"
    if hint is None or hint is type(None):
        return "null"
    if hint is UndefinedType:
        return "undefined"
    origin = typing.get_origin(hint)
    if origin is typing.Annotated:
        return _kind_name(hint.__origin__)
    if origin in (typing.Union, types.UnionType):
        return " | ".join(_kind_name(arg) for arg in typing.get_args(hint))
    if origin is not None:
        args = [_kind_name(arg) for arg in typing.get_args(hint) if _is_kind(arg)]
        name = _bare_name(origin)
        return f"{name}[{', '.join(args)}]" if args else name
    return _bare_name(hint)


def _is_kind(arg):
    return arg is None or isinstance(arg, (type, typing.TypeVar)) or (
        typing.get_origin(arg) is not None or arg is typing.Any)


def _bare_name(hint):
    name = getattr(hint, "__name__", None) or getattr(hint, "_name", None)
    return name if isinstance(name, str) and name.isidentifier() else "any"


def _is_private(name):
    return name.startswith("_") and not name.endswith("__")
