"""Shape classifier operations.

Each operation takes a source shape and produces a new `ShapeView` or a
tuple of field names. Operations with a field name argument override flags
on the named fields; projection operations keep only the fields that match
a classification. Naming a field the source shape does not have raises
`DefinitionError` when the derived shape is built.

Key operations return names in the declaration order of the source shape.
"""

__all__ = [
    "writable",
    "immutable",
    "with_optional",
    "with_required",
    "public_only",
    "writable_only",
    "readonly_only",
    "required_only",
    "nullable_only",
    "optional_only",
    "value_keys_for",
    "required_keys_for",
    "nullable_keys_for",
    "optional_keys_for",
    "writable_keys_for",
    "readonly_keys_for",
    "OPERATIONS",
    "KEY_OPERATIONS",
    "derive",
]

import shapedefs

from ._shape import ShapeView


def _override(shape, operation, names, flag, named, others=None):
    """Build a view with `flag` forced on the named fields.

    When `others` is None the remaining fields keep their source value,
    otherwise they are forced to `others`.
    """
    selected = shape.check_names(names)
    fields = []
    for field in shape:
        if field.name in selected:
            field = field.replace(**{flag: named})
        elif others is not None:
            field = field.replace(**{flag: others})
        fields.append(field)
    return ShapeView(shape, operation, fields)


def _project(shape, operation, predicate):
    return ShapeView(shape, operation, (f for f in shape if predicate(f)))


def writable(shape, *names):
    """Same fields, with the named fields made assignable."""
    return _override(shape, "Writable", names, "readonly", False)


def immutable(shape, *names):
    """Same fields, with the named fields made readonly."""
    return _override(shape, "Immutable", names, "readonly", True)


def with_optional(shape, *names):
    """Same fields, with only the named fields optional.

    Every field that is not named becomes required. With no names the
    whole shape is required.
    """
    return _override(shape, "WithOptional", names, "optional", True, False)


def with_required(shape, *names):
    """Same fields, with only the named fields required.

    Every field that is not named becomes optional. With no names the
    whole shape is optional.
    """
    return _override(shape, "WithRequired", names, "optional", False, True)


def public_only(shape):
    return _project(shape, "PublicOnly", lambda f: not f.private)


def writable_only(shape):
    return _project(shape, "WritableOnly", lambda f: not f.readonly)


def readonly_only(shape):
    return _project(shape, "ReadonlyOnly", lambda f: f.readonly)


def required_only(shape):
    return _project(shape, "RequiredOnly", lambda f: not f.optional)


def nullable_only(shape):
    return _project(shape, "NullableOnly", lambda f: f.nullable)


def optional_only(shape):
    return _project(shape, "OptionalOnly", lambda f: f.optional)


def value_keys_for(shape):
    """Every field name, optional fields included."""
    return shape.names


def required_keys_for(shape):
    return tuple(f.name for f in shape if not f.optional)


def nullable_keys_for(shape):
    return tuple(f.name for f in shape if f.nullable)


def optional_keys_for(shape):
    return tuple(f.name for f in shape if f.optional)


def writable_keys_for(shape):
    return tuple(f.name for f in shape if not f.readonly)


def readonly_keys_for(shape):
    return tuple(f.name for f in shape if f.readonly)


# Operations producing shapes, by declaration name
OPERATIONS = {
    "Writable": writable,
    "Immutable": immutable,
    "WithOptional": with_optional,
    "WithRequired": with_required,
    "PublicOnly": public_only,
    "WritableOnly": writable_only,
    "ReadonlyOnly": readonly_only,
    "RequiredOnly": required_only,
    "NullableOnly": nullable_only,
    "OptionalOnly": optional_only,
}

# Operations producing field names, by declaration name
KEY_OPERATIONS = {
    "ValueKeysFor": value_keys_for,
    "RequiredKeysFor": required_keys_for,
    "NullableKeysFor": nullable_keys_for,
    "OptionalKeysFor": optional_keys_for,
    "WritableKeysFor": writable_keys_for,
    "ReadonlyKeysFor": readonly_keys_for,
}

_NAMED = frozenset(["Writable", "Immutable", "WithOptional", "WithRequired"])


def derive(operation, shape, *names):
    """Apply a classifier operation by its declaration name.

    Args:
        operation: (str) Operation name, like "WithOptional" or "ReadonlyKeysFor"
        shape: (Shape) Source shape
        *names: (str) Field names for operations that take them

    Returns:
        (ShapeView | tuple[str]) Derived shape or field names

    Raises:
        DefinitionError: Unknown operation, names given to an operation
            that takes none, or a name that is not a field of the shape
    """
    func = OPERATIONS.get(operation) or KEY_OPERATIONS.get(operation)
    if func is None:
        raise shapedefs.DefinitionError(f"Unknown shape operation '{operation}'")
    if operation in _NAMED:
        return func(shape, *names)
    if names:
        raise shapedefs.DefinitionError(
            f"Shape operation '{operation}' does not take field names")
    return func(shape)
