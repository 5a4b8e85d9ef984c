"""Runtime guard for field presence on instances"""

__all__ = ["guard_for", "missing_for", "guard_shape"]

import collections.abc

import shapedefs

from ._value import Undefined


def _read(instance, name):
    """Read a field from a mapping by key or from an object by attribute.

    Missing fields read as Undefined.
    """
    if isinstance(instance, collections.abc.Mapping):
        if name not in instance:
            return Undefined
        return instance[name]
    return getattr(instance, name, Undefined)


def _check_instance(instance):
    if instance is None or instance is Undefined:
        raise shapedefs.InvalidArgument(f"Cannot guard fields on {instance!r}")


def guard_for(instance, *names):
    """Check that every named field is defined on an instance.

    Names are read left to right and the check stops at the first absent
    field. A field set to None is defined; only a missing field, or one
    holding the Undefined sentinel, is absent. With no names the result is
    always True. The instance is never modified.

    Args:
        instance: (Mapping | object) Value to inspect
        *names: (str) Field names to check

    Returns:
        (bool) True when every named field is defined

    Raises:
        InvalidArgument: If instance is None or Undefined
    """
    _check_instance(instance)
    for name in names:
        if _read(instance, name) is Undefined:
            return False
    return True


def missing_for(instance, *names):
    """Names that are absent on an instance, in argument order.

    Raises:
        InvalidArgument: If instance is None or Undefined
    """
    _check_instance(instance)
    return tuple(name for name in names if _read(instance, name) is Undefined)


def guard_shape(instance, shape):
    """Check that every required field of a shape is defined on an instance."""
    return guard_for(instance, *shapedefs.required_keys_for(shape))
