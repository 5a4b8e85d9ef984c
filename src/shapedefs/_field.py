"""Field descriptors used by shapes"""

__all__ = ["FieldDef"]


_FLAGS = ("nullable", "optional", "readonly", "private")


class FieldDef:
    """Classification of one named field within a shape.

    Field definitions are immutable. Derived shapes build new definitions
    with `replace`.

    Args:
        name: (str) Field name
        kind: (str) Descriptive name of the value type, not interpreted
        nullable: (bool) Field value may be None
        optional: (bool) Field may be absent
        readonly: (bool) Field is not assignable
        private: (bool) Field is not part of the public surface

    Attributes:
        name: (str) Field name
        kind: (str) Descriptive name of the value type
        nullable: (bool) Field value may be None
        optional: (bool) Field may be absent
        readonly: (bool) Field is not assignable
        private: (bool) Field is not part of the public surface
    """

    __slots__ = ("name", "kind", "nullable", "optional", "readonly", "private")

    def __init__(self, name, kind="any", nullable=False, optional=False,
                 readonly=False, private=False):
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "nullable", bool(nullable))
        object.__setattr__(self, "optional", bool(optional))
        object.__setattr__(self, "readonly", bool(readonly))
        object.__setattr__(self, "private", bool(private))

    def __setattr__(self, name, value):
        raise AttributeError(f"FieldDef is immutable, cannot set {name!r}")

    def __delattr__(self, name):
        raise AttributeError(f"FieldDef is immutable, cannot delete {name!r}")

    @property
    def visibility(self):
        """Either "public" or "private"."""
        return "private" if self.private else "public"

    def flags(self):
        """Classification flags as a dict."""
        return {flag: getattr(self, flag) for flag in _FLAGS}

    def replace(self, **flags):
        """Copy of this field with some flags overridden.

        Returns the same object when nothing changes.
        """
        unknown = set(flags) - set(_FLAGS)
        if unknown:
            raise TypeError(f"Unknown field flags: {', '.join(sorted(unknown))}")
        current = self.flags()
        merged = {**current, **{k: bool(v) for k, v in flags.items()}}
        if merged == current:
            return self
        return FieldDef(self.name, self.kind, **merged)

    def __reduce__(self):
        return (FieldDef, (self.name, self.kind, self.nullable, self.optional,
                           self.readonly, self.private))

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __eq__(self, other):
        if not isinstance(other, FieldDef):
            return NotImplemented
        return (self.name, self.kind) == (other.name, other.kind) and (
            self.flags() == other.flags())

    def __hash__(self):
        return hash((self.name, self.kind, *self.flags().values()))

    def __repr__(self):
        parts = []
        if self.private:
            parts.append("private ")
        if self.readonly:
            parts.append("readonly ")
        parts.append(self.name)
        if self.optional:
            parts.append("?")
        parts.append(f":{self.kind}")
        if self.nullable:
            parts.append("|null")
        return f"Field<{''.join(parts)}>"
