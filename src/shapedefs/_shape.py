"""Shape definitions and operations"""

import types

import shapedefs

from ._field import FieldDef


__all__ = ["Shape", "ShapeView"]


class Shape:
    """An ordered, immutable table of field definitions.

    Shapes describe the structure of record-like values. Field names are
    unique within a shape. Shapes never change after they are created;
    derived shapes are new `ShapeView` objects.

    Equality compares the field tables in order and ignores the shape name.

    Args:
        name: (str) Shape name, empty for anonymous shapes
        fields: (Iterable[FieldDef]) Field definitions in declaration order

    Attributes:
        name: (str) Shape name
        fields: (tuple[FieldDef]) Field definitions in declaration order
        names: (tuple[str]) Field names in declaration order

    Raises:
        DefinitionError: If two fields share a name
    """

    __slots__ = ("name", "_table")

    def __init__(self, name="", fields=()):
        table = {}
        for field in fields:
            if not isinstance(field, FieldDef):
                raise TypeError(f"Shape fields must be FieldDef, got {type(field).__name__}")
            if field.name in table:
                raise shapedefs.DefinitionError(
                    f"Duplicate field '{field.name}' in shape {name or '{...}'}")
            table[field.name] = field
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "_table", types.MappingProxyType(table))

    def __setattr__(self, name, value):
        raise AttributeError(f"Shape is immutable, cannot set {name!r}")

    def __delattr__(self, name):
        raise AttributeError(f"Shape is immutable, cannot delete {name!r}")

    @property
    def fields(self):
        return tuple(self._table.values())

    @property
    def names(self):
        return tuple(self._table)

    @property
    def display_name(self):
        return self.name or "{...}"

    def field(self, name):
        """Get a field definition by name.

        Raises:
            DefinitionError: If the shape has no such field
        """
        try:
            return self._table[name]
        except KeyError:
            raise shapedefs.DefinitionError(
                f"Shape {self.display_name} has no field '{name}'") from None

    def rename(self, name):
        """Copy of this shape under a different name."""
        clone = object.__new__(type(self))
        for klass in type(self).__mro__:
            for slot in getattr(klass, "__slots__", ()):
                object.__setattr__(clone, slot, getattr(self, slot))
        object.__setattr__(clone, "name", name)
        return clone

    def check_names(self, names):
        """Ensure every name is a field of this shape.

        Returns:
            (frozenset[str]) The names as a set

        Raises:
            DefinitionError: For the first name that is not a field
        """
        names = tuple(names)
        for name in names:
            if not isinstance(name, str):
                raise shapedefs.DefinitionError(
                    f"Field names must be strings, got {type(name).__name__}")
            if name not in self._table:
                raise shapedefs.DefinitionError(
                    f"Shape {self.display_name} has no field '{name}'")
        return frozenset(names)

    def __len__(self):
        return len(self._table)

    def __iter__(self):
        return iter(self._table.values())

    def __contains__(self, name):
        return name in self._table

    def __getitem__(self, name):
        return self._table[name]

    def __and__(self, other):
        """Combine the fields of two shapes into a new shape."""
        if not isinstance(other, Shape):
            return NotImplemented
        name = f"{self.display_name} & {other.display_name}"
        return Shape(name, self.fields + other.fields)

    def __reduce__(self):
        return (Shape, (self.name, self.fields))

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __eq__(self, other):
        if not isinstance(other, Shape):
            return NotImplemented
        return self.fields == other.fields

    def __hash__(self):
        return hash(self.fields)

    def __repr__(self):
        return f"Shape<{self.display_name}>"


class ShapeView(Shape):
    """A shape derived from another shape by a classifier operation.

    The fields of a view are always a subset of the source fields.

    Args:
        source: (Shape) Shape this view was derived from
        operation: (str) Name of the deriving operation
        fields: (Iterable[FieldDef]) Derived field definitions

    Attributes:
        source: (Shape) Shape this view was derived from
        operation: (str) Name of the deriving operation
    """

    __slots__ = ("source", "operation")

    def __init__(self, source, operation, fields):
        fields = tuple(fields)
        source.check_names(f.name for f in fields)
        super().__init__(f"{operation}({source.display_name})", fields)
        object.__setattr__(self, "source", source)
        object.__setattr__(self, "operation", operation)

    def __reduce__(self):
        return (_restore_view, (self.source, self.operation, self.fields, self.name))

    def __repr__(self):
        return f"ShapeView<{self.display_name}>"


def _restore_view(source, operation, fields, name):
    view = ShapeView(source, operation, fields)
    if view.name != name:
        view = view.rename(name)
    return view
