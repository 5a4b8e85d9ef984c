"""Tests for field descriptors."""

import pytest

from shapedefs import FieldDef


def test_defaults():
    field = FieldDef("name")
    assert field.kind == "any"
    assert field.flags() == {
        "nullable": False, "optional": False, "readonly": False, "private": False}
    assert field.visibility == "public"
    assert FieldDef("_name", private=True).visibility == "private"


def test_immutable():
    field = FieldDef("name", "str")
    with pytest.raises(AttributeError):
        field.readonly = True
    with pytest.raises(AttributeError):
        del field.name


def test_replace():
    field = FieldDef("name", "str", nullable=True)
    changed = field.replace(readonly=True)
    assert changed is not field
    assert changed.readonly and changed.nullable
    assert changed.name == "name" and changed.kind == "str"
    assert not field.readonly


def test_replace_unchanged_returns_same():
    field = FieldDef("name", "str", optional=True)
    assert field.replace(optional=True) is field
    assert field.replace() is field


def test_replace_unknown_flag():
    with pytest.raises(TypeError, match="visible"):
        FieldDef("name").replace(visible=True)


def test_equality():
    assert FieldDef("a", "str") == FieldDef("a", "str")
    assert FieldDef("a", "str") != FieldDef("a", "num")
    assert FieldDef("a", "str") != FieldDef("a", "str", optional=True)
    assert hash(FieldDef("a", "str")) == hash(FieldDef("a", "str"))


def test_repr():
    field = FieldDef("version", "num", readonly=True, optional=True, nullable=True)
    assert repr(field) == "Field<readonly version?:num|null>"
