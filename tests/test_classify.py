"""Tests for shape classifier operations."""

import pytest

import shapedefs
from shapedefs import FieldDef

import shapetest


PROJECTIONS = [
    shapedefs.public_only,
    shapedefs.writable_only,
    shapedefs.readonly_only,
    shapedefs.required_only,
    shapedefs.nullable_only,
    shapedefs.optional_only,
]

SHAPES = [
    shapetest.record_shape,
    shapetest.profile_shape,
    shapetest.person_shape,
]


def test_writable_named_fields(record):
    """Named fields become writable, the rest keep their source flag."""
    frozen = shapedefs.immutable(record, "name", "age", "version")
    result = shapedefs.writable(frozen, "name", "age")
    assert shapetest.flags(result, "readonly") == {
        "name": False, "age": False, "version": True}
    assert result.names == record.names


def test_immutable_named_fields(record):
    result = shapedefs.immutable(record, "age")
    assert shapetest.flags(result, "readonly") == {
        "name": False, "age": True, "version": False}


def test_writable_keeps_other_flags(profile):
    result = shapedefs.writable(profile, "version")
    assert shapetest.flags(result, "readonly") == {
        "name": False, "age": False, "version": False, "location": False}
    assert shapetest.flags(result, "optional") == shapetest.flags(profile, "optional")
    assert shapetest.flags(result, "nullable") == shapetest.flags(profile, "nullable")


@pytest.mark.parametrize("operation", [shapedefs.writable, shapedefs.immutable])
def test_readonly_override_without_names(profile, operation):
    """No names means nothing is overridden."""
    result = operation(profile)
    assert result == profile
    assert result is not profile


def test_with_optional(record):
    result = shapedefs.with_optional(record, "age")
    assert shapetest.flags(result, "optional") == {
        "name": False, "age": True, "version": False}


def test_with_optional_forces_others_required(profile):
    """Fields not named lose their optional flag."""
    result = shapedefs.with_optional(profile, "location")
    assert shapetest.flags(result, "optional") == {
        "name": False, "age": False, "version": False, "location": True}


def test_with_required(record):
    partial = shapedefs.with_required(record)
    assert shapedefs.required_keys_for(partial) == ()

    result = shapedefs.with_required(partial, "age")
    assert shapetest.flags(result, "optional") == {
        "name": True, "age": False, "version": True}


def test_with_optional_without_names(profile):
    """No names makes every field required."""
    result = shapedefs.with_optional(profile)
    assert shapedefs.optional_keys_for(result) == ()
    assert shapedefs.required_keys_for(result) == profile.names


def test_with_required_without_names(profile):
    """No names makes every field optional."""
    result = shapedefs.with_required(profile)
    assert shapedefs.required_keys_for(result) == ()
    assert shapedefs.optional_keys_for(result) == profile.names


@pytest.mark.parametrize("make_shape", SHAPES)
def test_with_optional_partition(make_shape):
    """Every subset of names splits the fields into optional and required."""
    shape = make_shape()
    names = shape.names
    for count in range(len(names) + 1):
        selected = names[:count]
        result = shapedefs.with_optional(shape, *selected)
        assert set(shapedefs.optional_keys_for(result)) == set(selected)
        assert set(shapedefs.required_keys_for(result)) == set(names[count:])


@pytest.mark.parametrize("operation", [
    shapedefs.writable,
    shapedefs.immutable,
    shapedefs.with_optional,
    shapedefs.with_required,
])
def test_unknown_field_rejected(profile, operation):
    with pytest.raises(shapedefs.DefinitionError, match="'height'"):
        operation(profile, "name", "height")


def test_duplicate_names_accepted(record):
    result = shapedefs.immutable(record, "age", "age")
    assert shapedefs.readonly_keys_for(result) == ("age",)


def test_source_is_unchanged(profile):
    before = profile.fields
    shapedefs.with_required(profile, "age")
    shapedefs.immutable(profile, "name")
    assert profile.fields == before
    assert profile.field("age").optional


def test_projections(profile):
    assert shapedefs.writable_only(profile).names == ("name", "age", "location")
    assert shapedefs.readonly_only(profile).names == ("version",)
    assert shapedefs.required_only(profile).names == ("name", "version", "location")
    assert shapedefs.nullable_only(profile).names == ("location",)
    assert shapedefs.optional_only(profile).names == ("age",)
    assert shapedefs.public_only(profile).names == profile.names


def test_public_only(person):
    result = shapedefs.public_only(person)
    assert result.names == ("name", "age")
    assert all(field.readonly for field in result)


def test_projection_keeps_descriptors(profile):
    result = shapedefs.required_only(profile)
    for field in result:
        assert field is profile.field(field.name)


@pytest.mark.parametrize("projection", PROJECTIONS)
@pytest.mark.parametrize("make_shape", SHAPES)
def test_projection_idempotent(projection, make_shape):
    once = projection(make_shape())
    twice = projection(once)
    assert twice == once
    assert twice.names == once.names


@pytest.mark.parametrize("projection", PROJECTIONS)
def test_view_fields_subset_of_source(profile, projection):
    view = projection(profile)
    assert isinstance(view, shapedefs.ShapeView)
    assert view.source is profile
    assert set(view.names) <= set(profile.names)


def test_view_names(profile):
    view = shapedefs.writable_only(profile)
    assert view.operation == "WritableOnly"
    assert view.name == "WritableOnly(Profile)"


def test_view_rejects_foreign_fields(profile):
    with pytest.raises(shapedefs.DefinitionError):
        shapedefs.ShapeView(profile, "Custom", [FieldDef("height", "num")])


def test_value_keys_with_extra_optional_field(record):
    extra = shapedefs.Shape("", [FieldDef("test", "str", optional=True)])
    combined = record & extra
    assert shapedefs.value_keys_for(combined) == ("name", "age", "version", "test")
    assert shapedefs.required_keys_for(combined) == ("name", "age", "version")
    assert shapedefs.optional_keys_for(combined) == ("test",)


def test_nullable_keys_with_extra_field(record):
    extra = shapedefs.Shape("", [FieldDef("test", "str", nullable=True)])
    combined = record & extra
    assert shapedefs.nullable_keys_for(combined) == ("test",)


def test_readonly_keys_with_extra_field(record):
    extra = shapedefs.Shape("", [FieldDef("test", "str", readonly=True)])
    combined = record & extra
    assert shapedefs.writable_keys_for(combined) == ("name", "age", "version")
    assert shapedefs.readonly_keys_for(combined) == ("test",)


def test_profile_key_sets(profile):
    assert shapedefs.writable_keys_for(profile) == ("name", "age", "location")
    assert "version" not in shapedefs.writable_keys_for(profile)
    assert shapedefs.nullable_keys_for(profile) == ("location",)
    assert shapedefs.readonly_keys_for(profile) == ("version",)
    assert shapedefs.value_keys_for(profile) == profile.names


def test_derive_by_name(profile):
    assert shapedefs.derive("WritableOnly", profile) == shapedefs.writable_only(profile)
    assert shapedefs.derive("WithOptional", profile, "age") == (
        shapedefs.with_optional(profile, "age"))
    assert shapedefs.derive("NullableKeysFor", profile) == ("location",)


def test_derive_unknown_operation(profile):
    with pytest.raises(shapedefs.DefinitionError, match="Unknown shape operation"):
        shapedefs.derive("Frozen", profile)


def test_derive_projection_rejects_names(profile):
    with pytest.raises(shapedefs.DefinitionError, match="does not take field names"):
        shapedefs.derive("ReadonlyOnly", profile, "version")


def test_operation_registries_cover_every_operation():
    assert len(shapedefs.OPERATIONS) == 10
    assert len(shapedefs.KEY_OPERATIONS) == 6
    assert not set(shapedefs.OPERATIONS) & set(shapedefs.KEY_OPERATIONS)
