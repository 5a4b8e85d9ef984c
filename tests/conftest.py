import pytest

import shapetest


@pytest.fixture
def record():
    return shapetest.record_shape()


@pytest.fixture
def profile():
    return shapetest.profile_shape()


@pytest.fixture
def person():
    return shapetest.person_shape()
