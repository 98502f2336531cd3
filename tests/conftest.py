"""Shared fixtures."""

import io

import pytest

from kvsh.kv.memory import Memory


@pytest.fixture
def db():
    store = Memory()
    yield store
    store.close()


@pytest.fixture
def user_keys(db):
    db.load({b"user:1": b"x", b"user:2": b"y", b"admin:1": b"z"})
    return db


@pytest.fixture
def out():
    return io.StringIO()
