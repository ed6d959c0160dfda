"""Pytest configuration and fixtures for simple_orm tests."""

import pytest

from simple_orm import Boolean, Column, Executor, Integer, Model, Text


class User(Model, table_name='users'):
    id = Column(Text, primary_key=True)
    name = Column(Text)
    age = Column(Integer)
    activated = Column(Boolean)


class RecordingExecutor(Executor):
    """Executor that remembers every statement and returns canned rows."""

    def __init__(self, rows=()):
        self.rows = list(rows)
        self.calls = []
        self.initialized = []

    async def execute(self, query, params=()):
        self.calls.append((query, tuple(params)))
        return self.rows

    async def initialize(self, schema, *, exist_ok=True):
        self.initialized.append((schema.table_name, exist_ok))
        await super().initialize(schema, exist_ok=exist_ok)


@pytest.fixture
def user_model():
    return User


@pytest.fixture
def user_schema():
    return User.__schema__


@pytest.fixture
def bob():
    return User(id='X1', name='Bob', age=30, activated=True)


@pytest.fixture
def executor():
    return RecordingExecutor()


@pytest.fixture
def make_executor():
    return RecordingExecutor
