"""Shared fixtures for substitution tests."""

import pytest

from varsub.variables import GlobalVariables, SubstitutionEngine, get_global_variables


@pytest.fixture
def global_variables():
    """An isolated global scope, independent of the process-wide store."""
    return GlobalVariables()


@pytest.fixture
def engine(global_variables):
    """Engine wired to the isolated global scope."""
    return SubstitutionEngine(global_scope=global_variables)


@pytest.fixture
def process_globals():
    """The process-wide store, restored after the test."""
    store = get_global_variables()
    saved = store.snapshot()
    yield store
    store.clear()
    store.update(saved)
