"""
Tests for the process-wide global variable store.
"""

import threading

from varsub.variables import GlobalVariables, SubstitutionEngine, SubstitutionType, ValueShape


def test_put_get_exists_remove():
    store = GlobalVariables({"a": 1})

    assert store.exists("a")
    assert store.get("a") == 1
    assert store.get("missing") is None
    assert store.get("missing", "fallback") == "fallback"

    store.put("b", None)
    assert store.exists("b")
    assert "b" in store
    assert len(store) == 2

    assert store.remove("a") == 1
    assert not store.exists("a")
    assert store.remove("a") is None


def test_snapshot_is_independent_copy():
    store = GlobalVariables()
    store.update({"x": "1", "y": "2"})

    snapshot = store.snapshot()
    store.put("z", "3")

    assert snapshot == {"x": "1", "y": "2"}
    assert store.keys() == ["x", "y", "z"]

    store.clear()
    assert len(store) == 0


def test_concurrent_writers_and_substitution():
    """Substitution reads stay consistent while other threads write the store."""
    store = GlobalVariables({"shared": "value"})
    engine = SubstitutionEngine(global_scope=store)
    errors = []

    def writer(offset):
        for i in range(500):
            store.put(f"key{offset}_{i}", i)

    def reader():
        try:
            for _ in range(500):
                result = engine.substitute_string("%shared%", ValueShape.STRING, None, SubstitutionType.GLOBAL)
                assert result == "value"
        except AssertionError as e:
            errors.append(e)

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
    threads += [threading.Thread(target=reader) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert not errors
    assert len(store) == 1 + 4 * 500
