""" Test cases for facts and the fact store """

import pytest

from barnacle import facts

def test_store_and_get(fact_store:facts.FactStore):
    fact_store.store_int("score", 42)
    fact_store.store_string("player", "Alice")
    fact_store.store_bool("is_alive", True)
    fact_store.add_to_list("tags", "vip")

    assert fact_store.get_int("score") == 42
    assert fact_store.get_string("player") == "Alice"
    assert fact_store.get_bool("is_alive") is True
    assert fact_store.get_list("tags") == frozenset(["vip"])
    assert fact_store.get("score") == facts.IntFact("score", 42)
    assert "score" in fact_store
    assert len(fact_store) == 4

def test_get_is_tolerant(fact_store:facts.FactStore):
    fact_store.store_int("score", 42)

    assert fact_store.get_int("nope") is None
    assert fact_store.get_string("score") is None
    assert fact_store.get_bool("score") is None
    assert fact_store.get_list("score") is None

def test_dedup(fact_store:facts.FactStore):
    fact_store.store_int("score", 1)
    assert fact_store.drain_updated() == {facts.IntFact("score", 1)}

    # same value again is not an update
    fact_store.store_int("score", 1)
    assert fact_store.drain_updated() == set()

    fact_store.store_int("score", 1)
    fact_store.store_int("score", 1)
    assert fact_store.updated == frozenset()

def test_drain_once(fact_store:facts.FactStore):
    fact_store.store_string("name", "bob")
    fact_store.store_bool("flag", False)

    assert fact_store.updated == {facts.StringFact("name", "bob"), facts.BoolFact("flag", False)}
    assert fact_store.drain_updated() == {facts.StringFact("name", "bob"), facts.BoolFact("flag", False)}
    assert fact_store.drain_updated() == set()
    assert fact_store.drain_updated() == set()

def test_changed_value_is_updated(fact_store:facts.FactStore):
    fact_store.store_int("score", 1)
    fact_store.drain_updated()
    fact_store.store_int("score", 2)

    assert fact_store.drain_updated() == {facts.IntFact("score", 2)}
    assert fact_store.get_int("score") == 2

@pytest.mark.parametrize("name", ["score", "player", "x"])
def test_type_mismatch(fact_store:facts.FactStore, name:str):
    fact_store.store_int(name, 3)

    with pytest.raises(facts.TypeMismatchError) as excinfo:
        fact_store.store_string(name, "three")
    assert excinfo.value.name == name
    assert excinfo.value.expected == "String"
    assert excinfo.value.actual == "Int"

    with pytest.raises(facts.TypeMismatchError):
        fact_store.store_bool(name, True)
    with pytest.raises(facts.TypeMismatchError):
        fact_store.add_to_list(name, "three")
    with pytest.raises(facts.TypeMismatchError):
        fact_store.remove_from_list(name, "three")

    # failed writes leave the fact alone
    assert fact_store.get_int(name) == 3

def test_int_fact_rejects_bool(fact_store:facts.FactStore):
    with pytest.raises(facts.TypeMismatchError):
        fact_store.store_int("score", True)
    assert "score" not in fact_store

    fact_store.store_int("score", 1)
    fact_store.drain_updated()
    with pytest.raises(facts.TypeMismatchError):
        fact_store.store(facts.IntFact("score", True))
    assert fact_store.get_int("score") == 1
    assert fact_store.drain_updated() == set()

def test_add_to_int(fact_store:facts.FactStore):
    fact_store.add_to_int("button_pressed", 1)
    assert fact_store.get_int("button_pressed") == 1
    fact_store.add_to_int("button_pressed", 2)
    assert fact_store.get_int("button_pressed") == 3
    fact_store.subtract_from_int("button_pressed", 5)
    assert fact_store.get_int("button_pressed") == -2

    fact_store.drain_updated()
    fact_store.add_to_int("button_pressed", 0)
    assert fact_store.drain_updated() == set()

def test_list_membership(fact_store:facts.FactStore):
    # removing from a missing list is a no-op
    fact_store.remove_from_list("tags", "vip")
    assert "tags" not in fact_store

    fact_store.add_to_list("tags", "vip")
    fact_store.add_to_list("tags", "new")
    assert fact_store.get_list("tags") == {"vip", "new"}
    fact_store.drain_updated()

    fact_store.add_to_list("tags", "vip")
    fact_store.remove_from_list("tags", "missing")
    assert fact_store.drain_updated() == set()

    fact_store.remove_from_list("tags", "vip")
    assert fact_store.drain_updated() == {facts.StringListFact("tags", frozenset(["new"]))}

def test_store_list(fact_store:facts.FactStore):
    fact_store.store_list("tags", ["b", "a"])
    fact_store.drain_updated()

    fact_store.store_list("tags", ["a", "b", "a"])
    assert fact_store.drain_updated() == set()

    fact_store.store_list("tags", ["c"])
    assert fact_store.get_list("tags") == {"c"}

def test_string_list_order_independent():
    a = facts.FactBuilder("tags").string_list(["x", "y", "z"])
    b = facts.FactBuilder("tags").string_list(["z", "x", "y"])

    assert a == b
    assert hash(a) == hash(b)
    assert a.sorted_values() == ["x", "y", "z"]
    assert facts.fact_type_name(a) == "StringList"

def test_snapshot_is_a_copy(fact_store:facts.FactStore):
    fact_store.store_int("score", 1)
    snapshot = fact_store.snapshot()
    fact_store.store_int("score", 2)
    fact_store.store_int("other", 2)

    assert snapshot == {"score": facts.IntFact("score", 1)}

def test_fact_builder():
    assert facts.FactBuilder("a").int(1) == facts.IntFact("a", 1)
    assert facts.FactBuilder("a").string("s") == facts.StringFact("a", "s")
    assert facts.FactBuilder("a").bool(False) == facts.BoolFact("a", False)
