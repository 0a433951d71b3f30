""" Test cases for the rule engine """

from barnacle import facts, rules
from barnacle.conditions import Rule, IntMoreThan, BoolEquals

def test_rule_flip(fact_store:facts.FactStore):
    fact_store.store_int("score", 0)
    engine = rules.RuleEngine()
    engine.add_rule(Rule("R1", (IntMoreThan("score", 3),)))

    assert engine.evaluate_rules(fact_store.snapshot()) == set()

    fact_store.store_int("score", 4)
    assert engine.evaluate_rules(fact_store.snapshot()) == {"R1"}
    assert engine.is_satisfied("R1")

    # nothing changed, nothing flips
    assert engine.evaluate_rules(fact_store.snapshot()) == set()
    assert engine.evaluate_rules(fact_store.snapshot()) == set()

    fact_store.store_int("score", 1)
    assert engine.evaluate_rules(fact_store.snapshot()) == {"R1"}
    assert not engine.is_satisfied("R1")

def test_only_flipped_rules_reported(fact_store:facts.FactStore):
    engine = rules.RuleEngine()
    engine.add_rule(Rule("score", (IntMoreThan("score", 3),)))
    engine.add_rule(Rule("alive", (BoolEquals("alive", True),)))
    engine.add_rule(Rule("always"))

    assert engine.evaluate_rules(fact_store.snapshot()) == {"always"}

    fact_store.store_bool("alive", True)
    assert engine.evaluate_rules(fact_store.snapshot()) == {"alive"}

    fact_store.store_int("score", 5)
    fact_store.store_bool("alive", False)
    assert engine.evaluate_rules(fact_store.snapshot()) == {"alive", "score"}

def test_readd_resets_state(fact_store:facts.FactStore):
    fact_store.store_int("score", 5)
    engine = rules.RuleEngine()
    engine.add_rule(Rule("R1", (IntMoreThan("score", 3),)))
    assert engine.evaluate_rules(fact_store.snapshot()) == {"R1"}

    # same name replaces the rule and starts it over as unsatisfied
    engine.add_rule(Rule("R1", (IntMoreThan("score", 4),)))
    assert len(engine) == 1
    assert not engine.is_satisfied("R1")
    assert engine.get_rule("R1") == Rule("R1", (IntMoreThan("score", 4),))
    assert engine.evaluate_rules(fact_store.snapshot()) == {"R1"}
