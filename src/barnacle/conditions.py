""" Conditions and rules evaluated against a snapshot of facts.

A missing fact, or one of the wrong type, just fails the condition. Nothing
here raises during evaluation. """

from dataclasses import dataclass, field
from typing import Union, Mapping, Sequence

from barnacle.facts import Fact, IntFact, StringFact, BoolFact, StringListFact

FactSnapshot = Mapping[str, Fact]


@dataclass(frozen=True)
class IntEquals:
    fact_name: str
    expected_value: int

    def evaluate(self, facts:FactSnapshot) -> bool:
        fact = facts.get(self.fact_name)
        return isinstance(fact, IntFact) and fact.value == self.expected_value


@dataclass(frozen=True)
class IntMoreThan:
    fact_name: str
    expected_value: int

    def evaluate(self, facts:FactSnapshot) -> bool:
        fact = facts.get(self.fact_name)
        return isinstance(fact, IntFact) and fact.value > self.expected_value


@dataclass(frozen=True)
class IntLessThan:
    fact_name: str
    expected_value: int

    def evaluate(self, facts:FactSnapshot) -> bool:
        fact = facts.get(self.fact_name)
        return isinstance(fact, IntFact) and fact.value < self.expected_value


@dataclass(frozen=True)
class StringEquals:
    fact_name: str
    expected_value: str

    def evaluate(self, facts:FactSnapshot) -> bool:
        fact = facts.get(self.fact_name)
        return isinstance(fact, StringFact) and fact.value == self.expected_value


@dataclass(frozen=True)
class BoolEquals:
    fact_name: str
    expected_value: bool

    def evaluate(self, facts:FactSnapshot) -> bool:
        fact = facts.get(self.fact_name)
        return isinstance(fact, BoolFact) and fact.value == self.expected_value


@dataclass(frozen=True)
class ListContains:
    fact_name: str
    expected_value: str

    def evaluate(self, facts:FactSnapshot) -> bool:
        fact = facts.get(self.fact_name)
        return isinstance(fact, StringListFact) and self.expected_value in fact.value


Condition = Union[IntEquals, IntMoreThan, IntLessThan, StringEquals, BoolEquals, ListContains]

# names used by the call form of the definition grammar, e.g. IntEquals(x, 1)
CONDITION_KINDS:Mapping[str, type] = {
    "IntEquals": IntEquals,
    "IntMoreThan": IntMoreThan,
    "IntLessThan": IntLessThan,
    "StringEquals": StringEquals,
    "BoolEquals": BoolEquals,
    "ListContains": ListContains,
}


@dataclass(frozen=True)
class Rule:
    """ A named conjunction of conditions.

    An empty rule is always satisfied. """

    name: str
    conditions: tuple[Condition, ...] = field(default=())

    def evaluate(self, facts:FactSnapshot) -> bool:
        return all(c.evaluate(facts) for c in self.conditions)


class ConditionBuilder:
    def __init__(self) -> None:
        self.conditions:list[Condition] = []

    def int_equals(self, fact_name:str, expected_value:int) -> "ConditionBuilder":
        self.conditions.append(IntEquals(fact_name, expected_value))
        return self

    def int_more_than(self, fact_name:str, expected_value:int) -> "ConditionBuilder":
        self.conditions.append(IntMoreThan(fact_name, expected_value))
        return self

    def int_less_than(self, fact_name:str, expected_value:int) -> "ConditionBuilder":
        self.conditions.append(IntLessThan(fact_name, expected_value))
        return self

    def string_equals(self, fact_name:str, expected_value:str) -> "ConditionBuilder":
        self.conditions.append(StringEquals(fact_name, expected_value))
        return self

    def bool_equals(self, fact_name:str, expected_value:bool) -> "ConditionBuilder":
        self.conditions.append(BoolEquals(fact_name, expected_value))
        return self

    def list_contains(self, fact_name:str, expected_value:str) -> "ConditionBuilder":
        self.conditions.append(ListContains(fact_name, expected_value))
        return self

    def build(self) -> list[Condition]:
        return list(self.conditions)


class RuleBuilder:
    def __init__(self, name:str) -> None:
        self.name = name
        self._conditions:list[Condition] = []

    def conditions(self, conditions:Sequence[Condition]) -> "RuleBuilder":
        self._conditions = list(conditions)
        return self

    def build(self) -> Rule:
        return Rule(self.name, tuple(self._conditions))
