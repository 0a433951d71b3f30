""" Effects a story beat applies to the fact store when it finishes. """

from dataclasses import dataclass
from typing import Union, Iterable

from barnacle.facts import FactStore, Fact, IntFact, StringFact, BoolFact, StringListFact


@dataclass(frozen=True)
class SetFact:
    fact: Fact

    def apply(self, store:FactStore) -> None:
        fact = self.fact
        if isinstance(fact, IntFact):
            store.store_int(fact.name, fact.value)
        elif isinstance(fact, StringFact):
            store.store_string(fact.name, fact.value)
        elif isinstance(fact, BoolFact):
            store.store_bool(fact.name, fact.value)
        elif isinstance(fact, StringListFact):
            store.store_list(fact.name, fact.value)
        else:
            raise TypeError(f'unknown fact type {type(fact)}')


Effect = Union[SetFact]


class EffectBuilder:
    def __init__(self) -> None:
        self.effects:list[Effect] = []

    def set_fact_int(self, name:str, value:int) -> "EffectBuilder":
        self.effects.append(SetFact(IntFact(name, value)))
        return self

    def set_fact_string(self, name:str, value:str) -> "EffectBuilder":
        self.effects.append(SetFact(StringFact(name, value)))
        return self

    def set_fact_bool(self, name:str, value:bool) -> "EffectBuilder":
        self.effects.append(SetFact(BoolFact(name, value)))
        return self

    def set_fact_string_list(self, name:str, values:Iterable[str]) -> "EffectBuilder":
        self.effects.append(SetFact(StringListFact(name, frozenset(values))))
        return self

    def build(self) -> list[Effect]:
        return list(self.effects)
