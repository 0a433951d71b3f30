""" Facts and the fact store.

A fact is a named, typed value. The store owns current truth, one fact per
name, and remembers which facts changed since the last time that set was
drained. """

import logging
from dataclasses import dataclass
from typing import Union, Optional, Iterable, AbstractSet, Mapping

from barnacle import util


@dataclass(frozen=True)
class IntFact:
    name: str
    value: int


@dataclass(frozen=True)
class StringFact:
    name: str
    value: str


@dataclass(frozen=True)
class BoolFact:
    name: str
    value: bool


@dataclass(frozen=True)
class StringListFact:
    """ a named set of strings

    Backed by a frozenset so equality and hashing don't depend on insertion
    order. """

    name: str
    value: frozenset[str]

    def sorted_values(self) -> list[str]:
        return sorted(self.value)


Fact = Union[IntFact, StringFact, BoolFact, StringListFact]

FACT_TYPE_NAMES:Mapping[type, str] = {
    IntFact: "Int",
    StringFact: "String",
    BoolFact: "Bool",
    StringListFact: "StringList",
}


def fact_type_name(fact:Fact) -> str:
    return FACT_TYPE_NAMES[type(fact)]


class TypeMismatchError(TypeError):
    """ A write tried to change the type of a fact, or give an int fact a bool. """

    def __init__(self, name:str, expected:str, actual:str) -> None:
        super().__init__(f'fact "{name}" is {actual}, cannot store {expected}')
        self.name = name
        self.expected = expected
        self.actual = actual


class FactBuilder:
    def __init__(self, name:str) -> None:
        self.name = name

    def int(self, value:int) -> IntFact:
        return IntFact(self.name, value)

    def string(self, value:str) -> StringFact:
        return StringFact(self.name, value)

    def bool(self, value:bool) -> BoolFact:
        return BoolFact(self.name, value)

    def string_list(self, values:Iterable[str]) -> StringListFact:
        return StringListFact(self.name, frozenset(values))


class FactStore:
    def __init__(self) -> None:
        self.logger = logging.getLogger(util.fullname(self))
        self._facts:dict[str, Fact] = {}
        self._updated:set[Fact] = set()

    def __contains__(self, name:str) -> bool:
        return name in self._facts

    def __len__(self) -> int:
        return len(self._facts)

    @property
    def facts(self) -> Mapping[str, Fact]:
        return self._facts

    @property
    def updated(self) -> AbstractSet[Fact]:
        """ facts changed since the last drain, without draining them """
        return frozenset(self._updated)

    def snapshot(self) -> Mapping[str, Fact]:
        return dict(self._facts)

    def _store(self, fact:Fact) -> None:
        if isinstance(fact, IntFact) and isinstance(fact.value, bool):
            raise TypeMismatchError(fact.name, "Bool", "Int")
        current = self._facts.get(fact.name)
        if current is not None:
            if type(current) is not type(fact):
                raise TypeMismatchError(fact.name, fact_type_name(fact), fact_type_name(current))
            if current == fact:
                return
        self.logger.debug(f'updated {fact}')
        self._facts[fact.name] = fact
        self._updated.add(fact)

    def store(self, fact:Fact) -> None:
        """ stores a fact through the setter matching its type """
        self._store(fact)

    def store_int(self, name:str, value:int) -> None:
        self._store(IntFact(name, value))

    def store_string(self, name:str, value:str) -> None:
        self._store(StringFact(name, value))

    def store_bool(self, name:str, value:bool) -> None:
        self._store(BoolFact(name, value))

    def store_list(self, name:str, values:Iterable[str]) -> None:
        self._store(StringListFact(name, frozenset(values)))

    def add_to_int(self, name:str, delta:int) -> None:
        current = self.get_int(name)
        self.store_int(name, (current or 0) + delta)

    def subtract_from_int(self, name:str, delta:int) -> None:
        self.add_to_int(name, -delta)

    def _existing_list(self, name:str) -> Optional[StringListFact]:
        current = self._facts.get(name)
        if current is None:
            return None
        if not isinstance(current, StringListFact):
            raise TypeMismatchError(name, "StringList", fact_type_name(current))
        return current

    def add_to_list(self, name:str, value:str) -> None:
        current = self._existing_list(name)
        if current is None:
            self._store(StringListFact(name, frozenset((value,))))
        elif value not in current.value:
            self._store(StringListFact(name, current.value | {value}))

    def remove_from_list(self, name:str, value:str) -> None:
        current = self._existing_list(name)
        if current is not None and value in current.value:
            self._store(StringListFact(name, current.value - {value}))

    def get(self, name:str) -> Optional[Fact]:
        return self._facts.get(name)

    def get_int(self, name:str) -> Optional[int]:
        fact = self._facts.get(name)
        return fact.value if isinstance(fact, IntFact) else None

    def get_string(self, name:str) -> Optional[str]:
        fact = self._facts.get(name)
        return fact.value if isinstance(fact, StringFact) else None

    def get_bool(self, name:str) -> Optional[bool]:
        fact = self._facts.get(name)
        return fact.value if isinstance(fact, BoolFact) else None

    def get_list(self, name:str) -> Optional[frozenset[str]]:
        fact = self._facts.get(name)
        return fact.value if isinstance(fact, StringListFact) else None

    def mark_updated(self, fact:Fact) -> None:
        """ flags a fact as updated, used when restoring saved state

        The updated set can hold superseded values of a fact (several writes
        between drains), so fact need not be current. """
        self._updated.add(fact)

    def drain_updated(self) -> set[Fact]:
        """ returns and clears the set of facts changed since the last drain """
        updated = self._updated
        self._updated = set()
        return updated
