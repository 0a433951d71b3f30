""" Tools to save and load director state. """

import enum
import typing
from typing import Any

import msgpack # type: ignore

from barnacle import conditions
from barnacle.conditions import Rule
from barnacle.director import Director
from barnacle.effects import SetFact
from barnacle.facts import FactStore, IntFact, StringFact, BoolFact, StringListFact
from barnacle.rules import RuleEngine
from barnacle.story import Story, StoryBeat, StoryEngine

TYPE_KEY = "_bt"

class STypes(enum.IntEnum):
    INT_FACT = enum.auto()
    STRING_FACT = enum.auto()
    BOOL_FACT = enum.auto()
    STRING_LIST_FACT = enum.auto()
    CONDITION = enum.auto()
    RULE = enum.auto()
    SET_FACT = enum.auto()
    STORY_BEAT = enum.auto()
    STORY = enum.auto()

FACT_TYPES:dict[type, STypes] = {
    IntFact: STypes.INT_FACT,
    StringFact: STypes.STRING_FACT,
    BoolFact: STypes.BOOL_FACT,
    StringListFact: STypes.STRING_LIST_FACT,
}

def encode(obj:typing.Any) -> typing.Any:
    if isinstance(obj, StringListFact):
        return {TYPE_KEY: STypes.STRING_LIST_FACT, "n": obj.name, "v": obj.sorted_values()}
    elif type(obj) in FACT_TYPES:
        return {TYPE_KEY: FACT_TYPES[type(obj)], "n": obj.name, "v": obj.value}
    elif type(obj) in conditions.CONDITION_KINDS.values():
        return {TYPE_KEY: STypes.CONDITION, "k": type(obj).__name__, "n": obj.fact_name, "v": obj.expected_value}
    elif isinstance(obj, Rule):
        return {TYPE_KEY: STypes.RULE, "n": obj.name, "c": list(obj.conditions)}
    elif isinstance(obj, SetFact):
        return {TYPE_KEY: STypes.SET_FACT, "f": obj.fact}
    elif isinstance(obj, StoryBeat):
        return {TYPE_KEY: STypes.STORY_BEAT, "n": obj.name, "r": obj.rules, "e": obj.effects, "f": obj.finished}
    elif isinstance(obj, Story):
        return {TYPE_KEY: STypes.STORY, "n": obj.name, "b": obj.beats, "i": obj.active_beat_index}
    raise TypeError(f'cannot serialize {type(obj)}')

def decode(obj:typing.Any) -> typing.Any:
    if TYPE_KEY not in obj:
        return obj
    try:
        stype = STypes(obj[TYPE_KEY])
    except ValueError as e:
        raise ValueError(f'unknown type tag {obj[TYPE_KEY]}') from e

    if stype == STypes.INT_FACT:
        return IntFact(obj["n"], obj["v"])
    elif stype == STypes.STRING_FACT:
        return StringFact(obj["n"], obj["v"])
    elif stype == STypes.BOOL_FACT:
        return BoolFact(obj["n"], obj["v"])
    elif stype == STypes.STRING_LIST_FACT:
        return StringListFact(obj["n"], frozenset(obj["v"]))
    elif stype == STypes.CONDITION:
        if obj["k"] not in conditions.CONDITION_KINDS:
            raise ValueError(f'unknown condition kind {obj["k"]}')
        return conditions.CONDITION_KINDS[obj["k"]](obj["n"], obj["v"])
    elif stype == STypes.RULE:
        return Rule(obj["n"], tuple(obj["c"]))
    elif stype == STypes.SET_FACT:
        return SetFact(obj["f"])
    elif stype == STypes.STORY_BEAT:
        return StoryBeat(obj["n"], obj["r"], obj["e"], obj["f"])
    else:
        return Story(obj["n"], obj["b"], obj["i"])

def save_director(director:Director) -> bytes:
    """ packs facts, rules and story progress

    The dirty set is saved too so a restored director reports the same
    updates on its next pass. Rule states are packed as [name, state] pairs,
    a rule name is never a map key. """
    state:dict[str, Any] = {
        "facts": list(director.fact_store.facts.values()),
        "updated": list(director.fact_store.updated),
        "rules": list(director.rule_engine.rules.values()),
        "rule_states": [[name, state] for name, state in director.rule_engine.rule_states.items()],
        "stories": director.story_engine.stories,
    }
    return msgpack.packb(state, default=encode)

def load_director(packed:bytes) -> Director:
    state = msgpack.unpackb(packed, object_hook=decode)

    fact_store = FactStore()
    for fact in state["facts"]:
        fact_store.store(fact)
    fact_store.drain_updated()
    for fact in state["updated"]:
        fact_store.mark_updated(fact)

    rule_engine = RuleEngine()
    for rule in state["rules"]:
        rule_engine.add_rule(rule)
    rule_engine.load_states(dict(state["rule_states"]))

    return Director(fact_store, rule_engine, StoryEngine(state["stories"]))
