""" Drives evaluation passes over facts, rules and stories.

The Director owns the fact store, rule engine and story engine. A host mutates
facts (e.g. in response to input) and calls tick() whenever it wants things
to move forward. Each tick is one pass, always in this order:

 * drain the facts updated since the last pass
 * snapshot current facts
 * evaluate rules against the snapshot, noting which flipped
 * evaluate each story's active beat against the snapshot
 * apply effects of every beat that just finished

Effects land in the fact store after evaluation, so they are only seen by the
next pass. """

import enum
import logging
from typing import Callable, Optional

from barnacle import util
from barnacle.facts import Fact, FactStore
from barnacle.rules import RuleEngine
from barnacle.story import Story, StoryEngine, StoryBeatFinished
from barnacle.rule_parser import ParseError, parse_story, parse_stories

FactListener = Callable[[Fact], None]
RuleListener = Callable[[str, bool], None]
BeatListener = Callable[[StoryBeatFinished], None]


class Counters(enum.IntEnum):
    PASSES = enum.auto()
    FACTS_UPDATED = enum.auto()
    RULES_FLIPPED = enum.auto()
    BEATS_FINISHED = enum.auto()
    EFFECTS_APPLIED = enum.auto()
    PARSE_FAILURES = enum.auto()
    EFFECT_FAILURES = enum.auto()


class PassResult:
    def __init__(self, updated_facts:set[Fact], flipped_rules:set[str], finished_beats:list[StoryBeatFinished]) -> None:
        self.updated_facts = updated_facts
        self.flipped_rules = flipped_rules
        self.finished_beats = finished_beats

    def __repr__(self) -> str:
        return f'PassResult(facts={len(self.updated_facts)}, rules={sorted(self.flipped_rules)}, beats={self.finished_beats})'

    def __bool__(self) -> bool:
        return bool(self.updated_facts or self.flipped_rules or self.finished_beats)


class Director:
    def __init__(
        self,
        fact_store:Optional[FactStore]=None,
        rule_engine:Optional[RuleEngine]=None,
        story_engine:Optional[StoryEngine]=None,
    ) -> None:
        self.logger = logging.getLogger(util.fullname(self))
        self.fact_store = fact_store if fact_store is not None else FactStore()
        self.rule_engine = rule_engine if rule_engine is not None else RuleEngine()
        self.story_engine = story_engine if story_engine is not None else StoryEngine()

        self.counters:dict[Counters, int] = {c: 0 for c in Counters}

        self._fact_listeners:list[FactListener] = []
        self._rule_listeners:list[RuleListener] = []
        self._beat_listeners:list[BeatListener] = []

    def add_fact_listener(self, listener:FactListener) -> None:
        self._fact_listeners.append(listener)

    def add_rule_listener(self, listener:RuleListener) -> None:
        self._rule_listeners.append(listener)

    def add_beat_listener(self, listener:BeatListener) -> None:
        self._beat_listeners.append(listener)

    def add_story(self, story:Story) -> None:
        self.story_engine.add_story(story)

    def add_story_text(self, data:str) -> Optional[Story]:
        """ parses and installs one story

        A story that fails to parse is logged and skipped, nothing from it is
        installed. """
        try:
            story = parse_story(data)
        except ParseError as e:
            self.counters[Counters.PARSE_FAILURES] += 1
            self.logger.error(f'could not parse story: {e}')
            return None
        self.story_engine.add_story(story)
        return story

    def add_stories_text(self, data:str) -> list[Story]:
        """ parses and installs every story in data, or none of them """
        try:
            stories = parse_stories(data)
        except ParseError as e:
            self.counters[Counters.PARSE_FAILURES] += 1
            self.logger.error(f'could not parse stories: {e}')
            return []
        for story in stories:
            self.story_engine.add_story(story)
        return stories

    def is_finished(self) -> bool:
        return self.story_engine.all_stories_finished()

    def tick(self) -> PassResult:
        updated_facts = self.fact_store.drain_updated()
        for fact in updated_facts:
            self.logger.debug(f'fact updated {fact}')
            for fact_listener in self._fact_listeners:
                fact_listener(fact)

        facts = self.fact_store.snapshot()

        flipped_rules = self.rule_engine.evaluate_rules(facts)
        for rule_name in flipped_rules:
            state = self.rule_engine.is_satisfied(rule_name)
            for rule_listener in self._rule_listeners:
                rule_listener(rule_name, state)

        finished_beats = self.story_engine.evaluate_stories(facts)
        effects_applied = 0
        for finished in finished_beats:
            for beat_listener in self._beat_listeners:
                beat_listener(finished)
            failures = finished.apply(self.fact_store)
            for e in failures:
                self.logger.error(f'could not apply effect of {finished}: {e}')
            self.counters[Counters.EFFECT_FAILURES] += len(failures)
            effects_applied += len(finished.effects) - len(failures)

        self.counters[Counters.PASSES] += 1
        self.counters[Counters.FACTS_UPDATED] += len(updated_facts)
        self.counters[Counters.RULES_FLIPPED] += len(flipped_rules)
        self.counters[Counters.BEATS_FINISHED] += len(finished_beats)
        self.counters[Counters.EFFECTS_APPLIED] += effects_applied

        return PassResult(updated_facts, flipped_rules, finished_beats)

    def run(self, max_ticks:int) -> int:
        """ ticks until every story is finished or max_ticks passes ran

        returns the number of passes run """
        ticks = 0
        while ticks < max_ticks and not self.is_finished():
            self.tick()
            ticks += 1
        return ticks
