""" Stories: ordered beats that advance as their rules are satisfied.

Each story has exactly one active beat. When every rule guarding the active
beat holds, the beat is marked finished, the story moves on to the next beat
and the caller gets a StoryBeatFinished notification so it can apply the
beat's effects, once. A story whose index has passed its last beat is
finished and stays that way. """

import logging
from typing import Optional, Sequence, Iterable, Callable

from barnacle import util
from barnacle.conditions import Rule, FactSnapshot
from barnacle.effects import Effect, EffectBuilder
from barnacle.facts import FactStore, TypeMismatchError


class StoryBeat:
    def __init__(self, name:str, rules:Sequence[Rule], effects:Sequence[Effect]=(), finished:bool=False) -> None:
        self.name = name
        self.rules = list(rules)
        self.effects = list(effects)
        self.finished = finished

    def __repr__(self) -> str:
        return f'StoryBeat({self.name!r}, finished={self.finished})'

    def __eq__(self, other:object) -> bool:
        if not isinstance(other, StoryBeat):
            return NotImplemented
        return (self.name, self.rules, self.effects, self.finished) == (other.name, other.rules, other.effects, other.finished)

    def evaluate(self, facts:FactSnapshot) -> bool:
        if not self.finished:
            self.finished = all(r.evaluate(facts) for r in self.rules)
        return self.finished


class Story:
    def __init__(self, name:str, beats:Sequence[StoryBeat], active_beat_index:int=0) -> None:
        if active_beat_index < 0 or active_beat_index > len(beats):
            raise ValueError(f'active beat index {active_beat_index} out of range for story {name} with {len(beats)} beats')
        self.name = name
        self.beats = list(beats)
        self.active_beat_index = active_beat_index

    def __repr__(self) -> str:
        return f'Story({self.name!r}, {self.active_beat_index}/{len(self.beats)})'

    def __eq__(self, other:object) -> bool:
        if not isinstance(other, Story):
            return NotImplemented
        return (self.name, self.beats, self.active_beat_index) == (other.name, other.beats, other.active_beat_index)

    @property
    def active_beat(self) -> Optional[StoryBeat]:
        if self.is_finished():
            return None
        return self.beats[self.active_beat_index]

    def is_finished(self) -> bool:
        return self.active_beat_index >= len(self.beats)

    def evaluate_active_beat(self, facts:FactSnapshot) -> Optional[StoryBeat]:
        """ evaluates the active beat, advancing by one if it finished

        returns the beat that finished, if any """
        if self.is_finished():
            return None
        beat = self.beats[self.active_beat_index]
        if beat.evaluate(facts):
            self.active_beat_index += 1
            return beat
        return None


class StoryBeatFinished:
    """ Notification that a story's beat just finished. """

    def __init__(self, story:Story, beat:StoryBeat) -> None:
        self.story = story
        self.beat = beat

    def __repr__(self) -> str:
        return f'StoryBeatFinished({self.story.name!r}, {self.beat.name!r})'

    @property
    def effects(self) -> Sequence[Effect]:
        return self.beat.effects

    def apply(self, store:FactStore) -> list[TypeMismatchError]:
        """ applies every effect of the beat, returning the ones that failed

        A mismatched effect does not stop the rest of the beat's effects. """
        failures:list[TypeMismatchError] = []
        for effect in self.beat.effects:
            try:
                effect.apply(store)
            except TypeMismatchError as e:
                failures.append(e)
        return failures


class StoryEngine:
    def __init__(self, stories:Iterable[Story]=()) -> None:
        self.logger = logging.getLogger(util.fullname(self))
        self.stories:list[Story] = list(stories)

    def __len__(self) -> int:
        return len(self.stories)

    def add_story(self, story:Story) -> None:
        self.stories.append(story)

    def get_story(self, name:str) -> Optional[Story]:
        # last one wins if names repeat
        for story in reversed(self.stories):
            if story.name == name:
                return story
        return None

    def evaluate_stories(self, facts:FactSnapshot) -> list[StoryBeatFinished]:
        finished:list[StoryBeatFinished] = []
        for story in self.stories:
            beat = story.evaluate_active_beat(facts)
            if beat is not None:
                self.logger.info(f'story {story.name} finished beat {beat.name}')
                finished.append(StoryBeatFinished(story, beat))
        return finished

    def all_stories_finished(self) -> bool:
        return all(s.is_finished() for s in self.stories)


class StoryBeatBuilder:
    def __init__(self, name:str) -> None:
        self.name = name
        self._rules:list[Rule] = []
        self._effects:list[Effect] = []

    def rules(self, rules:Sequence[Rule]) -> "StoryBeatBuilder":
        self._rules = list(rules)
        return self

    def add_rule(self, rule:Rule) -> "StoryBeatBuilder":
        self._rules.append(rule)
        return self

    def effects(self, effects:Sequence[Effect]) -> "StoryBeatBuilder":
        self._effects = list(effects)
        return self

    def with_effects(self, build_fn:Callable[[EffectBuilder], EffectBuilder]) -> "StoryBeatBuilder":
        self._effects.extend(build_fn(EffectBuilder()).build())
        return self

    def build(self) -> StoryBeat:
        return StoryBeat(self.name, self._rules, self._effects)


class StoryBuilder:
    def __init__(self, name:str) -> None:
        self.name = name
        self._beats:list[StoryBeat] = []

    def beats(self, beats:Sequence[StoryBeat]) -> "StoryBuilder":
        self._beats = list(beats)
        return self

    def add_story_beat(self, name:str, build_fn:Callable[[StoryBeatBuilder], StoryBeatBuilder]) -> "StoryBuilder":
        self._beats.append(build_fn(StoryBeatBuilder(name)).build())
        return self

    def build(self) -> Story:
        return Story(self.name, self._beats)
