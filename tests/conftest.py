import pytest

from barnacle import facts, story, director
from barnacle.conditions import Rule, IntMoreThan

@pytest.fixture
def fact_store() -> facts.FactStore:
    return facts.FactStore()

@pytest.fixture
def two_beat_story() -> story.Story:
    return (story.StoryBuilder("First Story")
        .add_story_beat("beat one", lambda b: b
            .add_rule(Rule("start", (IntMoreThan("button_pressed", 3),)))
            .with_effects(lambda e: e.set_fact_bool("beat_one", True)))
        .add_story_beat("beat two", lambda b: b
            .add_rule(Rule("second", (IntMoreThan("button_pressed", 10),))))
        .build())

@pytest.fixture
def story_director(two_beat_story:story.Story) -> director.Director:
    d = director.Director()
    d.fact_store.store_int("button_pressed", 0)
    d.add_story(two_beat_story)
    return d

STORY_TEXT = """
# Story: First Story

## StoryBeat: The story begins
### Rule: Start Rule
    button_pressed > 3
- Set Bool beat_one true

## StoryBeat: SecondBeat
- Rule: Start Second Rule
    - Condition: IntMoreThan(button_pressed, 10)
- Effect: SetFact Bool beat_two true
"""

@pytest.fixture
def story_text() -> str:
    return STORY_TEXT
