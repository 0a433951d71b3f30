""" Story Definition Parsing

Story definitions are line oriented text:

    # Story: First Story
    ## StoryBeat: The story begins
    ### Rule: Start Rule
        button_pressed > 3
        - Condition: IntMoreThan(button_pressed, 3)
    - Set Bool beat_one true

STORY := "# Story: " NAME BEAT+
BEAT := "## StoryBeat: " NAME RULE+ EFFECT+
RULE := ("### Rule: " | "- Rule: ") NAME CONDITION+
CONDITION := ["- Condition: "] (INFIX | CALL)
INFIX := FACT ("==" | ">" | "<" | "contains" | "equals") VALUE
CALL := KIND "(" FACT "," VALUE ")"
EFFECT := "- Set " TYPE " " FACT " to " VALUE
        | "- Effect: SetFact " TYPE " " FACT " " VALUE
TYPE := "Int" | "String" | "Bool" | "StringList"

Blank lines and surrounding whitespace are ignored. Any line that doesn't fit
the grammar, and any malformed int or bool literal, fails the whole story.
"""

import os
import re
from typing import Union, Optional, Sequence

from barnacle import conditions
from barnacle.conditions import Condition, Rule
from barnacle.effects import Effect, SetFact
from barnacle.facts import Fact, IntFact, StringFact, BoolFact, StringListFact
from barnacle.story import Story, StoryBeat

STORY_TAG = "# Story: "
BEAT_TAG = "## StoryBeat: "
RULE_TAGS = ("### Rule: ", "- Rule: ")
CONDITION_TAG = "- Condition: "
EFFECT_TAGS = ("- Set ", "- Effect: ")

INT_RE = re.compile(r"[+-]?[0-9]+")
FACT_NAME = r"[A-Za-z0-9_]+"
INFIX_SYMBOL_RE = re.compile(rf"({FACT_NAME})\s*(==|>|<)\s*(.+)")
INFIX_WORD_RE = re.compile(rf"({FACT_NAME})\s+(contains|equals)\s+(.+)")
CALL_RE = re.compile(rf"([A-Za-z]+)\(\s*({FACT_NAME})\s*,\s*(.+?)\s*\)")
SET_EFFECT_RE = re.compile(rf"- Set (Int|String|Bool|StringList) ({FACT_NAME}) to (.+)")
TAGGED_EFFECT_RE = re.compile(rf"- Effect: SetFact (Int|String|Bool|StringList) ({FACT_NAME}) (.+)")

INT32_MIN = -(1<<31)
INT32_MAX = (1<<31)-1


class ParseError(ValueError):
    def __init__(self, message:str, lineno:int=0, line:str="") -> None:
        if lineno > 0:
            message = f'line {lineno}: {message}: "{line}"'
        super().__init__(message)
        self.lineno = lineno
        self.line = line


class Line:
    def __init__(self, lineno:int, text:str) -> None:
        self.lineno = lineno
        self.text = text

    def error(self, message:str) -> ParseError:
        return ParseError(message, self.lineno, self.text)


def tokenize(data:str) -> list[Line]:
    """ splits data into stripped, non-blank lines keeping line numbers """
    return [Line(i+1, x.strip()) for i, x in enumerate(data.splitlines()) if x.strip()]


def parse_int(value:str, line:Optional[Line]=None) -> int:
    value = value.strip()
    if not INT_RE.fullmatch(value):
        raise _error(f'bad int literal "{value}"', line)
    i = int(value)
    if i < INT32_MIN or i > INT32_MAX:
        raise _error(f'int literal {value} does not fit in 32 bits', line)
    return i


def parse_bool(value:str, line:Optional[Line]=None) -> bool:
    value = value.strip()
    if value == "true":
        return True
    elif value == "false":
        return False
    raise _error(f'bad bool literal "{value}"', line)


def _error(message:str, line:Optional[Line]) -> ParseError:
    return line.error(message) if line else ParseError(message)


def _is_story(line:Line) -> bool:
    return line.text.startswith(STORY_TAG)

def _is_beat(line:Line) -> bool:
    return line.text.startswith(BEAT_TAG)

def _is_rule(line:Line) -> bool:
    return line.text.startswith(RULE_TAGS)

def _is_effect(line:Line) -> bool:
    return line.text.startswith(EFFECT_TAGS)


def _header_name(line:Line, tag:str) -> str:
    name = line.text[len(tag):].strip()
    if not name:
        raise line.error("missing name")
    return name


def parse_condition(text:str, line:Optional[Line]=None) -> Condition:
    data = text.strip()
    if data.startswith(CONDITION_TAG):
        data = data[len(CONDITION_TAG):].strip()

    m = CALL_RE.fullmatch(data)
    if m:
        kind, fact_name, value = m.groups()
        if kind not in conditions.CONDITION_KINDS:
            raise _error(f'unknown condition kind "{kind}"', line)
        if kind in ("IntEquals", "IntMoreThan", "IntLessThan"):
            return conditions.CONDITION_KINDS[kind](fact_name, parse_int(value, line))
        elif kind == "BoolEquals":
            return conditions.BoolEquals(fact_name, parse_bool(value, line))
        else:
            return conditions.CONDITION_KINDS[kind](fact_name, value)

    m = INFIX_SYMBOL_RE.fullmatch(data) or INFIX_WORD_RE.fullmatch(data)
    if not m:
        raise _error("expected a condition", line)
    fact_name, op, value = m.groups()
    value = value.strip()

    if op == "==":
        # int, then bool, then fall back to string
        if INT_RE.fullmatch(value):
            return conditions.IntEquals(fact_name, parse_int(value, line))
        elif value in ("true", "false"):
            return conditions.BoolEquals(fact_name, parse_bool(value, line))
        else:
            return conditions.StringEquals(fact_name, value)
    elif op == ">":
        return conditions.IntMoreThan(fact_name, parse_int(value, line))
    elif op == "<":
        return conditions.IntLessThan(fact_name, parse_int(value, line))
    elif op == "contains":
        return conditions.ListContains(fact_name, value)
    else:
        return conditions.StringEquals(fact_name, value)


def parse_fact(fact_type:str, fact_name:str, value:str, line:Optional[Line]=None) -> Fact:
    if fact_type == "Int":
        return IntFact(fact_name, parse_int(value, line))
    elif fact_type == "String":
        return StringFact(fact_name, value)
    elif fact_type == "Bool":
        return BoolFact(fact_name, parse_bool(value, line))
    elif fact_type == "StringList":
        return StringListFact(fact_name, frozenset(x.strip() for x in value.split(",")))
    raise _error(f'unknown fact type "{fact_type}"', line)


def parse_effect(text:str, line:Optional[Line]=None) -> Effect:
    data = text.strip()
    m = SET_EFFECT_RE.fullmatch(data) or TAGGED_EFFECT_RE.fullmatch(data)
    if not m:
        raise _error("expected an effect", line)
    fact_type, fact_name, value = m.groups()
    return SetFact(parse_fact(fact_type, fact_name, value.strip(), line))


def parse_rule(lines:Sequence[Line], pos:int) -> tuple[Rule, int]:
    line = lines[pos]
    tag = next(t for t in RULE_TAGS if line.text.startswith(t))
    name = _header_name(line, tag)
    pos += 1

    rule_conditions:list[Condition] = []
    while pos < len(lines) and not (_is_story(lines[pos]) or _is_beat(lines[pos]) or _is_rule(lines[pos]) or _is_effect(lines[pos])):
        rule_conditions.append(parse_condition(lines[pos].text, lines[pos]))
        pos += 1

    if not rule_conditions:
        raise line.error(f'rule {name} has no conditions')
    return Rule(name, tuple(rule_conditions)), pos


def parse_story_beat(lines:Sequence[Line], pos:int) -> tuple[StoryBeat, int]:
    line = lines[pos]
    name = _header_name(line, BEAT_TAG)
    pos += 1

    rules:list[Rule] = []
    effects:list[Effect] = []
    while pos < len(lines) and not (_is_story(lines[pos]) or _is_beat(lines[pos])):
        if _is_rule(lines[pos]):
            if effects:
                raise lines[pos].error(f'rules must come before effects in beat {name}')
            rule, pos = parse_rule(lines, pos)
            rules.append(rule)
        elif _is_effect(lines[pos]):
            effects.append(parse_effect(lines[pos].text, lines[pos]))
            pos += 1
        else:
            raise lines[pos].error("expected a rule or an effect")

    if not rules:
        raise line.error(f'beat {name} has no rules')
    if not effects:
        raise line.error(f'beat {name} has no effects')
    return StoryBeat(name, rules, effects), pos


def parse_story_lines(lines:Sequence[Line], pos:int) -> tuple[Story, int]:
    if pos >= len(lines):
        raise ParseError("expected a story, got end of input")
    line = lines[pos]
    if not _is_story(line):
        raise line.error(f'expected "{STORY_TAG.strip()}"')
    name = _header_name(line, STORY_TAG)
    pos += 1

    beats:list[StoryBeat] = []
    while pos < len(lines) and not _is_story(lines[pos]):
        if not _is_beat(lines[pos]):
            raise lines[pos].error("expected a story beat")
        beat, pos = parse_story_beat(lines, pos)
        beats.append(beat)

    if not beats:
        raise line.error(f'story {name} has no beats')
    return Story(name, beats), pos


def parse_story(data:str) -> Story:
    """ Parses exactly one story from data.

    Parameters
    ----------
    data : str
        story definition text

    Returns
    -------
    out : Story
        a fresh story with its first beat active

    Raises
    ------
    ParseError
        if any part of data does not fit the grammar, or if data holds more
        than one story
    """
    lines = tokenize(data)
    story, pos = parse_story_lines(lines, 0)
    if pos < len(lines):
        raise lines[pos].error("unexpected content after story")
    return story


def parse_stories(data:str) -> list[Story]:
    """ Parses every story in data, all or nothing. """
    lines = tokenize(data)
    stories:list[Story] = []
    pos = 0
    while pos < len(lines) or not stories:
        story, pos = parse_story_lines(lines, pos)
        stories.append(story)
    return stories


def loads(data:str) -> list[Story]:
    return parse_stories(data)


def load_file(path:Union[str, os.PathLike]) -> list[Story]:
    with open(path, "rt") as f:
        return parse_stories(f.read())

