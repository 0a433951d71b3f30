""" Barnacle: a fact driven rule and story progression engine

The host keeps a FactStore of named, typed facts (ints, strings, bools and
sets of strings) and mutates it as things happen, e.g. a button gets pressed.

Rules are named conjunctions of conditions over those facts. The RuleEngine
remembers whether each rule held on the last pass and reports the rules that
flipped.

Stories are ordered beats. Each beat is guarded by rules and carries effects.
Only one beat per story is active; once all of its rules hold the beat
finishes, its effects are written back into the facts and the next beat
becomes active. The StoryEngine advances all stories independently.

The Director owns all of that and runs passes in a fixed order (drain updated
facts, evaluate rules, evaluate stories, apply effects). Effects of a beat
finished in one pass are only seen by the next.

Stories can be written as text and parsed, see rule_parser:

    # Story: First Story
    ## StoryBeat: The story begins
    ### Rule: Start Rule
        button_pressed > 3
    - Set Bool beat_one true

Everything is synchronous and single threaded. Nothing here owns a frame loop,
the host decides when to tick.
"""

from .facts import Fact, IntFact, StringFact, BoolFact, StringListFact, FactStore, FactBuilder, TypeMismatchError
from .conditions import Condition, IntEquals, IntMoreThan, IntLessThan, StringEquals, BoolEquals, ListContains, Rule, ConditionBuilder, RuleBuilder
from .rules import RuleEngine
from .effects import Effect, SetFact, EffectBuilder
from .story import StoryBeat, Story, StoryEngine, StoryBeatFinished, StoryBeatBuilder, StoryBuilder
from .rule_parser import ParseError, parse_story, parse_stories, loads, load_file
from .director import Director, PassResult
