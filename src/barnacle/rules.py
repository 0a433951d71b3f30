""" Rule engine: tracks which rules are satisfied and reports flips. """

import logging
from typing import Mapping, Optional

from barnacle import util
from barnacle.conditions import Rule, FactSnapshot


class RuleEngine:
    def __init__(self) -> None:
        self.logger = logging.getLogger(util.fullname(self))
        self.rules:dict[str, Rule] = {}
        self.rule_states:dict[str, bool] = {}

    def __len__(self) -> int:
        return len(self.rules)

    def add_rule(self, rule:Rule) -> None:
        """ adds or replaces a rule by name

        The tracked state always starts out unsatisfied, even when replacing
        a rule that was satisfied, so the next evaluation reports it again if
        it holds. """
        self.rules[rule.name] = rule
        self.rule_states[rule.name] = False

    def get_rule(self, name:str) -> Optional[Rule]:
        return self.rules.get(name)

    def is_satisfied(self, name:str) -> bool:
        return self.rule_states.get(name, False)

    def evaluate_rules(self, facts:FactSnapshot) -> set[str]:
        """ re-evaluates every rule, returning the names whose state flipped """
        flipped:set[str] = set()
        for name, rule in self.rules.items():
            state = rule.evaluate(facts)
            if state != self.rule_states[name]:
                self.rule_states[name] = state
                flipped.add(name)
                self.logger.debug(f'rule {name} is now {state}')
        return flipped

    def load_states(self, states:Mapping[str, bool]) -> None:
        for name, state in states.items():
            if name not in self.rules:
                raise ValueError(f'no rule named "{name}" to restore state for')
            self.rule_states[name] = state
