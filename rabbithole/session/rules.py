"""Exploration rules and their rendering into prompt text.

Rules carry an optional trigger condition over the current step number,
e.g. ``step > 10`` or ``step % 5 == 0``. Conditions are parsed with a small
regex grammar, never evaluated as code. A condition that cannot be parsed
leaves the rule active.
"""

import logging
import operator
import re
from typing import Callable, Iterable, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

SCOPE_ALL = "all"

RULES_HEADER = "\n\n=== EXPLORATION RULES ===\n"
RULES_FOOTER = "\nThese rules must be followed throughout your response.\n"

_COMPARATORS: dict[str, Callable[[int, int], bool]] = {
    "==": operator.eq,
    "===": operator.eq,
    "!=": operator.ne,
    "!==": operator.ne,
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
}

# step <op> N  |  step % N <op> M
_CLAUSE_RE = re.compile(
    r"^\s*step\s*(?:%\s*(?P<modulus>\d+)\s*)?(?P<op>===|!==|==|!=|>=|<=|>|<)\s*(?P<value>-?\d+)\s*$"
)


class ExplorationRule(BaseModel):
    """A user-authored rule injected into generation prompts."""

    model_config = {"frozen": True}

    id: Optional[str] = None
    rule_text: str
    rule_type: str = "general"
    priority: int = 0
    is_active: bool = True
    scope: str = SCOPE_ALL
    trigger_condition: Optional[str] = None
    created_at_step: int = Field(default=0, ge=0)
    effectiveness_score: float = 0.0


def _evaluate_clause(clause: str, step: int) -> Optional[bool]:
    match = _CLAUSE_RE.match(clause)
    if match is None:
        return None
    left = step
    if match.group("modulus") is not None:
        modulus = int(match.group("modulus"))
        if modulus == 0:
            return None
        left = step % modulus
    return _COMPARATORS[match.group("op")](left, int(match.group("value")))


def evaluate_trigger(condition: Optional[str], step: int) -> bool:
    """Evaluate a trigger condition against the current step number.

    Clauses may be joined with ``&&`` and ``||`` (``&&`` binds tighter).

    Args:
        condition: Condition text, or None/empty for "always"
        step: Current step number

    Returns:
        Whether the rule is triggered. Unparseable conditions return True.
    """
    if not condition or not condition.strip():
        return True

    any_true = False
    for disjunct in condition.split("||"):
        all_true = True
        for clause in disjunct.split("&&"):
            result = _evaluate_clause(clause, step)
            if result is None:
                logger.debug(f"Unparseable trigger condition {condition!r}, treating as active")
                return True
            all_true = all_true and result
        any_true = any_true or all_true
    return any_true


def active_rules(rules: Iterable[ExplorationRule], mode: str, step: int) -> list[ExplorationRule]:
    """Active rules in scope for ``mode`` whose trigger holds, by priority descending."""
    selected = [
        rule
        for rule in rules
        if rule.is_active
        and rule.scope in (SCOPE_ALL, mode)
        and evaluate_trigger(rule.trigger_condition, step)
    ]
    return sorted(selected, key=lambda rule: rule.priority, reverse=True)


def format_rules_text(rules: Iterable[ExplorationRule], mode: str, step: int) -> str:
    """Render the active rules as a prompt suffix grouped by rule type.

    Returns:
        The formatted block, or an empty string when no rule is active.
    """
    selected = active_rules(rules, mode, step)
    if not selected:
        return ""

    by_type: dict[str, list[ExplorationRule]] = {}
    for rule in selected:
        by_type.setdefault(rule.rule_type, []).append(rule)

    text = RULES_HEADER
    for rule_type, typed in by_type.items():
        text += f"\n{rule_type.upper()} RULES:\n"
        for index, rule in enumerate(typed, start=1):
            text += f"{index}. {rule.rule_text}\n"
    return text + RULES_FOOTER
