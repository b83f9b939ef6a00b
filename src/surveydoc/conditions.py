"""
Conditions attached to survey elements.

A condition controls whether an element is shown, required, set or
iterated. It is a list of rules, each comparing the answer of another
item against a value.

IMPORTANT:
    Rules reference other items BY CODE, not by object.
    This is a weak reference: the condition stays valid only while the
    referenced code still exists in the document. Checking that is the
    job of the validation layer, not of this module.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class ConditionAction(Enum):
    """What a satisfied condition does to its element."""

    SHOW = "show"
    REQUIRE = "require"
    SET = "set"
    ITERATE = "iterate"


class Operator(Enum):
    """
    Comparison operators usable in a condition rule.

    `set` / `not_set` test whether the referenced item was answered
    at all and ignore `value`.
    """

    EQUALS = "="
    NOT_EQUALS = "!="
    GREATER_THAN = ">"
    LESS_THAN = "<"
    GREATER_EQUAL = ">="
    LESS_EQUAL = "<="
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    SET = "set"
    NOT_SET = "not_set"


class Gate(Enum):
    """How a rule combines with the rule before it."""

    AND = "and"
    OR = "or"


@dataclass(frozen=True)
class ConditionRule:
    """
    A single comparison inside a condition.

    Properties:
        code:
            Code of the referenced item (weak reference)

        operator:
            Comparison to apply

        value:
            Value compared against (string or number)

        negate:
            Invert the outcome of this rule

        row_code / column_code:
            Narrow the comparison to one row/column of a matrix question

        gate:
            Combination with the previous rule; ignored on the first rule
    """

    code: str
    operator: Operator = Operator.EQUALS
    value: Optional[object] = None
    negate: Optional[bool] = None
    row_code: Optional[str] = None
    column_code: Optional[str] = None
    gate: Optional[Gate] = None


@dataclass(frozen=True)
class ElementCondition:
    """An action plus the ordered rules that trigger it."""

    action: ConditionAction = ConditionAction.SHOW
    rules: Tuple[ConditionRule, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "rules", tuple(self.rules))

    def referenced_codes(self) -> Tuple[str, ...]:
        """Codes of all items this condition depends on, in rule order."""
        return tuple(rule.code for rule in self.rules)
