"""
Example survey used by the demo and the tests.

Builds a small customer feedback survey: an intro text, a block holding a
choice and a conditional follow-up, a page break and a closing number
question.
"""
from surveydoc.conditions import ConditionAction, ConditionRule, ElementCondition, Operator
from surveydoc.model import (
    BlockItem,
    BlockOptions,
    BreakPageItem,
    ChoiceOptions,
    ChoiceQuestion,
    ChoiceRowColumnOptions,
    ElementRow,
    NumberOptions,
    NumberQuestion,
    StringOptions,
    StringQuestion,
    Survey,
    TextItem,
)
from surveydoc.tree import reindex_items


def build_example_feedback_survey(code: str = "FEEDBACK") -> Survey:
    satisfaction = ChoiceQuestion(
        id="item_satisfaction",
        code="SAT",
        label="How satisfied are you with our service?",
        help="",
        options=ChoiceOptions(required=True, multiple_selection=False),
        rows=(
            ElementRow(id="row_sat_1", code="SAT_1", label="Satisfied", options=ChoiceRowColumnOptions()),
            ElementRow(id="row_sat_2", code="SAT_2", label="Neutral", options=ChoiceRowColumnOptions()),
            ElementRow(
                id="row_sat_3",
                code="SAT_3",
                label="Unsatisfied",
                options=ChoiceRowColumnOptions(no_randomize=True),
            ),
        ),
    )

    # Asked only to unsatisfied respondents
    follow_up = StringQuestion(
        id="item_reason",
        code="REASON",
        label="What could we do better?",
        help="A few words are enough.",
        options=StringOptions(
            required=False,
            multiline=True,
            condition=ElementCondition(
                action=ConditionAction.SHOW,
                rules=(ConditionRule(code="SAT", row_code="SAT_3", operator=Operator.SET),),
            ),
        ),
    )

    children = (
        TextItem(id="item_intro", code="INTRO", label="Thank you for taking part in this survey."),
        BlockItem(
            id="item_experience",
            code="EXPERIENCE",
            label="Your experience",
            options=BlockOptions(show_label=True),
            children=(satisfaction, follow_up),
        ),
        BreakPageItem(id="item_break", code="BREAK1"),
        NumberQuestion(
            id="item_age",
            code="AGE",
            label="How old are you?",
            help="",
            options=NumberOptions(required=False, integer=True, min=18, max=120),
        ),
    )

    return Survey(
        code=code,
        title="Customer Feedback",
        description="A short survey about your last visit.",
        children=reindex_items(children),
    )
