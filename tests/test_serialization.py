"""
Tests for serialization and deserialization of survey documents.

These tests ensure lossless JSON/YAML round-trip and the exact dict shape
(absent keys stay absent) using `surveydoc.serialization`.
"""

import json

import pytest
from surveydoc.conditions import ConditionAction, ConditionRule, ElementCondition, Gate, Operator
from surveydoc.examples import build_example_feedback_survey
from surveydoc.model import (
    BlockItem,
    ChoiceRowColumnOptions,
    ElementRow,
    ItemType,
    LoopConcept,
    LoopItem,
    NumberOptions,
    NumberQuestion,
    StringQuestion,
    Survey,
)
from surveydoc.serialization import (
    SerializationError,
    item_from_dict,
    item_to_dict,
    survey_from_dict,
    survey_from_json,
    survey_from_yaml,
    survey_to_dict,
    survey_to_json,
    survey_to_yaml,
)
from surveydoc.transform import transform_item


def build_sample_survey() -> Survey:
    survey = build_example_feedback_survey()
    loop = LoopItem(
        id="item_loop",
        code="BRANDS",
        label="For each brand",
        concepts=(
            LoopConcept(
                id="k1",
                code="BRAND_A",
                label="Brand A",
                condition=ElementCondition(
                    action=ConditionAction.ITERATE,
                    rules=(
                        ConditionRule(code="AGE", operator=Operator.GREATER_EQUAL, value=18),
                        ConditionRule(code="SAT", operator=Operator.NOT_SET, negate=True, gate=Gate.OR),
                    ),
                ),
            ),
        ),
        children=(NumberQuestion(id="n1", code="SPEND", label="Spend?", options=NumberOptions(fixed_values=[5, 10])),),
    )
    return Survey(code=survey.code, title=survey.title, description=survey.description, children=survey.children + (loop,))


def test_json_roundtrip():
    survey = build_sample_survey()
    before = survey_to_dict(survey)
    json_str = survey_to_json(survey)
    restored = survey_from_json(json_str)
    after = survey_to_dict(restored)
    assert before == after


def test_yaml_roundtrip():
    survey = build_sample_survey()
    before = survey_to_dict(survey)
    yaml_str = survey_to_yaml(survey)
    restored = survey_from_yaml(yaml_str)
    after = survey_to_dict(restored)
    assert before == after


def test_roundtrip_restores_equal_values():
    survey = build_example_feedback_survey()
    assert survey_from_json(survey_to_json(survey)) == survey


def test_camel_case_keys():
    d = survey_to_dict(build_example_feedback_survey())
    block = d["children"][1]
    assert block["isLast"] is False
    assert block["options"] == {"showLabel": True}
    choice = block["children"][0]
    assert choice["options"] == {"required": True, "multipleSelection": False}
    assert choice["parentIndexes"] == [1]
    assert choice["rows"][2]["options"] == {"noRandomize": True}
    follow_up = block["children"][1]
    assert follow_up["options"]["condition"] == {
        "action": "show",
        "rules": [{"code": "SAT", "operator": "set", "rowCode": "SAT_3"}],
    }


def test_break_page_shape():
    d = item_to_dict(transform_item(StringQuestion(id="q", code="Q", label="X", help="h"), ItemType.BREAK_PAGE))
    assert d["type"] == "breakPage"
    assert d["options"] == {}
    assert "label" not in d
    assert "help" not in d
    assert "children" not in d
    assert "rows" not in d


def test_unset_optional_fields_are_omitted():
    survey = Survey(
        code="S",
        title="Title",
        children=(
            StringQuestion(id="q", code="Q", label="X", rows=(ElementRow(id="r", code="R", label="Row"),)),
            LoopItem(id="l", code="L", label="Loop", concepts=(LoopConcept(id="k", code="K", label="Concept"),)),
        ),
    )
    d = survey_to_dict(survey)
    assert "description" not in d
    question, loop = d["children"]
    for key in ("parentIndex", "parentIndexes", "help"):
        assert key not in question
    assert "options" not in question["rows"][0]
    assert "condition" not in loop["concepts"][0]
    assert "null" not in survey_to_json(survey)
    assert survey_from_dict(d) == survey


def test_block_to_string_has_no_children_key():
    block = BlockItem(id="b", code="B", label="Block", children=(StringQuestion(id="q", code="Q", label="X"),))
    d = item_to_dict(transform_item(block, ItemType.STRING))
    assert "children" not in d
    assert d["rows"] == []


def test_choice_rows_get_choice_options():
    d = survey_to_dict(build_example_feedback_survey())
    restored = survey_from_dict(d)
    choice = restored.get_item("item_satisfaction")
    assert all(isinstance(row.options, ChoiceRowColumnOptions) for row in choice.rows)


def test_json_is_plain():
    json.loads(survey_to_json(build_sample_survey()))


def test_unknown_type():
    with pytest.raises(SerializationError):
        item_from_dict({"id": "x", "code": "X", "type": "slider"})


def test_missing_id():
    with pytest.raises(SerializationError):
        item_from_dict({"code": "X", "type": "text"})


def test_survey_must_be_mapping():
    with pytest.raises(SerializationError):
        survey_from_yaml("- just\n- a list\n")


def test_missing_optional_keys_use_defaults():
    survey = survey_from_dict({"code": "S", "title": "T", "children": [{"id": "a", "type": "choice"}]})
    item = survey.children[0]
    assert item.type is ItemType.CHOICE
    assert item.code == ""
    assert item.rows == ()
    assert item.options.multiple_selection is None
