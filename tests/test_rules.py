"""
Tests for the individual validation rules.

Each rule is run directly against a context; the engine is covered in
test_validator.py.
"""

import time

from surveydoc.conditions import ConditionRule, ElementCondition
from surveydoc.model import (
    BlockItem,
    BreakPageItem,
    ChoiceQuestion,
    ElementColumn,
    ElementRow,
    LoopConcept,
    LoopItem,
    StringOptions,
    StringQuestion,
    Survey,
    TextItem,
    TextOptions,
)
from surveydoc.tree import get_all_codes
from surveydoc.validation import (
    Severity,
    ValidationContext,
    condition_references_rule,
    question_structure_rule,
    survey_basic_fields_rule,
    survey_code_format_rule,
    survey_completeness_rule,
    unique_codes_rule,
)


def run(rule, survey):
    return rule.validate(ValidationContext(survey=survey, timestamp=time.time()))


def text(code, item_id=None, label="Some text"):
    return TextItem(id=item_id or f"id_{code}", code=code, label=label)


class TestBasicFields:

    def test_empty_survey(self):
        diagnostics = run(survey_basic_fields_rule, Survey(code="", title=""))
        assert [(d.field, d.severity) for d in diagnostics] == [("code", Severity.ERROR), ("title", Severity.ERROR)]

    def test_whitespace_is_blank(self):
        diagnostics = run(survey_basic_fields_rule, Survey(code="  ", title="Fine title"))
        assert [d.message for d in diagnostics] == ["Survey code is required"]

    def test_short_title(self):
        diagnostics = run(survey_basic_fields_rule, Survey(code="S", title="ab"))
        assert len(diagnostics) == 1
        assert diagnostics[0].field == "title"
        assert "at least 3" in diagnostics[0].message

    def test_valid(self):
        assert run(survey_basic_fields_rule, Survey(code="S", title="abc")) == []


class TestCodeFormat:

    def test_bad_characters(self):
        diagnostics = run(survey_code_format_rule, Survey(code="my survey!", title="T"))
        assert len(diagnostics) == 1
        assert diagnostics[0].severity is Severity.ERROR

    def test_too_long_is_warning(self):
        diagnostics = run(survey_code_format_rule, Survey(code="A" * 51, title="T"))
        assert [d.severity for d in diagnostics] == [Severity.WARNING]

    def test_exactly_fifty_is_fine(self):
        assert run(survey_code_format_rule, Survey(code="a-b_C" * 10, title="T")) == []

    def test_empty_code_left_to_basic_fields(self):
        assert run(survey_code_format_rule, Survey(code="", title="T")) == []


class TestUniqueCodes:

    def test_two_items_share_a_code(self):
        survey = Survey(code="S", title="Survey", children=(text("Q1", "a"), text("Q1", "b")))
        diagnostics = run(unique_codes_rule, survey)
        assert len(diagnostics) == 2
        assert all(d.code == "Q1" and d.severity is Severity.ERROR for d in diagnostics)
        assert [d.field for d in diagnostics] == ["children[0].code", "children[1].code"]
        assert "Found 2 occurrences" in diagnostics[0].message

    def test_survey_code_clashes_with_nested_row(self):
        choice = ChoiceQuestion(
            id="c", code="Q1", label="Pick", rows=(ElementRow(id="r", code="S", label="x"),)
        )
        survey = Survey(code="S", title="Survey", children=(BlockItem(id="b", code="B", label="B", children=(choice,)),))
        diagnostics = run(unique_codes_rule, survey)
        assert [d.field for d in diagnostics] == ["survey.code", "children[0].children[0].rows[0].code"]

    def test_three_occurrences(self):
        choice = ChoiceQuestion(
            id="c",
            code="X",
            label="Pick",
            rows=(ElementRow(id="r", code="X", label="x"),),
            columns=(ElementColumn(id="k", code="X", label="y"),),
        )
        diagnostics = run(unique_codes_rule, Survey(code="S", title="T", children=(choice,)))
        assert len(diagnostics) == 3
        assert all("Found 3 occurrences" in d.message for d in diagnostics)

    def test_no_duplicates_iff_no_errors(self):
        unique = Survey(code="S", title="T", children=(text("A"), text("B")))
        clash = Survey(code="S", title="T", children=(text("A"), text("S")))
        for survey in (unique, clash):
            codes = get_all_codes(survey)
            has_duplicates = len(codes) != len(set(codes))
            assert has_duplicates == bool(run(unique_codes_rule, survey))


class TestQuestionStructure:

    def test_missing_code_and_label(self):
        survey = Survey(code="S", title="T", children=(TextItem(id="t", code="", label=" "),))
        diagnostics = run(question_structure_rule, survey)
        assert [d.field for d in diagnostics] == ["children[0].code", "children[0].label"]

    def test_break_page_needs_no_label(self):
        survey = Survey(code="S", title="T", children=(BreakPageItem(id="b", code="B"),))
        assert run(question_structure_rule, survey) == []

    def test_choice_without_rows(self):
        survey = Survey(code="S", title="T", children=(ChoiceQuestion(id="c", code="C", label="Pick", rows=()),))
        diagnostics = run(question_structure_rule, survey)
        assert len(diagnostics) == 1
        assert diagnostics[0].field == "children[0].rows"
        assert diagnostics[0].severity is Severity.ERROR

    def test_incomplete_rows_reported_per_row(self):
        choice = ChoiceQuestion(
            id="c",
            code="C",
            label="Pick",
            rows=(
                ElementRow(id="r1", code="", label="A"),
                ElementRow(id="r2", code="R2", label=""),
                ElementRow(id="r3", code="R3", label="C"),
            ),
        )
        diagnostics = run(question_structure_rule, Survey(code="S", title="T", children=(choice,)))
        assert [d.field for d in diagnostics] == ["children[0].rows[0].code", "children[0].rows[1].label"]

    def test_recurses_into_containers(self):
        loop = LoopItem(id="l", code="L", label="Loop", children=(TextItem(id="t", code="T", label=""),))
        diagnostics = run(question_structure_rule, Survey(code="S", title="T", children=(loop,)))
        assert [d.field for d in diagnostics] == ["children[0].children[0].label"]


class TestCompleteness:

    def test_empty_survey(self):
        diagnostics = run(survey_completeness_rule, Survey(code="S", title="T"))
        assert [(d.field, d.severity) for d in diagnostics] == [
            ("description", Severity.INFO),
            ("children", Severity.WARNING),
        ]

    def test_single_child(self):
        survey = Survey(code="S", title="T", description="About", children=(text("A"),))
        diagnostics = run(survey_completeness_rule, survey)
        assert [(d.field, d.severity) for d in diagnostics] == [("children", Severity.INFO)]

    def test_complete(self):
        survey = Survey(code="S", title="T", description="About", children=(text("A"), text("B")))
        assert run(survey_completeness_rule, survey) == []


class TestConditionReferences:

    def test_existing_reference(self):
        target = ChoiceQuestion(id="c", code="C", label="Pick", rows=(ElementRow(id="r", code="R1", label="x"),))
        dependent = StringQuestion(
            id="s",
            code="S1",
            label="Why?",
            options=StringOptions(condition=ElementCondition(rules=(ConditionRule(code="C", row_code="R1"),))),
        )
        survey = Survey(code="S", title="T", children=(target, dependent))
        assert run(condition_references_rule, survey) == []

    def test_dangling_item_reference(self):
        dependent = TextItem(
            id="t",
            code="T",
            label="x",
            options=TextOptions(condition=ElementCondition(rules=(ConditionRule(code="GONE"),))),
        )
        diagnostics = run(condition_references_rule, Survey(code="S", title="T", children=(dependent,)))
        assert len(diagnostics) == 1
        assert diagnostics[0].field == "children[0].options.condition.rules[0].code"
        assert diagnostics[0].code == "GONE"

    def test_dangling_row_and_column(self):
        target = StringQuestion(id="q", code="Q", label="Matrix")
        rule = ConditionRule(code="Q", row_code="R9", column_code="C9")
        dependent = TextItem(id="t", code="T", label="x", options=TextOptions(condition=ElementCondition(rules=(rule,))))
        diagnostics = run(condition_references_rule, Survey(code="S", title="T", children=(target, dependent)))
        assert [d.field for d in diagnostics] == [
            "children[1].options.condition.rules[0].rowCode",
            "children[1].options.condition.rules[0].columnCode",
        ]

    def test_survey_code_is_not_an_item(self):
        rule = ConditionRule(code="S")
        dependent = TextItem(id="t", code="T", label="x", options=TextOptions(condition=ElementCondition(rules=(rule,))))
        assert len(run(condition_references_rule, Survey(code="S", title="T", children=(dependent,)))) == 1

    def test_loop_concept_conditions(self):
        concept = LoopConcept(id="k", code="K1", label="Brand", condition=ElementCondition(rules=(ConditionRule(code="NOPE"),)))
        loop = LoopItem(id="l", code="L", label="Loop", concepts=(concept,))
        diagnostics = run(condition_references_rule, Survey(code="S", title="T", children=(loop,)))
        assert [d.field for d in diagnostics] == ["children[0].concepts[0].condition.rules[0].code"]
