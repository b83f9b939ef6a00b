#!/usr/bin/env python3
"""
Editor Session Demo: build → edit → transform → validate → serialize

Shows the full workflow an editor UI drives:
1. Load the example survey
2. Add and edit items (copy-on-write)
3. Change an item's type
4. Validate and print diagnostics
5. Serialize to YAML
"""

from surveydoc.defaults import create_default_question
from surveydoc.examples import build_example_feedback_survey
from surveydoc.model import ItemType
from surveydoc.serialization import survey_to_yaml
from surveydoc.tree import add_item, change_item_type, flatten_survey, get_all_codes, update_item
from surveydoc.validation import Severity, create_survey_validator, condition_references_rule


def print_outline(survey):
    for item in flatten_survey(survey.children):
        label = getattr(item, "label", "")
        print(f"   {'  ' * item.depth}- [{item.type.value}] {item.code} {label}")


def main():
    print("=" * 80)
    print("EDITOR SESSION DEMO")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Load
    # =========================================================================
    print("\n1. LOADING EXAMPLE SURVEY...")
    survey = build_example_feedback_survey()
    print(f"   ✓ Loaded survey: {survey.code} - {survey.title}")
    print_outline(survey)

    # =========================================================================
    # STEP 2: Edit
    # =========================================================================
    print("\n2. EDITING...")
    question = create_default_question(ItemType.CHOICE, get_all_codes(survey))
    survey = add_item(survey, question)
    print(f"   ✓ Added {question.type.value} question {question.code} with {len(question.rows)} rows")

    # A second item reusing a code, to show the uniqueness rule at work
    survey = update_item(survey, question.id, code="AGE")
    print("   ✓ Renamed it to AGE (duplicate on purpose)")

    # =========================================================================
    # STEP 3: Change type
    # =========================================================================
    print("\n3. CHANGING TYPE...")
    survey = change_item_type(survey, "item_intro", ItemType.BREAK_PAGE)
    print("   ✓ Intro text is now a page break")
    print_outline(survey)

    # =========================================================================
    # STEP 4: Validate
    # =========================================================================
    print("\n4. VALIDATING...")
    validator = create_survey_validator([condition_references_rule])
    result = validator.validate(survey)
    print(f"   {result.summary}")
    for severity, diagnostics in result.by_severity().items():
        for diagnostic in diagnostics:
            print(f"      [{severity.value}] {diagnostic.field}: {diagnostic.message}")
    if not result.is_valid:
        print("   ✗ Save would be refused")

    # =========================================================================
    # STEP 5: Serialize
    # =========================================================================
    print("\n5. SERIALIZING...")
    print(survey_to_yaml(survey)[:400])

    errors = result.by_severity()[Severity.ERROR]
    print(f"\nDone. {len(errors)} blocking error(s).")


if __name__ == "__main__":
    main()
