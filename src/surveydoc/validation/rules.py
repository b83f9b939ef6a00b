"""
Validation rules for survey documents.

Each rule is independent and inspects the whole survey. Rules report
domain problems as diagnostics and never raise for invalid documents.

Default rules, in registration order:
    survey-basic-fields     code and title present, title long enough
    survey-code-format      code characters and length
    unique-codes            every code occurs once in the document
    question-structure      per-item required fields and choice rows
    survey-completeness     best-practice nudges

Optional rules:
    condition-references    conditions point at codes that exist
"""

import re
from typing import List, Sequence

from surveydoc.model import BreakPageItem, ChoiceQuestion, ContainerItem, QuestionItem, QuestionnaireItem
from surveydoc.tree import build_code_index, collect_conditions

from .types import Diagnostic, Severity, ValidationContext, ValidationRule

CODE_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
MAX_CODE_LENGTH = 50
MIN_TITLE_LENGTH = 3


def _blank(value) -> bool:
    return not value or not str(value).strip()


# =============================================================================
# SURVEY FIELDS
# =============================================================================


def _check_basic_fields(context: ValidationContext) -> List[Diagnostic]:
    survey = context.survey
    diagnostics = []

    if _blank(survey.code):
        diagnostics.append(Diagnostic("code", "Survey code is required"))

    if _blank(survey.title):
        diagnostics.append(Diagnostic("title", "Survey title is required"))

    if survey.title and len(survey.title) < MIN_TITLE_LENGTH:
        diagnostics.append(
            Diagnostic("title", f"Survey title must be at least {MIN_TITLE_LENGTH} characters long")
        )

    return diagnostics


def _check_code_format(context: ValidationContext) -> List[Diagnostic]:
    code = context.survey.code
    diagnostics = []
    if not code:
        return diagnostics

    if not CODE_PATTERN.match(code):
        diagnostics.append(
            Diagnostic("code", "Survey code can only contain letters, numbers, hyphens, and underscores")
        )

    if len(code) > MAX_CODE_LENGTH:
        diagnostics.append(
            Diagnostic(
                "code",
                f"Survey code should not exceed {MAX_CODE_LENGTH} characters",
                severity=Severity.WARNING,
            )
        )

    return diagnostics


# =============================================================================
# DOCUMENT-WIDE UNIQUENESS
# =============================================================================


def _check_unique_codes(context: ValidationContext) -> List[Diagnostic]:
    diagnostics = []
    for code, locations in build_code_index(context.survey).items():
        if len(locations) < 2:
            continue
        for location in locations:
            diagnostics.append(
                Diagnostic(
                    location.path,
                    f"Code '{code}' is not unique. Found {len(locations)} occurrences",
                    code=code,
                )
            )
    return diagnostics


# =============================================================================
# ITEM STRUCTURE
# =============================================================================


def _check_items(items: Sequence[QuestionnaireItem], path: str, diagnostics: List[Diagnostic]) -> None:
    for position, item in enumerate(items):
        item_path = f"{path}[{position}]"

        if _blank(item.code):
            diagnostics.append(Diagnostic(f"{item_path}.code", "Item code is required"))

        if not isinstance(item, BreakPageItem) and _blank(item.label):
            diagnostics.append(Diagnostic(f"{item_path}.label", "Item label is required"))

        if isinstance(item, ChoiceQuestion):
            if not item.rows:
                diagnostics.append(
                    Diagnostic(f"{item_path}.rows", "Choice questions must have at least one option")
                )
            for row_position, row in enumerate(item.rows):
                row_path = f"{item_path}.rows[{row_position}]"
                if _blank(row.code):
                    diagnostics.append(Diagnostic(f"{row_path}.code", "Row code is required"))
                if _blank(row.label):
                    diagnostics.append(Diagnostic(f"{row_path}.label", "Row label is required"))

        if isinstance(item, ContainerItem):
            _check_items(item.children, f"{item_path}.children", diagnostics)


def _check_question_structure(context: ValidationContext) -> List[Diagnostic]:
    diagnostics: List[Diagnostic] = []
    _check_items(context.survey.children, "children", diagnostics)
    return diagnostics


def _check_completeness(context: ValidationContext) -> List[Diagnostic]:
    survey = context.survey
    diagnostics = []

    if _blank(survey.description):
        diagnostics.append(
            Diagnostic(
                "description",
                "Consider adding a description to help respondents understand the survey purpose",
                severity=Severity.INFO,
            )
        )

    if not survey.children:
        diagnostics.append(Diagnostic("children", "Survey has no questions", severity=Severity.WARNING))
    elif len(survey.children) == 1:
        diagnostics.append(
            Diagnostic(
                "children",
                "Survey has only one question. Consider adding more questions for better insights",
                severity=Severity.INFO,
            )
        )

    return diagnostics


# =============================================================================
# CONDITION REFERENCES (optional)
# =============================================================================


def _check_condition_references(context: ValidationContext) -> List[Diagnostic]:
    index = build_code_index(context.survey)
    items_by_code = {}
    for code, locations in index.items():
        for location in locations:
            if isinstance(location.node, QuestionnaireItem):
                items_by_code.setdefault(code, location.node)

    diagnostics = []
    for path, condition in collect_conditions(context.survey):
        for position, rule in enumerate(condition.rules):
            rule_path = f"{path}.rules[{position}]"
            target = items_by_code.get(rule.code)
            if target is None:
                diagnostics.append(
                    Diagnostic(
                        f"{rule_path}.code",
                        f"Condition references unknown item '{rule.code}'",
                        code=rule.code,
                    )
                )
                continue
            rows = target.rows if isinstance(target, QuestionItem) else ()
            columns = target.columns if isinstance(target, QuestionItem) else ()
            if rule.row_code and rule.row_code not in {row.code for row in rows}:
                diagnostics.append(
                    Diagnostic(
                        f"{rule_path}.rowCode",
                        f"Item '{rule.code}' has no row '{rule.row_code}'",
                        code=rule.row_code,
                    )
                )
            if rule.column_code and rule.column_code not in {column.code for column in columns}:
                diagnostics.append(
                    Diagnostic(
                        f"{rule_path}.columnCode",
                        f"Item '{rule.code}' has no column '{rule.column_code}'",
                        code=rule.column_code,
                    )
                )
    return diagnostics


survey_basic_fields_rule = ValidationRule(
    name="survey-basic-fields",
    description="Survey must have code and title",
    check=_check_basic_fields,
)

survey_code_format_rule = ValidationRule(
    name="survey-code-format",
    description="Survey code must follow naming conventions",
    check=_check_code_format,
)

unique_codes_rule = ValidationRule(
    name="unique-codes",
    description="All codes must be unique within the survey",
    check=_check_unique_codes,
)

question_structure_rule = ValidationRule(
    name="question-structure",
    description="Questions must have required fields and proper structure",
    check=_check_question_structure,
)

survey_completeness_rule = ValidationRule(
    name="survey-completeness",
    description="Survey should follow best practices for completeness",
    check=_check_completeness,
)

condition_references_rule = ValidationRule(
    name="condition-references",
    description="Conditions must reference existing items, rows and columns",
    check=_check_condition_references,
)

DEFAULT_VALIDATION_RULES = (
    survey_basic_fields_rule,
    survey_code_format_rule,
    unique_codes_rule,
    question_structure_rule,
    survey_completeness_rule,
)
