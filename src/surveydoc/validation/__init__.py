"""Rule-based validation of survey documents."""

from .rules import (
    DEFAULT_VALIDATION_RULES,
    condition_references_rule,
    question_structure_rule,
    survey_basic_fields_rule,
    survey_code_format_rule,
    survey_completeness_rule,
    unique_codes_rule,
)
from .types import (
    Diagnostic,
    Severity,
    ValidationContext,
    ValidationResult,
    ValidationRule,
    ValidatorOptions,
    load_validator_options,
    options_from_dict,
    options_to_dict,
)
from .validator import (
    SurveyValidator,
    create_lenient_validator,
    create_strict_validator,
    create_survey_validator,
)

__all__ = [
    "DEFAULT_VALIDATION_RULES",
    "Diagnostic",
    "Severity",
    "SurveyValidator",
    "ValidationContext",
    "ValidationResult",
    "ValidationRule",
    "ValidatorOptions",
    "condition_references_rule",
    "create_lenient_validator",
    "create_strict_validator",
    "create_survey_validator",
    "load_validator_options",
    "options_from_dict",
    "options_to_dict",
    "question_structure_rule",
    "survey_basic_fields_rule",
    "survey_code_format_rule",
    "survey_completeness_rule",
    "unique_codes_rule",
]
