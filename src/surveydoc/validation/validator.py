"""
Survey Validator: runs validation rules and aggregates their diagnostics.

The validator is a function of (rule list, options, survey snapshot). It
keeps no state between runs beyond its configuration.

Run semantics:
    - Rules run in registration order
    - Diagnostics of disabled severities are dropped before counting
    - With stop_on_first_error, the run stops after the first rule that
      reports an error; what was collected so far is kept
    - A rule that raises is reported as an error diagnostic attributed to
      that rule; the remaining rules still run
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Iterable, List, Optional

from surveydoc.model import Survey

from .rules import DEFAULT_VALIDATION_RULES
from .types import (
    Diagnostic,
    Severity,
    ValidationContext,
    ValidationResult,
    ValidationRule,
    ValidatorOptions,
)

logger = logging.getLogger(__name__)

RULE_ERROR_FIELD = "_rule_error"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def summarize(diagnostics: List[Diagnostic]) -> str:
    """Human-readable one-line summary of a diagnostic list."""
    if not diagnostics:
        return "Survey validation passed with no issues."

    counts = {s: 0 for s in Severity}
    for diagnostic in diagnostics:
        counts[diagnostic.severity] += 1

    parts = []
    if counts[Severity.ERROR]:
        parts.append(_plural(counts[Severity.ERROR], "error"))
    if counts[Severity.WARNING]:
        parts.append(_plural(counts[Severity.WARNING], "warning"))
    if counts[Severity.INFO]:
        parts.append(_plural(counts[Severity.INFO], "info message"))
    return f"Survey validation found {', '.join(parts)}."


class SurveyValidator:
    """
    Validates surveys against a mutable list of rules.

    Example:
        validator = SurveyValidator()
        result = validator.validate(survey)
        if not result.is_valid:
            ...
    """

    def __init__(
        self,
        rules: Optional[Iterable[ValidationRule]] = None,
        options: Optional[ValidatorOptions] = None,
    ):
        self._rules: List[ValidationRule] = list(DEFAULT_VALIDATION_RULES if rules is None else rules)
        self._options = options or ValidatorOptions()

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def add_rule(self, rule: ValidationRule) -> None:
        self._rules.append(rule)

    def remove_rule(self, rule_name: str) -> None:
        self._rules = [rule for rule in self._rules if rule.name != rule_name]

    def get_rules(self) -> List[ValidationRule]:
        return list(self._rules)

    def update_options(self, **changes) -> None:
        """Merge option changes, e.g. `update_options(stop_on_first_error=True)`."""
        self._options = replace(self._options, **changes)

    def get_options(self) -> ValidatorOptions:
        return self._options

    def create_context(self, survey: Survey) -> ValidationContext:
        return ValidationContext(survey=survey, timestamp=time.time(), options=self._options)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def _run_rule(self, rule: ValidationRule, context: ValidationContext) -> List[Diagnostic]:
        try:
            return rule.validate(context)
        except Exception as exc:
            logger.exception("Validation rule '%s' failed", rule.name)
            return [
                Diagnostic(
                    RULE_ERROR_FIELD,
                    f"Validation rule '{rule.name}' failed: {exc}",
                    severity=Severity.ERROR,
                    rule=rule.name,
                )
            ]

    def validate(self, survey: Survey) -> ValidationResult:
        """
        Run every rule against `survey`.

        Returns:
            ValidationResult; `is_valid` is True iff no error survived
            severity filtering
        """
        context = self.create_context(survey)
        enabled = self._options.enabled_severities
        collected: List[Diagnostic] = []

        for rule in self._rules:
            kept = [d for d in self._run_rule(rule, context) if d.severity in enabled]
            collected.extend(kept)
            if self._options.stop_on_first_error and any(d.severity is Severity.ERROR for d in kept):
                logger.debug("Stopping after rule '%s' reported errors", rule.name)
                break

        grouped = {s: 0 for s in Severity}
        for diagnostic in collected:
            grouped[diagnostic.severity] += 1

        result = ValidationResult(
            is_valid=grouped[Severity.ERROR] == 0,
            has_warnings=grouped[Severity.WARNING] > 0,
            errors=collected,
            error_count=grouped[Severity.ERROR],
            warning_count=grouped[Severity.WARNING],
            info_count=grouped[Severity.INFO],
            summary=summarize(collected),
        )
        logger.debug("Validated survey '%s': %s", survey.code, result.summary)
        return result

    def validate_field(self, survey: Survey, field_path: str) -> List[Diagnostic]:
        """Diagnostics whose path is exactly `field_path` (full run, then filter)."""
        return [d for d in self.validate(survey).errors if d.field == field_path]

    def is_valid(self, survey: Survey) -> bool:
        return self.validate(survey).is_valid

    def get_errors(self, survey: Survey) -> List[Diagnostic]:
        return [d for d in self.validate(survey).errors if d.severity is Severity.ERROR]

    def get_warnings(self, survey: Survey) -> List[Diagnostic]:
        return [d for d in self.validate(survey).errors if d.severity is Severity.WARNING]


def create_survey_validator(
    custom_rules: Iterable[ValidationRule] = (),
    options: Optional[ValidatorOptions] = None,
) -> SurveyValidator:
    """Validator with the default rules followed by `custom_rules`."""
    return SurveyValidator(list(DEFAULT_VALIDATION_RULES) + list(custom_rules), options)


def create_strict_validator() -> SurveyValidator:
    """Validator reporting errors only."""
    return SurveyValidator(options=ValidatorOptions(enabled_severities={Severity.ERROR}))


def create_lenient_validator() -> SurveyValidator:
    """Validator reporting errors and warnings, without advisory info."""
    return SurveyValidator(
        options=ValidatorOptions(enabled_severities={Severity.ERROR, Severity.WARNING})
    )
