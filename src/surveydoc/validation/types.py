"""
Validation data types: diagnostics, rules, context, options and results.

Everything here is plain data. Diagnostics and results serialize to the
camelCase JSON shape the editor UI consumes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, List, Optional

import yaml

from surveydoc.model import Survey


class Severity(Enum):
    """
    How serious a diagnostic is.

        ERROR:   blocks saving
        WARNING: allowed but discouraged
        INFO:    advisory only
    """

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


ALL_SEVERITIES: FrozenSet[Severity] = frozenset(Severity)


@dataclass(frozen=True)
class Diagnostic:
    """
    A single validation finding.

    Properties:
        field: Dot/bracket path of the offending field (e.g. "children[0].rows")
        message: Human-readable explanation
        severity: Severity
        code: The offending code, when the finding is about one
        rule: Name of the rule that produced it, when attributed
    """

    field: str
    message: str
    severity: Severity = Severity.ERROR
    code: Optional[str] = None
    rule: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "field": self.field,
            "message": self.message,
            "severity": self.severity.value,
        }
        if self.code is not None:
            d["code"] = self.code
        if self.rule is not None:
            d["rule"] = self.rule
        return d


@dataclass(frozen=True)
class ValidatorOptions:
    """
    Validator configuration.

    Properties:
        stop_on_first_error:
            Skip remaining rules once a rule reports an error

        enabled_severities:
            Severities kept in the result; others are dropped before counting
    """

    stop_on_first_error: bool = False
    enabled_severities: FrozenSet[Severity] = ALL_SEVERITIES

    def __post_init__(self):
        # Accepts Severity members or their string values ("error", ...)
        object.__setattr__(self, "enabled_severities", frozenset(Severity(s) for s in self.enabled_severities))


def options_to_dict(options: ValidatorOptions) -> Dict[str, Any]:
    return {
        "stopOnFirstError": options.stop_on_first_error,
        "enabledSeverities": [s.value for s in Severity if s in options.enabled_severities],
    }


def options_from_dict(d: Dict[str, Any]) -> ValidatorOptions:
    """Build options from the camelCase config shape; missing keys keep defaults."""
    severities = d.get("enabledSeverities")
    return ValidatorOptions(
        stop_on_first_error=bool(d.get("stopOnFirstError", False)),
        enabled_severities=ALL_SEVERITIES if severities is None else severities,
    )


def load_validator_options(text: str) -> ValidatorOptions:
    """
    Read validator options from a YAML document.

    Example:
        stopOnFirstError: true
        enabledSeverities: [error, warning]
    """
    return options_from_dict(yaml.safe_load(text) or {})


@dataclass(frozen=True)
class ValidationContext:
    """Input of a rule run: the survey snapshot plus run metadata."""

    survey: Survey
    timestamp: float
    options: ValidatorOptions = field(default_factory=ValidatorOptions)


@dataclass(frozen=True)
class ValidationRule:
    """
    A named, independent check over the whole survey.

    `check` returns diagnostics for expected-invalid input and raises only
    on programming errors.
    """

    name: str
    description: str
    check: Callable[[ValidationContext], List[Diagnostic]]

    def validate(self, context: ValidationContext) -> List[Diagnostic]:
        return list(self.check(context))


@dataclass
class ValidationResult:
    """Aggregated outcome of one validation pass."""

    is_valid: bool
    has_warnings: bool
    errors: List[Diagnostic] = field(default_factory=list)
    error_count: int = 0
    warning_count: int = 0
    info_count: int = 0
    summary: str = ""

    def by_severity(self) -> Dict[Severity, List[Diagnostic]]:
        """Diagnostics grouped by severity, every severity present as a key."""
        grouped: Dict[Severity, List[Diagnostic]] = {s: [] for s in Severity}
        for diagnostic in self.errors:
            grouped[diagnostic.severity].append(diagnostic)
        return grouped

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "hasWarnings": self.has_warnings,
            "errors": [d.to_dict() for d in self.errors],
            "errorCount": self.error_count,
            "warningCount": self.warning_count,
            "infoCount": self.info_count,
            "summary": self.summary,
        }
