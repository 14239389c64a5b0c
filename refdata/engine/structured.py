"""
Sanity checks for the structured content embedded in rule records: JSON
configuration, message templates and SQL fragments.

None of these are interpreted. JSON only has to parse, templates only have to
balance their braces, and SQL is screened by the heuristic in
`PatternLibrary.looks_dangerous` without ever being executed.
"""

from __future__ import annotations

import json
from typing import Optional

from refdata.domain.models import RuleRecord
from refdata.engine.errors import FailureKind, ValidationFailure
from refdata.engine.fields import TEXT_MAX_LENGTH, clean_text
from refdata.engine.patterns import PatternLibrary

TEMPLATE_MAX_LENGTH = 512


def _reject_constant(name: str) -> None:
    raise ValueError(f"Non-standard JSON constant: {name}")


class StructuredContentValidator:
    """
    Validates JSON, template and SQL fields. Blank fields are skipped.
    """

    def __init__(self, patterns: PatternLibrary) -> None:
        self.patterns = patterns

    def validate_rule(self, rule: RuleRecord) -> None:
        self.validate_json(rule.json_config)
        self.validate_template(rule.template)
        self.validate_sql(rule.sql_str, "SQL string", "sql_str")
        self.validate_sql(rule.sql_part, "SQL part", "sql_part")

    def validate_json(self, value: Optional[str], field: str = "json") -> None:
        text = clean_text(value)
        if text is None:
            return
        try:
            json.loads(text, parse_constant=_reject_constant)
        except ValueError as exc:
            raise ValidationFailure(
                f"Invalid JSON configuration: {exc}",
                kind=FailureKind.STRUCTURED_JSON,
                field=field,
            ) from exc
        if len(text) > TEXT_MAX_LENGTH:
            raise ValidationFailure(
                f"JSON configuration cannot exceed {TEXT_MAX_LENGTH} characters",
                kind=FailureKind.LENGTH,
                field=field,
            )

    def validate_template(self, value: Optional[str], field: str = "template") -> None:
        text = clean_text(value)
        if text is None:
            return
        if len(text) > TEMPLATE_MAX_LENGTH:
            raise ValidationFailure(
                f"Template cannot exceed {TEMPLATE_MAX_LENGTH} characters",
                kind=FailureKind.LENGTH,
                field=field,
            )
        # Totals only: placeholder names and nesting order are not inspected.
        if text.count("{") != text.count("}"):
            raise ValidationFailure(
                "Template has unbalanced placeholders (mismatched braces)",
                kind=FailureKind.STRUCTURED_TEMPLATE,
                field=field,
            )

    def validate_sql(self, value: Optional[str], label: str, field: str) -> None:
        text = clean_text(value)
        if text is None:
            return
        if self.patterns.looks_dangerous(text):
            raise ValidationFailure(
                f"{label} contains potentially dangerous SQL patterns",
                kind=FailureKind.STRUCTURED_SQL,
                field=field,
            )
        if ";" in text[:-1]:
            raise ValidationFailure(
                f"{label} contains suspicious semicolon usage",
                kind=FailureKind.STRUCTURED_SQL,
                field=field,
            )
        if len(text) > TEXT_MAX_LENGTH:
            raise ValidationFailure(
                f"{label} cannot exceed {TEXT_MAX_LENGTH} characters",
                kind=FailureKind.LENGTH,
                field=field,
            )


__all__ = ["StructuredContentValidator", "TEMPLATE_MAX_LENGTH"]
