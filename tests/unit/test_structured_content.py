from __future__ import annotations

import pytest

from refdata.domain.models import RuleRecord
from refdata.engine.errors import FailureKind, ValidationFailure
from refdata.engine.patterns import PatternLibrary
from refdata.engine.structured import TEMPLATE_MAX_LENGTH, StructuredContentValidator


@pytest.fixture(scope="module")
def structured() -> StructuredContentValidator:
    return StructuredContentValidator(PatternLibrary())


def test_blank_components_are_skipped(structured):
    structured.validate_rule(RuleRecord(name="r", json_config="  ", template="", sql_str=None))


class TestJson:
    def test_invalid_json_reports_parser_message(self, structured):
        with pytest.raises(ValidationFailure) as exc_info:
            structured.validate_rule(RuleRecord(name="r", json_config="{invalid}"))
        assert exc_info.value.message.startswith("Invalid JSON configuration:")
        assert exc_info.value.kind is FailureKind.STRUCTURED_JSON
        assert exc_info.value.field == "json"

    @pytest.mark.parametrize("value", ['{"a": 1}', "[1, 2]", "42", '"text"', "null"])
    def test_any_valid_json_is_accepted(self, structured, value):
        structured.validate_json(value)

    @pytest.mark.parametrize("value", ['{"limit": NaN}', "[Infinity]", "-Infinity"])
    def test_non_standard_constants_are_rejected(self, structured, value):
        with pytest.raises(ValidationFailure, match="^Invalid JSON configuration: Non-standard JSON constant"):
            structured.validate_json(value)

    def test_json_length_limit(self, structured):
        value = '{"k": "' + "v" * 120 + '"}'
        with pytest.raises(ValidationFailure, match="^JSON configuration cannot exceed 125 characters$"):
            structured.validate_json(value)


class TestTemplate:
    def test_unbalanced_braces_fail(self, structured):
        with pytest.raises(ValidationFailure) as exc_info:
            structured.validate_rule(RuleRecord(name="r", template="Hello {name, balance {x}"))
        assert "unbalanced placeholders" in exc_info.value.message
        assert exc_info.value.kind is FailureKind.STRUCTURED_TEMPLATE

    def test_totals_only_not_order(self, structured):
        structured.validate_template("}{ reversed but balanced }{")

    def test_template_length_limit(self, structured):
        structured.validate_template("x" * TEMPLATE_MAX_LENGTH)
        with pytest.raises(ValidationFailure, match="^Template cannot exceed 512 characters$"):
            structured.validate_template("x" * (TEMPLATE_MAX_LENGTH + 1))


class TestSql:
    def test_semicolon_before_end_fails(self, structured):
        with pytest.raises(ValidationFailure) as exc_info:
            structured.validate_rule(RuleRecord(name="r", sql_part="field1; DROP TABLE"))
        assert exc_info.value.message == "SQL part contains suspicious semicolon usage"
        assert exc_info.value.field == "sql_part"

    def test_trailing_semicolon_is_allowed(self, structured):
        structured.validate_sql("amount > 10;", "SQL string", "sql_str")

    def test_dangerous_pattern_fails(self, structured):
        with pytest.raises(ValidationFailure) as exc_info:
            structured.validate_rule(RuleRecord(name="r", sql_str="select * from trades"))
        assert exc_info.value.message == "SQL string contains potentially dangerous SQL patterns"
        assert exc_info.value.kind is FailureKind.STRUCTURED_SQL

    def test_sql_length_limit(self, structured):
        with pytest.raises(ValidationFailure, match="^SQL part cannot exceed 125 characters$"):
            structured.validate_sql("a" * 126, "SQL part", "sql_part")
