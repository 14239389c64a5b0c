from __future__ import annotations

import pytest

from refdata.engine.patterns import ACCOUNT, RULE_NAME, TRADE_TYPE, Agency, PatternLibrary


@pytest.fixture(scope="module")
def patterns() -> PatternLibrary:
    return PatternLibrary()


class TestFormatRules:
    """Named format rules used by the field validator."""

    @pytest.mark.parametrize("value", ["ACC1", "0-DESK", "A_B-C", "9"])
    def test_account_accepts_uppercase_codes(self, patterns, value):
        assert patterns.get(ACCOUNT).matches(value)

    @pytest.mark.parametrize("value", ["abc123", "-ACC", "ACC 1", "ACC.1", ""])
    def test_account_rejects_other_shapes(self, patterns, value):
        assert not patterns.get(ACCOUNT).matches(value)

    def test_trade_type_must_start_with_letter(self, patterns):
        assert patterns.get(TRADE_TYPE).matches("SWAP_2")
        assert not patterns.get(TRADE_TYPE).matches("2SWAP")
        assert not patterns.get(TRADE_TYPE).matches("SWAP-2")

    def test_rule_name_allows_mixed_case_and_dots(self, patterns):
        assert patterns.get(RULE_NAME).matches("limits.v2-Daily_check")
        assert not patterns.get(RULE_NAME).matches(".hidden")

    def test_failure_message_names_allowed_characters(self, patterns):
        message = patterns.get(ACCOUNT).failure_message("abc123")
        assert "must start with alphanumeric" in message
        assert "uppercase" in message

    def test_unknown_rule_name_raises_key_error(self, patterns):
        with pytest.raises(KeyError, match="Unknown pattern"):
            patterns.get("iban")

    def test_format_rules_can_be_extended(self):
        library = PatternLibrary(format_rules={"desk": (r"D[0-9]+", "Desk must be D<number>")})
        assert library.get("desk").matches("D42")
        assert "desk" in library.names()
        assert ACCOUNT in library.names()


class TestRatingScales:
    """Agency letter-grade scales and investment-grade bands."""

    @pytest.mark.parametrize("notation", ["Aaa", "Aa1", "Baa3", "Ba2", "Caa1", "Ca", "C"])
    def test_moodys_scale(self, patterns, notation):
        assert patterns.rating_scale(Agency.MOODYS).matches(notation)

    @pytest.mark.parametrize("notation", ["AAA", "Aa4", "Baa", "BBB"])
    def test_moodys_rejects_letter_scale(self, patterns, notation):
        assert not patterns.rating_scale(Agency.MOODYS).matches(notation)

    @pytest.mark.parametrize("agency", [Agency.SP, Agency.FITCH])
    def test_letter_scale_for_sp_and_fitch(self, patterns, agency):
        scale = patterns.rating_scale(agency)
        for notation in ("AAA", "AA+", "BBB-", "CCC", "D"):
            assert scale.matches(notation)
        assert not scale.matches("Aaa")

    def test_scale_messages_name_the_agency(self, patterns):
        assert patterns.rating_scale(Agency.MOODYS).failure_message("X") == (
            "Invalid Moody's rating format: X"
        )
        assert patterns.rating_scale(Agency.SP).failure_message("X") == "Invalid S&P rating format: X"

    @pytest.mark.parametrize(
        ("agency", "notation", "expected"),
        [
            (Agency.MOODYS, "Baa3", True),
            (Agency.MOODYS, "Ba1", False),
            (Agency.SP, "BBB-", True),
            (Agency.SP, "BB+", False),
            (Agency.FITCH, "AA", True),
            (Agency.FITCH, "D", False),
        ],
    )
    def test_investment_grade_band(self, patterns, agency, notation, expected):
        assert patterns.is_investment_grade(agency, notation) is expected


class TestLooksDangerous:
    """SQL heuristic: statement + clause keywords, comments, procedure prefixes."""

    @pytest.mark.parametrize(
        "sql",
        [
            "SELECT * FROM users",
            "delete from accounts where 1=1",
            "amount > 0 -- comment",
            "a /* hidden */ b",
            "xp_cmdshell 'dir'",
            "UNION ALL SELECT password FROM users",
        ],
    )
    def test_flags_suspicious_fragments(self, patterns, sql):
        assert patterns.looks_dangerous(sql)

    @pytest.mark.parametrize("sql", ["amount > 100", "status = 'OPEN'", "DROP TABLE"])
    def test_accepts_plain_conditions(self, patterns, sql):
        assert not patterns.looks_dangerous(sql)
