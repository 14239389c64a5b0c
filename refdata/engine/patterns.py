"""
Compiled format rules shared by the validators.

Patterns are compiled once when the library is built and looked up by name.
Each entry carries the message used when a value does not conform, so the
validators never spell out regexes or wording themselves.

The SQL heuristic is exposed as `looks_dangerous` only; callers must not rely
on the underlying expression so it can be replaced by a real parser later.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Optional, Pattern


class Agency(str, Enum):
    """Credit rating agencies tracked on a rating record."""

    MOODYS = "MOODYS"
    SP = "SP"
    FITCH = "FITCH"


@dataclass(frozen=True)
class NamedPattern:
    """A compiled pattern plus the failure message template for it."""

    name: str
    regex: Pattern[str]
    message: str

    def matches(self, value: str) -> bool:
        return self.regex.fullmatch(value) is not None

    def failure_message(self, value: str) -> str:
        return self.message.format(value=value)


ACCOUNT = "account"
TRADE_TYPE = "trade_type"
RULE_NAME = "rule_name"

_FORMAT_RULES: Dict[str, tuple[str, str]] = {
    ACCOUNT: (
        r"[A-Z0-9][A-Z0-9_\-]*",
        "Account must start with alphanumeric character and contain only uppercase "
        "letters, digits, underscores, and hyphens",
    ),
    TRADE_TYPE: (
        r"[A-Z][A-Z0-9_]*",
        "Type must start with uppercase letter and contain only uppercase letters, "
        "digits, and underscores",
    ),
    RULE_NAME: (
        r"[a-zA-Z0-9][a-zA-Z0-9_\-.]*",
        "Rule name must start with alphanumeric character and contain only alphanumeric "
        "characters, underscores, hyphens, and dots",
    ),
}

# Full scales, best to worst
_LETTER_SCALE = r"AAA|AA[+-]?|A[+-]?|BBB[+-]?|BB[+-]?|B[+-]?|CCC[+-]?|CC|C|D"
_AGENCY_SCALES: Dict[Agency, tuple[str, str, str]] = {
    Agency.MOODYS: (
        r"Aaa|Aa[1-3]|A[1-3]|Baa[1-3]|Ba[1-3]|B[1-3]|Caa[1-3]|Ca|C",
        r"Aaa|Aa[1-3]|A[1-3]|Baa[1-3]",
        "Invalid Moody's rating format: {value}",
    ),
    Agency.SP: (
        _LETTER_SCALE,
        r"AAA|AA[+-]?|A[+-]?|BBB[+-]?",
        "Invalid S&P rating format: {value}",
    ),
    Agency.FITCH: (
        _LETTER_SCALE,
        r"AAA|AA[+-]?|A[+-]?|BBB[+-]?",
        "Invalid Fitch rating format: {value}",
    ),
}

_SQL_INJECTION = (
    r"(\b(ALTER|CREATE|DELETE|DROP|EXEC(UTE)?|INSERT|SELECT|UNION|UPDATE)\b.*"
    r"\b(FROM|INTO|SET|WHERE|JOIN)\b)|(--|/\*|\*/|xp_|sp_)"
)


class PatternLibrary:
    """
    Named, pre-compiled format rules and rating scales.

    Build one per process (see `EngineConfig`) and share it; instances are
    never mutated after construction.
    """

    def __init__(
        self,
        format_rules: Optional[Mapping[str, tuple[str, str]]] = None,
        sql_injection: str = _SQL_INJECTION,
    ) -> None:
        rules = dict(_FORMAT_RULES)
        if format_rules:
            rules.update(format_rules)
        self._formats: Dict[str, NamedPattern] = {
            name: NamedPattern(name, re.compile(regex), message)
            for name, (regex, message) in rules.items()
        }
        self._scales: Dict[Agency, NamedPattern] = {}
        self._investment: Dict[Agency, Pattern[str]] = {}
        for agency, (scale, investment, message) in _AGENCY_SCALES.items():
            self._scales[agency] = NamedPattern(agency.value, re.compile(scale), message)
            self._investment[agency] = re.compile(investment)
        self._sql_injection = re.compile(sql_injection, re.IGNORECASE)

    def get(self, name: str) -> NamedPattern:
        try:
            return self._formats[name]
        except KeyError:
            raise KeyError(
                f"Unknown pattern '{name}'. Available: {', '.join(self._formats)}"
            ) from None

    def names(self) -> list[str]:
        return sorted(self._formats)

    def rating_scale(self, agency: Agency) -> NamedPattern:
        return self._scales[agency]

    def is_investment_grade(self, agency: Agency, notation: str) -> bool:
        """True when `notation` sits in the agency's investment-grade band."""
        return self._investment[agency].fullmatch(notation) is not None

    def looks_dangerous(self, sql: str) -> bool:
        """
        Heuristic check for statement keywords combined with clause keywords,
        comment markers, or extended stored procedure prefixes.

        This is pattern matching, not parsing: false positives and negatives
        are expected.
        """
        return self._sql_injection.search(sql) is not None


__all__ = [
    "ACCOUNT",
    "Agency",
    "NamedPattern",
    "PatternLibrary",
    "RULE_NAME",
    "TRADE_TYPE",
]
