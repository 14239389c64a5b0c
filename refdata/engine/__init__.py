"""
Engine package: the validation and normalization components the pipelines are
assembled from, plus the derived scoring views.
"""

from refdata.engine.config import EngineConfig, get_engine_config
from refdata.engine.consistency import ConsistencyChecker
from refdata.engine.errors import (
    EngineError,
    FailureKind,
    RecordNotFoundError,
    ValidationFailure,
)
from refdata.engine.fields import FieldValidator
from refdata.engine.normalizer import Normalizer
from refdata.engine.patterns import Agency, NamedPattern, PatternLibrary
from refdata.engine.scoring import (
    ComplexityLevel,
    agency_grades,
    complexity_level,
    complexity_score,
    is_complete_rule,
    is_executable,
    is_investment_grade,
    risk_score,
    rule_summary,
    total_notional,
)
from refdata.engine.structured import StructuredContentValidator
from refdata.engine.uniqueness import UniquenessGuard

__all__ = [
    # Configuration
    "EngineConfig",
    "get_engine_config",
    # Errors
    "EngineError",
    "FailureKind",
    "RecordNotFoundError",
    "ValidationFailure",
    # Components
    "Agency",
    "ConsistencyChecker",
    "FieldValidator",
    "NamedPattern",
    "Normalizer",
    "PatternLibrary",
    "StructuredContentValidator",
    "UniquenessGuard",
    # Derived views
    "ComplexityLevel",
    "agency_grades",
    "complexity_level",
    "complexity_score",
    "is_complete_rule",
    "is_executable",
    "is_investment_grade",
    "risk_score",
    "rule_summary",
    "total_notional",
]
