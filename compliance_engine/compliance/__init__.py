"""Compliance rule evaluator: operator classification against the regulatory catalog."""

from compliance_engine.compliance.catalog import (
    CatalogLoadError,
    clear_catalog_cache,
    load_catalog,
    parse_catalog,
)
from compliance_engine.compliance.evaluator import (
    calculate_compliance,
    calculate_module_statuses,
    filter_applicable_articles,
    get_constellation_tier,
    redact_articles_for_client,
)
from compliance_engine.compliance.models import (
    ActivityType,
    Article,
    AssessmentAnswers,
    ChecklistItem,
    ClassificationError,
    ComplianceResult,
    ConstellationTier,
    EntitySize,
    Establishment,
    KeyDate,
    ModuleStatus,
    ModuleStatusType,
    OperatorType,
    OrbitRegime,
    RedactedComplianceResult,
    Regime,
    RegulatoryCatalog,
)
from compliance_engine.compliance.modules import (
    COMPLIANCE_MODULES,
    ComplianceModule,
    parse_article_range,
)

__all__ = [
    "ActivityType",
    "Article",
    "AssessmentAnswers",
    "COMPLIANCE_MODULES",
    "CatalogLoadError",
    "ChecklistItem",
    "ClassificationError",
    "ComplianceModule",
    "ComplianceResult",
    "ConstellationTier",
    "EntitySize",
    "Establishment",
    "KeyDate",
    "ModuleStatus",
    "ModuleStatusType",
    "OperatorType",
    "OrbitRegime",
    "RedactedComplianceResult",
    "Regime",
    "RegulatoryCatalog",
    "calculate_compliance",
    "calculate_module_statuses",
    "clear_catalog_cache",
    "filter_applicable_articles",
    "get_constellation_tier",
    "load_catalog",
    "parse_catalog",
    "parse_article_range",
    "redact_articles_for_client",
]
