"""
Compliance rule evaluator.

Maps assessment answers against a regulatory catalog to produce an operator's
compliance profile: classification, regime, applicable articles, module
statuses, checklist, key dates and summary statistics.

The evaluator is a pure function of its inputs. The catalog and module table
are passed in explicitly, so it is safe to call concurrently.
"""

import math
from collections.abc import Mapping
from typing import Any, Optional, Sequence, Union

from pydantic import ValidationError

from compliance_engine.compliance.catalog import parse_catalog
from compliance_engine.compliance.models import (
    ALL_OPERATORS,
    THIRD_COUNTRY_OPERATOR,
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
    RedactedArticle,
    RedactedComplianceResult,
    Regime,
    RegulatoryCatalog,
)
from compliance_engine.compliance.modules import (
    COMPLIANCE_MODULES,
    MANDATORY_TYPES,
    SIMPLIFIED_TYPE,
    ComplianceModule,
    article_number,
    normalize_compliance_type,
    parse_article_range,
)

# activity -> (operator type, abbreviation, label)
OPERATOR_MAPPING: dict[ActivityType, tuple[OperatorType, str, str]] = {
    ActivityType.SPACECRAFT: (OperatorType.SPACECRAFT_OPERATOR, "SCO", "Spacecraft Operator"),
    ActivityType.LAUNCH_VEHICLE: (OperatorType.LAUNCH_OPERATOR, "LO", "Launch Operator"),
    ActivityType.LAUNCH_SITE: (OperatorType.LAUNCH_SITE_OPERATOR, "LSO", "Launch Site Operator"),
    ActivityType.ISOS: (OperatorType.ISOS_PROVIDER, "ISOS", "In-Space Services Provider"),
    ActivityType.DATA_PROVIDER: (
        OperatorType.PRIMARY_DATA_PROVIDER,
        "PDP",
        "Primary Data Provider",
    ),
}

ENTITY_SIZE_LABELS: dict[EntitySize, str] = {
    EntitySize.SMALL: "Small Enterprise",
    EntitySize.RESEARCH: "Research/Educational Institution",
    EntitySize.MEDIUM: "Medium Enterprise",
    EntitySize.LARGE: "Large Enterprise",
}

ORBIT_LABELS: dict[OrbitRegime, str] = {
    OrbitRegime.LEO: "Low Earth Orbit (LEO)",
    OrbitRegime.MEO: "Medium Earth Orbit (MEO)",
    OrbitRegime.GEO: "Geostationary Orbit (GEO)",
    OrbitRegime.BEYOND: "Beyond Earth Orbit (Cislunar/Deep Space)",
}

LIGHT_REGIME_SIZES = {EntitySize.SMALL, EntitySize.RESEARCH}

EUSPA_REGISTRATION = ChecklistItem(
    action="Register with EUSPA",
    article_reference="Art. 105",
    deadline="Before EU market access",
    criticality="mandatory",
)


def _coerce_answers(answers: Union[AssessmentAnswers, Mapping[str, Any]]) -> AssessmentAnswers:
    if isinstance(answers, AssessmentAnswers):
        return answers
    try:
        return AssessmentAnswers.model_validate(dict(answers))
    except ValidationError as e:
        raise ClassificationError(f"Unrecognized assessment answers: {e}") from e


def _operator_codes(abbreviation: str, is_third_country: bool) -> set[str]:
    codes = {abbreviation}
    if is_third_country:
        codes.add(THIRD_COUNTRY_OPERATOR)
    return codes


def filter_applicable_articles(
    articles: Sequence[Article],
    operator_codes: set[str],
) -> list[Article]:
    """
    Keep articles that apply to the operator.

    An article applies iff ``applies_to`` names ALL or one of the operator's
    codes, and ``excludes`` names none of them.
    """
    applicable = []
    for article in articles:
        if operator_codes & set(article.excludes):
            continue
        applies_to = set(article.applies_to)
        if ALL_OPERATORS in applies_to or operator_codes & applies_to:
            applicable.append(article)
    return applicable


def _plural(count: int) -> str:
    return "s" if count != 1 else ""


def calculate_module_statuses(
    applicable_articles: Sequence[Article],
    is_light_regime: bool,
    modules: Sequence[ComplianceModule] = COMPLIANCE_MODULES,
) -> list[ModuleStatus]:
    """Summarise how each module applies given the applicable articles."""
    statuses = []
    for module in modules:
        ranges = parse_article_range(module.article_range)
        module_articles = [
            article
            for article in applicable_articles
            if any(start <= article_number(article.number) <= end for start, end in ranges)
        ]
        count = len(module_articles)
        types = {normalize_compliance_type(a.compliance_type) for a in module_articles}
        has_mandatory = bool(types & MANDATORY_TYPES)
        has_simplified = SIMPLIFIED_TYPE in types

        if count == 0:
            status = ModuleStatusType.NOT_APPLICABLE
            summary = "No specific requirements for your operator type."
        elif has_mandatory and not (is_light_regime and has_simplified):
            status = ModuleStatusType.REQUIRED
            summary = f"Full compliance required with {count} article{_plural(count)}."
        elif has_mandatory:
            status = ModuleStatusType.SIMPLIFIED
            summary = "Simplified requirements apply under the Light Regime."
        elif has_simplified and is_light_regime:
            status = ModuleStatusType.SIMPLIFIED
            summary = "Simplified requirements available."
        else:
            status = ModuleStatusType.RECOMMENDED
            summary = f"{count} relevant article{_plural(count)} for your operation."

        statuses.append(
            ModuleStatus(
                id=module.id,
                name=module.name,
                icon=module.icon,
                description=module.description,
                status=status,
                article_count=count,
                summary=summary,
            )
        )
    return statuses


def build_checklist(
    catalog: RegulatoryCatalog,
    operator_type: OperatorType,
    is_third_country: bool,
) -> list[ChecklistItem]:
    """Ordered checklist of required actions for the operator."""
    checklists = catalog.compliance_checklist_by_operator_type

    if is_third_country:
        tco = checklists.third_country_operator
        checklist = [*tco.pre_registration, *tco.ongoing]
        if not any(
            "euspa" in item.action.lower() or "register" in item.action.lower()
            for item in checklist
        ):
            checklist.insert(0, EUSPA_REGISTRATION)
        return checklist

    if operator_type == OperatorType.SPACECRAFT_OPERATOR:
        sco = checklists.spacecraft_operator_eu
        return [*sco.pre_authorization, *sco.ongoing, *sco.end_of_life]

    if operator_type in (OperatorType.LAUNCH_OPERATOR, OperatorType.LAUNCH_SITE_OPERATOR):
        lo = checklists.launch_operator_eu
        return [*lo.pre_authorization, *lo.operational]

    # In-space services and data providers follow the spacecraft track
    sco = checklists.spacecraft_operator_eu
    return [*sco.pre_authorization, *sco.ongoing]


def get_key_dates(is_light_regime: bool) -> list[KeyDate]:
    """Regulatory milestones for the operator's regime."""
    dates = [
        KeyDate(date="1 January 2030", description="EU Space Act enters into application"),
        KeyDate(
            date="31 December 2031",
            description="End of transitional period for existing operators",
        ),
    ]
    if is_light_regime:
        dates.append(
            KeyDate(
                date="31 December 2031",
                description="EFD deadline for small enterprises & research institutions",
            )
        )
    dates.append(KeyDate(date="1 January 2035", description="Five-year regulatory review"))
    return dates


def get_constellation_tier(
    operates_constellation: Optional[bool],
    size: Optional[int],
) -> tuple[Optional[ConstellationTier], Optional[str]]:
    """Classify constellation size. Lower band edges are inclusive."""
    if not operates_constellation:
        return ConstellationTier.SINGLE_SATELLITE, "Single Satellite"
    if size is None:
        return None, None
    if size >= 1000:
        return ConstellationTier.MEGA_CONSTELLATION, f"Mega Constellation ({size}+ satellites)"
    if size >= 100:
        return ConstellationTier.LARGE_CONSTELLATION, f"Large Constellation ({size} satellites)"
    if size >= 10:
        return ConstellationTier.MEDIUM_CONSTELLATION, f"Medium Constellation ({size} satellites)"
    if size >= 2:
        return ConstellationTier.SMALL_CONSTELLATION, f"Small Constellation ({size} satellites)"
    return ConstellationTier.SINGLE_SATELLITE, "Single Satellite"


def get_authorization_cost(operator_type: OperatorType, is_third_country: bool) -> str:
    """Rough authorization cost estimate."""
    if is_third_country:
        return "Registration fee (TBD by EUSPA)"
    if operator_type == OperatorType.SPACECRAFT_OPERATOR:
        return "~€100,000 per satellite platform"
    if operator_type in (OperatorType.LAUNCH_OPERATOR, OperatorType.LAUNCH_SITE_OPERATOR):
        return "~€150,000-300,000 per launch system"
    return "€50,000-100,000 estimated"


def get_authorization_path(is_third_country: bool, is_eu: bool) -> str:
    """Authorization route for the establishment category."""
    if is_third_country:
        return "EUSPA Registration → Commission Decision"
    if is_eu:
        return "National Authority (NCA) → URSO Registration"
    return "Determine establishment status"


def _operator_label(label: str, establishment: Optional[Establishment]) -> str:
    if establishment == Establishment.THIRD_COUNTRY_EU_SERVICES:
        return f"{label} (Third Country)"
    if establishment == Establishment.THIRD_COUNTRY_NO_EU:
        return f"{label} (Non-EU, no EU services)"
    return f"{label} (EU)"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_compliance(
    answers: Union[AssessmentAnswers, Mapping[str, Any]],
    catalog: Union[RegulatoryCatalog, Mapping[str, Any]],
    modules: Sequence[ComplianceModule] = COMPLIANCE_MODULES,
) -> ComplianceResult:
    """
    Calculate the compliance profile for a set of assessment answers.

    Args:
        answers: Questionnaire answers (model or mapping, camelCase accepted)
        catalog: Regulatory article catalog (model or raw mapping)
        modules: Compliance modules to summarise

    Returns:
        ComplianceResult snapshot

    Raises:
        ClassificationError: If an answer is outside its enumeration
        CatalogLoadError: If a raw catalog mapping does not validate
    """
    answers = _coerce_answers(answers)
    catalog = parse_catalog(catalog)

    activity = answers.activity_type or ActivityType.SPACECRAFT
    operator_type, abbreviation, label = OPERATOR_MAPPING[activity]

    is_eu = answers.establishment == Establishment.EU
    is_third_country = answers.establishment == Establishment.THIRD_COUNTRY_EU_SERVICES

    is_light_regime = answers.entity_size in LIGHT_REGIME_SIZES
    if is_light_regime:
        regime, regime_label = Regime.LIGHT, "Light Regime"
        regime_reason = "Eligible for simplified resilience and delayed EFD (Art. 10)"
    else:
        regime, regime_label = Regime.STANDARD, "Standard (Full Requirements)"
        regime_reason = "Full compliance required across all pillars"

    all_articles = catalog.iter_articles()
    applicable_articles = filter_applicable_articles(
        all_articles, _operator_codes(abbreviation, is_third_country)
    )

    total_articles = max(catalog.metadata.total_articles or 0, len(all_articles))
    applicable_count = len(applicable_articles)
    applicable_percentage = (
        _round_half_up(applicable_count / total_articles * 100) if total_articles else 0
    )

    tier, tier_label = get_constellation_tier(
        answers.operates_constellation, answers.constellation_size
    )

    return ComplianceResult(
        operator_type=operator_type,
        operator_type_label=_operator_label(label, answers.establishment),
        operator_abbreviation=abbreviation,
        is_eu=is_eu,
        is_third_country=is_third_country,
        regime=regime,
        regime_label=regime_label,
        regime_reason=regime_reason,
        entity_size=answers.entity_size.value if answers.entity_size else "unknown",
        entity_size_label=(
            ENTITY_SIZE_LABELS[answers.entity_size] if answers.entity_size else "Not specified"
        ),
        constellation_tier=tier,
        constellation_tier_label=tier_label,
        orbit=answers.primary_orbit.value if answers.primary_orbit else "unknown",
        orbit_label=(
            ORBIT_LABELS[answers.primary_orbit] if answers.primary_orbit else "Not specified"
        ),
        offers_eu_services=bool(answers.offers_eu_services),
        applicable_articles=applicable_articles,
        total_articles=total_articles,
        applicable_count=applicable_count,
        applicable_percentage=applicable_percentage,
        module_statuses=calculate_module_statuses(applicable_articles, is_light_regime, modules),
        checklist=build_checklist(catalog, operator_type, is_third_country),
        key_dates=get_key_dates(is_light_regime),
        estimated_authorization_cost=get_authorization_cost(operator_type, is_third_country),
        authorization_path=get_authorization_path(is_third_country, is_eu),
    )


def redact_articles_for_client(result: ComplianceResult) -> RedactedComplianceResult:
    """
    Strip proprietary guidance from applicable articles.

    Keeps number, title, compliance type and applicability lists only.
    """
    data = result.model_dump(exclude={"applicable_articles"})
    return RedactedComplianceResult(
        **data,
        applicable_articles=[
            RedactedArticle(
                number=article.number,
                title=article.title,
                compliance_type=article.compliance_type,
                applies_to=article.applies_to,
                excludes=article.excludes,
            )
            for article in result.applicable_articles
        ],
    )
