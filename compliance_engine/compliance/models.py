"""
Domain models for the compliance evaluator.

Covers the assessment questionnaire answers, the regulatory article catalog,
and the compliance profile produced from them.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ClassificationError(ValueError):
    """Raised when assessment answers fall outside the declared enumerations."""


class ActivityType(str, Enum):
    """Primary space activity declared in the assessment."""

    SPACECRAFT = "spacecraft"
    LAUNCH_VEHICLE = "launch_vehicle"
    LAUNCH_SITE = "launch_site"
    ISOS = "isos"
    DATA_PROVIDER = "data_provider"


class Establishment(str, Enum):
    """Where the operator is established relative to the EU."""

    EU = "eu"
    THIRD_COUNTRY_EU_SERVICES = "third_country_eu_services"
    THIRD_COUNTRY_NO_EU = "third_country_no_eu"


class EntitySize(str, Enum):
    """Entity size category. Research institutions are a special case."""

    SMALL = "small"
    RESEARCH = "research"
    MEDIUM = "medium"
    LARGE = "large"


class OrbitRegime(str, Enum):
    """Primary orbital regime."""

    LEO = "LEO"
    MEO = "MEO"
    GEO = "GEO"
    BEYOND = "beyond"


class OperatorType(str, Enum):
    """Regulated operator type, mapped 1:1 from the activity type."""

    SPACECRAFT_OPERATOR = "spacecraft_operator"
    LAUNCH_OPERATOR = "launch_operator"
    LAUNCH_SITE_OPERATOR = "launch_site_operator"
    ISOS_PROVIDER = "isos_provider"
    PRIMARY_DATA_PROVIDER = "primary_data_provider"


class Regime(str, Enum):
    """Regulatory track."""

    LIGHT = "light"
    STANDARD = "standard"


class ConstellationTier(str, Enum):
    """Size band of a group of coordinated spacecraft."""

    SINGLE_SATELLITE = "single_satellite"
    SMALL_CONSTELLATION = "small_constellation"
    MEDIUM_CONSTELLATION = "medium_constellation"
    LARGE_CONSTELLATION = "large_constellation"
    MEGA_CONSTELLATION = "mega_constellation"


class ModuleStatusType(str, Enum):
    """How strongly a compliance module applies to an operator."""

    REQUIRED = "required"
    SIMPLIFIED = "simplified"
    RECOMMENDED = "recommended"
    NOT_APPLICABLE = "not_applicable"


# Sentinel operator codes used in article applicability lists
ALL_OPERATORS = "ALL"
THIRD_COUNTRY_OPERATOR = "TCO"


class AssessmentAnswers(BaseModel):
    """Questionnaire answers. Accepts snake_case or camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    activity_type: Optional[ActivityType] = None
    is_defense_only: Optional[bool] = None
    all_assets_pre_launch: Optional[bool] = None
    establishment: Optional[Establishment] = None
    entity_size: Optional[EntitySize] = None
    operates_constellation: Optional[bool] = None
    constellation_size: Optional[int] = Field(default=None, ge=0)
    primary_orbit: Optional[OrbitRegime] = None
    offers_eu_services: Optional[bool] = Field(default=None, alias="offersEUServices")


# ==================== Regulatory catalog ====================

class Article(BaseModel):
    """A single regulatory article."""

    model_config = ConfigDict(extra="allow")

    number: Union[int, str]
    title: str
    summary: Optional[str] = None
    applies_to: list[str] = Field(default_factory=list)
    excludes: list[str] = Field(default_factory=list)
    compliance_type: str = "informational"
    operator_action: Optional[str] = None


class Section(BaseModel):
    """Section within a chapter."""

    number: Union[int, str]
    title: str
    articles_detail: list[Article] = Field(default_factory=list)


class Chapter(BaseModel):
    """Chapter within a title."""

    number: Union[int, str]
    title: str
    articles_detail: list[Article] = Field(default_factory=list)
    sections: list[Section] = Field(default_factory=list)


class Title(BaseModel):
    """Top-level title of the regulation."""

    number: Union[int, str]
    title: str
    articles_detail: list[Article] = Field(default_factory=list)
    chapters: list[Chapter] = Field(default_factory=list)


class ChecklistItem(BaseModel):
    """A required action and the article it comes from."""

    action: str
    article_reference: str
    deadline: Optional[str] = None
    criticality: Optional[str] = None


class OperatorChecklist(BaseModel):
    """Checklist phases for one operator category."""

    pre_authorization: list[ChecklistItem] = Field(default_factory=list)
    pre_registration: list[ChecklistItem] = Field(default_factory=list)
    ongoing: list[ChecklistItem] = Field(default_factory=list)
    operational: list[ChecklistItem] = Field(default_factory=list)
    end_of_life: list[ChecklistItem] = Field(default_factory=list)


class ChecklistCatalog(BaseModel):
    """Checklists keyed by operator category."""

    model_config = ConfigDict(extra="allow")

    spacecraft_operator_eu: OperatorChecklist = Field(default_factory=OperatorChecklist)
    launch_operator_eu: OperatorChecklist = Field(default_factory=OperatorChecklist)
    third_country_operator: OperatorChecklist = Field(default_factory=OperatorChecklist)


class CatalogMetadata(BaseModel):
    """Catalog provenance."""

    model_config = ConfigDict(extra="allow")

    version: Optional[str] = None
    total_articles: Optional[int] = Field(default=None, ge=0)
    last_updated: Optional[str] = None
    source: Optional[str] = None


class RegulatoryCatalog(BaseModel):
    """The regulatory article catalog and per-operator checklists."""

    model_config = ConfigDict(extra="allow")

    metadata: CatalogMetadata = Field(default_factory=CatalogMetadata)
    titles: list[Title] = Field(default_factory=list)
    compliance_checklist_by_operator_type: ChecklistCatalog = Field(
        default_factory=ChecklistCatalog
    )

    def iter_articles(self) -> list[Article]:
        """Flatten all articles in document order."""
        articles: list[Article] = []
        for title in self.titles:
            articles.extend(title.articles_detail)
            for chapter in title.chapters:
                articles.extend(chapter.articles_detail)
                for section in chapter.sections:
                    articles.extend(section.articles_detail)
        return articles


# ==================== Compliance profile ====================

class ModuleStatus(BaseModel):
    """Status summary for one compliance module."""

    id: str
    name: str
    icon: str
    description: str
    status: ModuleStatusType
    article_count: int = Field(ge=0)
    summary: str


class KeyDate(BaseModel):
    """A regulatory milestone."""

    date: str
    description: str


class ComplianceResult(BaseModel):
    """Complete compliance profile for one set of answers."""

    operator_type: OperatorType
    operator_type_label: str
    operator_abbreviation: str
    is_eu: bool
    is_third_country: bool
    regime: Regime
    regime_label: str
    regime_reason: str
    entity_size: str
    entity_size_label: str
    constellation_tier: Optional[ConstellationTier] = None
    constellation_tier_label: Optional[str] = None
    orbit: str
    orbit_label: str
    offers_eu_services: bool
    applicable_articles: list[Article]
    total_articles: int
    applicable_count: int
    applicable_percentage: int = Field(ge=0, le=100)
    module_statuses: list[ModuleStatus]
    checklist: list[ChecklistItem]
    key_dates: list[KeyDate]
    estimated_authorization_cost: str
    authorization_path: str


class RedactedArticle(BaseModel):
    """Article with proprietary guidance fields removed."""

    number: Union[int, str]
    title: str
    compliance_type: str
    applies_to: list[str] = Field(default_factory=list)
    excludes: list[str] = Field(default_factory=list)


class RedactedComplianceResult(ComplianceResult):
    """Compliance profile safe to send to clients."""

    applicable_articles: list[RedactedArticle]
