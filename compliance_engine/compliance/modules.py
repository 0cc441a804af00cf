"""
Compliance modules and compliance-type normalisation.

Each module groups the regulation's articles by article-number ranges.
"""

import re

from pydantic import BaseModel


class ComplianceModule(BaseModel):
    """A product module covering a set of article ranges."""

    id: str
    slug: str
    name: str
    icon: str
    description: str
    article_range: str


COMPLIANCE_MODULES: list[ComplianceModule] = [
    ComplianceModule(
        id="01",
        slug="authorization",
        name="Authorization & Licensing",
        icon="FileCheck",
        description="Authorization by the National Competent Authority before space activities.",
        article_range="Art. 6–16, 32–39, 105–108",
    ),
    ComplianceModule(
        id="02",
        slug="registration",
        name="Registration & Registry",
        icon="Database",
        description="URSO registration and Union Register of Space Objects compliance.",
        article_range="Art. 24",
    ),
    ComplianceModule(
        id="03",
        slug="environmental",
        name="Environmental Footprint",
        icon="Leaf",
        description="Environmental Footprint Declaration for each mission.",
        article_range="Art. 96–100",
    ),
    ComplianceModule(
        id="04",
        slug="cybersecurity",
        name="Cybersecurity & Resilience",
        icon="Shield",
        description="NIS2-aligned security and resilience for space systems.",
        article_range="Art. 74–95",
    ),
    ComplianceModule(
        id="05",
        slug="debris",
        name="Debris Mitigation & Safety",
        icon="Orbit",
        description="End-of-life disposal and collision avoidance.",
        article_range="Art. 58–72, 101–103",
    ),
    ComplianceModule(
        id="06",
        slug="insurance",
        name="Insurance & Liability",
        icon="ShieldCheck",
        description="Third-party liability and insurance coverage.",
        article_range="Art. 44–51",
    ),
    ComplianceModule(
        id="07",
        slug="supervision",
        name="Supervision & Reporting",
        icon="Eye",
        description="Ongoing supervisory and reporting obligations.",
        article_range="Art. 26–31, 40–57, 73",
    ),
    ComplianceModule(
        id="08",
        slug="regulatory-intelligence",
        name="Regulatory Intelligence",
        icon="Bell",
        description="Tracking regulatory changes and delegated acts.",
        article_range="Art. 104, 114–119",
    ),
]

# Catalog compliance types -> canonical types used for module status
COMPLIANCE_TYPE_MAP: dict[str, str] = {
    "mandatory": "mandatory_pre_activity",
    "mandatory_pre_authorization": "mandatory_pre_activity",
    "ongoing": "mandatory_ongoing",
    "conditional_simplification": "conditional_simplified",
    "conditional": "conditional_simplified",
    "scope_determination": "informational",
}

MANDATORY_TYPES = {"mandatory_pre_activity", "mandatory_ongoing"}
SIMPLIFIED_TYPE = "conditional_simplified"

_RANGE_PATTERN = re.compile(r"(\d+)\s*[–-]\s*(\d+)")
_NUMBER_PATTERN = re.compile(r"(\d+)")


def normalize_compliance_type(compliance_type: str) -> str:
    """Map a catalog compliance type to its canonical name."""
    return COMPLIANCE_TYPE_MAP.get(compliance_type, compliance_type)


def parse_article_range(article_range: str) -> list[tuple[int, int]]:
    """
    Parse an article range string into inclusive (start, end) pairs.

    "Art. 6–16, 24" -> [(6, 16), (24, 24)]
    """
    ranges = []
    cleaned = re.sub(r"Art\.\s*", "", article_range)
    for part in (p.strip() for p in cleaned.split(",")):
        range_match = _RANGE_PATTERN.search(part)
        if range_match:
            ranges.append((int(range_match.group(1)), int(range_match.group(2))))
            continue
        single_match = _NUMBER_PATTERN.search(part)
        if single_match:
            number = int(single_match.group(1))
            ranges.append((number, number))
    return ranges


def article_number(number: int | str) -> int:
    """Leading integer of an article number ("10a" -> 10, "annex" -> 0)."""
    if isinstance(number, int):
        return number
    match = re.match(r"^(\d+)", str(number))
    return int(match.group(1)) if match else 0
