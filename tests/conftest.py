"""
Pytest fixtures and configuration for tests.
"""

from types import SimpleNamespace
from typing import Any, Callable

import pytest

from compliance_engine.compliance import RegulatoryCatalog, parse_catalog
from compliance_engine.config import Environment, Settings
from compliance_engine.workflow import (
    StateDefinition,
    WorkflowDefinition,
    create_auto_transition,
    create_transition,
)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        environment=Environment.TEST,
        debug=True,
        log_level="DEBUG",
    )


# ==================== Workflow fixtures ====================


def build_review_definition(**overrides: Any) -> WorkflowDefinition:
    """
    Document review workflow:

        draft --submit--> pending_review --approve--> approved --archive--> archived
                          pending_review --reject--> rejected --revise--> draft

    ``approve`` is guarded by ``docs_complete``; ``auto_approve`` fires when
    the document is both approved and complete.
    """
    fields: dict[str, Any] = {
        "id": "document_review",
        "name": "Document Review",
        "initial_state": "draft",
        "states": {
            "draft": StateDefinition(
                name="Draft",
                transitions={"submit": create_transition("pending_review")},
            ),
            "pending_review": StateDefinition(
                name="Pending Review",
                transitions={
                    "approve": create_transition(
                        "approved",
                        guard=lambda ctx: ctx.docs_complete,
                    ),
                    "auto_approve": create_auto_transition(
                        "approved",
                        lambda ctx: ctx.is_approved and ctx.docs_complete,
                    ),
                    "reject": create_transition("rejected"),
                },
            ),
            "approved": StateDefinition(
                name="Approved",
                transitions={"archive": create_transition("archived")},
            ),
            "rejected": StateDefinition(
                name="Rejected",
                transitions={"revise": create_transition("draft")},
            ),
            "archived": StateDefinition(name="Archived"),
        },
    }
    fields.update(overrides)
    return WorkflowDefinition(**fields)


@pytest.fixture
def review_definition() -> WorkflowDefinition:
    """Document review workflow definition."""
    return build_review_definition()


@pytest.fixture
def review_definition_factory() -> Callable[..., WorkflowDefinition]:
    """Build review definitions with field overrides."""
    return build_review_definition


@pytest.fixture
def review_context() -> SimpleNamespace:
    """Mutable context for the review workflow."""
    return SimpleNamespace(docs_complete=False, is_approved=False)


# ==================== Compliance fixtures ====================


def _article(number, title, applies_to, compliance_type, **extra) -> dict:
    return {
        "number": number,
        "title": title,
        "summary": f"{title} summary",
        "applies_to": applies_to,
        "compliance_type": compliance_type,
        "operator_action": f"Comply with {title.lower()}",
        **extra,
    }


def _item(action: str, reference: str, deadline: str) -> dict:
    return {
        "action": action,
        "article_reference": reference,
        "deadline": deadline,
        "criticality": "mandatory",
    }


@pytest.fixture
def sample_catalog_data() -> dict:
    """
    Small regulatory catalog.

    Ten articles spread over titles, chapters and sections; metadata declares
    119 articles in the full regulation.
    """
    return {
        "metadata": {
            "version": "1.0",
            "total_articles": 119,
            "last_updated": "2025-01-01",
            "source": "EUR-Lex",
        },
        "titles": [
            {
                "number": 1,
                "title": "General Provisions",
                "articles_detail": [
                    _article(1, "Subject Matter", ["ALL"], "informational"),
                    _article(2, "Scope", ["SCO", "LO", "LSO"], "scope_determination"),
                ],
            },
            {
                "number": 2,
                "title": "Authorization",
                "chapters": [
                    {
                        "number": 1,
                        "title": "Authorization Requirements",
                        "articles_detail": [
                            _article(
                                6, "Authorization Requirement", ["SCO", "LO"],
                                "mandatory_pre_activity",
                            ),
                            _article(7, "Application Process", ["SCO", "LO", "LSO"], "mandatory"),
                            _article(10, "Light Regime", ["SCO"], "conditional_simplification"),
                        ],
                    }
                ],
            },
            {
                "number": 3,
                "title": "Supervision",
                "chapters": [
                    {
                        "number": 1,
                        "title": "Oversight",
                        "sections": [
                            {
                                "number": 1,
                                "title": "Monitoring",
                                "articles_detail": [
                                    _article(
                                        33, "Supervision Framework", ["ALL"], "mandatory_ongoing"
                                    ),
                                ],
                            }
                        ],
                    }
                ],
            },
            {
                "number": 4,
                "title": "Safety and Sustainability",
                "chapters": [
                    {
                        "number": 1,
                        "title": "Debris Mitigation",
                        "articles_detail": [
                            _article(55, "Debris Mitigation Plan", ["SCO"], "mandatory_ongoing"),
                        ],
                    },
                    {
                        "number": 2,
                        "title": "Cybersecurity",
                        "articles_detail": [
                            _article(
                                74, "Cybersecurity Requirements", ["SCO", "LO"],
                                "mandatory_ongoing", excludes=["PDP"],
                            ),
                        ],
                    },
                    {
                        "number": 3,
                        "title": "Environmental",
                        "articles_detail": [
                            _article(
                                96, "Environmental Footprint Declaration", ["SCO", "LO"],
                                "mandatory_ongoing",
                            ),
                        ],
                    },
                ],
            },
            {
                "number": 5,
                "title": "Third Country Operators",
                "articles_detail": [
                    _article(105, "Registration Requirement", ["TCO"], "mandatory_pre_activity"),
                ],
            },
        ],
        "compliance_checklist_by_operator_type": {
            "spacecraft_operator_eu": {
                "pre_authorization": [
                    _item("Determine authorization type", "Art. 6", "Before launch"),
                    _item("Submit application", "Art. 7", "6 months before launch"),
                ],
                "ongoing": [
                    _item("Annual reporting", "Art. 33", "Annual"),
                    _item("Incident notification", "Art. 74", "24 hours"),
                ],
                "end_of_life": [
                    _item("Submit decommissioning plan", "Art. 55", "30 days before EOL"),
                ],
            },
            "launch_operator_eu": {
                "pre_authorization": [
                    _item("Obtain launch license", "Art. 6", "Before launch"),
                ],
                "operational": [
                    _item("Safety monitoring", "Art. 33", "Continuous"),
                ],
            },
            "third_country_operator": {
                "pre_registration": [
                    _item("Register with EUSPA", "Art. 105", "Before EU market access"),
                ],
                "ongoing": [
                    _item("Maintain EU representative", "Art. 14", "Continuous"),
                ],
            },
        },
        "operator_types": {},
        "decision_tree": {},
    }


@pytest.fixture
def sample_catalog(sample_catalog_data: dict) -> RegulatoryCatalog:
    """Validated sample catalog."""
    return parse_catalog(sample_catalog_data)


@pytest.fixture
def make_answers() -> Callable[..., dict]:
    """Factory for camelCase assessment answers with sensible defaults."""

    def _make(**overrides: Any) -> dict:
        answers = {
            "activityType": "spacecraft",
            "isDefenseOnly": False,
            "allAssetsPreLaunch": False,
            "establishment": "eu",
            "entitySize": "medium",
            "operatesConstellation": False,
            "constellationSize": None,
            "primaryOrbit": "LEO",
            "offersEUServices": True,
        }
        answers.update(overrides)
        return answers

    return _make
