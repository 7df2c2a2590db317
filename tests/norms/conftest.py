"""
Shared fixtures for norm engine tests

The synthetic knowledge base keeps element weights and indicator counts
small so expected scores can be computed by hand.
"""

import pytest

from norm_audit.config.scoring_parameters import ScoringParameters
from norm_audit.services.norms.norm_knowledge_base import NormKnowledgeBase


def _theft_base():
    return {
        "id": "t-base",
        "law": "StGB",
        "paragraph": "§ 900",
        "title": "Testdiebstahl",
        "short_description": "Wegnahme einer fremden Sache.",
        "domain": "criminal",
        "type": "strafnorm",
        "keywords": ["diebstahl", "gestohlen"],
        "burden_of_proof": "claimant",
        "qualified_by": ["t-qual-1", "t-qual-2", "t-missing"],
        "qualification_level": 0,
        "strafrahmen": {"max": "5 Jahre", "unit": "freiheitsstrafe_oder_geldstrafe"},
        "tatbestands_merkmale": [
            {
                "id": "tb-900-1",
                "label": "Wegnahme",
                "description": "Bruch fremden Gewahrsams",
                "indicators": ["gestohlen", "entwendet"],
                "weight": 1.0,
                "required": True,
            },
            {
                "id": "tb-900-2",
                "label": "Beute",
                "description": "Gegenstand der Tat",
                "indicators": ["laptop", "handy", "geld", "schmuck"],
                "weight": 0.5,
                "required": True,
            },
        ],
        "exclusion_indicators": ["geliehen"],
    }


def synthetic_records():
    """Raw norm records for the synthetic knowledge base"""
    return [
        _theft_base(),
        {
            "id": "t-qual-1",
            "law": "StGB",
            "paragraph": "§ 901",
            "title": "Testdiebstahl mit Waffen",
            "domain": "criminal",
            "type": "strafnorm",
            "keywords": ["bewaffnet"],
            "qualification_of": "t-base",
            "qualification_level": 1,
            "strafrahmen": {"min": "6 Monate", "max": "10 Jahre", "unit": "freiheitsstrafe"},
            "tatbestands_merkmale": [
                {
                    "id": "tb-901-1",
                    "label": "Waffe",
                    "description": "Waffe mitgeführt",
                    "indicators": ["waffe", "messer"],
                    "weight": 0.9,
                    "required": False,
                }
            ],
        },
        {
            "id": "t-qual-2",
            "law": "StGB",
            "paragraph": "§ 902",
            "title": "Gewerbsmäßiger Testdiebstahl",
            "domain": "criminal",
            "type": "strafnorm",
            "keywords": ["gewerbsmäßig", "serie"],
            "qualification_of": "t-base",
            "qualification_level": 2,
            "strafrahmen": {"min": "1 Jahr", "max": "10 Jahre", "unit": "freiheitsstrafe"},
            "tatbestands_merkmale": [
                {
                    "id": "tb-902-1",
                    "label": "Gewerbsmäßigkeit",
                    "description": "Wiederholte Begehung als Einnahmequelle",
                    "indicators": ["gewerbsmäßig"],
                    "weight": 0.8,
                    "required": False,
                }
            ],
        },
        {
            "id": "stgb-129",
            "law": "StGB",
            "paragraph": "§ 129",
            "title": "Bildung krimineller Vereinigungen",
            "short_description": "Mitgliedschaft in einer kriminellen Vereinigung.",
            "domain": "criminal",
            "type": "strafnorm",
            "keywords": ["bande", "organisation"],
            "qualified_by": ["stgb-129a"],
            "qualification_level": 0,
            "strafrahmen": {"max": "5 Jahre", "unit": "freiheitsstrafe_oder_geldstrafe"},
            "tatbestands_merkmale": [
                {
                    "id": "tb-129-1",
                    "label": "Vereinigung",
                    "description": "Zusammenschluss von mind. 3 Personen",
                    "indicators": ["bande", "gruppe"],
                    "weight": 1.0,
                    "required": True,
                }
            ],
        },
        {
            "id": "stgb-129a",
            "law": "StGB",
            "paragraph": "§ 129a",
            "title": "Bildung terroristischer Vereinigungen",
            "domain": "criminal",
            "type": "strafnorm",
            "keywords": ["terroristisch"],
            "qualification_of": "stgb-129",
            "qualification_level": 1,
            "tatbestands_merkmale": [
                {
                    "id": "tb-129a-1",
                    "label": "Terrorzweck",
                    "description": "Zweck: terroristische Straftaten",
                    "indicators": ["terror"],
                    "weight": 1.0,
                    "required": True,
                }
            ],
        },
        {
            "id": "t-nonreq",
            "law": "HGB",
            "paragraph": "§ 77",
            "title": "Optionale Merkmale",
            "domain": "commercial",
            "type": "definition",
            "keywords": [],
            "tatbestands_merkmale": [
                {
                    "id": "tb-77-1",
                    "label": "Alpha",
                    "description": "",
                    "indicators": ["alpha"],
                    "weight": 0.5,
                    "required": False,
                },
                {
                    "id": "tb-77-2",
                    "label": "Beta",
                    "description": "",
                    "indicators": ["beta"],
                    "weight": 0.5,
                    "required": False,
                },
            ],
        },
        {
            "id": "t-civil",
            "law": "ABGB",
            "paragraph": "§ 1295",
            "title": "Schadenersatz aus Verschulden",
            "short_description": "Ersatz des schuldhaft verursachten Schadens.",
            "domain": "civil",
            "type": "anspruchsgrundlage",
            "keywords": ["schadensersatz", "schaden", "verletzung"],
            "related_norms": ["t-einwendung", "t-einrede", "ghost"],
            "burden_of_proof": "claimant",
        },
        {
            "id": "t-civil-2",
            "law": "ABGB",
            "paragraph": "§ 1100",
            "title": "Mietzinsanspruch",
            "domain": "civil",
            "type": "anspruchsgrundlage",
            "keywords": ["miete", "mietzins"],
        },
        {
            "id": "t-einwendung",
            "law": "ABGB",
            "paragraph": "§ 1304",
            "title": "Mitverschulden",
            "domain": "civil",
            "type": "einwendung",
            "keywords": ["mitverschulden"],
        },
        {
            "id": "t-einrede",
            "law": "ABGB",
            "paragraph": "§ 1489",
            "title": "Verjährung von Schadenersatz",
            "domain": "civil",
            "type": "einrede",
            "keywords": ["verjährung"],
        },
        {
            "id": "bgb-195",
            "law": "BGB",
            "paragraph": "§ 195",
            "title": "Regelmäßige Verjährungsfrist",
            "domain": "civil",
            "type": "frist",
            "keywords": ["verjährung", "frist"],
            "limitation_period_years": 3,
            "limitation_start": "Ende des Jahres der Kenntnis (§ 199 BGB)",
        },
        {
            "id": "t-event",
            "law": "BGB",
            "paragraph": "§ 999",
            "title": "Ereignisfrist",
            "domain": "civil",
            "type": "frist",
            "keywords": ["frist"],
            "limitation_period_years": 2,
        },
    ]


@pytest.fixture
def params():
    return ScoringParameters()


@pytest.fixture
def synthetic_kb():
    """Small hand-computable knowledge base"""
    return NormKnowledgeBase.from_records(synthetic_records(), {"version": "test"})


@pytest.fixture(scope="session")
def bundled_kb():
    """Bundled legal_norms.json knowledge base"""
    return NormKnowledgeBase.load_default()


@pytest.fixture
def theft_record():
    return _theft_base()
