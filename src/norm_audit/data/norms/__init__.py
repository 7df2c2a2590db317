"""
Norm Data Module

Contains the versioned JSON knowledge base of statutory norms:
- German civil, criminal, procedural and constitutional norms (BGB, StGB, ZPO, GG, ...)
- Austrian, Swiss, French, Italian, Portuguese and Polish core norms
- ECHR articles
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

DATA_DIR = Path(__file__).parent

LEGAL_NORMS_FILE = "legal_norms.json"


def load_json_db(filename: str, data_dir: Optional[Path] = None) -> Dict[str, Any]:
    """Load a JSON database file from the norm data directory."""
    filepath = (data_dir or DATA_DIR) / filename
    if not filepath.exists():
        raise FileNotFoundError(f"JSON database not found: {filepath}")
    with open(filepath, "r", encoding="utf-8") as f:
        return json.load(f)


def get_legal_norms() -> Dict[str, Any]:
    """Load the bundled legal norms database."""
    return load_json_db(LEGAL_NORMS_FILE)
