from typing import Any, Dict, List

from app.core.config.settings import get_settings


def get_criteria() -> List[Dict[str, Any]]:
    """Configured evaluation criteria, each with its score range filled in."""
    settings = get_settings()
    return [
        {
            "key": criterion["key"],
            "label": criterion.get("label", criterion["key"]),
            "description": criterion.get("description", ""),
            "min_score": settings.SCORE_MIN,
            "max_score": criterion["max_score"],
        }
        for criterion in settings.EVALUATION_CRITERIA
    ]

def criteria_keys() -> List[str]:
    return [criterion["key"] for criterion in get_criteria()]
