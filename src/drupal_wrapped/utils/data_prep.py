"""Data preparation for export."""

import json
from typing import Dict, Any


def prepare_export(review: Dict[str, Any], username: str, months: int) -> Dict[str, Any]:
    """Wrap a serialized YearInReview with export metadata."""
    from .. import __version__

    return {
        "username": username,
        "review": review,
        "metadata": {
            "export_timestamp": None,  # Will be set by export_to_json
            "window_months": months,
            "demo": bool(review.get("isDemo", False)),
            "version": __version__,
        },
    }


def export_to_json(data: Dict[str, Any], filename: str) -> None:
    """Export data to JSON file."""
    import datetime

    # Add timestamp
    data.setdefault("metadata", {})["export_timestamp"] = datetime.datetime.now().isoformat()

    with open(filename, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
