from typing import List

from models import TimelineItem


def make_era(movements: List[dict], century: str = "19th century") -> TimelineItem:
    """Build an era from {"name": ..., "countries": {country: [artist names]}} dicts"""
    return TimelineItem.model_validate(
        {
            "century": century,
            "period": "Test period",
            "description": "Test era",
            "artMovements": [
                {
                    "name": movement["name"],
                    "countries": [
                        {
                            "country": country,
                            "artists": [
                                {"name": name, "paintingTitle": f"Work by {name}"}
                                for name in names
                            ],
                        }
                        for country, names in movement["countries"].items()
                    ],
                }
                for movement in movements
            ],
        }
    )
