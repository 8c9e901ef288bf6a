import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import TypeAdapter

import config
from aggregator import aggregate_era
from models import CountrySummary, TimelineItem


logger = logging.getLogger(__name__)

_timeline_adapter = TypeAdapter(List[TimelineItem])


class TimelineCatalog:
    """Loads the static timeline document and serves eras and their aggregations"""

    def __init__(self, path: str = config.TIMELINE_PATH):
        self.path = Path(path)

        # In-memory state, filled by load()
        self._eras: Optional[List[TimelineItem]] = None
        self._countries: Dict[int, Optional[List[CountrySummary]]] = {}

    def load(self) -> List[TimelineItem]:
        """Parse the timeline document once; raises on a missing or invalid file"""
        if self._eras is not None:
            return self._eras

        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        self._eras = _timeline_adapter.validate_python(data)
        self._countries = {}
        logger.info("Loaded %d eras from %s", len(self._eras), self.path)
        return self._eras

    def set_eras(self, eras: List[TimelineItem]):
        """Replace the timeline in memory"""
        self._eras = list(eras)
        self._countries = {}

    def get_eras(self) -> List[TimelineItem]:
        """Get all eras, in document order"""
        if self._eras is None:
            return self.load()
        return self._eras

    def get_era(self, index: int) -> Optional[TimelineItem]:
        """Get an era by its position, or None when out of range"""
        eras = self.get_eras()
        if 0 <= index < len(eras):
            return eras[index]
        return None

    def get_countries(self, index: int) -> Optional[List[CountrySummary]]:
        """Get the aggregated country view of an era, memoized by era index"""
        if index not in self._countries:
            era = self.get_era(index)
            if era is None:
                return None
            self._countries[index] = aggregate_era(era)
        return self._countries[index]

    def lookup_keys(self) -> List[str]:
        """Every distinct photo and painting page title, in first-seen order"""
        keys: Dict[str, None] = {}
        for era in self.get_eras():
            for movement in era.art_movements:
                for group in movement.countries:
                    for artist in group.artists:
                        for key in (artist.photo_wiki_title, artist.painting_wiki_title):
                            if key:
                                keys.setdefault(key, None)
        return list(keys)
