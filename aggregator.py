from typing import Dict, List, Optional, Set

from pyuca import Collator

from models import ArtistSummary, CountrySummary, TimelineItem

# Unicode collation, independent of the host locale
_collator = Collator()


def aggregate_era(item: TimelineItem) -> Optional[List[CountrySummary]]:
    """Collapse an era's movement tree into a per-country artist index.

    An artist listed under the same country by several movements becomes a
    single entry carrying every movement name. Countries and artists are
    sorted by Unicode collation, movement names with a plain sort.
    Returns None when the era has no artists at all.
    """
    by_country: Dict[str, Dict[str, Set[str]]] = {}

    for movement in item.art_movements:
        for group in movement.countries:
            for artist in group.artists:
                artists = by_country.setdefault(group.country, {})
                artists.setdefault(artist.name, set()).add(movement.name)

    if not by_country:
        return None

    return [
        CountrySummary(
            country=country,
            artists=[
                ArtistSummary(name=name, movement_names=sorted(artists[name]))
                for name in sorted(artists, key=_collator.sort_key)
            ],
        )
        for country, artists in sorted(
            by_country.items(), key=lambda entry: _collator.sort_key(entry[0])
        )
    ]


def count_artists(item: TimelineItem) -> List[List[int]]:
    """Number of artists in each country group, per movement"""
    return [
        [len(group.artists) for group in movement.countries]
        for movement in item.art_movements
    ]
