"""In-memory filtering, ordering and aggregation over decoded assets."""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from .models import Asset, PhotographerCount, SearchCriteria, Stats

TOP_PHOTOGRAPHERS = 5
RECENT_UPLOADS = 5


def newest_first(assets: Iterable[Asset]) -> list[Asset]:
    # Stable: equal upload dates keep sheet order.
    return sorted(assets, key=lambda asset: asset.uploaded_at, reverse=True)


def _contains(haystack: str | None, needle: str) -> bool:
    return needle.lower() in (haystack or "").lower()


def matches(asset: Asset, criteria: SearchCriteria) -> bool:
    """Return True when *asset* satisfies every criterion that is set."""

    if criteria.event and not _contains(asset.event, criteria.event):
        return False
    if criteria.photographer and not _contains(asset.photographer, criteria.photographer):
        return False
    if criteria.location:
        if not asset.location or not _contains(asset.location, criteria.location):
            return False
    if criteria.tags:
        wanted = [tag.lower() for tag in criteria.tags if tag]
        if wanted and not any(
            tag in own.lower() for tag in wanted for own in asset.tags
        ):
            return False
    if criteria.date_from and asset.date < criteria.date_from:
        return False
    if criteria.date_to and asset.date > criteria.date_to:
        return False
    return True


def filter_assets(assets: Iterable[Asset], criteria: SearchCriteria) -> list[Asset]:
    return [asset for asset in assets if matches(asset, criteria)]


def build_stats(assets: list[Asset]) -> Stats:
    counts = Counter(asset.photographer for asset in assets)
    # most_common orders ties by first occurrence, so pass assets newest first.
    top = [
        PhotographerCount(name=name, count=count)
        for name, count in counts.most_common(TOP_PHOTOGRAPHERS)
    ]
    return Stats(
        total_assets=len(assets),
        total_events=len({asset.event for asset in assets}),
        top_photographers=top,
        recent_uploads=newest_first(assets)[:RECENT_UPLOADS],
    )
