from .models import Asset, AssetDraft, AssetPage, PhotographerCount, SearchCriteria, Stats
from .repository import AssetRepository, SheetAssetRepository

__all__ = [
    "Asset",
    "AssetDraft",
    "AssetPage",
    "AssetRepository",
    "PhotographerCount",
    "SearchCriteria",
    "SheetAssetRepository",
    "Stats",
]
