"""Asset record store.

:class:`AssetRepository` is the seam callers depend on. The only backing in
production is :class:`SheetAssetRepository`, which treats one tab of a
spreadsheet as a table: header on sheet row 1, one asset per row from row 2.

There is no index. Every read fetches the whole data region, decodes it and
sorts it in memory. Deletes address rows by position, so the lookup of the
row offset and the delete request run under a per-spreadsheet lock. The lock
covers threads of this process and, with ``lock_dir``, processes on the same
host; writers on other hosts are not coordinated.
"""

from __future__ import annotations

import abc
import contextlib
import logging
from datetime import date
from typing import Callable, Iterator

from dam.exceptions import AssetNotFound, DamError, RemoteUnavailable, classify_remote_error
from dam.metrics import assets_registered, track_store_operation
from dam.sheets.base import TabularSource
from dam.utils.lock import ResourceLock
from dam.utils.pagination import window

from . import codec
from .ids import IdGenerator, generate_asset_id
from .models import Asset, AssetDraft, AssetPage, SearchCriteria, Stats
from .query import build_stats, filter_assets, newest_first

logger = logging.getLogger(__name__)

DEFAULT_SHEET_NAME = "Assets"
DEFAULT_PAGE_SIZE = 1000
SHEET_PERMISSION_HINT = "share the spreadsheet with the service account as an editor"


class AssetRepository(abc.ABC):
    @abc.abstractmethod
    def ensure_schema(self) -> None:
        ...

    @abc.abstractmethod
    def create(self, draft: AssetDraft) -> Asset:
        ...

    @abc.abstractmethod
    def list(self, page_size: int = DEFAULT_PAGE_SIZE, offset: str | None = None) -> AssetPage:
        ...

    @abc.abstractmethod
    def search(self, criteria: SearchCriteria) -> list[Asset]:
        ...

    @abc.abstractmethod
    def get(self, asset_id: str) -> Asset | None:
        ...

    @abc.abstractmethod
    def delete(self, asset_id: str) -> None:
        """Remove the asset; raises :class:`AssetNotFound` when it does not exist."""

    @abc.abstractmethod
    def stats(self) -> Stats:
        ...

    @abc.abstractmethod
    def check_connection(self) -> str:
        """Human readable confirmation that the backing store is reachable."""


@contextlib.contextmanager
def _remote(operation: str) -> Iterator[None]:
    try:
        yield
    except DamError:
        raise
    except Exception as exc:
        logger.error("Error in sheet operation %r: %s", operation, exc)
        raise classify_remote_error(operation, exc, SHEET_PERMISSION_HINT) from exc


class SheetAssetRepository(AssetRepository):
    def __init__(
        self,
        source: TabularSource,
        sheet_name: str = DEFAULT_SHEET_NAME,
        id_generator: IdGenerator = generate_asset_id,
        clock: Callable[[], date] = date.today,
        lock: ResourceLock | None = None,
    ) -> None:
        self.source = source
        self.sheet_name = sheet_name
        self.generate_id = id_generator
        self.clock = clock
        self.lock = lock or ResourceLock(source.resource_id)

    # -- ranges --------------------------------------------------------------
    @property
    def header_range(self) -> str:
        return f"{self.sheet_name}!{codec.FIRST_COLUMN}1:{codec.LAST_COLUMN}1"

    @property
    def table_range(self) -> str:
        return codec.sheet_range(self.sheet_name)

    @property
    def data_range(self) -> str:
        return f"{self.sheet_name}!{codec.FIRST_COLUMN}2:{codec.LAST_COLUMN}"

    @property
    def id_range(self) -> str:
        return f"{self.sheet_name}!{codec.FIRST_COLUMN}2:{codec.FIRST_COLUMN}"

    # -- operations ----------------------------------------------------------
    def ensure_schema(self) -> None:
        with _remote("initialize Google Sheet"):
            if self.source.sheet_id(self.sheet_name) is None:
                logger.info("Sheet tab %s missing, creating it", self.sheet_name)
                self.source.create_sheet(self.sheet_name)
            header = self.source.get_rows(self.header_range)
            if not header or not any(str(cell).strip() for cell in header[0]):
                self.source.update_header(self.header_range, codec.HEADER_ROW)

    def _load(self) -> list[Asset]:
        self.ensure_schema()
        today = self.clock()
        with _remote("get assets"):
            rows = self.source.get_rows(self.data_range)
        # Data starts on sheet row 2.
        assets = [codec.decode_asset(row, index + 2, today) for index, row in enumerate(rows)]
        assets_registered.set(len(assets))
        return assets

    def _load_sorted(self) -> list[Asset]:
        return newest_first(self._load())

    def create(self, draft: AssetDraft) -> Asset:
        with track_store_operation("create"):
            self.ensure_schema()
            asset = Asset.from_draft(
                draft,
                id=self.generate_id(),
                uploaded_at=codec.today_string(self.clock()),
            )
            with _remote("create asset record"):
                self.source.append_row(self.table_range, codec.encode(asset))
            logger.info("Asset %s created for event %r", asset.id, asset.event)
            return asset

    def list(self, page_size: int = DEFAULT_PAGE_SIZE, offset: str | None = None) -> AssetPage:
        with track_store_operation("list"):
            records, next_offset = window(self._load_sorted(), page_size, offset)
            return AssetPage(records=records, next_offset=next_offset)

    def search(self, criteria: SearchCriteria) -> list[Asset]:
        with track_store_operation("search"):
            return filter_assets(self._load_sorted(), criteria)

    def get(self, asset_id: str) -> Asset | None:
        with track_store_operation("get"):
            for asset in self._load_sorted():
                if asset.id == asset_id:
                    return asset
            return None

    def delete(self, asset_id: str) -> None:
        with track_store_operation("delete"):
            self.ensure_schema()
            with self.lock.hold():
                with _remote("delete asset"):
                    ids = self.source.get_rows(self.id_range)
                offset = next(
                    (i for i, row in enumerate(ids) if row and str(row[0]) == asset_id),
                    None,
                )
                if offset is None:
                    raise AssetNotFound(asset_id)

                with _remote("delete asset"):
                    sheet_id = self.source.sheet_id(self.sheet_name)
                    if sheet_id is None:
                        raise RemoteUnavailable("delete asset", f"sheet {self.sheet_name!r} not found")
                    # Data offset 0 is sheet row 2, i.e. grid index 1 (header is grid index 0).
                    start = offset + 1
                    self.source.delete_row_range(sheet_id, start, start + 1)
            logger.info("Asset %s deleted (sheet row %s)", asset_id, offset + 2)

    def stats(self) -> Stats:
        with track_store_operation("stats"):
            return build_stats(self._load_sorted())

    def check_connection(self) -> str:
        with _remote("connect to Google Sheets"):
            title = self.source.title()
        return f"Connected to Google Sheets successfully. Spreadsheet: {title}"
