"""File-backed product catalog store.

商品数据来自一个目录下的 JSON 文件（每个文件是 ``{"products": [...]}`` 信封）。

- load(): 按文件名顺序读取全部文件，任一文件失败则整体失败
- start(): 首次加载（失败时以空目录降级启动），随后按固定间隔后台刷新
- current(): 返回当前快照；刷新时只做一次引用替换，读者不会看到半更新状态
"""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError

from src.core.config import DEFAULT_RELOAD_INTERVAL
from src.core.infrastructure.logging import BusinessEvents
from src.modules.catalog.domain.entities import CatalogSnapshot, Product
from src.modules.catalog.domain.exceptions import (
    CatalogLoadError,
    CatalogParseError,
    CatalogReadError,
)


class ProductListDocument(BaseModel):
    """Envelope of one product file."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    products: tuple[Product, ...] = ()


@dataclass(frozen=True)
class CatalogStoreStatus:
    """Observable state of the store (for health checks)."""

    product_count: int
    loaded_at: datetime | None
    last_error: str | None
    consecutive_failures: int
    running: bool


def normalize_reload_interval(interval: float | None) -> float:
    if interval is None or interval <= 0:
        return float(DEFAULT_RELOAD_INTERVAL)
    return float(interval)


class CatalogStore:
    """Owns the freshest successfully parsed product snapshot."""

    def __init__(
        self,
        products_dir: Path,
        *,
        file_extension: str = ".json",
        reload_interval: float | None = None,
    ) -> None:
        self._products_dir = products_dir
        self._file_extension = file_extension
        self._reload_interval = normalize_reload_interval(reload_interval)

        # 锁只保护快照引用的替换与读取
        self._lock = threading.Lock()
        self._snapshot = CatalogSnapshot()
        self._has_loaded = False

        self._last_error: str | None = None
        self._consecutive_failures = 0

        self._task: asyncio.Task[None] | None = None
        self._stop_event: asyncio.Event | None = None

    @property
    def products_dir(self) -> Path:
        return self._products_dir

    @property
    def reload_interval(self) -> float:
        return self._reload_interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def status(self) -> CatalogStoreStatus:
        snapshot = self.current()
        return CatalogStoreStatus(
            product_count=len(snapshot),
            loaded_at=snapshot.loaded_at if self._has_loaded else None,
            last_error=self._last_error,
            consecutive_failures=self._consecutive_failures,
            running=self.running,
        )

    def current(self) -> CatalogSnapshot:
        """Return the latest installed snapshot."""
        with self._lock:
            return self._snapshot

    def load(self) -> CatalogSnapshot:
        """Read and parse every eligible file into a new snapshot.

        Raises:
            CatalogReadError: 目录无法列出或文件无法读取
            CatalogParseError: 文件内容不符合 schema
        """
        paths = self._list_product_files()
        products: list[Product] = []
        for path in paths:
            products.extend(self._read_product_file(path))

        logger.info(f"Loaded {len(products)} products from {len(paths)} files")
        BusinessEvents.catalog_loaded(
            product_count=len(products),
            file_count=len(paths),
            products_dir=str(self._products_dir),
        )
        return CatalogSnapshot(products=tuple(products))

    async def start(self, interval: float | None = None) -> None:
        """Initial load, then arm the periodic reload task."""
        if self._task is not None:
            return
        if interval is not None:
            self._reload_interval = normalize_reload_interval(interval)

        logger.info("Loading Product Catalog...")
        try:
            snapshot = await asyncio.to_thread(self.load)
        except CatalogLoadError as e:
            self._record_failure(e)
            if self._has_loaded:
                # 重启时保留已有快照，按刷新失败处理
                logger.error(f"Error reading product files: {e}")
                BusinessEvents.catalog_reload_failed(
                    error=str(e),
                    consecutive_failures=self._consecutive_failures,
                )
            else:
                # 降级启动：以空目录继续提供服务，而不是拒绝启动
                logger.warning(
                    f"Error reading product files: {e}. Starting with an empty catalog."
                )
                BusinessEvents.catalog_degraded_start(error=str(e))
                self._install(CatalogSnapshot(), loaded=False)
        else:
            self._install(snapshot)
            self._record_success()

        logger.info(f"Product Catalog reload interval: {self._reload_interval}s")
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(
            self._run(self._stop_event), name="product-catalog-reload"
        )

    async def stop(self) -> None:
        """Signal the reload task to stop and wait for it."""
        if self._task is None or self._stop_event is None:
            return
        self._stop_event.set()
        await self._task
        self._task = None
        self._stop_event = None

    async def reload(self) -> bool:
        """Run one refresh tick. Returns True when a new snapshot was installed."""
        logger.info("Reloading Product Catalog...")
        try:
            snapshot = await asyncio.to_thread(self.load)
        except CatalogLoadError as e:
            self._record_failure(e)
            logger.error(f"Error reading product files: {e}")
            BusinessEvents.catalog_reload_failed(
                error=str(e),
                consecutive_failures=self._consecutive_failures,
            )
            return False

        self._install(snapshot)
        self._record_success()
        return True

    async def _run(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self._reload_interval)
            except TimeoutError:
                try:
                    await self.reload()
                except Exception:
                    logger.exception("Unexpected error while reloading product catalog")

    def _install(self, snapshot: CatalogSnapshot, *, loaded: bool = True) -> None:
        with self._lock:
            self._snapshot = snapshot
        # 只有成功加载的快照才算数，降级启动的空快照不算
        self._has_loaded = self._has_loaded or loaded

    def _record_success(self) -> None:
        self._last_error = None
        self._consecutive_failures = 0

    def _record_failure(self, error: Exception) -> None:
        self._last_error = str(error)
        self._consecutive_failures += 1

    def _list_product_files(self) -> list[Path]:
        try:
            entries = sorted(self._products_dir.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise CatalogReadError(
                f"Cannot list products directory {self._products_dir}: {e}"
            ) from e
        return [path for path in entries if path.name.endswith(self._file_extension)]

    @staticmethod
    def _read_product_file(path: Path) -> tuple[Product, ...]:
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise CatalogReadError(f"Cannot read product file {path}: {e}") from e

        try:
            document = ProductListDocument.model_validate_json(raw)
        except ValidationError as e:
            raise CatalogParseError(f"Invalid product file {path.name}: {e}") from e
        return document.products
