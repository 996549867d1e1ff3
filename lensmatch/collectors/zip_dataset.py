import asyncio
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

import requests

from lensmatch.config import settings
from lensmatch.models.zipcode import ZipRecord


logger = logging.getLogger(__name__)

ZIP_PATTERN = re.compile(r'[0-9]{5}')


class ZipDatasetLoader:
    """
    Two-tier cache of postal-code records fetched over HTTP.

    The quick dataset (highest-population zips) is fetched by initialize();
    the full dataset is fetched once, on demand, by load_full(). Concurrent
    callers share the in-flight fetch and get the same cached tuple.
    Failures never raise: the caller gets an empty tuple and `error` is set.
    """

    QUICK = 'quick'
    FULL = 'full'

    def __init__(self, base_url: str = None, quick_file: str = None,
                 full_file: str = None, timeout: float = None,
                 session: requests.Session = None):
        self.base_url = (base_url or settings.zip_data_base_url).rstrip('/')
        self.files = {
            self.QUICK: quick_file or settings.zip_quick_file,
            self.FULL: full_file or settings.zip_full_file,
        }
        self.timeout = timeout or settings.zip_fetch_timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': 'LensMatch/1.0 (zip search)',
            'Accept': 'application/json',
        })

        self.error: Optional[str] = None
        self._datasets: Dict[str, Tuple[ZipRecord, ...]] = {}
        self._indexes: Dict[str, Dict[str, ZipRecord]] = {}
        self._inflight: Dict[str, asyncio.Task] = {}

    @property
    def is_ready(self) -> bool:
        """True once the quick dataset is resident"""
        return self.QUICK in self._datasets

    @property
    def is_full_loaded(self) -> bool:
        return self.FULL in self._datasets

    @property
    def is_loading(self) -> bool:
        return bool(self._inflight)

    @property
    def quick_records(self) -> Tuple[ZipRecord, ...]:
        return self._datasets.get(self.QUICK, ())

    def lookup(self, kind: str, zip_code: str) -> Optional[ZipRecord]:
        return self._indexes.get(kind, {}).get(zip_code)

    def url_for(self, kind: str) -> str:
        return f"{self.base_url}/{self.files[kind]}"

    async def initialize(self) -> Tuple[ZipRecord, ...]:
        return await self._load(self.QUICK)

    async def load_full(self) -> Tuple[ZipRecord, ...]:
        return await self._load(self.FULL)

    async def ensure_full_loaded(self) -> bool:
        records = await self.load_full()
        return bool(records)

    async def _load(self, kind: str) -> Tuple[ZipRecord, ...]:
        cached = self._datasets.get(kind)
        if cached is not None:
            return cached

        task = self._inflight.get(kind)
        if task is None:
            task = asyncio.ensure_future(self._fetch(kind))
            self._inflight[kind] = task

        # A cancelled waiter must not cancel the fetch other callers share
        return await asyncio.shield(task)

    async def _fetch(self, kind: str) -> Tuple[ZipRecord, ...]:
        url = self.url_for(kind)
        logger.info(f"Fetching {kind} zip dataset from {url}")

        try:
            payload = await asyncio.to_thread(self._get_json, url)
            records = self._parse_records(payload, sort_by_zip=(kind == self.FULL))
        except Exception as e:
            self.error = f"Failed to load {kind} zip database: {e}"
            logger.error(self.error)
            return ()
        finally:
            self._inflight.pop(kind, None)

        self._datasets[kind] = records
        self._indexes[kind] = {record.zip: record for record in records}
        self.error = None

        logger.info(f"Loaded {len(records)} zip codes ({kind})")
        return records

    def _get_json(self, url: str) -> Any:
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def _parse_records(self, payload: Any, sort_by_zip: bool) -> Tuple[ZipRecord, ...]:
        if not isinstance(payload, list):
            raise ValueError(f"Expected a JSON array, got {type(payload).__name__}")

        records: List[ZipRecord] = []
        seen = set()
        skipped = 0
        duplicates = 0

        for item in payload:
            try:
                record = ZipRecord.from_dict(item)
            except (KeyError, TypeError, ValueError):
                skipped += 1
                continue

            if not ZIP_PATTERN.fullmatch(record.zip):
                skipped += 1
                continue

            if record.zip in seen:
                duplicates += 1
                continue

            seen.add(record.zip)
            records.append(record)

        if skipped:
            logger.warning(f"Skipped {skipped} malformed zip records")
        if duplicates:
            logger.warning(f"Dropped {duplicates} duplicate zip records")

        if sort_by_zip:
            records.sort(key=lambda r: r.zip)

        return tuple(records)
