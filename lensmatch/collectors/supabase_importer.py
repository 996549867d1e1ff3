import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from supabase import Client, create_client

from lensmatch.collectors.photographer_csv import PREVIEW_TABLE
from lensmatch.config import settings
from lensmatch.models.photographer import PhotographerImport


logger = logging.getLogger(__name__)


@dataclass
class ImportSummary:
    total: int = 0
    imported: int = 0
    failed: int = 0


class PhotographerImporter:
    """
    Batched upsert of preview profiles, keyed on the unique contact email.
    A failing batch is logged and counted; the rest of the import continues.
    """

    def __init__(self, client: Client = None, table: str = PREVIEW_TABLE):
        self._client = client
        self.table = table

    @property
    def client(self) -> Client:
        if self._client is None:
            if not settings.supabase_url or not settings.supabase_service_key:
                raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set to import photographers")
            self._client = create_client(settings.supabase_url, settings.supabase_service_key)
        return self._client

    def upsert(self, photographers: Sequence[PhotographerImport], batch_size: int = 50) -> ImportSummary:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        rows: List[Dict[str, Any]] = [p.to_dict() for p in photographers]
        summary = ImportSummary(total=len(rows))
        if not rows:
            return summary

        client = self.client

        for start in range(0, len(rows), batch_size):
            batch = rows[start:start + batch_size]
            end = start + len(batch)
            try:
                client.table(self.table).upsert(
                    batch, on_conflict='contact_email', ignore_duplicates=False
                ).execute()
            except Exception as e:
                logger.error(f"Batch {start}-{end} failed: {e}")
                summary.failed += len(batch)
                continue

            summary.imported += len(batch)
            logger.info(f"Imported batch {start}-{end}")

        logger.info(f"Import complete: {summary.imported}/{summary.total} imported, {summary.failed} failed")
        return summary

    def count(self) -> int:
        response = self.client.table(self.table).select('*', count='exact', head=True).execute()
        return response.count or 0
