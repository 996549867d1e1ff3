import logging
import re
from typing import Dict, Iterable, List, Optional, Tuple, Union

from lensmatch.collectors.zip_dataset import ZIP_PATTERN, ZipDatasetLoader
from lensmatch.models.zipcode import CityAggregate, ZipRecord


logger = logging.getLogger(__name__)

NUMERIC_PATTERN = re.compile(r'[0-9]+')

QUICK_QUERY_MAX_LENGTH = 3
QUICK_RESULT_LIMIT = 10
RESULT_LIMIT = 15

SearchResult = Union[ZipRecord, CityAggregate]


def is_numeric_query(query: str) -> bool:
    return bool(NUMERIC_PATTERN.fullmatch(query))


def match_records(records: Iterable[ZipRecord], query: str) -> List[ZipRecord]:
    """
    Linear scan: zip prefix for numeric queries,
    case-insensitive city substring otherwise
    """
    if is_numeric_query(query):
        return [r for r in records if r.zip.startswith(query)]

    lower_query = query.lower()
    return [r for r in records if lower_query in r.city.lower()]


def aggregate_by_city(records: Iterable[ZipRecord], query: str) -> List[CityAggregate]:
    """
    Group matches by exact city+state text.

    Cities that start with the query come first, then higher
    representative population; ties keep first-seen order.
    """
    lower_query = query.lower()
    cities: Dict[Tuple[str, str], CityAggregate] = {}

    for record in records:
        key = (record.city, record.state)
        if key not in cities:
            cities[key] = CityAggregate.from_record(record)
        cities[key].add(record)

    return sorted(
        cities.values(),
        key=lambda c: (not c.city.lower().startswith(lower_query), -c.representative_population)
    )


def search_records(records: Iterable[ZipRecord], query: str, limit: int = RESULT_LIMIT) -> List[SearchResult]:
    matches = match_records(records, query)
    if is_numeric_query(query):
        return matches[:limit]
    return aggregate_by_city(matches, query)[:limit]


class ZipSearchEngine:
    """
    Zip/city autocomplete over the two-tier dataset.
    Short queries are answered from the quick dataset when it can;
    everything else waits for the full dataset.
    """

    def __init__(self, loader: ZipDatasetLoader = None):
        self.loader = loader or ZipDatasetLoader()

    @property
    def is_ready(self) -> bool:
        return self.loader.is_ready

    @property
    def error(self) -> Optional[str]:
        return self.loader.error

    async def search(self, query: str) -> List[SearchResult]:
        query = (query or '').strip()
        if not query:
            return []

        # Quick tier answers with raw records; city grouping is full-tier only
        if len(query) <= QUICK_QUERY_MAX_LENGTH and self.is_ready:
            results = match_records(self.loader.quick_records, query)[:QUICK_RESULT_LIMIT]
            if results:
                return results

        records = await self.loader.load_full()
        if not records:
            return []

        results = search_records(records, query, limit=RESULT_LIMIT)
        logger.debug(f"Search {query!r}: {len(results)} results")
        return results

    async def validate_zip_code(self, zip_code: str) -> Optional[ZipRecord]:
        if not isinstance(zip_code, str) or not ZIP_PATTERN.fullmatch(zip_code):
            return None

        if self.is_ready:
            record = self.loader.lookup(ZipDatasetLoader.QUICK, zip_code)
            if record:
                return record

        if not await self.loader.ensure_full_loaded():
            return None

        return self.loader.lookup(ZipDatasetLoader.FULL, zip_code)
