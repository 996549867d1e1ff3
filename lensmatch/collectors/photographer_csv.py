import csv
import json
import logging
import random
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from lensmatch.config import settings
from lensmatch.models.photographer import PhotographerImport


logger = logging.getLogger(__name__)

PREVIEW_TABLE = 'photographer_preview_profiles'

# Column order shared by the SQL and CSV exports
COLUMNS = [
    'display_name',
    'contact_email',
    'contact_phone',
    'bio',
    'specialties',
    'languages',
    'years_experience',
    'hourly_rate',
    'location_city',
    'location_state',
    'is_available',
    'is_verified',
    'average_rating',
    'total_reviews',
    'total_bookings',
    'portfolio_images',
]


def split_tags(tags: Optional[str]) -> List[str]:
    if not tags:
        return []
    return [t.strip() for t in tags.lower().split(',')]


class PhotographerCsvConverter:
    """
    Converts the photographer contact export (First Name, Last Name, Email,
    Phone, Tags) into preview-profile rows.
    Location and specialties are derived from the tags through the lookup
    tables in the YAML config; demo stats come from the supplied RNG.
    """

    def __init__(self, config_path: str = None):
        self.config = self._load_config(config_path or settings.photographer_tags_path)
        self.state_names: Dict[str, str] = self.config['state_names']
        self.reserved_tags = set(self.config.get('reserved_tags', []))
        self.verified_tag = self.config.get('verified_tag', 'trainingcompleted')

    def _load_config(self, config_path: str) -> Dict:
        """Load tag lookup tables"""
        with open(config_path, 'r') as f:
            return yaml.safe_load(f)

    def parse_location(self, tags: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
        """
        Returns (state, city). The city is the tag right after the first
        state tag, unless that tag is a reserved one.
        """
        tag_list = split_tags(tags)

        state_index = next(
            (i for i, tag in enumerate(tag_list) if tag in self.state_names), None
        )
        if state_index is None:
            return None, None

        state = self.state_names[tag_list[state_index]]
        city = None
        if state_index + 1 < len(tag_list):
            candidate = tag_list[state_index + 1]
            if candidate and candidate not in self.reserved_tags:
                city = ' '.join(word[:1].upper() + word[1:] for word in candidate.split(' '))

        return state, city

    def parse_specialties(self, tags: Optional[str]) -> List[str]:
        tag_list = split_tags(tags)
        specialties: List[str] = []
        for tag, names in self.config['specialties'].items():
            if tag in tag_list:
                specialties.extend(names)
        return specialties or list(self.config['default_specialties'])

    def is_verified(self, tags: Optional[str]) -> bool:
        return self.verified_tag in (tags or '').lower()

    def build_import(self, row: Dict[str, str], rng: random.Random) -> Optional[PhotographerImport]:
        email = (row.get('Email') or '').strip()
        if not email:
            return None

        tags = row.get('Tags')
        state, city = self.parse_location(tags)
        specialties = self.parse_specialties(tags)
        demo = self.config['demo_values']

        name = f"{row.get('First Name') or ''} {row.get('Last Name') or ''}".strip()
        reviews = rng.randint(1, demo['max_reviews'])
        portfolio_size = rng.choice(demo['portfolio_size'])

        bio = f"Professional {' and '.join(specialties[:2])} services"
        if city:
            bio += f" in {city}"
        if state:
            bio += f", {state}"
        bio += ". Available for weddings, events, and special occasions."

        return PhotographerImport(
            display_name=name or 'Photographer',
            contact_email=email.lower(),
            contact_phone=(row.get('Phone') or '').strip() or None,
            bio=bio,
            specialties=specialties,
            years_experience=rng.randint(1, demo['max_years_experience']),
            hourly_rate=rng.choice(demo['hourly_rates']),
            location_city=city,
            location_state=state,
            is_verified=self.is_verified(tags),
            average_rating=round(4 + rng.random(), 1),
            total_reviews=reviews,
            total_bookings=rng.randrange(demo['max_extra_bookings']) + reviews,
            portfolio_images=rng.sample(self.config['portfolio_images'], portfolio_size),
        )

    def read_csv(self, csv_path: str, rng: random.Random = None) -> List[PhotographerImport]:
        rng = rng or random.Random()
        photographers = []
        skipped = 0

        with open(csv_path, 'r', newline='', encoding='utf-8-sig') as f:
            for row in csv.DictReader(f):
                photographer = self.build_import(row, rng)
                if photographer is None:
                    skipped += 1
                    continue
                photographers.append(photographer)

        logger.info(f"Converted {len(photographers)} photographers from {csv_path} (skipped {skipped} without email)")
        return photographers


def read_photographer_csv(csv_path: str, rng: random.Random = None,
                          config_path: str = None) -> List[PhotographerImport]:
    return PhotographerCsvConverter(config_path).read_csv(csv_path, rng)


def write_json(photographers: List[PhotographerImport], json_path: str) -> Path:
    path = Path(json_path)
    with open(path, 'w') as f:
        json.dump([p.to_dict() for p in photographers], f, indent=2)
    return path


def sql_literal(value: Any) -> str:
    if value is None:
        return 'NULL'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        if not value:
            return 'ARRAY[]::text[]'
        return f"ARRAY[{', '.join(sql_literal(v) for v in value)}]"
    escaped = str(value).replace("'", "''")
    return f"'{escaped}'"


def build_insert_sql(photographers: List[PhotographerImport]) -> str:
    """
    Single multi-row INSERT that upserts on the unique contact email
    """
    lines = [
        '-- Insert all photographers from CSV',
        f'-- Run this after creating the {PREVIEW_TABLE} table',
        '',
        f"INSERT INTO {PREVIEW_TABLE} (",
        '  ' + ', '.join(COLUMNS),
        ') VALUES',
    ]

    rows = []
    for p in photographers:
        data = p.to_dict()
        values = ',\n'.join(f"  {sql_literal(data[column])}" for column in COLUMNS)
        rows.append(f"(\n{values}\n)")

    sql = '\n'.join(lines) + '\n' + ',\n'.join(rows) + '\n'
    sql += 'ON CONFLICT (contact_email) DO UPDATE SET\n'
    sql += '  display_name = EXCLUDED.display_name,\n'
    sql += '  updated_at = NOW();\n'
    return sql


def write_sql(photographers: List[PhotographerImport], sql_path: str) -> Path:
    path = Path(sql_path)
    path.write_text(build_insert_sql(photographers))
    return path


def postgres_array(values: List[str]) -> str:
    quoted = []
    for v in values:
        escaped = str(v).replace('\\', '\\\\').replace('"', '\\"')
        quoted.append(f'"{escaped}"')
    return '{' + ','.join(quoted) + '}'


def csv_value(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (list, tuple)):
        return postgres_array(value)
    return str(value)


def write_postgres_csv(photographers: List[PhotographerImport], csv_path: str) -> Path:
    """CSV for the table editor importer; lists become Postgres array literals"""
    path = Path(csv_path)
    with open(path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(COLUMNS)
        for p in photographers:
            data = p.to_dict()
            writer.writerow([csv_value(data[column]) for column in COLUMNS])
    return path
