import json
import logging
from pathlib import Path
from typing import Dict

import pandas as pd


logger = logging.getLogger(__name__)

QUICK_MIN_POPULATION = 10000
QUICK_MAX_RECORDS = 1000

# simplemaps uszips.csv column -> dataset key
COLUMN_MAP = {
    'zip': 'zip',
    'city': 'city',
    'state_id': 'state',
    'state_name': 'stateName',
    'lat': 'lat',
    'lng': 'lng',
    'population': 'population',
}


def load_zip_csv(csv_path: str) -> pd.DataFrame:
    """
    Read a uszips CSV into the dataset shape, sorted by zip
    """
    df = pd.read_csv(csv_path, dtype={'zip': str}, keep_default_na=False, na_values=[''])

    missing = [c for c in COLUMN_MAP if c not in df.columns]
    if missing:
        raise ValueError(f"ZIP CSV is missing columns: {', '.join(missing)}")

    df = df[list(COLUMN_MAP)].rename(columns=COLUMN_MAP)
    df['zip'] = df['zip'].str.strip().str.zfill(5)
    df['population'] = pd.to_numeric(df['population'], errors='coerce').fillna(0).astype(int)
    df['lat'] = pd.to_numeric(df['lat'], errors='coerce')
    df['lng'] = pd.to_numeric(df['lng'], errors='coerce')

    df = df.dropna(subset=['zip', 'city', 'state'])
    df = df.drop_duplicates(subset='zip', keep='first')
    return df.sort_values('zip', kind='mergesort').reset_index(drop=True)


def select_quick(df: pd.DataFrame, min_population: int = QUICK_MIN_POPULATION,
                 limit: int = QUICK_MAX_RECORDS) -> pd.DataFrame:
    """Highest-population zips for first-keystroke search"""
    major = df[df['population'] > min_population]
    return major.sort_values('population', ascending=False, kind='mergesort').head(limit)


def _write_records(df: pd.DataFrame, path: Path):
    records = json.loads(df.to_json(orient='records'))
    with open(path, 'w') as f:
        json.dump(records, f, separators=(',', ':'))


def convert_zip_csv(csv_path: str, full_path: str, quick_path: str) -> Dict[str, int]:
    df = load_zip_csv(csv_path)
    quick = select_quick(df)

    full_file = Path(full_path)
    quick_file = Path(quick_path)
    full_file.parent.mkdir(parents=True, exist_ok=True)
    quick_file.parent.mkdir(parents=True, exist_ok=True)

    _write_records(df, full_file)
    _write_records(quick, quick_file)

    logger.info(f"Wrote {len(df)} zip codes to {full_file} and {len(quick)} to {quick_file}")
    return {
        'full': len(df),
        'quick': len(quick),
        'full_bytes': full_file.stat().st_size,
        'quick_bytes': quick_file.stat().st_size,
    }
