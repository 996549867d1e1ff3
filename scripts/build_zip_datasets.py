#!/usr/bin/env python3
"""
Download the simplemaps US ZIP database and build the search datasets
Creates public/data/uszips.json (all zips) and uszips-quick.json (top 1000 by population)
"""

import io
import sys
import zipfile
from pathlib import Path

import requests

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from lensmatch.collectors.zip_csv import convert_zip_csv  # noqa: E402

SIMPLEMAPS_URL = "https://simplemaps.com/static/data/us-zips/1.90/basic/simplemaps_uszips_basicv1.90.zip"
DATA_DIR = Path(__file__).resolve().parent.parent / "public" / "data"


def download_zip_csv(url=SIMPLEMAPS_URL):
    """Download the archive and extract uszips.csv"""
    print("Downloading ZIP database...")

    try:
        response = requests.get(url, timeout=60)
        response.raise_for_status()
    except requests.RequestException as e:
        print(f"Error downloading ZIP database: {e}")
        return None

    DATA_DIR.mkdir(parents=True, exist_ok=True)
    csv_file = DATA_DIR / "uszips.csv"

    with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
        name = next((n for n in archive.namelist() if n.endswith("uszips.csv")), None)
        if not name:
            print("Archive does not contain uszips.csv")
            return None
        csv_file.write_bytes(archive.read(name))

    print(f"Downloaded ZIP database to {csv_file}")
    return csv_file


def main():
    """Main processing pipeline"""
    print("ZIP Dataset Builder")
    print("=" * 40)

    if len(sys.argv) > 1:
        csv_file = Path(sys.argv[1])
    else:
        csv_file = download_zip_csv()

    if not csv_file or not csv_file.exists():
        print("No ZIP CSV available")
        sys.exit(1)

    summary = convert_zip_csv(
        csv_file,
        DATA_DIR / "uszips.json",
        DATA_DIR / "uszips-quick.json",
    )

    print("\nProcessing complete!")
    print(f"Full database: {summary['full']} zip codes ({summary['full_bytes'] / 1024 / 1024:.2f} MB)")
    print(f"Quick database: {summary['quick']} zip codes ({summary['quick_bytes'] / 1024:.2f} KB)")


if __name__ == "__main__":
    main()
