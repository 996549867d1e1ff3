import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parent.parent


@dataclass
class Settings:
    zip_data_base_url: str = "http://localhost:5173/data"
    zip_quick_file: str = "uszips-quick.json"
    zip_full_file: str = "uszips.json"
    zip_fetch_timeout: float = 30.0
    supabase_url: Optional[str] = None
    supabase_service_key: Optional[str] = None
    photographer_tags_path: str = str(PROJECT_ROOT / "config" / "photographer_tags.yaml")

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        return cls(
            zip_data_base_url=os.getenv('ZIP_DATA_BASE_URL', defaults.zip_data_base_url),
            zip_quick_file=os.getenv('ZIP_QUICK_FILE', defaults.zip_quick_file),
            zip_full_file=os.getenv('ZIP_FULL_FILE', defaults.zip_full_file),
            zip_fetch_timeout=float(os.getenv('ZIP_FETCH_TIMEOUT', defaults.zip_fetch_timeout)),
            supabase_url=os.getenv('SUPABASE_URL'),
            supabase_service_key=os.getenv('SUPABASE_SERVICE_KEY'),
            photographer_tags_path=os.getenv('PHOTOGRAPHER_TAGS_PATH', defaults.photographer_tags_path),
        )


settings = Settings.from_env()
