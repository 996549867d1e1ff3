from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ZipRecord:
    zip: str
    city: str
    state: str  # two-letter code
    latitude: float = 0.0
    longitude: float = 0.0
    population: int = 0
    state_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ZipRecord":
        """
        Build a record from a dataset entry.
        Accepts both the long and the compact (lat/lng) coordinate keys.
        """
        zip_code = str(data['zip']).strip()
        if len(zip_code) < 5 and zip_code.isdigit():
            zip_code = zip_code.zfill(5)

        latitude = data.get('latitude', data.get('lat'))
        longitude = data.get('longitude', data.get('lng'))

        return cls(
            zip=zip_code,
            city=str(data['city']),
            state=str(data['state']),
            latitude=float(latitude) if latitude not in (None, '') else 0.0,
            longitude=float(longitude) if longitude not in (None, '') else 0.0,
            population=max(0, int(data.get('population') or 0)),
            state_name=data.get('stateName') or data.get('state_name'),
        )

    @property
    def display_name(self) -> str:
        return f"{self.city}, {self.state}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'zip',
            'zip': self.zip,
            'city': self.city,
            'state': self.state,
            'state_name': self.state_name,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'population': self.population,
            'display_name': self.display_name,
        }


@dataclass
class CityAggregate:
    """City-level search result merging every zip of one city+state"""
    city: str
    state: str
    representative_population: int
    latitude: float = 0.0
    longitude: float = 0.0
    all_zips: List[str] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: ZipRecord) -> "CityAggregate":
        return cls(
            city=record.city,
            state=record.state,
            representative_population=record.population,
            latitude=record.latitude,
            longitude=record.longitude,
        )

    @property
    def display_name(self) -> str:
        return f"{self.city}, {self.state}"

    def add(self, record: ZipRecord):
        if record.zip not in self.all_zips:
            self.all_zips.append(record.zip)
        if record.population > self.representative_population:
            self.representative_population = record.population

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'city',
            'city': self.city,
            'state': self.state,
            'display_name': self.display_name,
            'representative_population': self.representative_population,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'all_zips': list(self.all_zips),
        }
