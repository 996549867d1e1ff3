from dataclasses import dataclass, field, asdict
from typing import Any, Dict, FrozenSet, Iterable, List, Optional


DEFAULT_LANGUAGES = ['English']
DEFAULT_RATING = 4.5


@dataclass
class ProfileRecord:
    id: str
    bio: str = ''
    display_name: str = 'Photographer'
    specialties: List[str] = field(default_factory=list)
    languages: List[str] = field(default_factory=lambda: list(DEFAULT_LANGUAGES))
    years_experience: int = 0
    hourly_rate: float = 0.0
    location_city: Optional[str] = None
    location_state: Optional[str] = None
    average_rating: float = 0.0
    total_reviews: int = 0
    total_bookings: int = 0
    portfolio_images: List[str] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ProfileRecord":
        """
        Build a listing from a photographer_preview_profiles row
        """
        return cls(
            id=str(row['id']),
            bio=row.get('bio') or '',
            display_name=row.get('display_name') or 'Photographer',
            specialties=list(row.get('specialties') or []),
            languages=list(row.get('languages') or DEFAULT_LANGUAGES),
            years_experience=int(row.get('years_experience') or 0),
            hourly_rate=float(row.get('hourly_rate') or 0),
            location_city=row.get('location_city'),
            location_state=row.get('location_state'),
            average_rating=float(row.get('average_rating') or DEFAULT_RATING),
            total_reviews=int(row.get('total_reviews') or 0),
            total_bookings=int(row.get('total_bookings') or 0),
            portfolio_images=list(row.get('portfolio_images') or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PriceRange:
    minimum: float
    maximum: Optional[float] = None  # None means no upper edge

    @classmethod
    def parse(cls, tag: Optional[str]) -> Optional["PriceRange"]:
        """
        Parse a range tag such as "100-200" or "500+".
        Returns None for "all" or an empty tag.
        """
        if tag is None:
            return None
        tag = tag.strip()
        if not tag or tag.lower() == 'all':
            return None

        parts = [part.strip() for part in tag.split('-')]
        try:
            if len(parts) == 1 and parts[0].endswith('+'):
                return cls(minimum=float(parts[0][:-1]))
            if len(parts) == 2 and parts[1].endswith('+'):
                return cls(minimum=float(parts[0]))
            if len(parts) == 2:
                minimum, maximum = float(parts[0]), float(parts[1])
                if maximum < minimum:
                    raise ValueError(f"Price range upper edge below lower edge: {tag!r}")
                return cls(minimum=minimum, maximum=maximum)
        except ValueError as e:
            raise ValueError(f"Invalid price range {tag!r}: {e}") from e

        raise ValueError(f"Invalid price range {tag!r}")

    def contains(self, rate: float) -> bool:
        if rate < self.minimum:
            return False
        return self.maximum is None or rate <= self.maximum

    @property
    def label(self) -> str:
        if self.maximum is None:
            return f"${self.minimum:,.0f}+/hr"
        return f"${self.minimum:,.0f}-${self.maximum:,.0f}/hr"


@dataclass(frozen=True)
class FilterConfig:
    """
    User-selected narrowing criteria.
    None or an empty set means the dimension is not configured.
    """
    min_rating: Optional[float] = None
    price_range: Optional[PriceRange] = None
    specialties: FrozenSet[str] = frozenset()
    languages: FrozenSet[str] = frozenset()
    location: Optional[str] = None

    @classmethod
    def from_ui(cls, rating: float = 0, price_range: Optional[str] = 'all',
                specialties: Iterable[str] = (), languages: Iterable[str] = (),
                zip: Optional[str] = '') -> "FilterConfig":
        """Translate the browse page's sentinel values into absent dimensions"""
        location = (zip or '').strip()
        return cls(
            min_rating=float(rating) if rating and rating > 0 else None,
            price_range=PriceRange.parse(price_range),
            specialties=frozenset(s for s in specialties if s),
            languages=frozenset(lang for lang in languages if lang),
            location=location or None,
        )

    @property
    def active_count(self) -> int:
        return (
            len(self.specialties) +
            len(self.languages) +
            (1 if self.min_rating is not None else 0) +
            (1 if self.price_range is not None else 0)
        )

    @property
    def is_empty(self) -> bool:
        return self.active_count == 0 and self.location is None


@dataclass
class PhotographerImport:
    """Row derived from one line of the photographer contact CSV"""
    display_name: str
    contact_email: str
    bio: str
    specialties: List[str]
    hourly_rate: int
    years_experience: int
    average_rating: float
    total_reviews: int
    total_bookings: int
    portfolio_images: List[str]
    contact_phone: Optional[str] = None
    languages: List[str] = field(default_factory=lambda: list(DEFAULT_LANGUAGES))
    location_city: Optional[str] = None
    location_state: Optional[str] = None
    is_available: bool = True
    is_verified: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
