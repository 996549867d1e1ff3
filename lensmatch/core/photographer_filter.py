import logging
from typing import Callable, List, Sequence

from lensmatch.models.photographer import FilterConfig, ProfileRecord


logger = logging.getLogger(__name__)

ProfilePredicate = Callable[[ProfileRecord], bool]


def _matches_specialties(profile: ProfileRecord, wanted) -> bool:
    own = [s.lower() for s in profile.specialties]
    return any(w.lower() in s for w in wanted for s in own)


def _matches_location(profile: ProfileRecord, term: str) -> bool:
    term = term.lower()
    city = (profile.location_city or '').lower()
    state = (profile.location_state or '').lower()
    return term in city or term in state


def build_predicates(config: FilterConfig) -> List[ProfilePredicate]:
    """
    One predicate per configured dimension.
    Unconfigured dimensions contribute nothing.
    """
    predicates: List[ProfilePredicate] = []

    if config.min_rating is not None:
        min_rating = config.min_rating
        predicates.append(lambda p: p.average_rating >= min_rating)

    if config.price_range is not None:
        price_range = config.price_range
        predicates.append(lambda p: price_range.contains(p.hourly_rate))

    if config.specialties:
        specialties = config.specialties
        predicates.append(lambda p: _matches_specialties(p, specialties))

    if config.languages:
        languages = config.languages
        predicates.append(lambda p: any(lang in languages for lang in p.languages))

    if config.location:
        location = config.location
        predicates.append(lambda p: _matches_location(p, location))

    return predicates


def apply_filters(profiles: Sequence[ProfileRecord], *configs: FilterConfig) -> List[ProfileRecord]:
    """
    Narrow profiles by every config given (AND across dimensions and configs).
    Returns a new list in input order; the source is left untouched.
    """
    predicates: List[ProfilePredicate] = []
    for config in configs:
        predicates.extend(build_predicates(config))

    filtered = [p for p in profiles if all(check(p) for check in predicates)]
    logger.debug(f"Filtered {len(profiles)} profiles down to {len(filtered)}")
    return filtered


def filter_profiles(profiles: Sequence[ProfileRecord], config: FilterConfig) -> List[ProfileRecord]:
    return apply_filters(profiles, config)
