# =============================================================================
# tests/test_photographer_filter.py - Photographer Filter Pipeline Tests
# =============================================================================

import itertools

import pytest

from lensmatch.core.photographer_filter import apply_filters, build_predicates, filter_profiles
from lensmatch.models.photographer import FilterConfig, PriceRange, ProfileRecord


def ids(profiles):
    return [p.id for p in profiles]


# =============================================================================
# Price ranges
# =============================================================================

class TestPriceRange:

    @pytest.mark.parametrize("tag", ["all", "ALL", "", "  ", None])
    def test_unconfigured_tags(self, tag):
        assert PriceRange.parse(tag) is None

    @pytest.mark.parametrize("tag,expected", [
        ("0-150", PriceRange(0, 150)),
        ("150-300", PriceRange(150, 300)),
        ("300-500", PriceRange(300, 500)),
        ("500+", PriceRange(500, None)),
        ("1000+", PriceRange(1000, None)),
    ])
    def test_parse(self, tag, expected):
        assert PriceRange.parse(tag) == expected

    @pytest.mark.parametrize("tag", ["cheap", "100-", "-100", "300-100", "1-2-3"])
    def test_malformed_tags_raise(self, tag):
        with pytest.raises(ValueError):
            PriceRange.parse(tag)

    def test_edges_are_inclusive(self):
        price = PriceRange(150, 300)
        assert price.contains(150)
        assert price.contains(300)
        assert not price.contains(149.99)
        assert not price.contains(301)

    def test_labels(self):
        assert PriceRange(500).label == "$500+/hr"
        assert PriceRange(150, 300).label == "$150-$300/hr"


# =============================================================================
# Filter configuration
# =============================================================================

class TestFilterConfig:

    def test_ui_sentinels_mean_no_filter(self):
        config = FilterConfig.from_ui(rating=0, price_range="all", specialties=[], languages=[], zip="")

        assert config.is_empty
        assert config.min_rating is None
        assert config.price_range is None
        assert config.location is None
        assert build_predicates(config) == []

    def test_ui_values(self):
        config = FilterConfig.from_ui(
            rating=4, price_range="150-300", specialties=["Wedding"], languages=["Spanish"], zip=" Austin "
        )

        assert config.min_rating == 4.0
        assert config.price_range == PriceRange(150, 300)
        assert config.specialties == frozenset({"Wedding"})
        assert config.location == "Austin"
        assert config.active_count == 4

    def test_ui_rejects_bad_price_tag(self):
        with pytest.raises(ValueError):
            FilterConfig.from_ui(price_range="lots")


# =============================================================================
# Pipeline
# =============================================================================

class TestFilterProfiles:

    def test_price_500_plus_scenario(self):
        records = [ProfileRecord(id=str(rate), hourly_rate=rate) for rate in (300, 500, 600)]

        result = filter_profiles(records, FilterConfig.from_ui(price_range="500+"))

        assert [p.hourly_rate for p in result] == [500, 600]

    def test_empty_config_passes_everything(self, profiles):
        result = filter_profiles(profiles, FilterConfig())

        assert result == profiles
        assert result is not profiles

    def test_minimum_rating(self, profiles):
        result = filter_profiles(profiles, FilterConfig(min_rating=4.5))
        assert ids(result) == ["1", "3", "5"]

    def test_price_range(self, profiles):
        result = filter_profiles(profiles, FilterConfig(price_range=PriceRange(150, 300)))
        assert ids(result) == ["1", "2"]

    def test_specialties_match_any_case_insensitive_substring(self, profiles):
        config = FilterConfig(specialties=frozenset({"wedding", "Corporate"}))
        assert ids(filter_profiles(profiles, config)) == ["1", "3", "4"]

    def test_portrait_matches_inside_longer_specialty(self, profiles):
        config = FilterConfig(specialties=frozenset({"Portrait"}))
        assert ids(filter_profiles(profiles, config)) == ["1", "5"]

    def test_languages_match_any(self, profiles):
        config = FilterConfig(languages=frozenset({"Spanish", "Hindi"}))
        assert ids(filter_profiles(profiles, config)) == ["1", "4"]

    def test_location_matches_city_or_state(self, profiles):
        assert ids(filter_profiles(profiles, FilterConfig(location="california"))) == ["1", "5"]
        assert ids(filter_profiles(profiles, FilterConfig(location="rock"))) == ["3"]
        assert ids(filter_profiles(profiles, FilterConfig(location="KANSAS"))) == ["3", "4"]

    def test_dimensions_combine_with_and(self, profiles):
        config = FilterConfig(
            min_rating=4.5,
            languages=frozenset({"English"}),
            location="California",
        )
        assert ids(filter_profiles(profiles, config)) == ["1", "5"]

        config = FilterConfig(min_rating=4.5, price_range=PriceRange(500))
        assert ids(filter_profiles(profiles, config)) == ["3"]

    def test_no_matches_is_empty_list(self, profiles):
        config = FilterConfig(min_rating=5.0, price_range=PriceRange(0, 50))
        assert filter_profiles(profiles, config) == []

    def test_source_list_untouched(self, profiles):
        before = list(profiles)

        filter_profiles(profiles, FilterConfig(min_rating=4.8))

        assert profiles == before

    def test_order_preserved(self, profiles):
        reversed_profiles = list(reversed(profiles))
        result = filter_profiles(reversed_profiles, FilterConfig(languages=frozenset({"English"})))
        assert ids(result) == ["5", "3", "2", "1"]


class TestComposition:

    CONFIGS = [
        FilterConfig(min_rating=4.5),
        FilterConfig(price_range=PriceRange(100, 500)),
        FilterConfig(specialties=frozenset({"Wedding"})),
        FilterConfig(specialties=frozenset({"Portrait"})),
        FilterConfig(languages=frozenset({"English"})),
        FilterConfig(location="ca"),
        FilterConfig(),
    ]

    def test_sequential_filters_equal_combined(self, profiles):
        for first, second in itertools.product(self.CONFIGS, repeat=2):
            sequential = filter_profiles(filter_profiles(profiles, first), second)
            assert sequential == apply_filters(profiles, first, second)

    def test_filters_commute(self, profiles):
        for first, second in itertools.combinations(self.CONFIGS, 2):
            forward = filter_profiles(filter_profiles(profiles, first), second)
            backward = filter_profiles(filter_profiles(profiles, second), first)
            assert forward == backward

    def test_same_dimension_twice_narrows(self, profiles):
        wedding = FilterConfig(specialties=frozenset({"Wedding"}))
        portrait = FilterConfig(specialties=frozenset({"Portrait"}))

        assert ids(apply_filters(profiles, wedding, portrait)) == ["1"]


class TestProfileRecord:

    def test_from_row_defaults(self):
        profile = ProfileRecord.from_row({
            "id": 42,
            "display_name": "Jo",
            "hourly_rate": 175,
            "specialties": None,
            "languages": None,
            "average_rating": None,
        })

        assert profile.id == "42"
        assert profile.languages == ["English"]
        assert profile.average_rating == 4.5
        assert profile.specialties == []
        assert profile.total_reviews == 0
        assert profile.hourly_rate == 175.0
