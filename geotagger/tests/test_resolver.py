"""
Tests for direct and suffix-augmented gazetteer resolution.
"""

from __future__ import annotations

import pytest

from geotagger.gazetteer import Gazetteer
from geotagger.resolver import RecognitionContext, Resolver


@pytest.fixture
def ctx():
    return RecognitionContext()


class TestDirectResolution:
    def test_unique_province_recorded(self, resolver, ctx):
        assert resolver.resolve("北京市", None, ctx) == "11"
        assert ctx.provinces == {"11"}
        assert ctx.cities == set()

    def test_unique_city_recorded(self, resolver, ctx):
        assert resolver.resolve("长春市", None, ctx) == "2201"
        assert ctx.cities == {"2201"}

    def test_unique_district_recorded_as_city_context(self, resolver, ctx):
        assert resolver.resolve("南关区", None, ctx) == "220102"
        assert ctx.cities == {"220102"}

    def test_ambiguous_resolved_by_origin(self, resolver, ctx):
        assert resolver.resolve("朝阳区", "11", ctx) == "110105"
        assert resolver.resolve("朝阳区", "22", ctx) == "220104"
        assert resolver.resolve("朝阳区", "2201", ctx) == "220104"

    def test_ambiguous_resolution_does_not_record(self, resolver, ctx):
        resolver.resolve("朝阳区", "11", ctx)
        assert ctx.provinces == set()
        assert ctx.cities == set()

    def test_ambiguous_without_evidence_fails(self, resolver, ctx):
        assert resolver.resolve("朝阳区", "44", ctx) is None
        assert resolver.resolve("朝阳区", None, ctx) is None
        assert ctx.provinces == set()
        assert ctx.cities == set()

    def test_ambiguous_resolved_by_city_context(self, resolver, ctx):
        ctx.cities.add("2201")
        assert resolver.resolve("朝阳区", None, ctx) == "220104"

    def test_city_level_candidate_uses_province_context(self, resolver, ctx):
        # Beijing's districts hang directly off the province (level 2)
        ctx.provinces.add("11")
        assert resolver.resolve("朝阳区", None, ctx) == "110105"

    def test_origin_beats_context(self, resolver, ctx):
        ctx.cities.add("2201")
        assert resolver.resolve("朝阳区", "11", ctx) == "110105"

    def test_empty_origin_treated_as_missing(self, resolver, ctx):
        assert resolver.resolve("朝阳区", "", ctx) is None

    def test_district_under_city_scenario(self, ctx):
        gazetteer = Gazetteer.from_dicts([
            {"name": "北京市", "code": "11", "childs": [
                {"name": "北京城区", "code": "1100", "childs": [
                    {"name": "朝阳区", "code": "110005"},
                ]},
            ]},
            {"name": "吉林省", "code": "22", "childs": [
                {"name": "长春", "code": "2200", "childs": [
                    {"name": "朝阳区", "code": "220004"},
                ]},
            ]},
        ])
        resolver = Resolver(gazetteer)
        ctx.provinces.add("11")
        assert resolver.resolve("朝阳区", "11", ctx) == "110005"
        assert resolver.resolve("朝阳区", "99", RecognitionContext()) is None


class TestSuffixResolution:
    def test_municipal_suffix(self, resolver, ctx):
        assert resolver.resolve("北京", None, ctx) == "11"
        assert ctx.provinces == {"11"}

    def test_city_suffix(self, resolver, ctx):
        assert resolver.resolve("长春", None, ctx) == "2201"

    def test_first_hit_kept_when_later_hit_ambiguous(self, resolver, ctx):
        # 朝阳市 (Liaoning) resolves; 朝阳区 stays ambiguous
        assert resolver.resolve("朝阳", None, ctx) == "2113"
        assert ctx.cities == {"2113"}

    def test_origin_hit_overrides_earlier_hit(self, resolver, ctx):
        assert resolver.resolve("朝阳", "11", ctx) == "110105"

    def test_unconfirmed_district_rejected(self, resolver, ctx):
        assert resolver.resolve("天河", None, ctx) is None

    def test_district_confirmed_by_province_context(self, resolver, ctx):
        ctx.provinces.add("44")
        assert resolver.resolve("天河", None, ctx) == "440106"

    def test_district_confirmed_by_city_context(self, resolver, ctx):
        ctx.cities.add("4401")
        assert resolver.resolve("天河", None, ctx) == "440106"

    def test_district_in_origin_region(self, resolver, ctx):
        assert resolver.resolve("天河", "44", ctx) == "440106"

    def test_county_level_city_rejected_at_municipal_tier(self, resolver, ctx):
        # 从化市 has a district-length code although it ends in 市
        assert resolver.resolve("从化", None, ctx) is None

    def test_county_level_city_in_origin_region(self, resolver, ctx):
        assert resolver.resolve("从化", "44", ctx) == "440184"

    def test_no_candidate(self, resolver, ctx):
        assert resolver.resolve("火星", None, ctx) is None
        assert resolver.resolve("火星", "11", ctx) is None


class TestRecognitionContext:
    def test_reset(self, gazetteer):
        ctx = RecognitionContext()
        ctx.record(gazetteer.lookup("北京市")[0])
        ctx.record(gazetteer.lookup("长春市")[0])
        assert ctx.provinces == {"11"}
        assert ctx.cities == {"2201"}
        ctx.reset()
        assert ctx.provinces == set()
        assert ctx.cities == set()
