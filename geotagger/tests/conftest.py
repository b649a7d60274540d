"""Shared fixtures: a small slice of the real province/city/district table."""

from __future__ import annotations

import json

import pytest

from geotagger.gazetteer import Gazetteer
from geotagger.resolver import Resolver
from geotagger.tokenizer import GeoTagger

SAMPLE_DIVISIONS = [
    {
        "name": "北京市", "code": "11",
        "childs": [
            {
                "name": "市辖区", "code": "1101",
                "childs": [
                    {"name": "东城区", "code": "110101"},
                    {"name": "朝阳区", "code": "110105"},
                    {"name": "海淀区", "code": "110108"},
                ],
            },
        ],
    },
    {
        "name": "辽宁省", "code": "21",
        "childs": [
            {
                "name": "朝阳市", "code": "2113",
                "childs": [
                    {"name": "市辖区", "code": "211301"},
                    {"name": "双塔区", "code": "211302"},
                ],
            },
        ],
    },
    {
        "name": "吉林省", "code": "22",
        "childs": [
            {
                "name": "长春市", "code": "2201",
                "childs": [
                    {"name": "市辖区", "code": "220101"},
                    {"name": "南关区", "code": "220102"},
                    {"name": "朝阳区", "code": "220104"},
                ],
            },
        ],
    },
    {
        "name": "广东省", "code": "44",
        "childs": [
            {
                "name": "广州市", "code": "4401",
                "childs": [
                    {"name": "天河区", "code": "440106"},
                    {"name": "从化市", "code": "440184"},
                ],
            },
        ],
    },
    {"name": "香港特别行政区", "code": "81", "childs": []},
]


@pytest.fixture(scope="module")
def gazetteer() -> Gazetteer:
    return Gazetteer.from_dicts(SAMPLE_DIVISIONS)


@pytest.fixture(scope="module")
def resolver(gazetteer) -> Resolver:
    return Resolver(gazetteer)


@pytest.fixture(scope="module")
def tagger(resolver) -> GeoTagger:
    return GeoTagger(resolver)


@pytest.fixture
def gazetteer_file(tmp_path):
    path = tmp_path / "pca-code.json"
    path.write_text(json.dumps(SAMPLE_DIVISIONS, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def newspaper_file(tmp_path):
    path = tmp_path / "newspaperList.txt"
    path.write_text("北京日报 11\n长春日报 22\n明报 81\n", encoding="utf-8")
    return path
