import pytest

from resolver.models import NormalizedRecord, SourceResult
from resolver.normalizer import (
    clean_name,
    extract_brand,
    extract_colorway,
    extract_model,
    normalize_result,
)


def _result(name, **fields):
    return SourceResult(name=name, returned_id="TEST-1", source_name="sneaks", **fields)


def test_normalize_panda_listing():
    record = normalize_result(_result("Nike Dunk Low Retro White Black Panda", exact_match=True))

    assert record.brand == "Nike"
    assert record.model == "Dunk Low"
    # Everything after "Retro" is taken as the colorway
    assert record.colorway == "White Black Panda"
    assert record.category == "sneakers"
    assert record.name == "Nike Dunk Low Retro White Black Panda"


def test_quoted_colorway_wins():
    record = normalize_result(_result("Air Jordan 4 'White Oreo'"))

    assert record.colorway == "White Oreo"
    assert record.brand == "Jordan"
    assert record.model == "Air Jordan 4"


def test_source_fields_kept_verbatim():
    record = normalize_result(
        _result(
            "Nike Dunk Low Retro White Black Panda",
            brand="NIKE INC",
            colorway="WHITE/BLACK",
            category="lifestyle",
        )
    )

    assert record.brand == "NIKE INC"
    assert record.colorway == "WHITE/BLACK"
    assert record.category == "lifestyle"
    assert record.model == "Dunk Low"


def test_normalize_none_and_nameless_results():
    assert normalize_result(None) == NormalizedRecord()

    record = normalize_result(_result(None))
    assert record.name is None
    assert record.brand is None
    assert record.model is None
    assert record.colorway is None
    assert record.category == "sneakers"


@pytest.mark.parametrize(
    "name, colorway",
    [
        ('Air Jordan 1 "Chicago"', "Chicago"),
        ("Jordan 4 Retro White Oreo (2021)", "White Oreo"),
        ("Jordan 11 Retro Concord 2018", "Concord"),
        ("Nike Air Force 1 Low (Triple White)", "Triple White"),
        ("Nike Dunk High Panda", "Panda"),
        ("adidas Yeezy Boost 350 V2 Zebra", "Zebra"),
        ("Nike Dunk Low (2021)", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_colorway_precedence(name, colorway):
    assert extract_colorway(name) == colorway


@pytest.mark.parametrize(
    "name, model",
    [
        ("Jordan 4 Retro White Oreo (2021)", "Jordan 4 Retro"),
        ("Nike Air Force 1 Low (Triple White)", "Air Force 1 Low"),
        ("Nike Air Max 90 Infrared", "Air Max 90"),
        ("adidas Yeezy Boost 350 V2 Zebra", "Yeezy Boost 350 V2"),
        ("Converse Chuck Taylor All Star", "Chuck Taylor"),
        ("Vans Old Skool Black", "Old Skool"),
        ("Mystery Shoe", None),
    ],
)
def test_extract_model(name, model):
    assert extract_model(name) == model


@pytest.mark.parametrize(
    "name, brand",
    [
        ("Air Jordan 1 Retro High OG", "Jordan"),
        ("Nike Dunk Low", "Nike"),
        ("Dunk Low Panda", "Nike"),
        ("adidas Yeezy Boost 350", "Adidas"),
        ("New Balance 550 White Green", "New Balance"),
        ("ASICS Gel-Lyte III", "Asics"),
        ("Mystery Shoe", None),
    ],
)
def test_extract_brand(name, brand):
    assert extract_brand(name) == brand


def test_clean_name():
    assert clean_name("Air  Jordan 1\tRetro (1985) ") == "Air Jordan 1 Retro"
    assert clean_name("Nike Dunk Low") == "Nike Dunk Low"
    assert clean_name(None) == ""
