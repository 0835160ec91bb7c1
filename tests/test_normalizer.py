import pytest

from rentintel.normalizer import (
    extract_street_name,
    extract_street_number,
    normalize_address,
    normalize_property_name,
)

ADDRESSES = [
    "222 North Main Street, Springfield, IL",
    "  123 Oak Avenue #4B; ",
    "1 Southwest Parkway Court",
    "55 e. Lake Shore Drive",
    "PO Box 12, Northeast Boulevard",
    "",
    "st ave n",
]


def test_normalize_address_abbreviates_and_strips_punctuation():
    assert normalize_address("222 North Main Street, Springfield") == "222 n main st springfield"
    assert normalize_address("  123 Oak Avenue #4B; ") == "123 oak ave 4b"
    assert normalize_address("1 Southwest Parkway") == "1 sw pkwy"


def test_normalize_address_only_replaces_whole_words():
    assert normalize_address("10 Streeter Lane") == "10 streeter ln"
    assert normalize_address("Northeast Court") == "ne ct"


@pytest.mark.parametrize("address", ADDRESSES)
def test_normalize_address_is_idempotent(address):
    once = normalize_address(address)
    assert normalize_address(once) == once


def test_normalize_empty_input():
    assert normalize_address("") == ""
    assert normalize_address(None) == ""
    assert normalize_property_name(None) == ""
    assert extract_street_number(None) == ""
    assert extract_street_name("") == ""


def test_normalize_property_name_strips_article_and_generic_suffix():
    assert normalize_property_name("The Oakwood Apartments") == "oakwood"
    assert normalize_property_name("Parkside Towers") == "parkside"
    assert normalize_property_name("Lincoln Place") == "lincoln"
    assert normalize_property_name("Harbor   View Commons") == "harbor view"
    assert normalize_property_name("Theater District Lofts") == "theater district lofts"


def test_extract_street_number():
    assert extract_street_number("222 Main St") == "222"
    assert extract_street_number("Main St") == ""
    assert extract_street_number("  2221 Main St") == "2221"


def test_extract_street_name_drops_number_and_city():
    assert extract_street_name("222 Main Street, Springfield, IL") == "main st"
    assert extract_street_name("Main Street") == "main st"
