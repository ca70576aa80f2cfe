import pytest
from pydantic import ValidationError

from listingmatch.comparables.errors import PropertyParseError
from listingmatch.comparables.models import (
    MatchResult,
    Property,
    PropertyType,
    parse_properties,
    parse_property,
)


def test_parse_form_strings(raw_payload):
    p = parse_property(raw_payload['baseProperty'])
    assert p.listing_name == 'Casa Escazu'
    assert p.property_type is PropertyType.HOUSE
    assert p.bedrooms == 3.0
    assert p.parking_spots == 2.0
    assert p.location() == ('San Jose', 'Escazu', 'San Rafael')


def test_snake_case_names_accepted():
    p = parse_property({
        'listing_name': 'x', 'property_type': 'Apartment', 'bedrooms': 1, 'bathrooms': 1, 'size': 40,
        'amenity_count': 0, 'age': 1, 'parking_spots': 0, 'condition': 3,
    })
    assert p.property_type is PropertyType.APARTMENT
    assert p.price is None


@pytest.mark.parametrize('raw,expected', [
    ('House', PropertyType.HOUSE),
    ('apartment', PropertyType.APARTMENT),
    ('ResidentialLand', PropertyType.RESIDENTIAL_LAND),
    ('Residential land', PropertyType.RESIDENTIAL_LAND),
    ('CommercialIndustrial', PropertyType.COMMERCIAL_INDUSTRIAL),
    ('Commercial/Industrial', PropertyType.COMMERCIAL_INDUSTRIAL),
])
def test_property_type_spellings(raw, expected):
    assert PropertyType.parse(raw) is expected


def test_unknown_property_type(raw_payload):
    raw = dict(raw_payload['baseProperty'], propertyType='Castle')
    with pytest.raises(PropertyParseError) as exc:
        parse_property(raw)
    assert 'propertyType' in exc.value.fields


@pytest.mark.parametrize('field,value', [
    ('bedrooms', ''),
    ('bedrooms', 'three'),
    ('size', '-5'),
    ('size', 'NaN'),
    ('condition', '7'),
])
def test_invalid_numbers_raise_instead_of_nan(raw_payload, field, value):
    raw = dict(raw_payload['baseProperty'], **{field: value})
    with pytest.raises(PropertyParseError) as exc:
        parse_property(raw, index=3)
    assert field in exc.value.fields
    assert exc.value.index == 3
    assert exc.value.listing_name == 'Casa Escazu'
    assert isinstance(exc.value, ValueError)


def test_non_mapping_record():
    with pytest.raises(PropertyParseError):
        parse_property(['not', 'a', 'record'])


def test_age_derived_from_year_built(raw_payload):
    far = parse_property(raw_payload['comparables'][1], reference_year=2024)
    assert far.age == 34
    assert far.year_built == 1990


def test_explicit_age_wins_over_year_built(raw_payload):
    raw = dict(raw_payload['baseProperty'], yearBuilt='1990')
    assert parse_property(raw, reference_year=2024).age == 10


def test_future_year_built_clamps_to_zero(raw_payload):
    raw = dict(raw_payload['comparables'][1], yearBuilt='2030')
    assert parse_property(raw, reference_year=2024).age == 0


def test_missing_age_and_year_built(raw_payload):
    raw = {k: v for k, v in raw_payload['baseProperty'].items() if k != 'age'}
    with pytest.raises(PropertyParseError) as exc:
        parse_property(raw)
    assert 'age' in exc.value.fields


def test_property_is_immutable(base_property):
    with pytest.raises(ValidationError):
        base_property.bedrooms = 9


def test_parse_property_passes_through_instances(base_property):
    assert parse_property(base_property) is base_property


def test_parse_properties_splits_good_and_bad(raw_payload):
    rows = list(raw_payload['comparables']) + [{'propertyType': 'House', 'bedrooms': 'x'}]
    good, bad = parse_properties(rows)
    assert [p.listing_name for p in good] == ['Same', 'Far']
    assert len(bad) == 1
    assert bad[0].index == 2
    assert bad[0].listing_name == 'Listing 3'
    assert 'bedrooms' in bad[0].as_dict()['fields']


def test_parse_properties_default_names(raw_payload):
    row = {k: v for k, v in raw_payload['comparables'][0].items() if k != 'listingName'}
    good, bad = parse_properties([row, row])
    assert not bad
    assert [p.listing_name for p in good] == ['Listing 1', 'Listing 2']


def test_blank_optional_fields(raw_payload):
    raw = dict(raw_payload['baseProperty'], url='', yearBuilt='')
    p = parse_property(raw)
    assert p.url is None
    assert p.year_built is None


def test_blank_price_is_none(raw_payload):
    p = parse_property(dict(raw_payload['baseProperty'], price='  '))
    assert p.price is None


def test_location_whitespace_is_kept(raw_payload):
    raw = dict(raw_payload['baseProperty'], province='San Jose ', listingName=' Casa ', bedrooms=' 3 ')
    p = parse_property(raw)
    assert p.province == 'San Jose '
    assert p.listing_name == 'Casa'
    assert p.bedrooms == 3.0


def test_to_record_round_trips_aliases(base_property):
    record = base_property.to_record()
    assert record['listingName'] == 'Base Property'
    assert record['propertyType'] == 'House'
    assert Property.model_validate(record) == base_property


def test_match_result_as_dict():
    r = MatchResult('L', 72.52747, 65.25, 68.888735)
    assert r.as_dict() == {'listingName': 'L', 'primaryScore': 72.53, 'secondaryScore': 65.25, 'finalScore': 68.89}
