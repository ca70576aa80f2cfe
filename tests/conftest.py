import pytest
import sys
from pathlib import Path

# Ensure src layout importable without an editable install
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / 'src'
sp = str(SRC)
if sp not in sys.path:
    sys.path.insert(0, sp)

from listingmatch.comparables.models import Property  # noqa: E402
from listingmatch.config.settings import Settings, reset_settings  # noqa: E402


def _make_property(**overrides):
    """Base listing from the evaluation form defaults, with field overrides."""
    data = {
        'listingName': 'Base Property',
        'propertyType': 'House',
        'bedrooms': 4,
        'bathrooms': 2,
        'price': 350000,
        'size': 500,
        'amenityCount': 10,
        'age': 5,
        'parkingSpots': 3,
        'condition': 4,
        'province': 'Province A',
        'canton': 'Canton A',
        'district': 'District A',
    }
    data.update(overrides)
    return Property.model_validate(data)


@pytest.fixture()
def make_property():
    return _make_property


@pytest.fixture()
def base_property():
    return _make_property()


@pytest.fixture()
def form_comparables():
    """The four sample comparables shipped with the evaluation form."""
    make_property = _make_property
    return [
        make_property(listingName='Listing 1'),
        make_property(listingName='Listing 2', bedrooms=5, bathrooms=3, price=360000, size=600,
                      amenityCount=7, parkingSpots=2, district='District B'),
        make_property(listingName='Listing 3', propertyType='Apartment', bedrooms=3, bathrooms=3,
                      price=360000, size=400, amenityCount=8, age=6, parkingSpots=1, condition=2),
        make_property(listingName='Listing 4', propertyType='Apartment', bedrooms=2, bathrooms=1,
                      price=360000, size=100),
    ]


@pytest.fixture()
def raw_payload():
    """API/CLI body as the listing form posts it (numbers as strings)."""
    return {
        'baseProperty': {
            'listingName': 'Casa Escazu', 'propertyType': 'House', 'bedrooms': '3', 'bathrooms': '2',
            'price': '250000', 'size': '200', 'amenityCount': '6', 'age': '10', 'parkingSpots': '2',
            'condition': '3', 'province': 'San Jose', 'canton': 'Escazu', 'district': 'San Rafael',
        },
        'comparables': [
            {'listingName': 'Same', 'propertyType': 'House', 'bedrooms': '3', 'bathrooms': '2',
             'price': '240000', 'size': '200', 'amenityCount': '6', 'age': '10', 'parkingSpots': '2',
             'condition': '3', 'province': 'San Jose', 'canton': 'Escazu', 'district': 'San Rafael'},
            {'listingName': 'Far', 'propertyType': 'Apartment', 'bedrooms': '1', 'bathrooms': '1',
             'price': '90000', 'size': '60', 'amenityCount': '2', 'yearBuilt': '1990', 'parkingSpots': '1',
             'condition': '2', 'province': 'Heredia', 'canton': 'Belen', 'district': 'La Ribera'},
        ],
    }


@pytest.fixture()
def settings(tmp_path):
    reset_settings()
    yield Settings(EXPORT_DIR=tmp_path / 'exports')
    reset_settings()


@pytest.fixture()
def client(settings):
    from listingmatch.app import create_app

    app = create_app(settings)
    app.config['TESTING'] = True
    return app.test_client()
