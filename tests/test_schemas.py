import pytest
from pydantic import ValidationError as PydanticValidationError

from recipe_voyage.schemas import (
    AncestryStepIn,
    DecorativeFont,
    GeoLocation,
    RecipePatch,
    Styling,
)


def test_styling_defaults():
    styling = Styling()

    assert styling.symbol == "fork.knife"
    assert styling.font is DecorativeFont.GEORGIA
    assert styling.accent_color == "#8B4513"


@pytest.mark.parametrize("raw", ["#d2691e", "d2691e", "  #D2691E "])
def test_hex_color_is_normalized(raw):
    assert Styling(accent_color=raw).accent_color == "#D2691E"


@pytest.mark.parametrize("raw", ["brown", "#12345", "#1234567", "#GGGGGG", ""])
def test_bad_hex_color(raw):
    with pytest.raises(PydanticValidationError):
        Styling(accent_color=raw)


def test_secondary_color_is_optional():
    assert Styling(secondary_color=None).secondary_color is None
    assert Styling(secondary_color="fff8dc").secondary_color == "#FFF8DC"


def test_unknown_font():
    with pytest.raises(PydanticValidationError):
        Styling(font="Comic Sans")


def test_blank_symbol():
    with pytest.raises(PydanticValidationError):
        Styling(symbol=" ")


def test_styling_is_frozen():
    with pytest.raises(PydanticValidationError):
        Styling().symbol = "leaf"


@pytest.mark.parametrize("lat,lon", [(90.1, 0), (-90.1, 0), (0, 180.5), (0, -181)])
def test_geolocation_bounds(lat, lon):
    with pytest.raises(PydanticValidationError):
        GeoLocation(latitude=lat, longitude=lon)


def test_geolocation_edges_are_valid():
    assert GeoLocation(latitude=-90, longitude=180).place_name is None


def test_patch_tracks_provided_fields():
    patch = RecipePatch(title="Soup", location=None)

    assert patch.model_fields_set == {"title", "location"}


def test_ancestry_blank_optionals_become_none():
    step = AncestryStepIn(country="Italy", region=" ", rough_date="", note="Sunday lunch")

    assert step.region is None
    assert step.rough_date is None
    assert step.note == "Sunday lunch"
