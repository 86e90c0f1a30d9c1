from datetime import datetime, timezone

import pytest

from recipe_voyage.errors import InvalidState, RecipeNotFound, ValidationError
from recipe_voyage.schemas import DecorativeFont, GeoLocation, RecipePatch, Styling


def test_create_recipe_uses_default_styling(repo):
    recipe = repo.create_recipe("Grandmother's Cookies")

    assert recipe.title == "Grandmother's Cookies"
    assert recipe.styling.symbol == "fork.knife"
    assert recipe.styling.font is DecorativeFont.GEORGIA
    assert recipe.styling.accent_color == "#8B4513"
    assert recipe.styling.secondary_color is None
    assert recipe.in_inbox is False
    assert recipe.sort_order == 0
    assert recipe.ingredients == [] and recipe.steps == [] and recipe.audio_notes == []


def test_create_recipe_stamps_created_at_from_clock(repo):
    recipe = repo.create_recipe("Soup")

    assert recipe.created_at == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert repo.get_recipe(recipe.id).created_at.tzinfo is not None


@pytest.mark.parametrize("title", ["", "   "])
def test_blank_title_is_rejected_without_change(repo, title):
    version = repo.views.version

    with pytest.raises(ValidationError) as exc:
        repo.create_recipe(title)

    assert exc.value.field == "title"
    assert repo.library == ()
    assert repo.views.version == version


def test_title_is_trimmed(repo):
    assert repo.create_recipe("  Pierogi  ").title == "Pierogi"


def test_styling_from_mapping_is_normalized(repo):
    recipe = repo.create_recipe(
        "Cookies",
        styling={"symbol": "birthday.cake.fill", "font": "Zapfino", "accent_color": "d2691e"},
    )

    assert recipe.styling == Styling(
        symbol="birthday.cake.fill", font=DecorativeFont.ZAPFINO, accent_color="#D2691E"
    )


def test_invalid_styling_is_a_validation_error(repo):
    with pytest.raises(ValidationError) as exc:
        repo.create_recipe("Cookies", styling={"accent_color": "brown"})

    assert exc.value.field == "styling"
    assert repo.library == ()


def test_invalid_location_is_a_validation_error(repo):
    with pytest.raises(ValidationError) as exc:
        repo.create_recipe("Cookies", location={"latitude": 91, "longitude": 0})

    assert exc.value.field == "location"


def test_owner_attribution(repo):
    owner = repo.create_owner("Nonna Lucia")

    recipe = repo.create_recipe("Ragù", owner_id=owner.id)

    assert recipe.owner is not None
    assert recipe.owner.name == "Nonna Lucia"
    assert [o.name for o in repo.list_owners()] == ["Nonna Lucia"]


def test_unknown_owner_is_rejected(repo):
    with pytest.raises(ValidationError) as exc:
        repo.create_recipe("Ragù", owner_id="nobody")

    assert exc.value.field == "owner_id"
    assert repo.library == ()


def test_blank_owner_name_is_rejected(repo):
    with pytest.raises(ValidationError):
        repo.create_owner(" ")


def test_inbox_recipe_requires_sender(repo):
    with pytest.raises(ValidationError) as exc:
        repo.create_inbox_recipe("Sauce", sender_name="")

    assert exc.value.field == "sender_name"
    assert repo.inbox == ()


def test_get_recipe_not_found(repo):
    with pytest.raises(RecipeNotFound):
        repo.get_recipe("missing")

    # Not-found is a precondition failure
    assert issubclass(RecipeNotFound, InvalidState)


def test_update_recipe_applies_only_provided_fields(repo):
    recipe = repo.create_recipe("Soup", description="Warming", styling={"accent_color": "#112233"})

    updated = repo.update_recipe(recipe.id, {"title": "Winter Soup"})

    assert updated.title == "Winter Soup"
    assert updated.description == "Warming"
    assert updated.styling.accent_color == "#112233"
    assert updated.sort_order == recipe.sort_order


def test_update_recipe_styling_and_location(repo):
    recipe = repo.create_recipe("Soup")

    updated = repo.update_recipe(
        recipe.id,
        RecipePatch(
            styling=Styling(symbol="leaf.fill", font=DecorativeFont.DIDOT, accent_color="#00AA00"),
            location=GeoLocation(latitude=43.77, longitude=11.25, place_name="Florence"),
        ),
    )

    assert updated.styling.symbol == "leaf.fill"
    assert updated.styling.font is DecorativeFont.DIDOT
    assert updated.location.place_name == "Florence"

    cleared = repo.update_recipe(recipe.id, {"location": None, "description": ""})
    assert cleared.location is None
    assert cleared.description is None


def test_update_recipe_rejects_blank_title(repo):
    recipe = repo.create_recipe("Soup")

    with pytest.raises(ValidationError):
        repo.update_recipe(recipe.id, {"title": "  "})

    assert repo.get_recipe(recipe.id).title == "Soup"


def test_update_missing_recipe(repo):
    with pytest.raises(RecipeNotFound):
        repo.update_recipe("missing", {"title": "Soup"})


def test_update_recipe_does_not_move_partitions(repo):
    received = repo.create_inbox_recipe("Sauce", sender_name="Rosa")

    repo.update_recipe(received.id, {"title": "Rosa's Sauce"})

    assert [r.title for r in repo.inbox] == ["Rosa's Sauce"]
    assert repo.library == ()
