import pytest

from recipe_voyage.errors import RecipeNotFound, ResourceCleanupFailure
from recipe_voyage.models import (
    Recipe,
    RecipeAncestryStep,
    RecipeAudioNote,
    RecipeIngredient,
    RecipePhoto,
    RecipeStep,
)


@pytest.fixture
def full_recipe(repo):
    """A library recipe with every kind of child."""
    recipe = repo.create_recipe("To Be Deleted")
    repo.add_ingredient(recipe.id, "Flour", "2 cups")
    repo.add_step(recipe.id, "Mix")
    repo.add_ancestry_step(recipe.id, "Italy")
    repo.add_photo(recipe.id, b"jpeg")
    repo.add_audio_note(recipe.id, "f1.m4a", 12.5)
    return recipe


def test_delete_recipe_cascades(repo, full_recipe, db_session, audio_store, photo_store):
    failures = repo.delete_recipe(full_recipe.id)

    assert failures == []
    db_session.expire_all()
    assert db_session.get(Recipe, full_recipe.id) is None
    for model in (RecipeIngredient, RecipeStep, RecipeAncestryStep, RecipePhoto, RecipeAudioNote):
        assert db_session.query(model).count() == 0, model.__name__

    audio_store.delete_file.assert_called_once_with("f1.m4a")
    photo_store.delete.assert_called_once_with("photo-1.bin")
    assert repo.library == ()


def test_delete_continues_when_file_deletion_fails(repo, full_recipe, db_session, audio_store):
    audio_store.delete_file.return_value = False

    failures = repo.delete_recipe(full_recipe.id)

    audio_store.delete_file.assert_called_once_with("f1.m4a")
    assert len(failures) == 1
    assert isinstance(failures[0], ResourceCleanupFailure)
    assert failures[0].resource == "f1.m4a"
    assert db_session.get(Recipe, full_recipe.id) is None
    assert db_session.query(RecipeAudioNote).count() == 0


def test_delete_continues_when_file_store_raises(repo, full_recipe, db_session, audio_store):
    audio_store.delete_file.side_effect = PermissionError("read-only volume")

    failures = repo.delete_recipe(full_recipe.id)

    assert [f.resource for f in failures] == ["f1.m4a"]
    assert "read-only volume" in str(failures[0])
    assert db_session.get(Recipe, full_recipe.id) is None


def test_shared_filename_is_deleted_once(repo, audio_store):
    recipe = repo.create_recipe("Soup")
    repo.add_audio_note(recipe.id, "f1.m4a", 3.0)
    repo.add_audio_note(recipe.id, "f1.m4a", 4.0)
    repo.add_audio_note(recipe.id, "f2.m4a", 5.0)

    repo.delete_recipe(recipe.id)

    assert sorted(c.args[0] for c in audio_store.delete_file.call_args_list) == ["f1.m4a", "f2.m4a"]


def test_delete_closes_library_gap(repo, library_of):
    ids = library_of("A", "B", "C")

    repo.delete_recipe(ids["B"])

    assert [(r.title, r.sort_order) for r in repo.library] == [("A", 0), ("C", 1)]


def test_delete_inbox_recipe_leaves_library_alone(repo, library_of):
    library_of("A", "B")
    received = repo.create_inbox_recipe("X", sender_name="Rosa")

    repo.delete_recipe(received.id)

    assert [(r.title, r.sort_order) for r in repo.library] == [("A", 0), ("B", 1)]
    assert repo.inbox == ()


def test_delete_recipe_not_found(repo, audio_store):
    with pytest.raises(RecipeNotFound):
        repo.delete_recipe("nonexistent-id")

    audio_store.delete_file.assert_not_called()
