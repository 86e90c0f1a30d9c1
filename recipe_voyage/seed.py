"""Sample data for local development.

Idempotent by title: re-running never duplicates recipes.

Usage:
    python -m recipe_voyage.seed
"""

import logging

from .logging_config import configure_logging
from .repository import RecipeRepository, build_repository
from .schemas import Styling
from .settings import settings

logger = logging.getLogger("recipe_voyage.seed")


SAMPLE_LIBRARY = [
    {
        "title": "Grandmother's Cookies",
        "description": "A family favorite passed down through generations.",
        "styling": {"symbol": "birthday.cake.fill", "accent_color": "#D2691E"},
        "ingredients": [
            ("All-purpose flour", "2 cups"),
            ("Sugar", "1 cup"),
            ("Butter", "1 stick"),
        ],
        "steps": [
            "Preheat oven to 350°F",
            "Mix ingredients",
            "Bake for 12 minutes",
        ],
        "ancestry": [
            {"country": "Italy", "region": "Tuscany", "rough_date": "1920s", "generation": 1},
            {"country": "Canada", "region": "Ontario", "rough_date": "1960s", "generation": 2},
        ],
    },
]

SAMPLE_INBOX = [
    {
        "title": "Aunt Rosa's Tomato Sauce",
        "sender_name": "Rosa",
        "styling": {"symbol": "flame.fill", "accent_color": "#B22222"},
        "ingredients": [("San Marzano tomatoes", "2 cans"), ("Garlic", "4 cloves")],
        "steps": ["Crush the tomatoes by hand", "Simmer with garlic for an hour"],
        "ancestry": [],
    },
]


def _fill(repo: RecipeRepository, recipe_id: str, item: dict) -> None:
    for name, quantity in item["ingredients"]:
        repo.add_ingredient(recipe_id, name, quantity)
    for instruction in item["steps"]:
        repo.add_step(recipe_id, instruction)
    for ancestry in item["ancestry"]:
        repo.add_ancestry_step(recipe_id, **ancestry)


def seed_sample_recipes(repo: RecipeRepository) -> int:
    """Create the sample recipes that don't exist yet. Returns how many were created."""
    existing = {r.title for r in repo.library} | {r.title for r in repo.inbox}
    created = 0

    for item in SAMPLE_LIBRARY:
        if item["title"] in existing:
            continue
        logger.info(f"Seeding recipe: {item['title']}")
        recipe = repo.create_recipe(
            item["title"],
            styling=Styling(**item["styling"]),
            description=item["description"],
        )
        _fill(repo, recipe.id, item)
        created += 1

    for item in SAMPLE_INBOX:
        if item["title"] in existing:
            continue
        logger.info(f"Seeding inbox recipe: {item['title']}")
        recipe = repo.create_inbox_recipe(
            item["title"],
            sender_name=item["sender_name"],
            styling=Styling(**item["styling"]),
        )
        _fill(repo, recipe.id, item)
        created += 1

    return created


def main():
    configure_logging()
    logger.info(f"Seeding {settings.database_url}...")
    repo = build_repository()
    created = seed_sample_recipes(repo)
    logger.info(f"Done: {created} recipes created")


if __name__ == "__main__":
    main()
