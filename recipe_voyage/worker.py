"""Auto-inbox worker: simulates recipes arriving in the inbox.

Every poll, if the inbox is empty and the library is not, one library recipe
chosen uniformly at random is moved into the inbox. Best effort only: a
failed run is logged and the loop carries on.

Usage:
    RECIPE_VOYAGE_AUTO_INBOX_ENABLED=true python -m recipe_voyage.worker
"""

import logging
import random
import time
from typing import Optional

from .errors import RecipeVoyageError
from .logging_config import configure_logging
from .repository import RecipeRepository, build_repository
from .settings import settings

logger = logging.getLogger("recipe_voyage.worker")


def run_auto_inbox_once(repo: RecipeRepository, rng: Optional[random.Random] = None) -> Optional[str]:
    """Run one auto-inbox pass. Returns the moved recipe id, if any."""
    try:
        moved = repo.move_random_library_recipe_to_inbox(rng)
    except RecipeVoyageError as e:
        logger.warning(f"Auto-inbox run skipped: {e}")
        return None

    if moved:
        logger.info(f"Delivered recipe {moved} to the inbox")
    return moved


def main():
    """Main worker loop."""
    configure_logging()
    if not settings.auto_inbox_enabled:
        logger.info("Auto-inbox disabled (set RECIPE_VOYAGE_AUTO_INBOX_ENABLED=true)")
        return

    interval = settings.auto_inbox_interval_seconds
    logger.info(f"Auto-inbox starting (Poll: {interval}s, DB: {settings.database_url})")
    repo = build_repository()
    rng = random.Random()

    while True:
        try:
            run_auto_inbox_once(repo, rng)
        except Exception as e:
            logger.error(f"Auto-inbox loop error: {e}", exc_info=True)
        time.sleep(interval)


if __name__ == "__main__":
    main()
