"""First-run seeding from the bundled seed_tree.yml."""

import logging
from pathlib import Path

import yaml

from prompttree.db.repository import PromptRepository
from prompttree.tree.importer import TreeImporter
from prompttree.tree.schemas import Tree

logger = logging.getLogger(__name__)

SEED_PATH = Path(__file__).parent / "seed_tree.yml"


def load_seed_tree(path: Path = SEED_PATH) -> Tree:
    with open(path) as f:
        data = yaml.safe_load(f)
    return Tree.model_validate(data)


async def seed_if_empty(
    repo: PromptRepository, importer: TreeImporter, path: Path = SEED_PATH
) -> bool:
    """Import the seed tree when no prompts exist. Returns True if it seeded."""
    if await repo.count_prompts() > 0:
        logger.info("Data already seeded (skipping)")
        return False
    tree = load_seed_tree(path)
    await importer.import_tree(tree)
    logger.info("Database seeded with %d prompts", len(tree.prompts))
    return True
