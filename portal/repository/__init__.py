"""Storage layer: one contract, two interchangeable backends."""
import logging

from portal.config import Settings
from portal.database import build_engine
from portal.repository.base import Repository
from portal.repository.entities import ENTITIES, Entity, Scope, entity_for
from portal.repository.memory import MemoryRepository
from portal.repository.seed import seed_initial_data
from portal.repository.sql import SqlRepository

logger = logging.getLogger(__name__)


def create_repository(settings: Settings) -> Repository:
    """Build the backend selected by ``STORAGE_BACKEND`` and seed it if asked."""
    if settings.STORAGE_BACKEND == "memory":
        repository: Repository = MemoryRepository()
    else:
        repository = SqlRepository(build_engine(settings.DATABASE_URL))
    logger.info("Using %s repository", repository.backend_name)

    if settings.SEED_DEMO_USERS:
        seed_initial_data(repository)
    return repository


__all__ = [
    "ENTITIES",
    "Entity",
    "MemoryRepository",
    "Repository",
    "Scope",
    "SqlRepository",
    "create_repository",
    "entity_for",
    "seed_initial_data",
]
