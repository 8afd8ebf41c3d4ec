"""Bootstrap accounts so a fresh deployment can be logged into."""
import logging

from portal.repository.base import Repository

logger = logging.getLogger(__name__)

DEMO_USERS = (
    {
        "email": "admin@webstudio.com",
        "password": "admin123",
        "first_name": "Admin",
        "last_name": "User",
        "role": "admin",
        "avatar_initials": "AU",
    },
    {
        "email": "manager@webstudio.com",
        "password": "manager123",
        "first_name": "Manager",
        "last_name": "User",
        "role": "manager",
        "avatar_initials": "MU",
    },
    {
        "email": "client@example.com",
        "password": "client123",
        "first_name": "Client",
        "last_name": "User",
        "role": "client",
        "avatar_initials": "CU",
    },
)


def seed_initial_data(repository: Repository) -> bool:
    """Create one user per role when the store has no users yet.

    Returns whether anything was written.
    """
    # credentials imports the repository package
    from portal.credentials import create_user

    if repository.count("user") > 0:
        logger.debug("Users present, skipping seed")
        return False

    for data in DEMO_USERS:
        create_user(repository, data)
    logger.info("Seeded %d demo users into the %s repository", len(DEMO_USERS), repository.backend_name)
    return True
