"""
Database seeder – creates the default admin account on first startup.

Controlled by the SEED_ADMIN / ADMIN_* settings. Change ADMIN_PASSWORD (or
disable seeding) before exposing the service anywhere real.
"""
import logging

from store_ratings.core.config import settings
from store_ratings.core.security import hash_password
from store_ratings.db.database import Database
from store_ratings.models.user import Role
from store_ratings.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


def seed_admin(database: Database) -> None:
    """
    Insert the default admin user if it does not already exist.
    Safe to call on every startup – it is a no-op when the user is present.
    """
    with database.session() as conn:
        repo = UserRepository(conn)
        if repo.get_by_email(settings.ADMIN_EMAIL):
            logger.info("Seeder: admin '%s' already exists – skipping.", settings.ADMIN_EMAIL)
            return

        repo.create(
            name=settings.ADMIN_NAME,
            email=settings.ADMIN_EMAIL,
            password_hash=hash_password(settings.ADMIN_PASSWORD),
            role=Role.ADMIN,
        )
        logger.info("Seeder: created default admin '%s'.", settings.ADMIN_EMAIL)
