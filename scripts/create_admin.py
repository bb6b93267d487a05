import logging
import os

from dotenv import load_dotenv

from classroom_portal.features.auth.auth_helpers import hash_password
from classroom_portal.features.users.crud import create_user, get_user_by_email

load_dotenv()

logger = logging.getLogger(__name__)

ADMIN_NAME = os.getenv("ADMIN_NAME", "System Administrator")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@demo.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "password123")


def create_admin():
    if get_user_by_email(ADMIN_EMAIL):
        logger.info("Admin user %s already exists", ADMIN_EMAIL)
        return

    create_user(
        name=ADMIN_NAME,
        email=ADMIN_EMAIL,
        password_hash=hash_password(ADMIN_PASSWORD),
        role="admin",
    )
    logger.info("Admin user created: %s", ADMIN_EMAIL)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    create_admin()
