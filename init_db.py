#!/usr/bin/env python3
"""Create the database tables and make sure the initial admin account exists"""

import argparse
import logging

from app.core.config import settings
from app.core.exceptions import ValidationError
from app.core.logging import setup_logging
from app.models.user import UserRole
from app.services.user import UserService
from main import create_database

logger = logging.getLogger("init_db")


def init_database(reset: bool = False, reset_admin_password: bool = False) -> None:
    database = create_database()
    if not database.ping():
        raise SystemExit(1)

    if reset:
        logger.warning("Dropping all tables")
        database.drop_all()
    database.create_all()
    logger.info("Database tables created")

    users = UserService(database)
    if users.authenticate_user(settings.FIRST_ADMIN_USERNAME, settings.FIRST_ADMIN_PASSWORD):
        logger.info("Admin user %s already present", settings.FIRST_ADMIN_USERNAME)
    elif reset_admin_password and users.set_password(settings.FIRST_ADMIN_USERNAME, settings.FIRST_ADMIN_PASSWORD):
        logger.info("Admin password reset for %s", settings.FIRST_ADMIN_USERNAME)
    else:
        try:
            users.create_user({
                "username": settings.FIRST_ADMIN_USERNAME,
                "email": settings.FIRST_ADMIN_EMAIL,
                "password": settings.FIRST_ADMIN_PASSWORD,
                "role": UserRole.ADMIN,
            })
            logger.info("Admin user %s created", settings.FIRST_ADMIN_USERNAME)
        except ValidationError as exc:
            logger.warning("%s; run with --reset-admin-password to overwrite it", exc.message)

    database.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--reset", action="store_true", help="drop all tables first")
    parser.add_argument("--reset-admin-password", action="store_true",
                        help="overwrite the admin password with FIRST_ADMIN_PASSWORD")
    args = parser.parse_args()

    setup_logging(settings.LOG_LEVEL)
    init_database(reset=args.reset, reset_admin_password=args.reset_admin_password)
