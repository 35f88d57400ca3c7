#!/usr/bin/env python
"""Create a user account from the command line."""
import argparse
import logging

from task_manager.config import DATABASE_URL
from task_manager.database import Database
from task_manager.logging_setup import setup_logging
from task_manager.models import User
from task_manager.routers.auth import get_password_hash, get_user_by_email

logger = logging.getLogger("add_user")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--email", default="test@example.com")
    parser.add_argument("--password", default="password")
    args = parser.parse_args()

    setup_logging()
    database = Database(DATABASE_URL)
    database.create_tables()

    try:
        with database.session() as db:
            if get_user_by_email(db, args.email):
                logger.info("User %s already exists", args.email)
                return

            user = User(email=args.email, hashed_password=get_password_hash(args.password))
            db.add(user)
            db.commit()
            logger.info("Created user %s (%s)", args.email, user.id)
    finally:
        database.dispose()


if __name__ == "__main__":
    main()
