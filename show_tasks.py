#!/usr/bin/env python
"""Print a user's tasks, highest priority first."""
import argparse
import functools
import logging
import sys
from datetime import datetime, timezone

from task_manager.config import DATABASE_URL
from task_manager.database import Database
from task_manager.formatting import compare_priority, format_priority, format_status, is_overdue
from task_manager.logging_setup import setup_logging
from task_manager.routers.auth import get_user_by_email
from task_manager.services import tasks as task_service

logger = logging.getLogger("show_tasks")


def format_task_line(task, now=None) -> str:
    due = ""
    if task.due_date is not None:
        due = datetime.fromtimestamp(task.due_date / 1000, tz=timezone.utc).strftime(" due %Y-%m-%d")
        if is_overdue(task.due_date, now):
            due += " (overdue)"
    return f"[{format_status(task.status):<11}] {format_priority(task.priority):<6} {task.title}{due}"


def sort_by_priority(tasks):
    return sorted(tasks, key=functools.cmp_to_key(lambda a, b: compare_priority(a.priority, b.priority)))


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("email")
    args = parser.parse_args()

    setup_logging()
    database = Database(DATABASE_URL)

    try:
        with database.session() as db:
            user = get_user_by_email(db, args.email)
            if user is None:
                logger.error("No user registered as %s", args.email)
                return 1
            for task in sort_by_priority(task_service.list_tasks(db, user.id)):
                print(format_task_line(task))
    finally:
        database.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
