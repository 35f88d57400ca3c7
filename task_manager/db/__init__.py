"""Data access layer.

Example: ``from task_manager.db import tasks as task_store``
"""

from . import tasks

__all__ = ["tasks"]
