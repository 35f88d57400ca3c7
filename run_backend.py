#!/usr/bin/env python
"""Script to run the task manager API server."""
import os

import uvicorn

from task_manager.logging_setup import setup_logging

if __name__ == "__main__":
    setup_logging()
    uvicorn.run(
        "task_manager.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "0") == "1",
        log_config=None,
    )
