#!/usr/bin/env python3
"""Run script for studynext."""

import logging
import os

import uvicorn

from studynext.database.database import init_db

if __name__ == "__main__":
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
    init_db()
    uvicorn.run(
        "studynext.api.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
