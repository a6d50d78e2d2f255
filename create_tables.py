#!/usr/bin/env python3
"""
Script to create database tables
Run this after the database is created to set up all tables
"""
import logging
import os
import sys

# Add the app directory to the path
app_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'app')
sys.path.insert(0, app_dir)

from sqlalchemy.exc import SQLAlchemyError

from clubcms.config import get_settings
from clubcms.database import build_engine, create_tables as create_all_tables

logger = logging.getLogger("create_tables")


def create_tables():
    """Create all database tables"""
    engine = build_engine(get_settings().database_url)
    try:
        logger.info("Creating database tables...")
        create_all_tables(engine)
        logger.info("Database tables created successfully")
        return True
    except SQLAlchemyError:
        logger.exception("Error creating tables")
        return False


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    sys.exit(0 if create_tables() else 1)
