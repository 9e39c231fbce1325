"""
Reminder Database Setup Script
==============================

Creates the reminder tables before the worker or API starts.

Usage:
    python -m order_reminders.db.init_db [--check-only]
"""

import argparse
import logging
import sys

from sqlalchemy import inspect, text

from order_reminders.db.base import Base
from order_reminders.db.session import engine
from order_reminders.reminders import unified_models  # noqa: F401  (registers tables)

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def check_connection(bind=engine) -> bool:
    """Test database connection"""
    logger.info("🔌 Testing database connection...")
    try:
        with bind.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("✅ Database connection successful")
        return True
    except Exception as e:
        logger.error(f"❌ Database connection failed: {e}")
        return False


def missing_tables(bind=engine) -> list:
    existing_tables = set(inspect(bind).get_table_names())
    return [name for name in Base.metadata.tables if name not in existing_tables]


def create_tables(bind=engine) -> None:
    logger.info("🔨 Creating reminder tables...")
    Base.metadata.create_all(bind=bind)
    logger.info("✅ Tables ready")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Set up reminder tables")
    parser.add_argument("--check-only", action="store_true", help="Only report missing tables")
    args = parser.parse_args(argv)

    if not check_connection():
        return 1

    missing = missing_tables()
    if missing:
        logger.info(f"📋 Missing tables: {', '.join(missing)}")
    else:
        logger.info("📋 All reminder tables exist")

    if args.check_only:
        return 1 if missing else 0

    if missing:
        create_tables()
    return 0


if __name__ == "__main__":
    sys.exit(main())
