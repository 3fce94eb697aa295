#!/usr/bin/env python3
"""
Create the Garment Exchange schema

Usage:
    python scripts/init_db.py                   # create missing tables
    python scripts/init_db.py --sample-data     # ... and load the sample catalog
    python scripts/init_db.py --drop --sample-data

Uses DATABASE_URL from the environment / .env (defaults to ./garments.db).
"""
import argparse
import logging

from dotenv import load_dotenv

load_dotenv()

from garment_exchange.core.config import settings
from garment_exchange.core.database import init_db

logging.basicConfig(level=logging.INFO, format='%(message)s')
logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create the Garment Exchange database schema")
    parser.add_argument('--drop', action='store_true',
                        help='Drop all tables before creating them (destroys data)')
    parser.add_argument('--sample-data', action='store_true',
                        help='Load two sample vendors with four items into an empty catalog')
    args = parser.parse_args(argv)

    logger.info("=" * 60)
    logger.info(f"Initialising database: {settings.DATABASE_URL.split('@')[-1]}")
    logger.info("=" * 60)

    init_db(drop=args.drop, load_sample_data=args.sample_data)

    logger.info("✅ Done")


if __name__ == "__main__":
    main()
