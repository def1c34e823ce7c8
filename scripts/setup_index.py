"""
Create the articles index and optionally load demo data.

Run this once against a fresh cluster before starting the API.

Usage:
    python -m scripts.setup_index --recreate --seed
"""

import logging
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from elasticsearch import Elasticsearch, helpers

from article_search.core.config import settings
from article_search.services.search.index_mapping import (
    ARTICLE_MAPPING,
    INDEX_SETTINGS,
    build_demo_articles,
    bulk_actions,
)
from article_search.services.service_factory import search_client_options

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def setup_index(client: Elasticsearch, index: str, recreate: bool = False) -> None:
    """
    Create the articles index with its mapping.

    Args:
        client: Elasticsearch client instance
        index: Name of the index to create
        recreate: If True, delete an existing index first
    """
    if client.indices.exists(index=index):
        if not recreate:
            logger.info(f"Index '{index}' already exists, leaving it in place")
            return
        client.indices.delete(index=index)
        logger.info(f"Deleted existing index '{index}'")

    client.indices.create(index=index, settings=INDEX_SETTINGS, mappings=ARTICLE_MAPPING)
    logger.info(f"Created index '{index}'")


def seed_index(client: Elasticsearch, index: str) -> int:
    """
    Bulk index the demo articles.

    Returns:
        Number of documents indexed
    """
    articles = build_demo_articles()
    success, errors = helpers.bulk(
        client, bulk_actions(index, articles), refresh="wait_for", raise_on_error=False
    )
    if errors:
        logger.error(f"Bulk index has failures: {errors}")
    logger.info(f"Indexed {success} demo articles into '{index}'")
    return success


def main():
    """Main entry point for index setup."""
    import argparse

    parser = argparse.ArgumentParser(description="Create and seed the articles index")
    parser.add_argument(
        "--recreate",
        action="store_true",
        help="Delete the index first if it already exists",
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Load the demo articles after creating the index",
    )
    parser.add_argument(
        "--index",
        default=settings.article_index,
        help="Index name (defaults to ARTICLE_INDEX)",
    )
    args = parser.parse_args()

    logger.info(f"Connecting to Elasticsearch at {settings.elasticsearch_url}...")
    client = Elasticsearch(settings.elasticsearch_url, **search_client_options())

    try:
        setup_index(client, args.index, recreate=args.recreate)
        if args.seed:
            seed_index(client, args.index)
    except Exception as e:
        logger.error(f"Failed to initialize index '{args.index}': {e}")
        sys.exit(1)
    finally:
        client.close()

    logger.info("Index setup complete")


if __name__ == "__main__":
    main()
