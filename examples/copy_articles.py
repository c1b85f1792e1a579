#!/usr/bin/env python3
"""Copy articles between two Drupal sites.

Reads every article from a REST export view on the source site, with tags
expanded, and recreates it on the target site. Tags are created inline
together with each article.

Usage:
    1. Create a REST export view at /api/articles on the source site
    2. Set the environment variables below
    3. Run: python copy_articles.py

Environment Variables:
    SOURCE_DRUPAL_URL, SOURCE_DRUPAL_USER, SOURCE_DRUPAL_PASS
    TARGET_DRUPAL_URL, TARGET_DRUPAL_USER, TARGET_DRUPAL_PASS
"""

import asyncio
import logging
import os
from typing import Any

from drupal_kit import AsyncClient, ExportError, create_config, inline_entity

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("copy_articles")


def config_from_env(prefix: str) -> Any:
    return create_config(
        os.getenv(f"{prefix}_DRUPAL_URL", "http://localhost:8080"),
        os.getenv(f"{prefix}_DRUPAL_USER", "admin"),
        os.getenv(f"{prefix}_DRUPAL_PASS", ""),
    )


def to_payload(article: dict[str, Any]) -> dict[str, Any]:
    """Turn an exported article into a create payload for the target site."""
    tags = [
        inline_entity(
            "taxonomy_term",
            {
                "vid": tag["resolved_data"]["vid"],
                "name": tag["resolved_data"]["name"],
            },
        )
        for tag in article.get("field_tags", [])
        if "resolved_data" in tag
    ]
    return {
        "type": [{"target_id": "article"}],
        "title": article["title"],
        "body": article.get("body", []),
        "field_tags": tags,
    }


async def main() -> None:
    async with AsyncClient(config_from_env("SOURCE")) as source, AsyncClient(
        config_from_env("TARGET")
    ) as target:
        await source.login()
        await target.login()

        try:
            articles = await source.export_view(
                "api/articles",
                reference_fields=["field_tags"],
                per_item_callback=lambda item, index: logger.info(f"Exported #{index}"),
            )
        except ExportError as e:
            logger.error(f"Export stopped at page {e.page}; copying {len(e.results)} items")
            articles = e.results

        for article in articles:
            saved = await target.node_save(None, to_payload(article))
            logger.info(f"Created node {saved['nid'][0]['value']}")


if __name__ == "__main__":
    asyncio.run(main())
