"""
Structured data (JSON-LD) extraction.
"""

import json
import logging
from typing import List, Iterable, Optional
from bs4 import BeautifulSoup
from app.schemas.crawl import SchemaMarkup, PageData

logger = logging.getLogger(__name__)

def _schema_from_item(item) -> Optional[SchemaMarkup]:
    if not isinstance(item, dict):
        return None
    schema_type = item.get("@type")
    if isinstance(schema_type, list):
        schema_type = [t for t in schema_type if isinstance(t, str)]
    if not schema_type or not isinstance(schema_type, (str, list)):
        return None
    return SchemaMarkup(type=schema_type, properties=item)

def extract_schema_markup(soup: BeautifulSoup) -> List[SchemaMarkup]:
    """
    Extract every JSON-LD schema declared in the document.

    A script may hold a single object or an array of objects, and objects may
    wrap their members in a ``@graph`` array; each typed object becomes one
    SchemaMarkup. Scripts that are not valid JSON are skipped.
    """
    schemas = []

    for script in soup.find_all("script", type="application/ld+json"):
        content = script.get_text()
        if not content or not content.strip():
            continue

        try:
            data = json.loads(content)
        except json.JSONDecodeError:
            logger.warning("Skipping invalid JSON-LD block: %s...", content.strip()[:100])
            continue

        items = data if isinstance(data, list) else [data]
        for item in items:
            schema = _schema_from_item(item)
            if schema:
                schemas.append(schema)

            if isinstance(item, dict) and isinstance(item.get("@graph"), list):
                for graph_item in item["@graph"]:
                    graph_schema = _schema_from_item(graph_item)
                    if graph_schema:
                        schemas.append(graph_schema)

    return schemas

def schema_type_key(schema: SchemaMarkup):
    """Hashable key for a schema type, list-valued types compare as tuples."""
    if isinstance(schema.type, list):
        return tuple(schema.type)
    return schema.type

def dedupe_schema_types(pages: Iterable[PageData]) -> List[SchemaMarkup]:
    """Merge schemas across pages keeping the first schema of each type."""
    seen_types = set()
    schemas = []
    for page in pages:
        for schema in page.schema_markup:
            key = schema_type_key(schema)
            if key not in seen_types:
                seen_types.add(key)
                schemas.append(schema)
    return schemas
