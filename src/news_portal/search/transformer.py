from datetime import datetime
from typing import Any, Dict, Optional
from news_portal.models.article import (
  title_to_slug,
  UNCATEGORIZED_NAME,
  UNCATEGORIZED_SLUG,
  UNKNOWN_AUTHOR,
)
from news_portal.utils.dates import format_time_ago, to_iso

PLACEHOLDER_IMAGE = "/placeholder.jpg"


def _label(value: Any, fallback: str) -> str:
  # Empty strings count as unresolved too
  return value if value else fallback


def transform_article(
    doc: Dict[str, Any],
    now: Optional[datetime] = None,
    placeholder_image: str = PLACEHOLDER_IMAGE) -> Dict[str, Any]:
  """Reshape an aggregated article document into the public search item"""
  return {
    "id": str(doc["_id"]),
    "title": doc.get("title") or "",
    "excerpt": doc.get("shortDescription") or "",
    "imageUrl": doc.get("coverImageUrl") or placeholder_image,
    "category": _label(doc.get("categoryName"), UNCATEGORIZED_NAME),
    "categorySlug": _label(doc.get("categorySlug"), UNCATEGORIZED_SLUG),
    "author": _label(doc.get("authorName"), UNKNOWN_AUTHOR),
    "publishedAt": format_time_ago(doc.get("publicationDate"), now=now),
    "publishedDate": to_iso(doc.get("publicationDate")),
    "slug": doc.get("slug") or title_to_slug(doc.get("title")),
    "views": doc.get("views") or 0,
    "tags": list(doc.get("tags") or []),
    "relevance": doc.get("relevanceScore") or 0
  }


def transform_article_detail(
    doc: Dict[str, Any],
    category: Optional[Dict[str, Any]] = None,
    author: Optional[Dict[str, Any]] = None,
    now: Optional[datetime] = None,
    placeholder_image: str = PLACEHOLDER_IMAGE) -> Dict[str, Any]:
  """Single article view: search fields plus content and updatedAt"""
  enriched = dict(doc)
  enriched["categoryName"] = (category or {}).get("name")
  enriched["categorySlug"] = (category or {}).get("slug")
  enriched["authorName"] = (author or {}).get("fullName")

  detail = transform_article(enriched, now=now, placeholder_image=placeholder_image)
  detail.pop("relevance")
  detail["content"] = doc.get("content") or ""
  detail["updatedAt"] = to_iso(doc.get("updatedAt"))
  return detail


def transform_category(doc: Dict[str, Any]) -> Dict[str, Any]:
  return {
    "id": str(doc["_id"]),
    "name": doc.get("name") or UNCATEGORIZED_NAME,
    "slug": doc.get("slug") or UNCATEGORIZED_SLUG
  }
