from dataclasses import dataclass, field
from typing import Any, Dict, List
from pymongo.errors import PyMongoError
from news_portal.errors import StoreUnavailable
from news_portal.models.article import UNCATEGORIZED_NAME, UNCATEGORIZED_SLUG, UNKNOWN_AUTHOR
from news_portal.search.query_builder import SearchQuery
from news_portal.utils.logger import logger

SEARCH_FAILED_MESSAGE = "Có lỗi xảy ra khi tìm kiếm"

# Fields returned for each article of a search page
PAGE_PROJECTION = {
  "_id": 1,
  "title": 1,
  "slug": 1,
  "shortDescription": 1,
  "coverImageUrl": 1,
  "publicationDate": 1,
  "views": 1,
  "tags": 1,
  "categoryName": 1,
  "categorySlug": 1,
  "authorName": 1,
  "relevanceScore": 1
}


@dataclass(frozen=True)
class SearchPage:
  """One page of matched documents and the unpaginated match count"""
  items: List[Dict[str, Any]] = field(default_factory=list)
  total_count: int = 0


def enrichment_stages(
    categories_collection: str = "categories",
    users_collection: str = "users") -> List[Dict[str, Any]]:
  """Join-equivalent stages: category name/slug and author name with fallbacks"""
  return [
    {
      "$lookup": {
        "from": categories_collection,
        "localField": "categoryId",
        "foreignField": "_id",
        "as": "category"
      }
    },
    {"$unwind": {"path": "$category", "preserveNullAndEmptyArrays": True}},
    {
      "$lookup": {
        "from": users_collection,
        "localField": "authorId",
        "foreignField": "_id",
        "as": "author"
      }
    },
    {"$unwind": {"path": "$author", "preserveNullAndEmptyArrays": True}},
    {
      "$addFields": {
        "categoryName": {"$ifNull": ["$category.name", UNCATEGORIZED_NAME]},
        "categorySlug": {"$ifNull": ["$category.slug", UNCATEGORIZED_SLUG]},
        "authorName": {"$ifNull": ["$author.fullName", UNKNOWN_AUTHOR]}
      }
    },
  ]


def relevance_stage_value(relevance: Any) -> Any:
  # A bare number in $addFields would be read as a projection flag
  if isinstance(relevance, dict):
    return relevance
  return {"$literal": relevance}


class SearchExecutor:
  """Runs a SearchQuery as a single aggregation on the articles collection"""

  def __init__(self, db):
    self.db = db
    db_config = getattr(db, 'db_config', None)
    collections = db_config.get('collections', {}) if isinstance(db_config, dict) else {}
    self.categories_collection = collections.get('categories', 'categories')
    self.users_collection = collections.get('users', 'users')

  def build_pipeline(self, query: SearchQuery) -> List[Dict[str, Any]]:
    """
    Filter, score, sort, then split with $facet into the requested page
    and the total count of the filtered set.

    Only the page branch is joined with categories and users, since the
    sort never depends on them.
    """
    stages = [{"$match": query.filter}]
    # Listings carry no relevance score
    if query.relevance is not None:
      stages.append({"$addFields": {"relevanceScore": relevance_stage_value(query.relevance)}})
    return stages + [
      {"$sort": query.sort},
      {
        "$facet": {
          "articles": [
            {"$skip": query.skip},
            {"$limit": query.limit},
            *enrichment_stages(self.categories_collection, self.users_collection),
            {"$project": PAGE_PROJECTION}
          ],
          "totalCount": [{"$count": "count"}]
        }
      }
    ]

  def execute(self, query: SearchQuery, failure_message: str = SEARCH_FAILED_MESSAGE) -> SearchPage:
    """Read one page.

    Raises:
      StoreUnavailable: the aggregation failed; nothing partial is returned
    """
    pipeline = self.build_pipeline(query)
    try:
      result = self.db.aggregate_articles(pipeline)
    except PyMongoError as e:
      logger.error(f"✗ Lỗi MongoDB khi đọc bài viết: {e}")
      raise StoreUnavailable(failure_message) from e

    return parse_facet_result(result)


def parse_facet_result(result: List[Dict[str, Any]]) -> SearchPage:
  """Unpack the single document produced by the $facet stage"""
  facet = result[0] if result else {}
  items = facet.get("articles") or []
  counts = facet.get("totalCount") or []
  total = counts[0].get("count", 0) if counts else 0
  return SearchPage(items=list(items), total_count=total)
