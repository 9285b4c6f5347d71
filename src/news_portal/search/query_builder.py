"""
Translate a search request into the pieces of an article aggregation:
the $match filter, the relevance expression and the $sort stage.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional
from pymongo.errors import PyMongoError
from news_portal.errors import InvalidRequest, CategoryNotResolved, StoreUnavailable
from news_portal.models.article import ArticleStatus
from news_portal.utils.logger import logger

# Category values that mean "no category filter"
ALL_CATEGORIES = frozenset({"all", "Tất cả"})

# Relevance weights per matched field
TITLE_WEIGHT = 10
SHORT_DESCRIPTION_WEIGHT = 5
CONTENT_WEIGHT = 2

MISSING_CRITERIA_MESSAGE = "Vui lòng nhập từ khóa tìm kiếm hoặc chọn danh mục"

# $skip is encoded as a signed 64-bit BSON integer
MAX_SKIP = 2**63 - 1


class SortBy(str, Enum):
  RELEVANCE = "relevance"
  NEWEST = "newest"
  OLDEST = "oldest"
  MOST_VIEWED = "most-viewed"

  @classmethod
  def from_param(cls, value: Optional[str]) -> 'SortBy':
    """Unknown or missing values sort by relevance"""
    try:
      return cls(value)
    except ValueError:
      return cls.RELEVANCE


@dataclass(frozen=True)
class SearchRequest:
  """Immutable search parameters, passed unchanged through every layer"""
  query: str = ""
  category: str = ""
  sort_by: SortBy = SortBy.RELEVANCE
  page: int = 1
  limit: int = 12

  @property
  def text(self) -> str:
    return (self.query or "").strip()

  @property
  def category_value(self) -> str:
    """Category filter value, empty when absent or 'all'"""
    value = (self.category or "").strip()
    return "" if value in ALL_CATEGORIES else value

  @property
  def skip(self) -> int:
    return (self.page - 1) * self.limit

  def validate(self, max_limit: Optional[int] = None):
    """Fail fast, before any store access"""
    if not self.text and not self.category_value:
      raise InvalidRequest(MISSING_CRITERIA_MESSAGE)
    validate_paging(self.page, self.limit, max_limit)


def validate_paging(page: int, limit: int, max_limit: Optional[int] = None):
  """Reject page/limit values the store cannot serve.

  Raises:
    InvalidRequest: not a positive integer, limit above max_limit, or an
      offset past what the store can encode
  """
  if isinstance(page, bool) or not isinstance(page, int) or page < 1:
    raise InvalidRequest("Số trang phải là số nguyên lớn hơn hoặc bằng 1")
  if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
    raise InvalidRequest("Số bài viết mỗi trang phải là số nguyên lớn hơn hoặc bằng 1")
  if max_limit is not None and limit > max_limit:
    raise InvalidRequest(f"Số bài viết mỗi trang không được vượt quá {max_limit}")
  if (page - 1) * limit > MAX_SKIP:
    raise InvalidRequest("Số trang quá lớn")


@dataclass(frozen=True)
class SearchQuery:
  """Filter, relevance expression and sort specification for one request"""
  filter: Dict[str, Any]
  relevance: Any
  sort: Dict[str, int]
  skip: int
  limit: int
  category_id: Any = None
  category: Optional[Dict[str, Any]] = field(default=None, compare=False)


def text_pattern(text: str) -> str:
  """Regex that matches text literally"""
  return re.escape(text)


def build_text_filter(text: str) -> Dict[str, Any]:
  """OR across title, shortDescription, content and tags"""
  pattern = text_pattern(text)
  return {
    "$or": [
      {"title": {"$regex": pattern, "$options": "i"}},
      {"shortDescription": {"$regex": pattern, "$options": "i"}},
      {"content": {"$regex": pattern, "$options": "i"}},
      # Matches if any array element matches
      {"tags": {"$regex": pattern, "$options": "i"}},
    ]
  }


def _field_match(field_name: str, pattern: str, weight: int) -> Dict[str, Any]:
  # $ifNull keeps $regexMatch from failing on missing fields
  return {
    "$cond": [
      {"$regexMatch": {
        "input": {"$ifNull": [f"${field_name}", ""]},
        "regex": pattern,
        "options": "i"
      }},
      weight,
      0
    ]
  }


def build_relevance_expression(text: str) -> Any:
  """Weighted sum of field matches; constant 1 without free text"""
  if not text:
    return 1
  pattern = text_pattern(text)
  return {
    "$add": [
      _field_match("title", pattern, TITLE_WEIGHT),
      _field_match("shortDescription", pattern, SHORT_DESCRIPTION_WEIGHT),
      _field_match("content", pattern, CONTENT_WEIGHT),
    ]
  }


def build_sort(sort_by: SortBy) -> Dict[str, int]:
  """Sort stage; _id closes every spec so ties page deterministically"""
  if sort_by == SortBy.NEWEST:
    return {"publicationDate": -1, "_id": -1}
  if sort_by == SortBy.OLDEST:
    return {"publicationDate": 1, "_id": 1}
  if sort_by == SortBy.MOST_VIEWED:
    return {"views": -1, "_id": -1}
  return {"relevanceScore": -1, "publicationDate": -1, "_id": -1}


def resolve_category(db, value: str, failure_message: str = "Có lỗi xảy ra khi tìm kiếm") -> Dict[str, Any]:
  """Category document for a slug or name.

  Raises:
    CategoryNotResolved: nothing matches
    StoreUnavailable: the lookup itself failed
  """
  try:
    category = db.find_category(value)
  except PyMongoError as e:
    logger.error(f"✗ Lỗi khi tra cứu danh mục '{value}': {e}")
    raise StoreUnavailable(failure_message) from e
  if category is None:
    raise CategoryNotResolved(f"Không tìm thấy danh mục '{value}'")
  return category


def build_search_query(request: SearchRequest, db) -> SearchQuery:
  """Build the query for a validated request.

  An unknown category is logged and ignored: the search then runs across all
  categories instead of returning nothing.
  """
  text = request.text
  search_filter: Dict[str, Any] = {"status": ArticleStatus.PUBLISHED.value}

  if text:
    search_filter.update(build_text_filter(text))

  category = None
  if request.category_value:
    try:
      category = resolve_category(db, request.category_value)
      search_filter["categoryId"] = category["_id"]
    except CategoryNotResolved as e:
      logger.warning(f"⚠ {e.message}, bỏ qua bộ lọc danh mục")

  return SearchQuery(
    filter = search_filter,
    relevance = build_relevance_expression(text),
    sort = build_sort(request.sort_by),
    skip = request.skip,
    limit = request.limit,
    category_id = category["_id"] if category else None,
    category = category
  )
