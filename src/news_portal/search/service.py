from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from bson import ObjectId
from pymongo.errors import PyMongoError
from news_portal.errors import (
  InvalidRequest,
  ArticleNotFound,
  CategoryNotFound,
  CategoryNotResolved,
  StoreUnavailable,
)
from news_portal.models.article import ArticleStatus
from news_portal.search.query_builder import (
  ALL_CATEGORIES,
  SearchQuery,
  SearchRequest,
  SortBy,
  build_search_query,
  build_sort,
  resolve_category,
  validate_paging,
)
from news_portal.search.pipeline import SearchExecutor
from news_portal.search.transformer import (
  transform_article,
  transform_article_detail,
  transform_category,
  PLACEHOLDER_IMAGE,
)
from news_portal.search.pagination import build_pagination
from news_portal.utils.logger import logger
from news_portal.utils.config import CONFIG

LISTING_FAILED_MESSAGE = "Có lỗi xảy ra khi tải bài viết"


class SearchService:
  """Read side of the site: search, categories and article detail"""

  def __init__(self, db, config: Optional[Dict[str, Any]] = None):
    """Initialize search service"""
    self.config = config or CONFIG
    search_config = self.config.get('search', {})

    self.db = db
    self.executor = SearchExecutor(db)
    self.default_page_size = search_config.get('default_page_size', 12)
    self.max_page_size = search_config.get('max_page_size', 100)
    self.placeholder_image = search_config.get('placeholder_image', PLACEHOLDER_IMAGE)

  def search(self, request: SearchRequest) -> Dict[str, Any]:
    """Run a search and build the `data` part of the response envelope"""
    request.validate(max_limit=self.max_page_size)

    logger.info(
      f"Tìm kiếm: q='{request.text}' category='{request.category}' "
      f"sortBy={request.sort_by.value} page={request.page} limit={request.limit}"
    )

    query = build_search_query(request, self.db)
    page = self.executor.execute(query)

    # One clock reading for the whole page
    now = datetime.now(timezone.utc)
    articles = [
      transform_article(doc, now=now, placeholder_image=self.placeholder_image)
      for doc in page.items
    ]

    logger.info(f"✓ {page.total_count} kết quả, trả về {len(articles)}")

    return {
      "articles": articles,
      "pagination": build_pagination(request.page, request.limit, page.total_count),
      "searchInfo": {
        "query": request.query,
        "category": request.category,
        "sortBy": request.sort_by.value,
        "totalResults": page.total_count
      }
    }

  def list_articles(
      self,
      page: int = 1,
      limit: Optional[int] = None,
      category: str = "") -> Dict[str, Any]:
    """Published articles, newest first, optionally for one category"""
    limit = limit if limit is not None else self.default_page_size
    validate_paging(page, limit, self.max_page_size)

    listing_filter: Dict[str, Any] = {"status": ArticleStatus.PUBLISHED.value}
    value = (category or "").strip()
    if value and value not in ALL_CATEGORIES:
      try:
        found = resolve_category(self.db, value, failure_message=LISTING_FAILED_MESSAGE)
      except CategoryNotResolved as e:
        raise CategoryNotFound("Danh mục không tồn tại") from e
      listing_filter["categoryId"] = found["_id"]

    query = SearchQuery(
      filter = listing_filter,
      relevance = None,
      sort = build_sort(SortBy.NEWEST),
      skip = (page - 1) * limit,
      limit = limit
    )
    result = self.executor.execute(query, failure_message=LISTING_FAILED_MESSAGE)

    now = datetime.now(timezone.utc)
    articles = []
    for doc in result.items:
      item = transform_article(doc, now=now, placeholder_image=self.placeholder_image)
      item.pop("relevance")
      articles.append(item)

    return {
      "articles": articles,
      "pagination": build_pagination(page, limit, result.total_count)
    }

  def list_categories(self) -> List[Dict[str, Any]]:
    try:
      categories = self.db.list_categories()
    except PyMongoError as e:
      logger.error(f"✗ Lỗi MongoDB khi tải danh mục: {e}")
      raise StoreUnavailable("Có lỗi xảy ra khi tải danh mục") from e
    return [transform_category(c) for c in categories]

  def get_article(self, article_id: str) -> Dict[str, Any]:
    """Published article by id; counts one view"""
    if not ObjectId.is_valid(article_id):
      raise InvalidRequest("ID bài viết không hợp lệ")
    oid = ObjectId(article_id)

    try:
      article = self.db.find_published_article(oid)
      if article is None:
        raise ArticleNotFound("Bài viết không tồn tại")

      self.db.increment_views(oid)
      category = self.db.find_category_by_id(article.get('categoryId'))
      author = self.db.find_user_by_id(article.get('authorId'))
    except PyMongoError as e:
      logger.error(f"✗ Lỗi MongoDB khi tải bài viết {article_id}: {e}")
      raise StoreUnavailable("Lỗi server") from e

    # Report the view just recorded
    article['views'] = (article.get('views') or 0) + 1
    return transform_article_detail(
      article,
      category = category,
      author = author,
      placeholder_image = self.placeholder_image
    )

  def health(self) -> Dict[str, Any]:
    try:
      self.db.ping()
      count = self.db.count_by_filter({"status": "published"})
    except PyMongoError as e:
      logger.error(f"✗ MongoDB không phản hồi: {e}")
      return {"status": "unavailable", "articles": 0}
    return {"status": "healthy", "articles": count}
