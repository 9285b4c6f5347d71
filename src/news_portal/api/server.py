"""
HTTP API for the news portal.

Read-only endpoints: article search, article listing, category list,
article detail and a health check. Every response uses the `{success, data | error}` envelope.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from news_portal import __version__
from news_portal.errors import NewsPortalError
from news_portal.search.query_builder import SearchRequest, SortBy
from news_portal.search.service import SearchService
from news_portal.utils.logger import logger


def _failure(status_code: int, message: str) -> JSONResponse:
  return JSONResponse({"success": False, "error": message}, status_code=status_code)


def _service(request: Request) -> SearchService:
  return request.app.state.service


@asynccontextmanager
async def lifespan(app: FastAPI):
  """Connect to MongoDB on startup unless a store was injected"""
  if app.state.service is None:
    from news_portal.database.mongodb_client import MongoDBClient

    logger.info("Đang kết nối MongoDB...")
    app.state.service = SearchService(MongoDBClient())
    logger.info("✓ API sẵn sàng")

  yield

  logger.info("API đang tắt")


def create_app(db=None) -> FastAPI:
  """
  Create the FastAPI application.

  Args:
    db: Store adapter to serve from. When None, a MongoDBClient is
      created from the configuration at startup.

  Returns:
    Configured FastAPI instance.
  """
  app = FastAPI(
    title="News Portal API",
    description="Tìm kiếm và đọc bài viết",
    version=__version__,
    lifespan=lifespan
  )
  app.state.service = SearchService(db) if db is not None else None

  @app.exception_handler(NewsPortalError)
  async def handle_portal_error(request: Request, exc: NewsPortalError):
    if exc.status_code >= 500:
      logger.error(f"✗ {request.url.path}: {exc!r} ({exc.__cause__!r})")
    else:
      logger.info(f"⊘ {request.url.path}: {exc.message}")
    return _failure(exc.status_code, exc.message)

  @app.exception_handler(RequestValidationError)
  async def handle_validation_error(request: Request, exc: RequestValidationError):
    fields = ", ".join(str(err["loc"][-1]) for err in exc.errors())
    return _failure(400, f"Tham số không hợp lệ: {fields}")

  @app.exception_handler(Exception)
  async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"✗ {request.url.path}: lỗi không mong đợi: {exc!r}")
    return _failure(500, "Lỗi server")

  @app.get("/search")
  @app.get("/api/search")
  def search(
    request: Request,
    q: str = Query(default=""),
    category: str = Query(default=""),
    sort_by: str = Query(default=SortBy.RELEVANCE.value, alias="sortBy"),
    page: int = Query(default=1),
    limit: Optional[int] = Query(default=None)
  ):
    """Search published articles by text and/or category"""
    service = _service(request)
    search_request = SearchRequest(
      query = q,
      category = category,
      sort_by = SortBy.from_param(sort_by),
      page = page,
      limit = limit if limit is not None else service.default_page_size
    )
    data = service.search(search_request)
    return {"success": True, "data": data}

  @app.get("/api/categories")
  def list_categories(request: Request):
    """All categories sorted by name"""
    return {"success": True, "data": _service(request).list_categories()}

  @app.get("/api/articles")
  def list_articles(
    request: Request,
    category: str = Query(default=""),
    page: int = Query(default=1),
    limit: Optional[int] = Query(default=None)
  ):
    """Published articles, newest first"""
    data = _service(request).list_articles(page=page, limit=limit, category=category)
    return {"success": True, "data": data}

  @app.get("/api/articles/{article_id}")
  def get_article(request: Request, article_id: str):
    """Published article detail; counts one view"""
    return {"success": True, "data": _service(request).get_article(article_id)}

  @app.get("/health")
  def health_check(request: Request):
    health = _service(request).health()
    status_code = 200 if health["status"] == "healthy" else 503
    return JSONResponse(health, status_code=status_code)

  return app


# Create the app instance
app = create_app()
