from .query_builder import SearchRequest, SearchQuery, SortBy, build_search_query
from .pipeline import SearchExecutor, SearchPage
from .service import SearchService

__all__ = [
  'SearchRequest', 'SearchQuery', 'SortBy', 'build_search_query',
  'SearchExecutor', 'SearchPage', 'SearchService'
]
