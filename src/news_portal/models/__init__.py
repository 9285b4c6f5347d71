from .article import (
  Article,
  ArticleStatus,
  Author,
  Category,
  UserRole,
  UNCATEGORIZED_NAME,
  UNCATEGORIZED_SLUG,
  UNKNOWN_AUTHOR,
)

__all__ = [
  'Article', 'ArticleStatus', 'Author', 'Category', 'UserRole',
  'UNCATEGORIZED_NAME', 'UNCATEGORIZED_SLUG', 'UNKNOWN_AUTHOR'
]
