import math
from typing import Any, Dict


def build_pagination(page: int, limit: int, total: int) -> Dict[str, Any]:
  """Pagination envelope for a 1-based page of a result set"""
  total_pages = math.ceil(total / limit) if limit > 0 else 0
  return {
    "currentPage": page,
    "totalPages": total_pages,
    "totalItems": total,
    "itemsPerPage": limit,
    "hasNextPage": page < total_pages,
    "hasPrevPage": page > 1
  }
