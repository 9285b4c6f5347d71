#!/usr/bin/env python3
"""
Search Script

Run one article search against MongoDB and print the page
"""

import json
import click
from news_portal.database.mongodb_client import MongoDBClient
from news_portal.errors import NewsPortalError
from news_portal.search import SearchRequest, SearchService, SortBy
from news_portal.utils.config import CONFIG
from news_portal.utils.logger import setup_logger, logger


setup_logger(
  log_file=CONFIG['logging']['log_file'],
  level="WARNING"
)

@click.command()
@click.option('--category', default='', help='Category slug or name')
@click.option('--sort-by', type=click.Choice([s.value for s in SortBy]), default='relevance',
              help='Result ordering')
@click.option('--page', default=1, type=int, help='Page number (from 1)')
@click.option('--limit', default=CONFIG['search']['default_page_size'], type=int, help='Page size')
@click.option('--json', 'as_json', is_flag=True, help='Print the raw response data')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.argument('query', required=False, default='')

def main(category, sort_by, page, limit, as_json, debug, query):
  """Search published articles"""

  if debug:
    logger.setLevel("DEBUG")

  service = SearchService(MongoDBClient(create_indexes=False))
  request = SearchRequest(
    query = query,
    category = category,
    sort_by = SortBy(sort_by),
    page = page,
    limit = limit
  )

  try:
    data = service.search(request)
  except NewsPortalError as e:
    print(f"✗ {e.message}")
    raise SystemExit(1)

  if as_json:
    print(json.dumps(data, ensure_ascii=False, indent=2))
    return

  pagination = data['pagination']
  print("="*80)
  print(f"{pagination['totalItems']} kết quả - trang {pagination['currentPage']}/{pagination['totalPages']}")
  print("="*80)

  if not data['articles']:
    print("Không tìm thấy kết quả. Hãy thử từ khóa khác, kiểm tra chính tả hoặc chọn danh mục khác.")
    return

  for article in data['articles']:
    print(f"[{article['relevance']:>2}] {article['title']}")
    print(f"     {article['category']} · {article['author']} · {article['publishedAt']} · {article['views']} lượt xem")


if __name__ == "__main__":
  main()
