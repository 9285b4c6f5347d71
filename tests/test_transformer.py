"""
Tests for the result transformer and pagination envelope.
"""

from datetime import datetime

import pytest
from bson import ObjectId

from news_portal.search.pagination import build_pagination
from news_portal.search.transformer import (
  transform_article,
  transform_article_detail,
  transform_category,
)


class TestTransformArticle:
  """Public search item shape and defaults."""

  def test_full_document(self, aggregated_article, now):
    item = transform_article(aggregated_article, now=now)

    assert item == {
      "id": "66f1c0a2b3c4d5e6f7a8b9c0",
      "title": "Giá vàng hôm nay",
      "excerpt": "Giá vàng tăng mạnh",
      "imageUrl": "/uploads/vang.jpg",
      "category": "Kinh tế",
      "categorySlug": "kinh-te",
      "author": "Nguyễn Văn An",
      "publishedAt": "3 giờ trước",
      "publishedDate": "2026-10-19T09:00:00+00:00",
      "slug": "gia-vang-hom-nay",
      "views": 42,
      "tags": ["vàng", "kinh tế"],
      "relevance": 15
    }

  def test_sparse_document_gets_defaults(self, now):
    """Missing fields resolve to fixed values, never None."""
    doc = {"_id": ObjectId(), "title": "Tin  Nóng Hôm nay"}

    item = transform_article(doc, now=now)

    assert item["excerpt"] == ""
    assert item["imageUrl"] == "/placeholder.jpg"
    assert item["category"] == "Chưa phân loại"
    assert item["categorySlug"] == "uncategorized"
    assert item["author"] == "Không rõ"
    assert item["publishedAt"] == "Chưa rõ"
    assert item["publishedDate"] is None
    assert item["slug"] == "tin-nóng-hôm-nay"
    assert item["views"] == 0
    assert item["tags"] == []
    assert item["relevance"] == 0

  def test_empty_category_name_uses_fallback(self, aggregated_article, now):
    aggregated_article["categoryName"] = ""
    assert transform_article(aggregated_article, now=now)["category"] == "Chưa phân loại"

  def test_excerpt_not_synthesized_from_content(self, aggregated_article, now):
    aggregated_article["shortDescription"] = ""
    aggregated_article["content"] = "Nội dung dài"
    assert transform_article(aggregated_article, now=now)["excerpt"] == ""

  def test_custom_placeholder(self, now):
    item = transform_article({"_id": ObjectId(), "title": "a"}, now=now, placeholder_image="/img/none.png")
    assert item["imageUrl"] == "/img/none.png"


class TestTransformDetail:
  """Single article view."""

  def test_detail_resolves_references(self, economy_category, author, now):
    doc = {
      "_id": ObjectId(),
      "title": "Giá vàng",
      "content": "Nội dung",
      "publicationDate": datetime(2026, 10, 1),
      "updatedAt": datetime(2026, 10, 2),
      "views": 5
    }

    detail = transform_article_detail(doc, category=economy_category, author=author, now=now)

    assert detail["category"] == "Kinh tế"
    assert detail["author"] == "Nguyễn Văn An"
    assert detail["content"] == "Nội dung"
    assert detail["updatedAt"] == "2026-10-02T00:00:00+00:00"
    assert "relevance" not in detail

  def test_detail_without_references(self, now):
    detail = transform_article_detail({"_id": ObjectId(), "title": "x"}, now=now)
    assert detail["category"] == "Chưa phân loại"
    assert detail["author"] == "Không rõ"


def test_transform_category(economy_category):
  assert transform_category(economy_category) == {
    "id": str(economy_category["_id"]),
    "name": "Kinh tế",
    "slug": "kinh-te"
  }


class TestPagination:
  """Pagination envelope math."""

  def test_middle_page(self):
    assert build_pagination(2, 12, 30) == {
      "currentPage": 2,
      "totalPages": 3,
      "totalItems": 30,
      "itemsPerPage": 12,
      "hasNextPage": True,
      "hasPrevPage": True
    }

  @pytest.mark.parametrize("total, limit, pages", [(0, 12, 0), (1, 12, 1), (12, 12, 1), (13, 12, 2), (20, 7, 3)])
  def test_total_pages_is_ceiling(self, total, limit, pages):
    assert build_pagination(1, limit, total)["totalPages"] == pages

  def test_page_beyond_end(self):
    pagination = build_pagination(999, 12, 20)
    assert pagination["totalItems"] == 20
    assert pagination["hasNextPage"] is False
    assert pagination["hasPrevPage"] is True

  def test_no_results(self):
    pagination = build_pagination(1, 12, 0)
    assert pagination["hasNextPage"] is False
    assert pagination["hasPrevPage"] is False
