"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timezone

import pytest
from bson import ObjectId

# ============================================================
# Store double
# ============================================================


class FakeStore:
  """In-memory stand-in for MongoDBClient.

  Categories and users are looked up for real; aggregate_articles returns
  the canned facet result and records every pipeline it receives.
  """

  def __init__(self, categories=None, users=None, articles=None, facet=None):
    self.categories = list(categories or [])
    self.users = list(users or [])
    self.articles = list(articles or [])
    self.facet = facet if facet is not None else [{"articles": [], "totalCount": []}]
    self.pipelines = []
    self.incremented = []
    self.error = None

  def _maybe_fail(self):
    if self.error is not None:
      raise self.error

  def find_category(self, value):
    self._maybe_fail()
    for field in ("slug", "name"):
      for category in self.categories:
        if category.get(field) == value:
          return category
    return None

  def find_category_by_id(self, category_id):
    self._maybe_fail()
    return next((c for c in self.categories if c["_id"] == category_id), None)

  def find_user_by_id(self, user_id):
    self._maybe_fail()
    return next((u for u in self.users if u["_id"] == user_id), None)

  def list_categories(self):
    self._maybe_fail()
    return sorted(self.categories, key=lambda c: c["name"])

  def aggregate_articles(self, pipeline):
    self.pipelines.append(pipeline)
    self._maybe_fail()
    return self.facet

  def find_published_article(self, article_id):
    self._maybe_fail()
    return next(
      (dict(a) for a in self.articles if a["_id"] == article_id and a.get("status") == "published"),
      None
    )

  def increment_views(self, article_id):
    self.incremented.append(article_id)
    return True

  def count_by_filter(self, filter_dict):
    self._maybe_fail()
    return len([a for a in self.articles if a.get("status") == filter_dict.get("status")])

  def ping(self):
    self._maybe_fail()
    return True


# ============================================================
# Data fixtures
# ============================================================


@pytest.fixture
def now():
  """Fixed reference time for relative date formatting."""
  return datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def economy_category():
  return {"_id": ObjectId(), "name": "Kinh tế", "slug": "kinh-te"}


@pytest.fixture
def tech_category():
  return {"_id": ObjectId(), "name": "Công nghệ", "slug": "cong-nghe"}


@pytest.fixture
def author():
  return {"_id": ObjectId(), "fullName": "Nguyễn Văn An", "email": "an@example.com", "role": "admin"}


@pytest.fixture
def aggregated_article():
  """Article document as produced by the search pipeline."""
  return {
    "_id": ObjectId("66f1c0a2b3c4d5e6f7a8b9c0"),
    "title": "Giá vàng hôm nay",
    "slug": "gia-vang-hom-nay",
    "shortDescription": "Giá vàng tăng mạnh",
    "coverImageUrl": "/uploads/vang.jpg",
    "publicationDate": datetime(2026, 10, 19, 9, 0),
    "views": 42,
    "tags": ["vàng", "kinh tế"],
    "categoryName": "Kinh tế",
    "categorySlug": "kinh-te",
    "authorName": "Nguyễn Văn An",
    "relevanceScore": 15
  }


@pytest.fixture
def store(economy_category, tech_category, author):
  return FakeStore(categories=[economy_category, tech_category], users=[author])
