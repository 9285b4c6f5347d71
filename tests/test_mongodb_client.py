"""
Tests for the MongoDB adapter, with pymongo collections mocked.
"""

from unittest.mock import MagicMock, patch

import pytest
from bson import ObjectId

from news_portal.database.mongodb_client import MongoDBClient

TEST_CONFIG = {
  "database": {
    "mongodb_uri": "mongodb://configured:27017",
    "mongodb_uri_env": "NEWS_PORTAL_TEST_URI_ENV",
    "database_name": "news_test",
    "collections": {"articles": "articles", "categories": "categories", "users": "users"}
  }
}


@pytest.fixture
def client(monkeypatch):
  monkeypatch.delenv("NEWS_PORTAL_TEST_URI_ENV", raising=False)
  with patch("news_portal.database.mongodb_client.pymongo.MongoClient") as mongo_client:
    db = MongoDBClient(config=TEST_CONFIG, create_indexes=False)
  db.articles = MagicMock()
  db.categories = MagicMock()
  db.users = MagicMock()
  db._mongo_client = mongo_client
  return db


class TestConnection:

  def test_uses_configured_uri(self, client):
    args, kwargs = client._mongo_client.call_args
    assert args[0] == "mongodb://configured:27017"
    assert kwargs["serverSelectionTimeoutMS"] == 5000

  def test_environment_overrides_uri(self, monkeypatch):
    monkeypatch.setenv("NEWS_PORTAL_TEST_URI_ENV", "mongodb://from-env:27017")
    with patch("news_portal.database.mongodb_client.pymongo.MongoClient") as mongo_client:
      MongoDBClient(config=TEST_CONFIG, create_indexes=False)
    assert mongo_client.call_args[0][0] == "mongodb://from-env:27017"


class TestFindCategory:
  """Slug is looked up before name."""

  def test_slug_match_stops_lookup(self, client):
    category = {"_id": ObjectId(), "name": "Công nghệ", "slug": "cong-nghe"}
    client.categories.find_one.return_value = category

    assert client.find_category("cong-nghe") is category
    client.categories.find_one.assert_called_once_with({"slug": "cong-nghe"})

  def test_falls_back_to_name(self, client):
    category = {"_id": ObjectId(), "name": "Công nghệ", "slug": "cong-nghe"}
    client.categories.find_one.side_effect = [None, category]

    assert client.find_category("Công nghệ") is category
    calls = [c.args[0] for c in client.categories.find_one.call_args_list]
    assert calls == [{"slug": "Công nghệ"}, {"name": "Công nghệ"}]

  def test_not_found(self, client):
    client.categories.find_one.return_value = None
    assert client.find_category("khong-co") is None

  def test_by_id_skips_missing_reference(self, client):
    assert client.find_category_by_id(None) is None
    client.categories.find_one.assert_not_called()


class TestArticles:

  def test_aggregate_materializes_cursor(self, client):
    client.articles.aggregate.return_value = iter([{"articles": [], "totalCount": []}])
    assert client.aggregate_articles([{"$match": {}}]) == [{"articles": [], "totalCount": []}]

  def test_published_lookup_filters_status(self, client):
    oid = ObjectId()
    client.find_published_article(oid)
    client.articles.find_one.assert_called_once_with({"_id": oid, "status": "published"})

  def test_increment_views(self, client):
    oid = ObjectId()
    client.articles.update_one.return_value.modified_count = 1
    assert client.increment_views(oid) is True
    client.articles.update_one.assert_called_once_with({"_id": oid}, {"$inc": {"views": 1}})

  def test_find_by_slug_reads_title_only(self, client):
    client.articles.find_one.return_value = {"_id": ObjectId(), "title": "Giá vàng", "slug": "gia-vang"}

    assert client.find_article_by_slug("gia-vang")["title"] == "Giá vàng"
    client.articles.find_one.assert_called_once_with({"slug": "gia-vang"}, {"title": 1, "slug": 1})

  def test_insert_duplicate_slug_is_skipped(self, client):
    from pymongo.errors import DuplicateKeyError
    client.articles.insert_one.side_effect = DuplicateKeyError("dup")
    assert client.insert_article({"title": "x", "slug": "x"}) is None


class TestIndexes:

  def test_creates_only_missing_indexes(self, client):
    client.articles.name = "articles"
    client.categories.name = "categories"
    client.articles.list_indexes.return_value = [
      {"key": {"_id": 1}, "name": "_id_"},
      {"key": {"status": 1}, "name": "status_1"},
    ]
    client.categories.list_indexes.return_value = [{"key": {"_id": 1}, "name": "_id_"}]

    client._create_indexes()

    article_fields = [c.args[0] for c in client.articles.create_index.call_args_list]
    assert "status" not in article_fields
    assert set(article_fields) == {"categoryId", "publicationDate", "views", "slug"}
    client.categories.create_index.assert_any_call("slug", unique=True)
