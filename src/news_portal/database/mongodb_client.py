import os
import pymongo
from datetime import datetime, date
from typing import Dict, List, Any, Optional
from bson import ObjectId
from news_portal.utils.logger import logger
from news_portal.utils.config import CONFIG


class MongoDBClient:
  """MongoDB client for the articles, categories and users collections"""

  def __init__(self, config: Optional[Dict[str, Any]] = None, create_indexes: bool = True):
    """Initialize MongoDB client"""
    db_config = (config or CONFIG)['database']
    self.db_config = db_config

    # Environment wins over the configured URI
    uri = os.environ.get(db_config.get('mongodb_uri_env', 'MONGODB_URI')) or db_config['mongodb_uri']

    # Connect to MongoDB
    self.client = pymongo.MongoClient(
      uri,
      serverSelectionTimeoutMS = db_config.get('server_selection_timeout_ms', 5000)
    )
    self.db = self.client[db_config['database_name']]

    collections = db_config.get('collections', {})
    self.articles = self.db[collections.get('articles', 'articles')]
    self.categories = self.db[collections.get('categories', 'categories')]
    self.users = self.db[collections.get('users', 'users')]

    # Create indexes
    if create_indexes:
      self._create_indexes()

  def _create_indexes(self):
    """Create necessary indexes for efficient querying, in needed"""
    specs = [
      (self.articles, "status", {}),
      (self.articles, "categoryId", {}),
      (self.articles, "publicationDate", {}),
      (self.articles, "views", {}),
      (self.articles, "slug", {"unique": True}),
      (self.categories, "slug", {"unique": True}),
      (self.categories, "name", {}),
    ]

    created = 0
    existing_by_collection = {}

    # Create indexes if they do not exist
    for collection, field, options in specs:
      if collection.name not in existing_by_collection:
        # Convert SON → dict → sorted tuple (hashable)
        existing_by_collection[collection.name] = {
          tuple(sorted(dict(idx["key"]).items()))
          for idx in collection.list_indexes()
        }
      key_tuple = ((field, 1),)

      if key_tuple not in existing_by_collection[collection.name]:
        collection.create_index(field, **options)
        created += 1

    if created > 0:
      logger.info(f"✓ đã tạo {created} chỉ mục trong cơ sở dữ liệu")

  def ping(self) -> bool:
    """Check the server answers"""
    self.client.admin.command('ping')
    return True

  def mongo_clean(self, doc):
    """Convert non-BSON types to serializable"""
    if isinstance(doc, dict):
      return {k: self.mongo_clean(v) for k, v in doc.items()}
    elif isinstance(doc, list):
      return [self.mongo_clean(x) for x in doc]
    elif isinstance(doc, date) and not isinstance(doc, datetime):
      return datetime.combine(doc, datetime.min.time())
    return doc

  # Categories

  def find_category(self, value: str) -> Optional[Dict[str, Any]]:
    """Find a category by slug, then by name.

    Two lookups keep the precedence deterministic when a name collides with
    another category's slug.
    """
    category = self.categories.find_one({"slug": value})
    if category is None:
      category = self.categories.find_one({"name": value})
    return category

  def find_category_by_id(self, category_id: Any) -> Optional[Dict[str, Any]]:
    if category_id is None:
      return None
    return self.categories.find_one({"_id": category_id})

  def list_categories(self) -> List[Dict[str, Any]]:
    """All categories sorted by name"""
    return list(self.categories.find({}).sort("name", pymongo.ASCENDING))

  def insert_category(self, category_data: Dict[str, Any]) -> ObjectId:
    result = self.categories.insert_one(category_data)
    return result.inserted_id

  # Users

  def find_user_by_id(self, user_id: Any) -> Optional[Dict[str, Any]]:
    if user_id is None:
      return None
    return self.users.find_one({"_id": user_id})

  def find_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
    return self.users.find_one({"email": email})

  def insert_user(self, user_data: Dict[str, Any]) -> ObjectId:
    result = self.users.insert_one(self.mongo_clean(user_data))
    return result.inserted_id

  # Articles

  def aggregate_articles(self, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Run an aggregation pipeline on the articles collection"""
    return list(self.articles.aggregate(pipeline))

  def find_published_article(self, article_id: ObjectId) -> Optional[Dict[str, Any]]:
    return self.articles.find_one({"_id": article_id, "status": "published"})

  def increment_views(self, article_id: ObjectId) -> bool:
    """Add one view to an article"""
    result = self.articles.update_one({"_id": article_id}, {"$inc": {"views": 1}})
    return result.modified_count > 0

  def find_article_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
    return self.articles.find_one({"slug": slug}, {"title": 1, "slug": 1})

  def slug_exists(self, slug: str) -> bool:
    return self.articles.count_documents({"slug": slug}, limit=1) > 0

  def insert_article(self, article_data: Dict[str, Any]) -> Optional[str]:
    """Insert a single article"""
    try:
      article_data_clean = self.mongo_clean(article_data)
      result = self.articles.insert_one(article_data_clean)
    except pymongo.errors.DuplicateKeyError:
      logger.info("ℹ Bài viết đã tồn tại (bỏ qua)")
      return None
    except pymongo.errors.OperationFailure as e:
      logger.error(f"✗ Lỗi MongoDB: {e}")
      raise # Rethrow for caller to handle
    return str(result.inserted_id)

  def count_by_filter(self, filter_dict: Dict[str, Any]) -> int:
    """Count articles matching filter"""
    return self.articles.count_documents(filter_dict)

  def clear_collections(self):
    """Clear articles, categories and users (use with caution!)"""
    self.articles.delete_many({})
    self.categories.delete_many({})
    self.users.delete_many({})
    logger.info("⚠ Đã xóa toàn bộ dữ liệu của các collection")

  def get_statistics(self) -> Dict[str, Any]:
    """Get collection statistics"""
    total_articles = self.articles.count_documents({})
    published = self.articles.count_documents({"status": "published"})

    # Get date range of published articles
    oldest = self.articles.find_one(
      {"status": "published"},
      sort=[("publicationDate", pymongo.ASCENDING)]
    )
    newest = self.articles.find_one(
      {"status": "published"},
      sort=[("publicationDate", pymongo.DESCENDING)]
    )

    return {
      "total_articles": total_articles,
      "published_articles": published,
      "categories": self.categories.count_documents({}),
      "authors": self.users.count_documents({}),
      "date_range": {
        "oldest": oldest['publicationDate'] if oldest else None,
        "newest": newest['publicationDate'] if newest else None
      }
    }

  def close(self):
    self.client.close()
