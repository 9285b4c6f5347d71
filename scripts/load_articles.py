#!/usr/bin/env python3
"""
Article Loading Script

This script loads articles from YAML files into MongoDB, creating the
referenced categories and authors on the way.

Expected file structure:
data/
  articles/
  kinh-te-01.yaml
  cong-nghe-01.yaml
  ...

YAML article format:
title: "Giá vàng hôm nay"
shortDescription: "Giá vàng trong nước tăng mạnh"
content: |-
  Nội dung bài viết...
category: "Kinh tế"
author:
  fullName: "Nguyễn Văn A"
  email: "a@example.com"
tags: ["vàng", "kinh tế"]
status: "published"
publicationDate: "2026-10-01 08:30"
coverImageUrl: "/uploads/vang.jpg"
views: 0
"""

import sys
import yaml
import click
from datetime import datetime, timezone
from dateutil import parser
from pathlib import Path
from tqdm import tqdm
from typing import Dict, Any, Optional
from news_portal.database.mongodb_client import MongoDBClient
from news_portal.models.article import (
  Article, ArticleStatus, Author, Category, slugify, unique_slug, UNPUBLISHED_DATE
)
from news_portal.utils.config import CONFIG


class ArticleLoader:
  """Handle article loading with category/author resolution"""

  def __init__(self, db=None, force: bool = False):
    """Initialize loader

    Args:
      db: Store adapter, a MongoDBClient from the configuration by default
      force: Load articles again even when their slug is already taken
    """
    self.db = db if db is not None else MongoDBClient()
    self.force = force
    self._category_ids = {}
    self._author_ids = {}

  def load_article_from_yaml(self, yaml_path: str) -> Dict[str, Any]:
    """Load article from YAML file"""
    with open(yaml_path, 'r', encoding='utf-8') as f:
      return yaml.safe_load(f)

  def category_id_for(self, name: Optional[str]):
    """Existing or newly created category id, None without a name"""
    if not name:
      return None
    if name not in self._category_ids:
      category = self.db.find_category(name)
      if category is None:
        category_id = self.db.insert_category(Category(name=name, slug=slugify(name)).to_dict())
      else:
        category_id = category['_id']
      self._category_ids[name] = category_id
    return self._category_ids[name]

  def author_id_for(self, data: Optional[Dict[str, Any]]):
    """Existing or newly created user id, matched by email"""
    if not data or not data.get('email'):
      return None
    email = data['email']
    if email not in self._author_ids:
      user = self.db.find_user_by_email(email)
      if user is None:
        author = Author(full_name=data.get('fullName', email), email=email)
        user_id = self.db.insert_user(author.to_dict())
      else:
        user_id = user['_id']
      self._author_ids[email] = user_id
    return self._author_ids[email]

  def slug_for(self, data: Dict[str, Any], title: str) -> Optional[str]:
    """Free slug for a fixture, None when the article is already loaded.

    A slug held by an article with the same title means the fixture was
    loaded before. Any other collision gets a timestamp suffix.
    """
    slug = slugify(data.get('slug') or title) or "bai-viet"
    existing = self.db.find_article_by_slug(slug)
    if existing is None:
      return slug
    if existing.get('title') == title and not self.force:
      return None
    return unique_slug(slug, self.db.slug_exists)

  def create_article_from_yaml(self, yaml_path: str) -> Optional[Article]:
    """Create Article object from YAML file, None when already loaded"""

    # Load YAML data
    data = self.load_article_from_yaml(yaml_path)

    title = data.get('title')
    if not title:
      raise ValueError(f"Article {yaml_path} has no title, ignoring it")

    slug = self.slug_for(data, title)
    if slug is None:
      return None

    status = ArticleStatus(data.get('status', ArticleStatus.PUBLISHED.value))

    # Drafts keep the epoch sentinel until published
    publication_date = fuzzy_parse_date(data.get('publicationDate'))
    if publication_date is None:
      publication_date = UNPUBLISHED_DATE if status == ArticleStatus.DRAFT else datetime.now(timezone.utc)

    # Tags: list or comma separated string, duplicates removed
    tags = data.get('tags') or []
    if isinstance(tags, str):
      tags = tags.split(',')
    tags = list(dict.fromkeys(str(t).strip() for t in tags if str(t).strip()))

    return Article(
      title = title,
      slug = slug,
      short_description = data.get('shortDescription', ''),
      content = data.get('content', ''),
      cover_image_url = data.get('coverImageUrl'),
      status = status,
      category_id = self.category_id_for(data.get('category')),
      author_id = self.author_id_for(data.get('author')),
      tags = tags,
      views = int(data.get('views', 0)),
      publication_date = publication_date,
      updated_at = datetime.now(timezone.utc)
    )

  def load_batch(self, articles_dir: str) -> Dict[str, int]:
    """Load all articles from directory"""

    articles_path = Path(articles_dir)

    if not articles_path.exists():
      raise ValueError(f"Articles directory not found: {articles_dir}")

    article_files = [
      f for f in sorted(articles_path.iterdir())
      if f.is_file() and f.suffix in {'.yaml', '.yml'}
    ]

    stats = {
      "total": len(article_files),
      "loaded": 0,
      "skipped": 0,
      "errors": 0
    }

    print(f"\nFound {stats['total']} article files in {articles_dir}")

    # Process each article
    for article_file in tqdm(article_files, desc = "Loading articles"):
      try:
        article = self.create_article_from_yaml(str(article_file))
        if article is not None and self.db.insert_article(article.to_dict()):
          stats['loaded'] += 1
        else:
          stats['skipped'] += 1

      except yaml.YAMLError as e:
        print(f"\n✗ YAML Error in {article_file.name}: {e}")
        stats['errors'] += 1
      except (ValueError, KeyError) as e:
        print(f"\n✗ Error processing {article_file.name}: {e}")
        stats['errors'] += 1

    return stats


def fuzzy_parse_date(value) -> Optional[datetime]:
  """Parse a YAML date value, None when missing or unreadable"""
  if value is None or value == '':
    return None
  if isinstance(value, datetime):
    parsed = value
  else:
    try:
      parsed = parser.parse(str(value), fuzzy = True)
    except (ValueError, OverflowError):
      return None
  if parsed.tzinfo is None:
    parsed = parsed.replace(tzinfo = timezone.utc)
  return parsed


@click.command()
@click.option('--articles-dir',
              default = CONFIG.get('ingestion', {}).get('articles_path', 'data/articles'),
              help = 'Directory containing article YAML files')
@click.option('--clear-db', is_flag = True,
        help = 'Clear articles, categories and users before loading (DANGEROUS!)')
@click.option('--force', is_flag = True,
        help = 'Load articles whose slug already exists under a new slug')

def main(articles_dir, clear_db, force):
  """Load articles from YAML files into MongoDB"""

  print("="*80)
  print("ARTICLE LOADING")
  print("="*80)

  loader = ArticleLoader(force = force)

  # Clear database if requested
  if clear_db:
    response = input("⚠ WARNING: This will delete all articles, categories and users! Type 'YES' to confirm: ")
    if response == "YES":
      loader.db.clear_collections()
    else:
      print("Aborted.")
      return

  try:
    stats = loader.load_batch(articles_dir)

    # Print statistics
    print("\n" + "="*80)
    print("LOADING COMPLETE")
    print("="*80)
    print(f"Total files: {stats['total']}")
    print(f"✓ Loaded: {stats['loaded']}")
    print(f"⊘ Skipped: {stats['skipped']}")
    print(f"✗ Errors: {stats['errors']}")

    # Show database statistics
    db_stats = loader.db.get_statistics()
    print("\nDatabase Statistics:")
    print(f"Total articles in DB: {db_stats['total_articles']}")
    print(f"Published: {db_stats['published_articles']}")
    print(f"Categories: {db_stats['categories']}")
    if db_stats['date_range']['oldest']:
      print(f"Date range: {db_stats['date_range']['oldest'].date()} to {db_stats['date_range']['newest'].date()}")

  except Exception as e:
    print(f"\n✗ Fatal error: {e}")
    import traceback
    traceback.print_exc()
    sys.exit(1)


if __name__ == "__main__":
  main()
