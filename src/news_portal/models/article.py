import re
import unicodedata
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Dict, Any, Callable
from dataclasses import dataclass, field
from bson import ObjectId

# Fallback labels for references that do not resolve
UNCATEGORIZED_NAME = "Chưa phân loại"
UNCATEGORIZED_SLUG = "uncategorized"
UNKNOWN_AUTHOR = "Không rõ"

# Drafts carry this value until they are published
UNPUBLISHED_DATE = datetime(1970, 1, 1, tzinfo=timezone.utc)


class ArticleStatus(str, Enum):
  DRAFT = "draft"
  PUBLISHED = "published"


class UserRole(str, Enum):
  GUEST = "guest"
  USER = "user"
  ADMIN = "admin"


@dataclass
class Category:
  """Category structure"""
  name: str
  slug: str
  id: Optional[ObjectId] = None

  def to_dict(self) -> Dict[str, Any]:
    """Convert to dictionary for MongoDB"""
    data = {"name": self.name, "slug": self.slug}
    if self.id is not None:
      data["_id"] = self.id
    return data


@dataclass
class Author:
  """User structure, limited to what readers need"""
  full_name: str
  email: str
  role: UserRole = UserRole.USER
  id: Optional[ObjectId] = None
  created_at: Optional[datetime] = None

  def to_dict(self) -> Dict[str, Any]:
    """Convert to dictionary for MongoDB"""
    data = {
      "fullName": self.full_name,
      "email": self.email,
      "role": self.role.value,
      "createdAt": self.created_at or datetime.now(timezone.utc)
    }
    if self.id is not None:
      data["_id"] = self.id
    return data


@dataclass
class Article:
  """Article as written by the loader.

  Stored documents are loosely shaped: everything except the title may be
  missing, so the read side applies its own fallbacks to raw documents.
  """
  title: str
  slug: str
  short_description: str = ""
  content: str = ""
  cover_image_url: Optional[str] = None
  status: ArticleStatus = ArticleStatus.DRAFT
  category_id: Optional[ObjectId] = None
  author_id: Optional[ObjectId] = None
  tags: List[str] = field(default_factory=list)
  views: int = 0
  publication_date: datetime = UNPUBLISHED_DATE
  updated_at: Optional[datetime] = None
  id: Optional[ObjectId] = None

  def to_dict(self) -> Dict[str, Any]:
    """Convert to dictionary for MongoDB"""
    data = {
      "title": self.title,
      "slug": self.slug,
      "shortDescription": self.short_description,
      "content": self.content,
      "coverImageUrl": self.cover_image_url,
      "status": self.status.value,
      "categoryId": self.category_id,
      "authorId": self.author_id,
      "tags": list(self.tags),
      "views": self.views,
      "publicationDate": self.publication_date,
      "updatedAt": self.updated_at or datetime.now(timezone.utc)
    }
    if self.id is not None:
      data["_id"] = self.id
    return data


def title_to_slug(title: Optional[str]) -> str:
  """Display-only slug: lowercase title, whitespace runs become hyphens"""
  if not title:
    return ""
  return re.sub(r"\s+", "-", title.lower())


def slugify(text: str) -> str:
  """URL-safe slug, Vietnamese diacritics removed ('Công nghệ' -> 'cong-nghe')"""
  text = text.replace("đ", "d").replace("Đ", "D")
  normalized = unicodedata.normalize("NFKD", text)
  ascii_text = normalized.encode("ascii", "ignore").decode("ascii")
  return re.sub(r"[^a-z0-9]+", "-", ascii_text.lower()).strip("-")


def unique_slug(
    text: str,
    exists: Callable[[str], bool],
    now: Optional[datetime] = None) -> str:
  """Slug for text, suffixed with a millisecond timestamp on collision"""
  slug = slugify(text) or "bai-viet"
  if not exists(slug):
    return slug
  stamp = int((now or datetime.now(timezone.utc)).timestamp() * 1000)
  return f"{slug}-{stamp}"
