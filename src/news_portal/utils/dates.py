from datetime import datetime, timezone
from typing import Any, Optional
from dateutil import parser

UNKNOWN_DATE_LABEL = "Chưa rõ"
JUST_NOW_LABEL = "Vừa xong"


def to_utc(value: Any) -> Optional[datetime]:
  """Coerce a stored timestamp into an aware UTC datetime.

  MongoDB hands back naive datetimes that are already UTC; strings (e.g. from
  YAML fixtures or JSON) are parsed with dateutil.
  """
  if value is None or value == "":
    return None
  if isinstance(value, str):
    value = parser.isoparse(value)
  if not isinstance(value, datetime):
    return None
  if value.tzinfo is None:
    return value.replace(tzinfo=timezone.utc)
  return value.astimezone(timezone.utc)


def format_long_date(value: datetime) -> str:
  """Vietnamese long date, e.g. '19 tháng 10, 2026'"""
  return f"{value.day} tháng {value.month}, {value.year}"


def format_time_ago(value: Any, now: Optional[datetime] = None) -> str:
  """Human relative time for a publication timestamp.

  Args:
    value: datetime, ISO string or None
    now: reference time, defaults to the current UTC time
  """
  published = to_utc(value)
  if published is None:
    return UNKNOWN_DATE_LABEL

  now = to_utc(now) if now is not None else datetime.now(timezone.utc)
  diff_seconds = (now - published).total_seconds()

  # Floored whole units
  minutes = int(diff_seconds // 60)
  hours = minutes // 60
  days = hours // 24

  if minutes < 1:
    return JUST_NOW_LABEL
  elif minutes < 60:
    return f"{minutes} phút trước"
  elif hours < 24:
    return f"{hours} giờ trước"
  elif days < 7:
    return f"{days} ngày trước"
  elif days < 30:
    return f"{days // 7} tuần trước"
  return format_long_date(published)


def to_iso(value: Any) -> Optional[str]:
  """ISO-8601 string for JSON output, None when absent"""
  converted = to_utc(value)
  return converted.isoformat() if converted else None
