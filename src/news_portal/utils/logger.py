import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

# uvicorn loggers that share our handlers when serving the API
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def setup_logger(
  name: str = "news_portal",
  log_file: Optional[str] = "logs/news_portal.log",
  level: str = "INFO",
  attach: Iterable[str] = SERVER_LOGGERS
):
  """
  Console + file logging for the portal

  Args:
    name: Logger name
    log_file: Path to log file, None for console only
    level: Log level (DEBUG, INFO, WARNING, ERROR)
    attach: Other loggers routed to the same handlers
  """
  handlers = []

  # Console: short timestamps
  console_handler = logging.StreamHandler(sys.stdout)
  console_handler.setFormatter(logging.Formatter(
    "%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%H:%M:%S"
  ))
  handlers.append(console_handler)

  # File: full timestamps and source location
  if log_file:
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_path, encoding='utf-8')
    file_handler.setFormatter(logging.Formatter(
      "%(asctime)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s",
      datefmt="%Y-%m-%d %H:%M:%S"
    ))
    handlers.append(file_handler)

  for logger_name in (name, *attach):
    target = logging.getLogger(logger_name)
    target.setLevel(getattr(logging, level.upper()))
    target.handlers = list(handlers)
    target.propagate = False

  return logging.getLogger(name)

# Global logger instance
logger = logging.getLogger("news_portal")
