"""Error taxonomy shared by the store adapter, the search layer and the API"""


class NewsPortalError(Exception):
  """Base class for errors rendered as a failure envelope"""
  status_code = 500

  def __init__(self, message: str):
    super().__init__(message)
    self.message = message


class InvalidRequest(NewsPortalError):
  """Request parameters rejected before any store access"""
  status_code = 400


class ArticleNotFound(NewsPortalError):
  """No published article with the requested id"""
  status_code = 404


class StoreUnavailable(NewsPortalError):
  """Any failure while reading from the document store"""
  status_code = 500


class CategoryNotResolved(NewsPortalError):
  """Category filter value matched neither a slug nor a name.

  Never reaches the client: the query builder logs it and drops the filter.
  """


class CategoryNotFound(NewsPortalError):
  """Article listing requested for a category that does not exist"""
  status_code = 404
