"""Stock request workflow: create, approve, reject, complete, delete, queries."""

from stockroom.workflow import stock_requests

__all__ = ["stock_requests"]
