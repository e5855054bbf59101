from .results import Failure, Found, NotFound, Result

__all__ = ["Failure", "Found", "NotFound", "Result"]
