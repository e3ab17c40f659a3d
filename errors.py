# errors.py
# Exception types shared by the engine and the Flask API.

from typing import Any, Dict, Optional


class PlannerError(ValueError):
    # Base class for errors reported back to the caller.
    def __init__(self, message: str, status_code: int = 400, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# Raised when a generation request is rejected before any search work.
class ValidationError(PlannerError):
    pass


# Raised when an uploaded catalog document cannot be modelled.
class CatalogError(PlannerError):
    pass
