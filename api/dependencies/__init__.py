"""FastAPI dependencies."""
from api.dependencies.auth import require_reviewer

__all__ = ["require_reviewer"]
