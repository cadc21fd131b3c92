"""API route modules."""
from api.routes import notifications, questions, recordings, submissions

__all__ = ["notifications", "questions", "recordings", "submissions"]
