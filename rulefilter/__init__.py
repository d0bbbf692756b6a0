"""Rule-driven filters that assign or delete values in data when conditions hold."""

__version__ = "0.1.0"

__all__ = [
    "assign_delete",
    "assign_set",
    "assignment",
    "cache",
    "condition",
    "errors",
    "executor",
    "filter",
    "requestcontext",
]