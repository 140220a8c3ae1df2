"""Score admission and ranking logic shared by the web service and the admin CLI."""

__all__ = [
    "checksum",
    "errors",
    "formatting",
    "models",
    "service",
]
