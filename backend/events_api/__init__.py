"""Events API: validated CRUD for events with presigned image uploads."""

__version__ = "1.0.0"
