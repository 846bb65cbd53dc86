"""
Service interfaces for dependency inversion.
Allows swapping storage backends without changing request handling.
"""

from .store import EventRecord, EventStore, StoreResult, Ok, NotFound, Conflict, Failure
from .upload import UploadAuthorizer, UploadGrant

__all__ = [
    'EventRecord', 'EventStore', 'StoreResult', 'Ok', 'NotFound', 'Conflict', 'Failure',
    'UploadAuthorizer', 'UploadGrant',
]
