"""Record/Collection Extension Hook

Mixins that make host classes validatable, plus reference Record and
RecordCollection implementations.
"""
from .mixins import CollectionValidation, ModelValidation
from .record import Events, Record, RecordCollection

__all__ = [
    "ModelValidation",
    "CollectionValidation",
    "Events",
    "Record",
    "RecordCollection",
]
