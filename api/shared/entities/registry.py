"""Entity registry to ensure SQLAlchemy loads all table metadata.

Import all entity modules here so ``BaseEntity.metadata.create_all`` sees them.
"""
# Import base first to expose BaseEntity.metadata
from api.shared.entities.base import BaseEntity  # noqa: F401

# Feature: Transcript
from api.features.transcript.entities.message import Message  # noqa: F401
from api.features.transcript.entities.feedback import Feedback  # noqa: F401
