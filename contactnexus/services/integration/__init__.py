"""
Integration Services

Adapters between the domain services and the collaborators around them:
the smart group suggester and contact import/export.
"""

from .suggestion_service import SuggestionService
from .transfer_service import TransferService

__all__ = [
    'SuggestionService',
    'TransferService'
]
