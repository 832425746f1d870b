"""Test configuration for ensuring package imports and shared fixtures."""

import os
import sys

import pytest

# Add the repository root (the directory containing this file) to ``sys.path``
# so ``contactnexus`` imports without an editable install.
ROOT_DIR = os.path.abspath(os.path.dirname(__file__))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from contactnexus.core.dependencies import build_services  # noqa: E402
from contactnexus.core.store import InMemoryDatabase  # noqa: E402
from contactnexus.services.integration.suggestion_service import SurnameGroupSuggester  # noqa: E402


@pytest.fixture
def db():
    return InMemoryDatabase()


@pytest.fixture
def services(db):
    """Services wired around a fresh, empty database."""
    return build_services(db, SurnameGroupSuggester())
