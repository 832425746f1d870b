"""
ContactNexus

In-memory contact manager with a nested family/friend group hierarchy,
exposed as a FastAPI service.
"""

__version__ = "1.0.0"
