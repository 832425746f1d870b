"""
Base Service Classes and Utilities

This module provides the foundation for all service layer implementations including
base classes, error handling, result types, and common service patterns.
"""

import logging
from typing import Any, Dict, List, Optional, Generic, TypeVar, Callable
from datetime import datetime, timezone
from abc import ABC
from dataclasses import dataclass
from functools import wraps

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ServiceError(Exception):
    """Base exception for service layer errors."""

    http_status = 500

    def __init__(self, message: str, error_code: str = None, details: Dict[str, Any] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "SERVICE_ERROR"
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)


class ValidationError(ServiceError):
    """Validation error in service layer."""

    http_status = 400

    def __init__(self, message: str, field: str = None, value: Any = None):
        super().__init__(message, "VALIDATION_ERROR", {"field": field, "value": value})
        self.field = field
        self.value = value


class NotFoundError(ServiceError):
    """Resource not found error."""

    http_status = 404

    def __init__(self, resource_type: str, identifier: str):
        message = f"{resource_type} not found: {identifier}"
        super().__init__(message, "NOT_FOUND", {"resource_type": resource_type, "identifier": identifier})
        self.resource_type = resource_type
        self.identifier = identifier


class CycleError(ServiceError):
    """Re-parenting would make a group its own ancestor."""

    http_status = 409

    def __init__(self, group_id: str, parent_id: str):
        if group_id == parent_id:
            message = f"Group {group_id} cannot be its own parent"
        else:
            message = f"Group {parent_id} is a descendant of {group_id} and cannot become its parent"
        super().__init__(message, "CYCLE_ERROR", {"group_id": group_id, "parent_id": parent_id})
        self.group_id = group_id
        self.parent_id = parent_id


class SuggestionError(ServiceError):
    """The group suggestion collaborator failed or answered nonsense."""

    http_status = 502

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(message, "SUGGESTION_ERROR", details)


@dataclass
class ServiceResult(Generic[T]):
    """Standard result type for service operations."""
    success: bool
    data: Optional[T] = None
    error: Optional[ServiceError] = None
    warnings: List[str] = None
    metadata: Dict[str, Any] = None

    def __post_init__(self):
        if self.warnings is None:
            self.warnings = []
        if self.metadata is None:
            self.metadata = {}

    @classmethod
    def success_result(cls, data: T, metadata: Dict[str, Any] = None, warnings: List[str] = None) -> 'ServiceResult[T]':
        """Create a successful result."""
        return cls(success=True, data=data, metadata=metadata or {}, warnings=warnings or [])

    @classmethod
    def error_result(cls, error: ServiceError, metadata: Dict[str, Any] = None) -> 'ServiceResult[T]':
        """Create an error result."""
        return cls(success=False, error=error, metadata=metadata or {})

    @classmethod
    def from_exception(cls, exc: Exception, metadata: Dict[str, Any] = None) -> 'ServiceResult[T]':
        """Create error result from exception."""
        if isinstance(exc, ServiceError):
            error = exc
        else:
            error = ServiceError(str(exc), "INTERNAL_ERROR")
        return cls.error_result(error, metadata)

    def unwrap(self) -> T:
        """Return ``data`` or raise the carried error."""
        if not self.success:
            raise self.error
        return self.data


def service_method(func: Callable) -> Callable:
    """Decorator for service methods with automatic error handling and logging."""

    @wraps(func)
    def wrapper(self, *args, **kwargs):
        method_name = f"{self.__class__.__name__}.{func.__name__}"
        logger.debug(f"[{method_name}] Starting operation")

        try:
            # Validate service state
            if hasattr(self, '_validate_service_state'):
                self._validate_service_state()

            # Execute the method
            result = func(self, *args, **kwargs)

            # Log outcome
            if isinstance(result, ServiceResult):
                if result.success:
                    logger.debug(f"[{method_name}] Operation completed successfully")
                else:
                    logger.error(f"[{method_name}] Operation failed: {result.error.message}")
            else:
                logger.debug(f"[{method_name}] Operation completed")

            return result

        except ServiceError as e:
            logger.warning(f"[{method_name}] Service error: {e.message}")
            return ServiceResult.error_result(e)
        except Exception as e:
            logger.exception(f"[{method_name}] Unexpected error: {e}")
            error = ServiceError(f"Internal error in {method_name}: {str(e)}", "INTERNAL_ERROR")
            return ServiceResult.error_result(error)

    return wrapper


class BaseService(ABC):
    """Abstract base class for all services."""

    def __init__(self, name: str = None):
        self.name = name or self.__class__.__name__
        self.logger = logging.getLogger(f"services.{self.name}")
        self._initialized = False
        self._dependencies = {}
        self._configuration = {}

    def initialize(self, config: Dict[str, Any] = None) -> None:
        """Initialize the service with configuration."""
        self._configuration = config or {}
        self._initialized = True
        self.logger.debug(f"Service {self.name} initialized")

    def _validate_service_state(self) -> None:
        """Validate that the service is properly initialized."""
        if not self._initialized:
            raise ServiceError(f"Service {self.name} not initialized", "SERVICE_NOT_INITIALIZED")

    def add_dependency(self, name: str, service: 'BaseService') -> None:
        """Add a service dependency."""
        self._dependencies[name] = service
        self.logger.debug(f"Added dependency: {name}")

    def get_dependency(self, name: str) -> 'BaseService':
        """Get a service dependency."""
        if name not in self._dependencies:
            raise ServiceError(f"Dependency {name} not found", "DEPENDENCY_NOT_FOUND")
        return self._dependencies[name]

    @property
    def config(self) -> Dict[str, Any]:
        """Get service configuration."""
        return self._configuration

    def get_config(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self._configuration.get(key, default)
