"""Custom exception hierarchy for the preview service."""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Preview definition errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INDEX_DEFINITION_NOT_FOUND = "INDEX_DEFINITION_NOT_FOUND"
    PREVIEW_UNSUPPORTED = "PREVIEW_UNSUPPORTED"

    # Preview build errors
    BUILD_FAILED = "BUILD_FAILED"
    UNRESOLVED_PLACEHOLDER = "UNRESOLVED_PLACEHOLDER"

    # Search engine errors
    REMOTE_ERROR = "REMOTE_ERROR"

    # Preview handle errors
    PREVIEW_NOT_FOUND = "PREVIEW_NOT_FOUND"

    # Generic errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class PreviewException(Exception):
    """
    Base exception for all preview service errors.

    Provides structured error responses with:
    - Human-readable message
    - Machine-readable error code
    - HTTP status code
    - Optional additional details
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for JSON response.

        Returns:
            Dictionary with error, message, and details fields
        """
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class ValidationError(PreviewException):
    """Preview capability of an index definition is malformed."""

    def __init__(self, message: str, plugin_id: Optional[str] = None, context: Optional[str] = None):
        details = {}
        if plugin_id:
            details["plugin_id"] = plugin_id
        if context:
            details["context"] = context
        super().__init__(
            message,
            ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=details
        )


class IndexDefinitionNotFoundError(PreviewException):
    """No index definition is registered under the plugin id."""

    def __init__(self, plugin_id: str):
        super().__init__(
            f"Index definition not found: {plugin_id}",
            ErrorCode.INDEX_DEFINITION_NOT_FOUND,
            status_code=404,
            details={"plugin_id": plugin_id}
        )


class PreviewUnsupportedError(PreviewException):
    """No index definition can preview the entity in the requested context."""

    def __init__(self, entity_type: str, bundle: Optional[str], context: str):
        super().__init__(
            f"Preview is not supported for {entity_type}:{bundle or '-'} in context '{context}'",
            ErrorCode.PREVIEW_UNSUPPORTED,
            status_code=422,
            details={"entity_type": entity_type, "bundle": bundle, "context": context}
        )


class BuildError(PreviewException):
    """A preview index was created but the preview could not be completed."""

    def __init__(
        self,
        message: str,
        plugin_id: Optional[str] = None,
        index_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
        error_code: ErrorCode = ErrorCode.BUILD_FAILED,
    ):
        details: Dict[str, Any] = {}
        if plugin_id:
            details["plugin_id"] = plugin_id
        if index_name:
            details["index_name"] = index_name
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(message, error_code, status_code=500, details=details)
        self.original_error = original_error


class UnresolvedPlaceholderError(BuildError):
    """A path template placeholder has no value in the indexed document."""

    def __init__(self, placeholder: str, template: str):
        super().__init__(
            f"Placeholder '{{{placeholder}}}' in preview path '{template}' has no value",
            error_code=ErrorCode.UNRESOLVED_PLACEHOLDER,
        )
        self.placeholder = placeholder
        self.details.update({"placeholder": placeholder, "template": template})


class RemoteError(PreviewException):
    """Search engine call failed."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
        **context: Any,
    ):
        details: Dict[str, Any] = {k: v for k, v in context.items() if v is not None}
        if operation:
            details["operation"] = operation
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(message, ErrorCode.REMOTE_ERROR, status_code=502, details=details)
        self.original_error = original_error


class PreviewNotFoundError(PreviewException):
    """Preview handle is unknown or has expired."""

    def __init__(self, handle: str):
        super().__init__(
            f"Preview not found: {handle}",
            ErrorCode.PREVIEW_NOT_FOUND,
            status_code=404,
            details={"handle": handle}
        )
