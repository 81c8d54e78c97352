"""
Custom exception hierarchy for the Agent Demo API.

This module defines a standardized exception hierarchy for consistent
error handling across the application.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class BaseAppException(HTTPException):
    """Base exception for all application errors."""

    def __init__(
        self,
        detail: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        headers: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code or self.__class__.__name__


# Authentication Exceptions


class AuthenticationError(BaseAppException):
    """Raised when authentication fails."""

    def __init__(
        self, detail: str = "Authentication failed", error_code: Optional[str] = None
    ):
        super().__init__(
            detail, status.HTTP_401_UNAUTHORIZED, error_code=error_code or "AUTH_ERROR"
        )


# Resource Exceptions


class ResourceNotFoundError(BaseAppException):
    """Raised when a resource is not found."""

    def __init__(self, resource_type: str, resource_id: str):
        detail = f"{resource_type} with ID '{resource_id}' not found"
        super().__init__(
            detail, status.HTTP_404_NOT_FOUND, error_code="RESOURCE_NOT_FOUND"
        )


class ResourceAlreadyExistsError(BaseAppException):
    """Raised when attempting to create a duplicate resource."""

    def __init__(self, resource_type: str, identifier: str):
        detail = f"{resource_type} with identifier '{identifier}' already exists"
        super().__init__(detail, status.HTTP_409_CONFLICT, error_code="RESOURCE_EXISTS")


class ResourceConflictError(BaseAppException):
    """Raised when an operation conflicts with the current state of a resource."""

    def __init__(self, detail: str, error_code: str = "RESOURCE_CONFLICT"):
        super().__init__(detail, status.HTTP_409_CONFLICT, error_code=error_code)


# Data Validation Exceptions


class ValidationError(BaseAppException):
    """Raised when data validation fails."""

    def __init__(self, detail: str, field: Optional[str] = None):
        error_code = (
            f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        )
        super().__init__(
            detail, status.HTTP_422_UNPROCESSABLE_ENTITY, error_code=error_code
        )


# Storage Exceptions


class StorageError(BaseAppException):
    """Raised when storage operations fail."""

    def __init__(self, detail: str, operation: str):
        # Map to controlled vocabulary to prevent high cardinality
        operation_map = {
            "read": "READ",
            "write": "WRITE",
            "delete": "DELETE",
            "create": "CREATE",
            "update": "UPDATE",
        }
        normalized_op = operation_map.get(operation.lower(), "UNKNOWN")
        super().__init__(
            f"Storage {operation} failed: {detail}",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code=f"STORAGE_{normalized_op}_ERROR",
        )


# Catalog Exceptions


class DomainNotFoundError(ResourceNotFoundError):
    """Raised when a domain is not found."""

    def __init__(self, domain_id: str):
        super().__init__("Domain", domain_id)


class DomainAlreadyExistsError(ResourceAlreadyExistsError):
    """Raised when a domain name is already taken."""

    def __init__(self, name: str):
        super().__init__("Domain", name)


class DomainNotEmptyError(ResourceConflictError):
    """Raised when deleting a domain that still owns agents."""

    def __init__(self, domain_id: str):
        super().__init__(
            f"Domain '{domain_id}' still has agents. Move or delete them first.",
            error_code="DOMAIN_NOT_EMPTY",
        )


class AgentNotFoundError(ResourceNotFoundError):
    """Raised when an agent is not found (or not published for demo users)."""

    def __init__(self, agent_id: str):
        super().__init__("Agent", agent_id)


class QuestionNotFoundError(ResourceNotFoundError):
    """Raised when a question is not found."""

    def __init__(self, question_id: str):
        super().__init__("Question", question_id)


class VariantNotFoundError(ResourceNotFoundError):
    """Raised when a question or answer variant is not found."""

    def __init__(self, variant_type: str, variant_id: str):
        super().__init__(variant_type, variant_id)


# Chat Exceptions


class ChatSessionNotFoundError(ResourceNotFoundError):
    """Raised when a chat session is missing, inactive or owned by another user."""

    def __init__(self, session_id: str):
        super().__init__("Chat session", session_id)
