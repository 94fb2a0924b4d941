"""
Custom exceptions for the triage pipeline with enhanced error context.

None of these cross a component boundary of the core: extraction errors map
to an error locator, classification errors to the fallback verdict and
execution errors to a manual-needed outcome. Mail store errors are run-level.
"""

from typing import Dict, Any, Optional


class ExtractionError(Exception):
    """Raised when unsubscribe link extraction fails."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context

    def __str__(self) -> str:
        base_message = super().__str__()
        if self.context:
            context_info = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base_message} (context: {context_info})"
        return base_message


class ClassificationError(Exception):
    """Raised when the text-generation service gives no usable answer."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        base_message = super().__str__()
        if self.status_code is not None:
            return f"{base_message} (status_code={self.status_code})"
        return base_message


class ExecutionError(Exception):
    """Raised when an unsubscribe action cannot be carried out."""

    def __init__(self, message: str, method: Optional[str] = None, target: Optional[str] = None):
        super().__init__(message)
        self.method = method
        self.target = target

    def __str__(self) -> str:
        base_message = super().__str__()
        details = []
        if self.method:
            details.append(f"method={self.method}")
        if self.target:
            details.append(f"target={self.target}")

        if details:
            return f"{base_message} ({', '.join(details)})"
        return base_message


class MailStoreError(Exception):
    """Raised when the mail store cannot be reached or refuses an operation."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation

    def __str__(self) -> str:
        base_message = super().__str__()
        if self.operation:
            return f"{base_message} (operation={self.operation})"
        return base_message
