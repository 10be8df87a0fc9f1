#!/usr/bin/env python3
"""
Custom exceptions for the Photo Pipeline
Every failure is raised loudly with enough detail to act on it
"""

import sys
import traceback
from typing import Optional, Dict, Any


class PhotoPipelineError(Exception):
    """Base exception for all Photo Pipeline errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize exception with message and optional details

        Args:
            message: Error message
            details: Additional error details
        """
        self.message = message
        self.details = details or {}

        full_message = f"\n{'=' * 70}\n"
        full_message += "❌ PHOTO PIPELINE ERROR ❌\n"
        full_message += f"{'=' * 70}\n\n"
        full_message += f"ERROR: {message}\n"

        if self.details:
            full_message += "\nDETAILS:\n"
            if isinstance(self.details, dict):
                for key, value in self.details.items():
                    full_message += f"  {key}: {value}\n"
            else:
                full_message += f"  {self.details}\n"

        full_message += f"\n{'=' * 70}\n"

        super().__init__(full_message)


class ConfigurationError(PhotoPipelineError):
    """Raised when caller configuration or settings are invalid or missing"""
    pass


class EngineError(PhotoPipelineError):
    """Raised when the image engine cannot read, transform or write an image"""

    def __init__(self, operation: str, path: Any, error: Exception):
        self.operation = operation
        self.path = str(path)
        self.error = error
        details = {
            "Operation": operation,
            "Path": self.path,
            "Error type": type(error).__name__,
            "Error message": str(error)
        }
        super().__init__(f"Image engine failed during '{operation}'", details)


class LoggingError(PhotoPipelineError):
    """Raised when logging setup or operations fail"""

    def __init__(self, operation: str, error: str, resolution: str = ""):
        message = (
            f"❌ LOGGING FAILURE: {operation}\n"
            f"Error: {error}"
        )
        if resolution:
            message += f"\nResolution: {resolution}"

        super().__init__(message)


def handle_error(error: Exception, context: str = "") -> None:
    """Report an error loudly and exit with status 1

    Args:
        error: The exception that occurred
        context: Additional context about what was happening
    """
    print("\n" + "❌" * 35)
    print("FATAL ERROR - CANNOT CONTINUE")
    print("❌" * 35)

    if context:
        print(f"\nCONTEXT: {context}")

    if isinstance(error, PhotoPipelineError):
        print(str(error))
    else:
        print(f"\nERROR TYPE: {type(error).__name__}")
        print(f"ERROR MESSAGE: {str(error)}")
        print("\nFULL TRACEBACK:")
        print(traceback.format_exc())

    print("\n" + "❌" * 35)

    sys.exit(1)
