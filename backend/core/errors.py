"""
Error types shared by the upload guard, the parameter normalizer and the routers.

Validation errors carry a user-facing message and map to HTTP 400.
Configuration errors map to a generic HTTP 500; their details stay in the logs.
"""


class ImageValidationError(Exception):
    """A request failed validation; the message is safe to show to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingUpload(ImageValidationError):
    def __init__(self, message: str = "Missing image file upload"):
        super().__init__(message)


class EmptyUpload(ImageValidationError):
    def __init__(self, message: str = "Uploaded file is empty"):
        super().__init__(message)


class UploadTooLarge(ImageValidationError):
    def __init__(self, message: str = "Image exceeds 15MB limit"):
        super().__init__(message)


class MissingPrompt(ImageValidationError):
    def __init__(self, message: str = "Prompt is required"):
        super().__init__(message)


class ConfigurationError(Exception):
    """A server-side setting (usually a backend credential) is missing."""
