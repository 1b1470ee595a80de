"""
Registration pipeline errors.

Every error that aborts a submission derives from RegistrationServiceError.
The error_code identifies the failing step in logs; clients always receive
the same generic failure body.
"""


class RegistrationServiceError(Exception):
    """Base exception for registration pipeline errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 500):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class TemplateAssetError(RegistrationServiceError):
    """Raised when a document template, stylesheet or logo cannot be loaded."""

    def __init__(self, path, reason: str = "missing"):
        self.path = path
        super().__init__(
            message=f"Document template asset {path} could not be loaded ({reason})",
            error_code="TEMPLATE_ASSET_MISSING",
        )


class DocumentRenderError(RegistrationServiceError):
    """Raised when the browser fails to render or rasterize a document."""

    def __init__(self, kind: str, reason: str):
        self.kind = kind
        super().__init__(
            message=f"Failed to render {kind}: {reason}",
            error_code="RENDER_FAILED",
        )


class RegistrationPersistenceError(RegistrationServiceError):
    """Raised when the registration could not be saved."""

    def __init__(self, message: str, error_code: str = "PERSISTENCE_FAILED"):
        super().__init__(message=message, error_code=error_code)


class DuplicateSerialError(RegistrationPersistenceError):
    """Raised when the allocated serial number is already stored."""

    def __init__(self, serial_number: str):
        self.serial_number = serial_number
        super().__init__(
            message=f"Serial number {serial_number} is already registered",
            error_code="DUPLICATE_SERIAL_NUMBER",
        )
