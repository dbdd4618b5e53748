"""Custom exception classes for the ProPR backend."""


class ProPRError(Exception):
    """Base exception for ProPR."""

    def __init__(self, code: str, message: str, details=None, status_code: int = 500):
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)


class ValidationError(ProPRError):
    """Submission is missing required fields or carries unusable values."""

    def __init__(self, message: str, details=None):
        super().__init__("VALIDATION_ERROR", message, details, status_code=422)


class NotFoundError(ProPRError):
    """Resource not found."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            "NOT_FOUND",
            f"{resource} not found: {resource_id}",
            status_code=404,
        )


class AuthenticationError(ProPRError):
    """Client key missing or wrong."""

    def __init__(self, message: str = "Invalid or missing X-Client-Key"):
        super().__init__("AUTHENTICATION_ERROR", message, status_code=401)


class CertificateError(ProPRError):
    """Usable TLS material could not be produced; fatal at startup."""

    def __init__(self, message: str):
        super().__init__("CERTIFICATE_ERROR", message)
