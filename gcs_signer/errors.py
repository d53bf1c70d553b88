class GcsSignerError(Exception):
    """Base class for everything raised by gcs_signer."""


class AuthError(GcsSignerError):
    """Raised when no credential material could be found."""


class InvalidKeyError(GcsSignerError, ValueError):
    """Raised when the keyfile or its private key cannot be parsed."""


class InvalidArgument(GcsSignerError, ValueError):
    """Raised when a signing call asks for an unsupported protocol version."""
