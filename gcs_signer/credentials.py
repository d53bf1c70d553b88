import json
import logging

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.serialization import load_pem_private_key

from .errors import AuthError, InvalidKeyError

logger = logging.getLogger(__name__)


class CredentialContext:
    """
    Holds the RSA private key and the principal (service account email)
    used to sign URLs.

    The context is immutable once built and may be shared between threads;
    it never exposes the private key through ``repr``.
    """

    __slots__ = ('_signing_key', '_principal', '_project_id')

    def __init__(self, signing_key, principal, project_id=None):
        if signing_key is None:
            raise AuthError("No credentials given.")
        if not isinstance(signing_key, rsa.RSAPrivateKey):
            raise InvalidKeyError("Signing key must be an RSA private key")
        if not principal:
            raise InvalidKeyError("Credentials need a principal (client_email)")

        object.__setattr__(self, '_signing_key', signing_key)
        object.__setattr__(self, '_principal', principal)
        object.__setattr__(self, '_project_id', project_id)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @classmethod
    def from_pem(cls, pem, principal, project_id=None):
        """
        Build a context from a PEM encoded (PKCS#1 or PKCS#8) RSA key.

        :param pem: the private key
        :type pem: str or bytes
        :param principal: identity asserted by the signed URLs
        :type principal: str
        :return: a CredentialContext
        :rtype: CredentialContext
        """
        if not pem:
            raise AuthError("No credentials given.")
        if isinstance(pem, str):
            pem = pem.encode('utf-8')

        try:
            key = load_pem_private_key(pem, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise InvalidKeyError(f"Could not load private key: {e}") from e

        return cls(key, principal, project_id)

    @classmethod
    def from_keyfile_json(cls, keyfile_json, principal=None):
        """
        Build a context from the contents of a service account keyfile.

        The document must contain ``private_key``; ``client_email`` is used
        as the principal unless one is passed explicitly.

        :param keyfile_json: the keyfile document
        :type keyfile_json: str
        :param principal: overrides the keyfile's ``client_email``
        :type principal: str
        :return: a CredentialContext
        :rtype: CredentialContext
        """
        if not keyfile_json:
            raise AuthError("No credentials given.")

        try:
            credentials = json.loads(keyfile_json)
        except ValueError as e:
            raise InvalidKeyError(f"Keyfile is not valid JSON: {e}") from e

        if not isinstance(credentials, dict) or not credentials.get('private_key'):
            raise InvalidKeyError("Keyfile does not contain a private_key")

        if principal is None:
            principal = credentials.get('client_email')
        if not principal:
            raise InvalidKeyError("Keyfile does not contain a client_email")

        logger.debug("Loaded credentials for %s (project %s)",
                     principal, credentials.get('project_id'))

        return cls.from_pem(credentials['private_key'],
                            principal,
                            credentials.get('project_id'))

    @property
    def principal(self):
        return self._principal

    @property
    def project_id(self):
        return self._project_id

    def sign(self, payload):
        """Return the RSA-SHA256 (PKCS#1 v1.5) signature of ``payload``."""
        if isinstance(payload, str):
            payload = payload.encode('utf-8')
        return self._signing_key.sign(payload,
                                      padding.PKCS1v15(),
                                      hashes.SHA256())

    def __repr__(self):
        return (f"<{type(self).__name__} "
                f"project_id: {self._project_id} "
                f"client_email: {self._principal}>")

    __str__ = __repr__
