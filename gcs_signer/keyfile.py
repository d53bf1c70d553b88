import logging
import os

from .credentials import CredentialContext
from .errors import AuthError
from .signed_urls import DEFAULT_GCS_URL
from .signer import GcsSigner

logger = logging.getLogger(__name__)

ENV_KEYFILE_PATHS = ('GOOGLE_CLOUD_KEYFILE', 'GOOGLE_APPLICATION_CREDENTIALS')
ENV_KEYFILE_JSON = 'GOOGLE_CLOUD_KEYFILE_JSON'


def read_keyfile(path):
    with open(path, encoding='utf-8') as f:
        return f.read()


def load_keyfile_json(path=None, keyfile_json=None, environ=None):
    """
    Resolve the service account keyfile contents.

    A ``path`` wins over inline ``keyfile_json``; when neither is given the
    environment is consulted, a keyfile path variable before the inline
    JSON variable.

    :return: the keyfile JSON text, or None if nothing was found
    :rtype: str
    """
    if path:
        logger.debug("Reading keyfile from %s", path)
        return read_keyfile(path)

    if keyfile_json:
        logger.debug("Using inline keyfile")
        return keyfile_json

    if environ is None:
        environ = os.environ

    for name in ENV_KEYFILE_PATHS:
        if environ.get(name):
            logger.debug("Reading keyfile from $%s", name)
            return read_keyfile(environ[name])

    if environ.get(ENV_KEYFILE_JSON):
        logger.debug("Using keyfile from $%s", ENV_KEYFILE_JSON)
        return environ[ENV_KEYFILE_JSON]

    return None


def create_signer(args, environ=None):
    """
    Create a GcsSigner using the connectivity information contained in args.

    :param args: action parameters
    :type args: dict
    :return: A GcsSigner
    :rtype: GcsSigner
    """

    # set the storage endpoint
    gcs_url = args.get('endpoint', args.get('ENDPOINT', DEFAULT_GCS_URL))

    keyfile_json = load_keyfile_json(path=args.get('keyfile', args.get('path')),
                                     keyfile_json=args.get('keyfile_json'),
                                     environ=environ)
    if keyfile_json is None:
        # fatal error; no service account was given to the action
        raise AuthError("No credentials given.")

    credentials = CredentialContext.from_keyfile_json(keyfile_json,
                                                      principal=args.get('client_email'))

    return GcsSigner(credentials, gcs_url=gcs_url)
