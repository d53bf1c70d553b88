from .credentials import CredentialContext
from .errors import AuthError, GcsSignerError, InvalidArgument, InvalidKeyError
from .keyfile import create_signer, load_keyfile_json
from .signed_urls import (DEFAULT_GCS_URL, MAX_V4_EXPIRES, sign_url,
                          sign_url_v2, sign_url_v4)
from .signer import GcsSigner
