import datetime
import json

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from gcs_signer import CredentialContext

CLIENT_EMAIL = 'renderer@choirless.iam.gserviceaccount.com'
PROJECT_ID = 'choirless'
FROZEN_UNIX = 1700000000


@pytest.fixture(scope='session')
def private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope='session')
def private_pem(private_key):
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode('ascii')


@pytest.fixture(scope='session')
def keyfile_json(private_pem):
    return json.dumps({
        'type': 'service_account',
        'project_id': PROJECT_ID,
        'private_key': private_pem,
        'client_email': CLIENT_EMAIL,
    })


@pytest.fixture
def credentials(keyfile_json):
    return CredentialContext.from_keyfile_json(keyfile_json)


@pytest.fixture
def frozen_now():
    return datetime.datetime.fromtimestamp(FROZEN_UNIX, tz=datetime.timezone.utc)
