## Signed URL support
## https://cloud.google.com/storage/docs/access-control/signed-urls
import datetime
import hashlib
import base64
import logging

from requests.compat import urlparse
from requests.utils import quote

from .errors import InvalidArgument

logger = logging.getLogger(__name__)

DEFAULT_GCS_URL = 'https://storage.googleapis.com'
DEFAULT_VALID_FOR = 300

# v4 signatures can not outlive seven days
MAX_V4_EXPIRES = 7 * 24 * 60 * 60

V4_ALGORITHM = 'GOOG4-RSA-SHA256'
V4_SCOPE_SUFFIX = 'auto/storage/goog4_request'


def split_endpoint(gcs_url):
    """Return the (scheme, host, path prefix) of a storage endpoint."""
    if '://' not in gcs_url:
        gcs_url = f'https://{gcs_url}'
    parsed = urlparse(gcs_url)
    return parsed.scheme, parsed.netloc, parsed.path.rstrip('/')


def encode_component(value, safe=''):
    # only RFC 3986 unreserved characters survive unescaped
    return quote(str(value).encode('utf-8'), safe=safe)


def request_path(bucket, key, prefix=''):
    """Canonical path of an object, slashes within the key stay literal."""
    return prefix + '/' + bucket + '/' + encode_component(key, safe='/')


def canonical_query(params):
    """Key-sorted, strictly percent-encoded query string; None values dropped."""
    return '&'.join(f'{encode_component(k)}={encode_component(v)}'
                    for k, v in sorted(params.items())
                    if v is not None)


def merge_params(extra, required):
    # required params always win over caller supplied ones
    merged = dict(extra or {})
    merged.update(required)
    return merged


def utc_now(now=None):
    if now is None:
        return datetime.datetime.now(tz=datetime.timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=datetime.timezone.utc)
    return now.astimezone(datetime.timezone.utc)


def unix_seconds(value):
    """Unix seconds of a datetime (naive means UTC) or a number."""
    if isinstance(value, datetime.datetime):
        return int(utc_now(value).timestamp())
    return int(value)


def duration_seconds(valid_for):
    if valid_for is None:
        return DEFAULT_VALID_FOR
    if isinstance(valid_for, datetime.timedelta):
        return int(valid_for.total_seconds())
    return int(valid_for)


def sign_url_v2(credentials, bucket, key,
                method='GET',
                expires=None,
                valid_for=DEFAULT_VALID_FOR,
                content_md5=None,
                content_type=None,
                response_content_disposition=None,
                response_content_type=None,
                params=None,
                gcs_url=DEFAULT_GCS_URL,
                now=None):
    """
    Create a signed URL using the legacy (v2) scheme.

    :param credentials: key and principal to sign with
    :type credentials: CredentialContext
    :param expires: absolute expiry, wins over valid_for
    :type expires: datetime.datetime or int
    :param valid_for: lifetime in seconds relative to now
    :type valid_for: int or datetime.timedelta
    :param params: extra query parameters
    :type params: dict
    :return: the signed URL
    :rtype: str
    """
    scheme, host, prefix = split_endpoint(gcs_url)
    path = request_path(bucket, key, prefix)

    if expires is not None:
        expires_at = unix_seconds(expires)
    else:
        expires_at = unix_seconds(utc_now(now)) + duration_seconds(valid_for)

    string_to_sign = '\n'.join([method,
                                content_md5 or '',
                                content_type or '',
                                str(expires_at),
                                path])
    signature = base64.b64encode(credentials.sign(string_to_sign)).decode('ascii')

    query = canonical_query(merge_params(params, {
        'GoogleAccessId': credentials.principal,
        'Expires': expires_at,
        'Signature': signature,
        'response-content-disposition': response_content_disposition,
        'response-content-type': response_content_type,
    }))

    logger.debug("Signed v2 %s url for gs://%s/%s expiring at %d",
                 method, bucket, key, expires_at)

    return f'{scheme}://{host}{path}?{query}'


def sign_url_v4(credentials, bucket, key,
                method='GET',
                expires=None,
                valid_for=DEFAULT_VALID_FOR,
                headers=None,
                response_content_disposition=None,
                response_content_type=None,
                params=None,
                gcs_url=DEFAULT_GCS_URL,
                now=None):
    """
    Create a signed URL using the scoped (v4) scheme.

    The signature covers the method, the path, the whole query string minus
    the signature itself, and every header in ``headers`` plus ``host``.
    """
    scheme, host, prefix = split_endpoint(gcs_url)
    path = request_path(bucket, key, prefix)

    # the same instant feeds the scope, the date and the expiry
    time = utc_now(now)
    timestamp = time.strftime('%Y%m%dT%H%M%SZ')
    datestamp = time.strftime('%Y%m%d')
    credential_scope = datestamp + '/' + V4_SCOPE_SUFFIX

    request_headers = {'host': host}
    for name, value in (headers or {}).items():
        request_headers[name.lower()] = str(value)
    signed_headers = ';'.join(sorted(request_headers))

    if expires is not None:
        goog_expires = unix_seconds(expires) - unix_seconds(time)
    else:
        goog_expires = duration_seconds(valid_for)
    goog_expires = max(0, min(goog_expires, MAX_V4_EXPIRES))

    # assemble the standardized request
    standardized_querystring = canonical_query(merge_params(params, {
        'X-Goog-Algorithm': V4_ALGORITHM,
        'X-Goog-Credential': credentials.principal + '/' + credential_scope,
        'X-Goog-Date': timestamp,
        'X-Goog-Expires': goog_expires,
        'X-Goog-SignedHeaders': signed_headers,
        'response-content-disposition': response_content_disposition,
        'response-content-type': response_content_type,
    }))

    standardized_headers = [f'{name}:{value}'
                            for name, value in sorted(request_headers.items())]

    standardized_request = '\n'.join([method,
                                      path,
                                      standardized_querystring,
                                      *standardized_headers,
                                      '',
                                      signed_headers,
                                      'UNSIGNED-PAYLOAD'])

    # assemble string-to-sign
    sts = '\n'.join([V4_ALGORITHM,
                     timestamp,
                     credential_scope,
                     hashlib.sha256(standardized_request.encode('utf-8')).hexdigest()])

    signature = credentials.sign(sts).hex()

    logger.debug("Signed v4 %s url for gs://%s/%s valid for %ds",
                 method, bucket, key, goog_expires)

    return (f'{scheme}://{host}{path}?' +
            standardized_querystring +
            '&X-Goog-Signature=' +
            signature)


SIGNERS = {
    'v2': sign_url_v2,
    'v4': sign_url_v4,
}


def sign_url(credentials, bucket, key, version='v2', headers=None, **options):
    """
    Create a signed URL for ``key`` in ``bucket``.

    ``version`` selects the protocol, ``v2`` (default) or ``v4``. Remaining
    keyword arguments are passed to the selected protocol; ``headers`` only
    has a meaning under ``v4`` and is ignored for ``v2``.

    If neither ``expires`` nor ``valid_for`` is given the URL is valid for
    300 seconds::

        sign_url(credentials, 'bucket-name', 'path/to/file', valid_for=30 * 60)
        sign_url(credentials, 'bucket-name', 'path/to/file', version='v4',
                 headers={'x-goog-meta-owner': 'choir'})
    """
    signer = SIGNERS.get(version)
    if signer is None:
        raise InvalidArgument(f"Version not supported: {version!r}")

    if version == 'v4':
        options['headers'] = headers
    elif headers:
        logger.debug("Ignoring headers for %s signature", version)

    return signer(credentials, bucket, key, **options)
