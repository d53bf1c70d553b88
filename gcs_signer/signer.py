from .signed_urls import DEFAULT_GCS_URL, sign_url


class GcsSigner:
    """
    Signs URLs for objects on Google Cloud Storage with one set of
    credentials.

        signer = GcsSigner(CredentialContext.from_keyfile_json(keyfile))
        signer.sign_url('your-bucket', 'object/name')
        # => 'https://storage.googleapis.com/your-bucket/object/name?...'

    ``clock`` is a callable returning the current time; it is sampled once
    per signed URL.
    """

    def __init__(self, credentials, gcs_url=DEFAULT_GCS_URL, clock=None):
        self.credentials = credentials
        self.gcs_url = gcs_url
        self.clock = clock

    def sign_url(self, bucket, key, version='v2', **options):
        options.setdefault('gcs_url', self.gcs_url)
        if self.clock is not None and 'now' not in options:
            options['now'] = self.clock()
        return sign_url(self.credentials, bucket, key, version=version, **options)

    def __repr__(self):
        return ("<GcsSigner "
                f"project_id: {self.credentials.project_id} "
                f"client_email: {self.credentials.principal}>")
