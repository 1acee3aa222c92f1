import os

import pytest

# The handler module builds its boto3 client at import time
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("BUCKET_NAME", "test-upload-bucket")


class FakeS3:
    def __init__(self, url="https://example.com/signed?X=1", error=None):
        self.url = url
        self.error = error
        self.calls: list[dict] = []

    def generate_presigned_url(self, client_method, Params=None, ExpiresIn=3600, HttpMethod=None):
        self.calls.append({"ClientMethod": client_method, "Params": Params, "ExpiresIn": ExpiresIn})
        if self.error is not None:
            raise self.error
        return self.url


@pytest.fixture
def fake_s3():
    return FakeS3()


@pytest.fixture
def make_s3():
    return FakeS3
