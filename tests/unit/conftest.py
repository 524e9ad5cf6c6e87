# ---------------------------------------------------------------------------
# Shared fixtures for the media service unit tests.
#
# FakeGateway stands in for the R2 gateway. It records every put, delete and
# presign call so tests can assert on how many storage calls a service made
# (including "none at all" when validation should have stopped the request).
# ---------------------------------------------------------------------------
import pytest

from src.aws.s3_utils import StoredObject
from src.errors import StorageWriteError

PUBLIC_BASE = "https://media.example.com"


class FakeGateway:
    def __init__(self, available=True, public_base_url=PUBLIC_BASE):
        self.available = available
        self.public_base_url = public_base_url
        self.bucket = "test-bucket"
        self.objects = {}
        self.puts = []
        self.deletes = []
        self.presigns = []
        self.fail_put = False
        self.fail_delete = False

    def is_available(self):
        return self.available

    def put(self, key, body, content_type):
        if self.fail_put:
            raise StorageWriteError(f"Failed to store {key}: boom")
        data = body if isinstance(body, (bytes, bytearray)) else body.read()
        self.puts.append((key, content_type))
        self.objects[key] = StoredObject(bytes(data), content_type)

    def delete(self, key):
        self.deletes.append(key)
        if self.fail_delete:
            raise StorageWriteError(f"Failed to delete {key}: boom")
        self.objects.pop(key, None)

    def presign_put(self, key, content_type, ttl_seconds=3600, content_length=None):
        self.presigns.append((key, content_type, ttl_seconds, content_length))
        return f"https://signed.example.com/{key}?X-Amz-Expires={ttl_seconds}"

    def get(self, key):
        return self.objects.get(key)

    @property
    def calls(self):
        return len(self.puts) + len(self.deletes) + len(self.presigns)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def fixed_clock():
    return lambda: 1700000000000
