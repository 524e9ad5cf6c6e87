# tests/unit/test_local_storage.py
#
# Unit tests for the local filesystem gateway used in development
# (LOCAL_STORAGE=1). Files are written under pytest's tmp_path only.
import io

import pytest

from src.aws.config import StorageConfig
from src.aws.s3_utils import R2Gateway
from src.errors import ValidationError
from src.services.storage import LocalStorageGateway, build_storage


def test_put_get_delete(tmp_path):
    gw = LocalStorageGateway(str(tmp_path), "http://localhost:8000/local-media/")
    gw.put("events/1-a.jpg", b"abc", "image/jpeg")
    gw.put("videos/1-b.mp4", io.BytesIO(b"video"), "video/mp4")

    assert gw.get("events/1-a.jpg").body == b"abc"
    assert gw.get("events/1-a.jpg").content_type == "image/jpeg"
    assert gw.get("videos/1-b.mp4").body == b"video"

    gw.delete("events/1-a.jpg")
    assert gw.get("events/1-a.jpg") is None
    # deleting twice is fine
    gw.delete("events/1-a.jpg")


def test_public_base_and_presign(tmp_path):
    gw = LocalStorageGateway(str(tmp_path), "http://localhost:8000/local-media/")
    assert gw.public_base_url == "http://localhost:8000/local-media"
    assert gw.is_available()
    assert gw.presign_put("videos/1-x-b.mp4", "video/mp4") == "local://upload/videos/1-x-b.mp4"


def test_key_outside_root_is_refused(tmp_path):
    gw = LocalStorageGateway(str(tmp_path / "root"), "http://localhost")
    with pytest.raises(ValidationError):
        gw.put("../escape.txt", b"x", "text/plain")
    with pytest.raises(ValidationError):
        gw.get("events/../../escape.txt")
    with pytest.raises(ValidationError):
        gw.delete("../escape.txt")


def test_bucket_is_root_directory_name(tmp_path):
    gw = LocalStorageGateway(str(tmp_path / "local-media") + "/", "http://localhost")
    assert gw.bucket == "local-media"


def test_build_storage_selects_gateway(tmp_path):
    local = build_storage(StorageConfig.from_env({"LOCAL_STORAGE": "1", "LOCAL_STORAGE_DIR": str(tmp_path)}))
    assert isinstance(local, LocalStorageGateway)
    assert local.public_base_url == "http://localhost:8000/local-media"

    remote = build_storage(StorageConfig.from_env({}))
    assert isinstance(remote, R2Gateway)
    assert remote.is_available() is False
