# ---------------------------------------------------------------------------
# Unit Tests: Presigned Upload Issuer
#
# Covers single and batch presigning plus the opt-in confirmation check:
#   - the clip.mp4 scenario: publicUrl round-trips to the returned key
#   - policy validation happens before any URL is signed
#   - batch requests report per-file failures without failing the batch
#   - confirm_upload issues a HEAD request (mocked) and fails closed for
#     URLs outside the bucket
# ---------------------------------------------------------------------------
import pytest
import requests

from src.errors import StorageUnavailable, ValidationError
from src.schemas.media import PresignFile
from src.services.keys import derive_key_from_url
from src.services.presign import PresignService
from src.services.uploads import MB

T = 1700000000000


@pytest.fixture
def service(gateway, fixed_clock):
    return PresignService(gateway, clock=fixed_clock, suffix=lambda: "abc123def")


def test_clip_scenario_round_trips(service, gateway):
    issued = service.issue_presigned_upload("clip.mp4", "video/mp4", "videos")

    assert issued.key == f"videos/{T}-abc123def-clip.mp4"
    assert derive_key_from_url(issued.public_url, gateway.public_base_url) == issued.key
    assert issued.upload_url.startswith("https://signed.example.com/")
    assert gateway.presigns == [(issued.key, "video/mp4", 3600, None)]
    # presigning never writes the body
    assert gateway.puts == []


def test_declared_size_is_bound_and_checked(service, gateway):
    service.issue_presigned_upload("clip.mp4", "video/mp4", "videos", size=10 * MB)
    assert gateway.presigns[0][3] == 10 * MB

    with pytest.raises(ValidationError):
        service.issue_presigned_upload("huge.mp4", "video/mp4", "videos", size=600 * MB)
    assert len(gateway.presigns) == 1


def test_invalid_requests_are_never_signed(service, gateway):
    with pytest.raises(ValidationError):
        service.issue_presigned_upload("clip.mp4", "video/mp4", "nowhere")
    with pytest.raises(ValidationError):
        service.issue_presigned_upload("doc.pdf", "application/pdf", "videos")
    assert gateway.calls == 0


def test_unavailable_storage(gateway, fixed_clock):
    gateway.available = False
    with pytest.raises(StorageUnavailable):
        PresignService(gateway, clock=fixed_clock).issue_presigned_upload("clip.mp4", "video/mp4", "videos")
    assert gateway.calls == 0


def test_batch_reports_per_file_errors(service, gateway):
    files = [
        PresignFile(name="a.jpg", type="image/jpeg", size=1000),
        PresignFile(name="notes.txt", type="text/plain", size=10),
        PresignFile(name="b.png", type=None, size=None),
    ]
    result = service.issue_presigned_batch(files, "events")

    ok = [i for i in result.presigned_urls if not i.error]
    failed = [i for i in result.presigned_urls if i.error]
    assert [i.file_name for i in ok] == ["a.jpg", "b.png"]
    assert [i.file_name for i in failed] == ["notes.txt"]
    assert ok[1].content_type == "image/jpeg"
    assert result.public_url == "https://media.example.com"
    assert result.bucket == "test-bucket"
    assert len(gateway.presigns) == 2


def test_batch_sign_failure_is_per_file(service, gateway, mocker):
    from src.errors import StorageWriteError

    mocker.patch.object(gateway, "presign_put", side_effect=StorageWriteError("sign failed"))
    result = service.issue_presigned_batch([PresignFile(name="a.jpg", type="image/jpeg")], "events")
    assert result.presigned_urls[0].error == "sign failed"


def test_batch_invalid_folder_and_empty(service, gateway):
    with pytest.raises(ValidationError):
        service.issue_presigned_batch([PresignFile(name="a.jpg", type="image/jpeg")], "nowhere")
    with pytest.raises(ValidationError):
        service.issue_presigned_batch([], "events")
    assert gateway.calls == 0


def test_confirm_upload_head_ok(service, mocker):
    head = mocker.patch("src.services.presign.requests.head")
    head.return_value.status_code = 200

    assert service.confirm_upload("https://media.example.com/videos/1-x-clip.mp4") is True
    head.assert_called_once()
    assert head.call_args.args[0] == "https://media.example.com/videos/1-x-clip.mp4"


def test_confirm_upload_missing_object(service, mocker):
    head = mocker.patch("src.services.presign.requests.head")
    head.return_value.status_code = 404
    assert service.confirm_upload("https://media.example.com/videos/1-x-clip.mp4") is False


def test_confirm_upload_network_error(service, mocker):
    mocker.patch("src.services.presign.requests.head", side_effect=requests.ConnectionError("down"))
    assert service.confirm_upload("https://media.example.com/videos/1-x-clip.mp4") is False


def test_confirm_upload_rejects_foreign_urls(service, mocker):
    head = mocker.patch("src.services.presign.requests.head")
    with pytest.raises(ValidationError):
        service.confirm_upload("https://attacker.example.net/x")
    head.assert_not_called()
