"""
HTTP接口测试（FastAPI TestClient）
"""
import pytest
from fastapi.testclient import TestClient

from upload_util.config import settings
from upload_util.core.client_factory import create_client
from upload_util.main import create_app

from tests.conftest import FakeTransport

PREFIX = settings.API_V1_PREFIX


@pytest.fixture
def local_api(local_config):
    app = create_app(storage_client=create_client(local_config))
    with TestClient(app) as client:
        yield client


@pytest.fixture
def minio_api(minio_config, fake_transport):
    app = create_app(storage_client=create_client(minio_config, transport=fake_transport))
    with TestClient(app) as client:
        yield client


def test_upload_file(local_api, tmp_path):
    response = local_api.post(
        f"{PREFIX}/upload/file",
        files={"file": ("test.txt", b"0123456789", "text/plain")},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["key"] == "test.txt"
    assert body["size"] == 10
    assert body["url"] == "file://test.txt"
    assert body["filename"] == "test.txt"
    assert (tmp_path / "test.txt").read_bytes() == b"0123456789"
    assert "X-Request-ID" in response.headers


def test_upload_rejected_extension(minio_api, fake_transport):
    response = minio_api.post(
        f"{PREFIX}/upload/file",
        files={"file": ("virus.exe", b"MZ", "application/octet-stream")},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "EXTENSIONNOTALLOWED"
    assert fake_transport.calls == 0


def test_backend_failure_maps_to_502(minio_config):
    client = create_client(minio_config, transport=FakeTransport(fail_with=ConnectionError("down")))
    with TestClient(create_app(storage_client=client)) as api:
        response = api.post(
            f"{PREFIX}/upload/file",
            files={"file": ("a.txt", b"abc", "text/plain")},
        )
    assert response.status_code == 502
    assert response.json()["error"]["code"] == "BACKENDWRITEFAILED"


def test_upload_multiple_files(minio_api):
    response = minio_api.post(
        f"{PREFIX}/upload/files",
        files=[
            ("files", ("a.txt", b"aaa", "text/plain")),
            ("files", ("b.png", b"bbb", "image/png")),
            ("files", ("c.exe", b"ccc", "application/octet-stream")),
        ],
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success_count"] == 2
    assert body["error_count"] == 1
    assert {r["key"] for r in body["results"]} == {"images/a.txt", "images/b.png"}
    assert body["errors"][0]["filename"] == "c.exe"
    assert body["errors"][0]["code"] == "EXTENSIONNOTALLOWED"


def test_get_url(minio_api):
    response = minio_api.get(f"{PREFIX}/upload/url", params={"key": "images/a.png"})
    assert response.status_code == 200
    assert response.json() == {
        "url": "http://localhost:9000/uploads/images/a.png",
        "key": "images/a.png",
    }


def test_get_url_requires_key(minio_api):
    response = minio_api.get(f"{PREFIX}/upload/url")
    assert response.status_code == 400


def test_delete_file(local_api, tmp_path):
    local_api.post(f"{PREFIX}/upload/file", files={"file": ("gone.txt", b"bye", "text/plain")})

    response = local_api.request("DELETE", f"{PREFIX}/upload/file", json={"key": "gone.txt"})
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert not (tmp_path / "gone.txt").exists()

    again = local_api.request("DELETE", f"{PREFIX}/upload/file", json={"key": "gone.txt"})
    assert again.status_code == 502
    assert again.json()["error"]["code"] == "BACKENDDELETEFAILED"


def test_health_and_root_redirect(local_api):
    response = local_api.get(f"{PREFIX}/system/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["storage"] == "local"

    root = local_api.get("/", follow_redirects=False)
    assert root.status_code in (302, 307)
    assert root.headers["location"].endswith("/system/health")


def test_startup_fails_on_bad_config(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_CONFIG_PATH", str(tmp_path / "missing.yaml"))
    app = create_app()
    with pytest.raises(Exception):
        with TestClient(app):
            pass
