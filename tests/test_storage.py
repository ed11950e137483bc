import io
import os

import pytest
from fastapi import UploadFile

from civic_issues.main import app
from civic_issues.storage import LocalFileStorage, get_storage


def test_store_writes_file_and_returns_url(tmp_path):
    storage = LocalFileStorage(str(tmp_path / "uploads"))
    upload = UploadFile(file=io.BytesIO(b"jpeg-bytes"), filename="Pothole.JPG")

    url = storage.store(upload)

    assert url.startswith("/uploads/")
    assert url.endswith(".jpg")
    stored = tmp_path / "uploads" / url.rsplit("/", 1)[1]
    assert stored.read_bytes() == b"jpeg-bytes"


def test_store_gives_each_upload_a_fresh_name(tmp_path):
    storage = LocalFileStorage(str(tmp_path))
    first = storage.store(UploadFile(file=io.BytesIO(b"a"), filename="same.png"))
    second = storage.store(UploadFile(file=io.BytesIO(b"b"), filename="same.png"))
    assert first != second
    assert len(os.listdir(tmp_path)) == 2


@pytest.fixture
def upload_client(client, tmp_path):
    app.dependency_overrides[get_storage] = lambda: LocalFileStorage(str(tmp_path))
    yield client
    del app.dependency_overrides[get_storage]


def test_upload_endpoint(upload_client, citizen, tmp_path):
    response = upload_client.post(
        "/upload",
        files=[
            ("files", ("one.jpg", b"1", "image/jpeg")),
            ("files", ("two.png", b"2", "image/png")),
        ],
        headers=citizen["headers"],
    )

    assert response.status_code == 200
    urls = response.json()["urls"]
    assert len(urls) == 2
    assert sorted(os.listdir(tmp_path)) == sorted(url.rsplit("/", 1)[1] for url in urls)


def test_upload_requires_files(upload_client, citizen):
    response = upload_client.post("/upload", headers=citizen["headers"])
    assert response.status_code == 400
    assert response.json() == {"error": "No files provided"}


def test_upload_requires_login(upload_client):
    response = upload_client.post("/upload", files=[("files", ("one.jpg", b"1", "image/jpeg"))])
    assert response.status_code == 401
