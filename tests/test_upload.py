import os

from tutorlink.configs.settings import settings
from tutorlink.cores import file_validator

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


async def test_receipt_with_bad_extension_is_rejected(client, make_student):
    _, _, headers = await make_student()

    response = await client.post("/api/upload/receipt", headers=headers,
                                 files={"file": ("script.exe", b"MZ....", "application/octet-stream")})
    print(response.text)

    assert response.status_code == 400
    assert response.json()["detail"].startswith("Extensión no permitida")


async def test_empty_receipt_is_rejected(client, make_student):
    _, _, headers = await make_student()

    response = await client.post("/api/upload/receipt", headers=headers,
                                 files={"file": ("recibo.png", b"", "image/png")})

    assert response.status_code == 400
    assert response.json()["detail"] == "El archivo está vacío"


async def test_receipt_saved_under_upload_dir(client, make_student, tmp_path, monkeypatch):
    _, _, headers = await make_student()
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    monkeypatch.setattr(file_validator.magic, "from_buffer", lambda content, mime=True: "image/png")

    response = await client.post("/api/upload/receipt", headers=headers,
                                 files={"file": ("recibo.png", PNG_BYTES, "image/png")})
    print(response.text)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["path"].startswith("/uploads/receipts/")
    assert os.path.exists(os.path.join(tmp_path, "receipts", data["filename"]))


async def test_mime_mismatch_is_rejected(client, make_student, monkeypatch):
    _, _, headers = await make_student()
    monkeypatch.setattr(file_validator.magic, "from_buffer", lambda content, mime=True: "text/html")

    response = await client.post("/api/upload/receipt", headers=headers,
                                 files={"file": ("recibo.pdf", b"<html></html>", "application/pdf")})

    assert response.status_code == 400
    assert "MIME" in response.json()["detail"]


async def test_profile_image_updates_user(client, make_student, tmp_path, monkeypatch):
    _, _, headers = await make_student()
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    monkeypatch.setattr(file_validator.magic, "from_buffer", lambda content, mime=True: "image/png")

    response = await client.post("/api/upload/profile", headers=headers,
                                 files={"file": ("yo.png", PNG_BYTES, "image/png")})
    assert response.status_code == 201

    profile = await client.get("/api/profile/student/", headers=headers)
    assert profile.json()["data"]["image"] == response.json()["data"]["path"]
