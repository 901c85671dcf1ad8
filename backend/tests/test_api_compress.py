import io

from PIL import Image

from conftest import make_image
from imagepro import config


def test_compress_returns_encoded_image(client):
    payload = make_image("JPEG", size=(300, 200), noise=True)
    resp = client.post(
        "/api/compress",
        files={"image_file": ("beach.jpg", payload, "image/jpeg")},
        data={"quality": "0.6"},
    )
    assert resp.status_code == 200, resp.text
    assert resp.headers["content-type"] == "image/jpeg"
    assert resp.headers["x-original-size"] == str(len(payload))
    assert resp.headers["x-compressed-size"] == str(len(resp.content))
    assert (resp.headers["x-image-width"], resp.headers["x-image-height"]) == ("300", "200")
    assert 'filename="compressed-beach.jpeg"' in resp.headers["content-disposition"]
    with Image.open(io.BytesIO(resp.content)) as img:
        assert img.size == (300, 200)


def test_compress_png_is_returned_as_png(client, png_bytes):
    resp = client.post("/api/compress", files={"image_file": ("icon.png", png_bytes, "image/png")})
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/png"


def test_compress_without_file_is_rejected(client):
    resp = client.post("/api/compress", data={"quality": "0.8"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Please upload an image file"}


def test_compress_oversized_file_is_rejected(client, monkeypatch, jpeg_bytes):
    monkeypatch.setattr(config, "MAX_IMAGE_SIZE_BYTES", 100)
    resp = client.post("/api/compress", files={"image_file": ("big.jpg", jpeg_bytes, "image/jpeg")})
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_compress_unsupported_type_is_rejected(client):
    resp = client.post("/api/compress", files={"image_file": ("anim.gif", b"GIF89a", "image/gif")})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Only JPG / PNG / WebP images are supported"


def test_compress_corrupt_file_reports_decode_error(client):
    resp = client.post("/api/compress", files={"image_file": ("broken.jpg", b"garbage", "image/jpeg")})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Failed to read image"}


def test_compress_quality_out_of_range(client, jpeg_bytes):
    resp = client.post(
        "/api/compress",
        files={"image_file": ("photo.jpg", jpeg_bytes, "image/jpeg")},
        data={"quality": "1.5"},
    )
    assert resp.status_code == 400


def test_limits_and_formats(client):
    limits = client.get("/api/limits").json()
    assert limits["max_image_size_bytes"] == config.MAX_IMAGE_SIZE_BYTES
    assert limits["allowed_media_types"] == ["image/jpeg", "image/png", "image/webp"]
    assert limits["quality"] == {"default_percent": 80, "min_percent": 40, "step_percent": 5}
    formats = client.get("/api/formats").json()
    assert formats["generation_sizes"] == ["1024x1024", "1280x720", "2K"]
    assert client.get("/api/health").json() == {"status": "ok"}
