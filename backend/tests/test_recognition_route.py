import base64

import httpx
import pytest

from imagepro import config
from imagepro.proxy.recognition import (
    NoContent,
    PlainText,
    TextChunks,
    extract_summary,
    parse_message_content,
)


def _completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def test_success_is_relayed_and_payload_carries_image(client, upstream, jpeg_bytes):
    body = b'{"choices": [{"message": {"content": "a cat on a sofa"}}]}'
    upstream.respond(200, content=body)
    resp = client.post(
        "/api/recognize",
        files={"image_file": ("cat.jpg", jpeg_bytes, "image/jpeg")},
        data={"prompt": "What is this?"},
    )
    assert resp.status_code == 200
    assert resp.content == body

    sent = upstream.requests[0]
    assert str(sent.url) == config.ARK_CHAT_ENDPOINT
    assert sent.headers["Authorization"] == "Bearer ark-test-key"
    payload = upstream.last_json
    assert payload["model"] == config.ARK_VISION_MODEL
    text_part, image_part = payload["messages"][0]["content"]
    assert text_part == {"type": "text", "text": "What is this?"}
    expected_url = "data:image/jpeg;base64," + base64.b64encode(jpeg_bytes).decode("ascii")
    assert image_part == {"type": "image_url", "image_url": {"url": expected_url}}


def test_default_prompt_when_absent(client, upstream, jpeg_bytes):
    upstream.respond(200, json=_completion("ok"))
    client.post("/api/recognize", files={"image_file": ("cat.jpg", jpeg_bytes, "image/jpeg")})
    assert upstream.last_json["messages"][0]["content"][0]["text"] == config.DEFAULT_RECOGNITION_PROMPT


def test_missing_file_is_rejected(client, upstream):
    resp = client.post("/api/recognize", data={"prompt": "hi"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Please upload an image file"}
    assert upstream.call_count == 0


def test_oversized_file_is_rejected_without_external_call(client, upstream, monkeypatch, jpeg_bytes):
    monkeypatch.setattr(config, "MAX_IMAGE_SIZE_BYTES", len(jpeg_bytes) - 1)
    resp = client.post("/api/recognize", files={"image_file": ("cat.jpg", jpeg_bytes, "image/jpeg")})
    assert resp.status_code == 400
    assert "error" in resp.json()
    assert upstream.call_count == 0


def test_wrong_media_type_is_rejected(client, upstream):
    resp = client.post("/api/recognize", files={"image_file": ("notes.txt", b"hello", "text/plain")})
    assert resp.status_code == 400
    assert upstream.call_count == 0


def test_missing_credential_fails_before_external_call(client, upstream, monkeypatch, jpeg_bytes):
    monkeypatch.setattr(config, "ARK_API_KEY", None)
    resp = client.post("/api/recognize", files={"image_file": ("cat.jpg", jpeg_bytes, "image/jpeg")})
    assert resp.status_code == 500
    assert "ARK_API_KEY" in resp.json()["error"]
    assert upstream.call_count == 0


def test_external_failure_is_mirrored(client, upstream, jpeg_bytes):
    upstream.respond(401, content=b'{"error": {"message": "invalid key"}}')
    resp = client.post("/api/recognize", files={"image_file": ("cat.jpg", jpeg_bytes, "image/jpeg")})
    assert resp.status_code == 401
    assert resp.json() == {"error": {"message": "invalid key"}}


def test_transport_error_becomes_server_error(client, upstream, jpeg_bytes):
    upstream.fail_with(httpx.ReadTimeout, "timed out")
    resp = client.post("/api/recognize", files={"image_file": ("cat.jpg", jpeg_bytes, "image/jpeg")})
    assert resp.status_code == 500
    assert resp.json() == {"error": "timed out"}


def test_summary_keeps_only_text_chunks():
    payload = _completion([
        {"type": "text", "text": "a red apple"},
        {"type": "image_url", "image_url": {"url": "data:image/png;base64,AAAA"}},
    ])
    assert extract_summary(payload) == "a red apple"


def test_summary_joins_text_chunks_in_order():
    payload = _completion([
        {"type": "text", "text": "  first  "},
        {"type": "reasoning", "text": "hidden"},
        {"type": "text", "text": "second\n"},
        {"type": "text", "text": "   "},
    ])
    assert extract_summary(payload) == "first\nsecond"


def test_plain_string_content_is_returned_unchanged():
    assert extract_summary(_completion("  A dog.  ")) == "  A dog.  "
    assert parse_message_content(_completion("A dog.")) == PlainText("A dog.")


@pytest.mark.parametrize("payload", [
    None,
    "text",
    {},
    {"choices": []},
    {"choices": [{}]},
    {"choices": [{"message": {"content": ""}}]},
    {"choices": [{"message": {"content": 42}}]},
])
def test_unusable_payloads_have_no_content(payload):
    assert parse_message_content(payload) == NoContent()
    assert extract_summary(payload) == ""


def test_chunk_list_is_parsed_as_text_chunks():
    content = parse_message_content(_completion([{"type": "text", "text": "x"}, "junk"]))
    assert isinstance(content, TextChunks)
    assert len(content.chunks) == 1
