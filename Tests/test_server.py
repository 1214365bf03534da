import os, sys, io, pytest
from PIL import Image
from fastapi.testclient import TestClient
ROOT = os.path.dirname(os.path.dirname(__file__))
sys.path.insert(0, ROOT)

from PixelPass.server.server import app
from PixelPass.client import send_images

client = TestClient(app)

def png_bytes(color, size=(8, 8)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()

def upload(*colors):
    return [("images", (f"img{i}.png", png_bytes(c), "image/png")) for i, c in enumerate(colors)]

def test_defaults():
    r = client.get("/policy/defaults")
    assert r.status_code == 200
    assert r.json()["max_attempts"] == 100
    assert r.json()["max_length"] == 1024

def test_generate_is_reproducible():
    form = {"length": "12", "chars": "ulns", "count": "3"}
    r1 = client.post("/generate", files=upload((0, 0, 0), (255, 255, 255)), data=form)
    r2 = client.post("/generate", files=upload((255, 255, 255), (0, 0, 0)), data=form)
    assert r1.status_code == 200, r1.text
    body = r1.json()
    assert body == r2.json()
    assert len(body["passwords"]) == 3 and len(set(body["passwords"])) == 3
    assert body["images"] == 2 and len(body["digest_hex"]) == 64

def test_generate_randomized_hides_digest():
    r = client.post("/generate", files=upload((9, 9, 9)), data={"randomize": "true"})
    assert r.status_code == 200
    assert r.json()["digest_hex"] is None

@pytest.mark.parametrize("form", [
    {"chars": "q"},
    {"length": "1"},
    {"length": "0"},
    {"count": "0"},
    {"length": "5000"},
    {"count": "65"},
])
def test_generate_rejects_bad_requests(form):
    r = client.post("/generate", files=upload((0, 0, 0)), data=form)
    assert r.status_code == 422

def test_generate_rejects_non_image():
    r = client.post("/generate", files=[("images", ("x.png", b"not a png", "image/png"))])
    assert r.status_code == 422

def test_generate_rejects_oversized_image(monkeypatch):
    files = [("images", ("big.png", png_bytes((0, 0, 0), size=(100, 100)), "image/png"))]
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
    r = client.post("/generate", files=files)
    assert r.status_code == 422
    assert "too large" in r.json()["detail"]

def test_send_images_client(tmp_path, monkeypatch, capsys):
    p = tmp_path / "a.png"
    p.write_bytes(png_bytes((200, 10, 10)))
    sent = {}

    class Reply:
        def json(self):
            return {"passwords": ["x"]}

    def fake_post(url, files=None, data=None, timeout=None):
        sent.update(url=url, files=files, data=data)
        return Reply()

    monkeypatch.setattr(send_images.requests, "post", fake_post)
    monkeypatch.setattr(sys, "argv", ["send_images.py", "http://srv", str(p)])
    monkeypatch.setenv("PIXPASS_LENGTH", "20")
    monkeypatch.delenv("PIXPASS_CHARS", raising=False)
    monkeypatch.delenv("PIXPASS_COUNT", raising=False)
    send_images.main()
    assert sent["url"] == "http://srv/generate"
    assert sent["files"][0][1][0] == "a.png"
    assert sent["data"] == {"length": "20"}
    assert "passwords" in capsys.readouterr().out
