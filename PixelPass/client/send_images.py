import os, sys, mimetypes, requests

def main():
    if len(sys.argv) < 3:
        print("Usage: python3 send_images.py <server_base_url> <image> [image...]")
        sys.exit(1)

    server, paths = sys.argv[1], sys.argv[2:]
    length = os.getenv("PIXPASS_LENGTH")
    chars = os.getenv("PIXPASS_CHARS")
    count = os.getenv("PIXPASS_COUNT")

    files = []
    for path in paths:
        with open(path, "rb") as f:
            data = f.read()
        content_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
        files.append(("images", (os.path.basename(path), data, content_type)))

    form = {k: v for k, v in (("length", length), ("chars", chars), ("count", count)) if v}
    r = requests.post(f"{server}/generate", files=files, data=form, timeout=30)
    print(r.json())

if __name__ == "__main__":
    main()
