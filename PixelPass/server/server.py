import logging
from typing import List, Optional
from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from pydantic import BaseModel
from ..crypto.errors import PixelPassError
from ..crypto.password_helpers import DEFAULT_CHARS, DEFAULT_COUNT, DEFAULT_LENGTH, make_policy, passwords_from_buffers
from ..crypto.password import MAX_ATTEMPTS
from ..imaging.sources import load_pixel_buffer

logger = logging.getLogger(__name__)

app = FastAPI(title="PixelPass (image-derived passwords)")

MAX_COUNT = 64
MAX_LENGTH = 1024

class PasswordReply(BaseModel):
    passwords: List[str]
    length: int
    entropy_bits: float
    images: int
    digest_hex: Optional[str] = None

@app.get("/policy/defaults")
def policy_defaults():
    return {"length": DEFAULT_LENGTH, "chars": DEFAULT_CHARS, "count": DEFAULT_COUNT,
            "max_attempts": MAX_ATTEMPTS, "max_length": MAX_LENGTH, "max_count": MAX_COUNT}

# sync handler: FastAPI runs it in its threadpool
@app.post("/generate", response_model=PasswordReply)
def generate(
    images: List[UploadFile] = File(...),
    length: int = Form(DEFAULT_LENGTH),
    chars: str = Form(DEFAULT_CHARS),
    count: int = Form(DEFAULT_COUNT),
    randomize: bool = Form(False),
):
    if not 1 <= count <= MAX_COUNT:
        raise HTTPException(status_code=422, detail=f"count must be between 1 and {MAX_COUNT}")
    if length > MAX_LENGTH:
        raise HTTPException(status_code=422, detail=f"length must be at most {MAX_LENGTH}")
    try:
        policy = make_policy(length, chars)
        buffers = [load_pixel_buffer(f.file.read()) for f in images]
        result = passwords_from_buffers(buffers, policy, count=count, randomize=randomize)
    except (PixelPassError, ValueError, OSError) as e:
        logger.info("rejected request: %s", e)
        raise HTTPException(status_code=422, detail=str(e))
    result.pop("bitmaps")
    return PasswordReply(**result)
