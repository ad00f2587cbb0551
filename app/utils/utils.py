import base64
import binascii
import re
import secrets
import string
from pathlib import Path

from fastapi import HTTPException, status

from app.config.config import settings


REDEEM_CODE_ALPHABET = string.ascii_uppercase + string.digits
REDEEM_CODE_LENGTH = 8

DATA_URL_PATTERN = re.compile(
    r"^data:image/(?P<ext>png|jpe?g|gif|webp);base64,(?P<data>.+)$", re.DOTALL
)


# <<<<< ---------- utility for secure token generation:


def generate_secure_token(length: int = 32) -> str:
    """Generate cryptographically secure token"""
    return secrets.token_urlsafe(length)


def generate_verification_code() -> str:
    return str(secrets.randbelow(1_000_000)).zfill(6)


def generate_redeem_code(prefix: str | None = None) -> str:
    """Mint a reward code such as ECO-7K2M9QXA (upper-case base-36 suffix)"""
    prefix = prefix or settings.REDEEM_CODE_PREFIX
    suffix = "".join(
        secrets.choice(REDEEM_CODE_ALPHABET) for _ in range(REDEEM_CODE_LENGTH)
    )
    return f"{prefix}-{suffix}"


# <<<<< ---------- credit levels:


def get_eco_level(credits: int) -> str:
    if credits >= 200:
        return "Eco Champion"
    if credits >= 100:
        return "Green Hero"
    if credits >= 50:
        return "Eco Warrior"
    return "Eco Beginner"


def credits_to_next_reward(credits: int) -> int:
    return max(0, settings.REDEEM_COST - credits)


# <<<<< ---------- complaint photos:


def save_image(photo: str | None, upload_dir: str | None = None) -> str | None:
    """
    Persist a complaint photo and return the URL it is served from.

    Args:
        photo: A ``data:image/...;base64,`` payload or an http(s) URL
        upload_dir: Target directory, defaults to settings.UPLOAD_DIR

    Returns:
        ``/uploads/<file>`` for stored payloads, the URL itself for links,
        or None when no photo was sent
    """
    if not photo:
        return None

    if photo.startswith(("http://", "https://")):
        return photo

    match = DATA_URL_PATTERN.match(photo)
    if not match:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Photo must be a base64 image data URL or an image link",
        )

    try:
        content = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Photo is not valid base64"
        )

    ext = match.group("ext").replace("jpeg", "jpg")
    target_dir = Path(upload_dir or settings.UPLOAD_DIR)
    target_dir.mkdir(parents=True, exist_ok=True)

    file_name = f"{secrets.token_hex(12)}.{ext}"
    (target_dir / file_name).write_bytes(content)

    return f"/uploads/{file_name}"
