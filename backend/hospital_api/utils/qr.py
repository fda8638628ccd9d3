"""
Check-in codes and QR payloads.

A check-in code looks like ``GCH-7KQ2M``: the configured prefix, a dash and
five characters from an alphabet without the look-alikes 0, O, 1 and I.
"""

import base64
import json
import re
import secrets
from datetime import datetime, timezone
from io import BytesIO
from typing import Optional

import qrcode
import qrcode.image.svg
from qrcode.constants import ERROR_CORRECT_M

from ..config import get_settings

settings = get_settings()

CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
PAYLOAD_TYPE = "appointment_checkin"

_CODE_PATTERN = re.compile(
    rf"^{re.escape(settings.CHECKIN_CODE_PREFIX)}-"
    rf"[{CODE_ALPHABET}]{{{settings.CHECKIN_CODE_LENGTH}}}$"
)


def generate_check_in_code() -> str:
    """Random, human-friendly code. Uniqueness is the caller's job."""
    body = "".join(
        secrets.choice(CODE_ALPHABET) for _ in range(settings.CHECKIN_CODE_LENGTH)
    )
    return f"{settings.CHECKIN_CODE_PREFIX}-{body}"


def is_valid_check_in_code(code: Optional[str]) -> bool:
    """Case-insensitive format check."""
    if not isinstance(code, str):
        return False
    return bool(_CODE_PATTERN.fullmatch(code.upper()))


def build_payload(
    appointment_id: str,
    code: Optional[str] = None,
    now: Optional[datetime] = None
) -> dict:
    issued_at = now or datetime.now(timezone.utc)
    return {
        "type": PAYLOAD_TYPE,
        "id": appointment_id,
        "code": code or None,
        "timestamp": issued_at.isoformat(),
    }


def encode_payload(payload: dict) -> str:
    return json.dumps(payload, separators=(",", ":"))


def parse_payload(raw: str) -> Optional[dict]:
    """Return the scanned payload, or None when it is not one of ours."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return None

    if not isinstance(data, dict):
        return None
    if data.get("type") != PAYLOAD_TYPE or not data.get("id"):
        return None
    return data


def _make_qr(data: str) -> qrcode.QRCode:
    qr = qrcode.QRCode(
        error_correction=ERROR_CORRECT_M,
        box_size=settings.QR_BOX_SIZE,
        border=settings.QR_BORDER,
    )
    qr.add_data(data)
    qr.make(fit=True)
    return qr


def render_qr_data_url(data: str) -> str:
    """PNG QR image as a ``data:`` URL."""
    img = _make_qr(data).make_image(
        fill_color=settings.QR_DARK_COLOR,
        back_color=settings.QR_LIGHT_COLOR,
    )
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def render_qr_svg(data: str) -> str:
    img = _make_qr(data).make_image(image_factory=qrcode.image.svg.SvgPathImage)
    buffer = BytesIO()
    img.save(buffer)
    return buffer.getvalue().decode("utf-8")
