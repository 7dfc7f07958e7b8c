from io import BytesIO
import base64
import re
import secrets
import time

import qrcode
from qrcode import constants

QR_CODE_PATTERN = re.compile(r"^QR-\d+-[a-f0-9]{16}$")
PIN_PATTERN = re.compile(r"^\d{4}$")


def generate_pin() -> str:
    """Random 4-digit gate PIN between 1000 and 9999"""
    return str(1000 + secrets.randbelow(9000))


def generate_qr_data() -> str:
    """Unique QR token: QR-<unix millis>-<16 hex chars>"""
    return f"QR-{int(time.time() * 1000)}-{secrets.token_hex(8)}"


def validate_qr_code(code: str) -> bool:
    return bool(QR_CODE_PATTERN.match(code or ""))


def validate_pin(pin: str) -> bool:
    return bool(PIN_PATTERN.match(pin or ""))


def generate_qr_code_image(data: str, size: int = 256) -> str:
    """Render an entry code as a PNG data URL for display at the gate"""

    qr = qrcode.QRCode(
        version=None,
        error_correction=constants.ERROR_CORRECT_M,
        box_size=10,
        border=1,
    )
    qr.add_data(data)
    qr.make(fit=True)

    qr_image = qr.make_image(fill_color="black", back_color="white")
    qr_image = qr_image.resize((size, size))

    buffer = BytesIO()
    qr_image.save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"
