import base64

from parkpass.bookings.codes import (
    generate_pin, generate_qr_code_image, generate_qr_data, validate_pin, validate_qr_code
)


def test_pin_is_four_digits_in_range():
    for _ in range(200):
        pin = generate_pin()
        assert validate_pin(pin)
        assert 1000 <= int(pin) <= 9999


def test_qr_token_format_and_uniqueness():
    tokens = {generate_qr_data() for _ in range(100)}
    assert len(tokens) == 100
    for token in tokens:
        assert validate_qr_code(token)
        prefix, millis, suffix = token.split("-")
        assert prefix == "QR"
        assert millis.isdigit()
        assert len(suffix) == 16


def test_validators_reject_malformed_codes():
    assert not validate_pin("123")
    assert not validate_pin("12a4")
    assert not validate_pin(None)
    assert not validate_qr_code("QR-123-xyz")
    assert not validate_qr_code("1234")


def test_qr_image_is_png_data_url():
    image = generate_qr_code_image(generate_qr_data(), size=128)
    prefix = "data:image/png;base64,"
    assert image.startswith(prefix)
    raw = base64.b64decode(image[len(prefix):])
    assert raw[:8] == b"\x89PNG\r\n\x1a\n"
