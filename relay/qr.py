"""QR code rendering for short links."""

import io

import qrcode

QR_WIDTH_PX = 300
QR_BORDER = 1


def render_png(url: str, width: int = QR_WIDTH_PX, border: int = QR_BORDER) -> bytes:
    """Encode ``url`` as a PNG roughly ``width`` pixels wide."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=border,
    )
    qr.add_data(url)
    qr.make(fit=True)
    qr.box_size = max(1, width // (qr.modules_count + 2 * border))
    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf)
    return buf.getvalue()
