"""
Product code graphics
Deterministic QR-style and barcode-style SVG placeholders drawn from a
product ID. They only look like codes; nothing can scan them. The printable
PDF uses a real Code 128 barcode instead.
"""

from markupsafe import Markup, escape

QR_SIZE = 100
QR_MODULES = 21

BARCODE_WIDTH = 150
BARCODE_HEIGHT = 40


def _num(value):
    """SVG attribute number without trailing zeros"""
    return f'{round(value, 4):g}'


def qr_pattern(text):
    """
    Module grid for the QR placeholder

    Returns:
        list: QR_MODULES rows of booleans (True = dark module)
    """
    if not text:
        return []
    length = len(text)
    return [
        [(ord(text[(i + j) % length]) + i * j) % 2 == 1 for j in range(QR_MODULES)]
        for i in range(QR_MODULES)
    ]


def barcode_bars(text):
    """
    Bars for the barcode placeholder

    Returns:
        list: (x, width) of each dark bar
    """
    bars = []
    length = len(text or '')
    for i in range(length * 8):
        char_code = ord(text[i % length])
        if (char_code + i) % 3 != 0:
            bars.append((i * 3, 2 + char_code % 3))
    return bars


def generate_qr_svg(text, size=QR_SIZE):
    """
    Render the QR placeholder for a product ID

    Args:
        text: Product ID
        size: Width and height in pixels

    Returns:
        Markup: SVG element, empty for an empty ID
    """
    pattern = qr_pattern(text)
    if not pattern:
        return Markup('')

    module_size = size / QR_MODULES
    rects = []
    for i, row in enumerate(pattern):
        for j, dark in enumerate(row):
            if dark:
                rects.append(
                    f'<rect x="{_num(j * module_size)}" y="{_num(i * module_size)}" '
                    f'width="{_num(module_size)}" height="{_num(module_size)}" fill="black"/>'
                )

    return Markup(
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" '
        f'class="border" role="img" aria-label="QR code for {escape(text)}">'
        + ''.join(rects)
        + '</svg>'
    )


def generate_barcode_svg(text, width=BARCODE_WIDTH, height=BARCODE_HEIGHT):
    """
    Render the barcode placeholder for a product ID, with the ID printed
    underneath

    Returns:
        Markup: SVG element, empty for an empty ID
    """
    if not text:
        return Markup('')

    rects = [
        f'<rect x="{x}" y="0" width="{bar_width}" height="{height}" fill="black"/>'
        for x, bar_width in barcode_bars(text)
    ]
    label = (
        f'<text x="{_num(width / 2)}" y="{height + 15}" text-anchor="middle" '
        f'font-size="8" fill="black">{escape(text)}</text>'
    )

    # Bars past the width are clipped like any SVG overflow; the label sits
    # below the box and needs overflow visible to show
    return Markup(
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'class="border bg-white" style="overflow: visible">'
        + ''.join(rects)
        + label
        + '</svg>'
    )
