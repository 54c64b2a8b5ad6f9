"""
Certificate PDF rendering

One fixed 800x600 page. Coordinates below are PDF points measured from the
bottom-left corner; text is neither wrapped nor shrunk to fit.
"""

import io

from PIL import Image, ImageDraw, ImageFont

PAGE_WIDTH, PAGE_HEIGHT = 800, 600
BACKGROUND = (242, 242, 242)

FONT_CANDIDATES = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "DejaVuSans-Bold.ttf",
    "Helvetica-Bold.ttf",
    "Arial Bold.ttf",
)

# (text template, x, y, size, grey level 0..1)
LAYOUT = (
    ("Certificate of Completion", 180, 520, 30, 0.2),
    ("This certificate is proudly presented to:", 200, 470, 14, 0.3),
    ("{name}", 200, 430, 28, 0.0),
    ("For successfully completing:", 200, 380, 14, 0.3),
    ("{course_title}", 200, 350, 20, 0.1),
    ("Date: {date}", 200, 300, 14, 0.3),
    ("CourseHub Academy", 330, 60, 12, 0.2),
)


def _load_font(size: int):
    for candidate in FONT_CANDIDATES:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    return ImageFont.load_default()


def _grey(level: float) -> tuple:
    value = round(level * 255)
    return (value, value, value)


def render_certificate_pdf(name: str, course_title: str, date: str) -> bytes:
    """Draw the certificate and return the PDF bytes"""
    img = Image.new("RGB", (PAGE_WIDTH, PAGE_HEIGHT), color=BACKGROUND)
    draw = ImageDraw.Draw(img)

    fields = {"name": name or "", "course_title": course_title or "", "date": date or ""}
    for template, x, y, size, level in LAYOUT:
        text = template.format(**fields)
        # PDF y is the baseline from the bottom; Pillow wants the top edge
        top = PAGE_HEIGHT - y - size
        draw.text((x, top), text, fill=_grey(level), font=_load_font(size))

    buf = io.BytesIO()
    img.save(buf, format="PDF", resolution=72.0)
    return buf.getvalue()
