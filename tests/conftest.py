import io

import openpyxl
import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

# Header and chunks of a 1x1 PNG; readers only look at the signature.
PNG_1X1 = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000001e221bc330000000049454e44ae426082"
)


@pytest.fixture()
def menu_pdf_bytes() -> bytes:
    """Generate a single-page menu PDF with known items and prices."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Pizzas")
    c.drawString(72, 700, "Margherita 11.50")
    c.drawString(72, 680, "Diavola 13.00")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page menu with one section on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Starters page")
    c.showPage()
    c.drawString(72, 720, "Desserts page")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def corrupted_pdf_bytes() -> bytes:
    return b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\nthis is not really a pdf"


@pytest.fixture()
def xlsx_bytes() -> bytes:
    """Generate a price list workbook with one sheet."""
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    sheet.title = "Drinks"
    sheet.append(["Product", "Size", "Price"])
    sheet.append(["Espresso", "Single", 2.2])
    sheet.append(["Latte", "Large", 3.9])
    buf = io.BytesIO()
    workbook.save(buf)
    return buf.getvalue()


@pytest.fixture()
def csv_bytes() -> bytes:
    return "Product;Price\nBrownie;4.50\nTiramisu;5.00\n".encode("utf-8")


@pytest.fixture()
def png_bytes() -> bytes:
    return PNG_1X1
