"""Tests for page naming, pagination and the ZIP bundle."""

from __future__ import annotations

import io
import random
import zipfile

import pytest
from PyPDF2 import PdfReader
from PIL import Image
from pptx import Presentation
from pptx.util import Inches

import document as doc
import puzzle_engine as eng
import svg_renderer as svg


@pytest.fixture(autouse=True)
def quiet_loggers():
    for mod in (eng, svg, doc):
        mod.set_logger(lambda msg: None)
    yield
    for mod in (eng, svg, doc):
        mod.set_logger(None)


def _png(size=(160, 200), color="white") -> bytes:
    out = io.BytesIO()
    Image.new("RGB", size, color).save(out, format="PNG")
    return out.getvalue()


@pytest.fixture
def results():
    return eng.generate_batch([["CAT", "DOG"], ["SUN", "MOON", "STAR"]], size=6, seed="doc")


def test_page_svgs_names(results) -> None:
    pages = doc.page_svgs(results)
    assert [name for name, _ in pages] == ["puzzle_001.svg", "puzzle_002.svg"]

    pages = doc.page_svgs(results, solutions=True)
    assert [name for name, _ in pages] == [
        "puzzle_001.svg", "solution_001.svg", "puzzle_002.svg", "solution_002.svg",
    ]
    assert all(text.startswith("<svg") for _, text in pages)


def test_pdf_from_captures_one_page_per_capture() -> None:
    data = doc.pdf_from_captures([_png(), _png(color="gray"), _png((80, 100))])

    assert data.startswith(b"%PDF")
    assert b"/Count 3" in data


def test_pdf_from_captures_needs_pages() -> None:
    with pytest.raises(ValueError):
        doc.pdf_from_captures([])


def test_pptx_slides_match_page_size() -> None:
    layout = svg.PageLayout()
    data = doc.pptx_from_captures([_png(), _png()], layout)
    prs = Presentation(io.BytesIO(data))

    assert len(prs.slides) == 2
    assert prs.slide_width == Inches(8)
    assert prs.slide_height == Inches(10)
    pic = prs.slides[0].shapes[0]
    assert (pic.left, pic.top, pic.width, pic.height) == (0, 0, Inches(8), Inches(10))


def test_build_zip_svg_only(results) -> None:
    pages = doc.page_svgs(results, solutions=True)
    data = doc.build_zip(pages, make_png=False, make_pdf=False, make_pptx=False)

    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        assert sorted(zf.namelist()) == sorted(name for name, _ in pages)
        assert zf.read("puzzle_001.svg").decode("utf-8") == pages[0][1]


def _pillow_pdf(pages: int) -> bytes:
    out = io.BytesIO()
    images = [Image.new("RGB", (80, 100), "white") for _ in range(pages)]
    images[0].save(out, format="PDF", save_all=True, append_images=images[1:])
    return out.getvalue()


def test_merge_pdfs_keeps_every_page_in_order() -> None:
    data = doc.merge_pdfs([_pillow_pdf(1), _pillow_pdf(2), _pillow_pdf(1)])

    assert data.startswith(b"%PDF")
    assert len(PdfReader(io.BytesIO(data)).pages) == 4


def test_merge_pdfs_needs_documents() -> None:
    with pytest.raises(ValueError):
        doc.merge_pdfs([])


# The rest needs cairosvg and the native cairo library it loads.
@pytest.fixture
def cairosvg():
    try:
        import cairosvg
    except (ImportError, OSError) as e:
        pytest.skip(f"cairosvg unavailable: {e}")
    return cairosvg


def test_capture_pages_are_twice_the_page_size(cairosvg, results) -> None:
    svgs = [text for _, text in doc.page_svgs(results)]
    doubled = doc.capture_pages(svgs)
    plain = doc.capture_pages(svgs[:1], scale=1.0)

    assert len(doubled) == 2
    big = Image.open(io.BytesIO(doubled[0]))
    small = Image.open(io.BytesIO(plain[0]))
    assert big.format == "PNG"
    assert big.size == (small.width * 2, small.height * 2)
    assert big.width * 10 == big.height * 8


def test_pdf_direct_is_one_document(cairosvg, results) -> None:
    svgs = [text for _, text in doc.page_svgs(results)]
    reader = PdfReader(io.BytesIO(doc.pdf_direct(svgs)))

    assert len(reader.pages) == 2
    box = reader.pages[0].mediabox
    assert float(box.width) / float(box.height) == pytest.approx(0.8, abs=0.01)


def test_build_zip_with_every_format(cairosvg, results) -> None:
    pages = doc.page_svgs(results, solutions=True)
    data = doc.build_zip(pages, make_png=True, make_pdf=True, make_pptx=True)

    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        names = set(zf.namelist())
        for name, _ in pages:
            assert name in names
            assert name.replace(".svg", ".png") in names
            assert name.replace(".svg", ".pdf") in names
        assert {"puzzles.pdf", "puzzles-from-captures.pdf", "puzzles.pptx"} <= names
        assert not [n for n in names if n.endswith("_ERROR.txt")]

        assert len(PdfReader(io.BytesIO(zf.read("puzzles.pdf"))).pages) == 2
        assert b"/Count 2" in zf.read("puzzles-from-captures.pdf")
        assert len(Presentation(io.BytesIO(zf.read("puzzles.pptx"))).slides) == 2


def test_build_zip_records_failed_png(cairosvg, results, monkeypatch) -> None:
    real = cairosvg.svg2png
    calls = []

    def flaky(*args, **kwargs):
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("boom")
        return real(*args, **kwargs)

    monkeypatch.setattr(cairosvg, "svg2png", flaky)
    messages = []
    doc.set_logger(messages.append)
    pages = doc.page_svgs(results)
    data = doc.build_zip(pages, make_png=True, make_pdf=True, make_pptx=True)

    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        names = set(zf.namelist())
        assert "puzzle_001.PNG_ERROR.txt" in names
        assert "boom" in zf.read("puzzle_001.PNG_ERROR.txt").decode("utf-8")
        assert "puzzle_001.png" not in names
        assert {"puzzle_001.svg", "puzzle_002.svg", "puzzle_002.png", "puzzle_001.pdf"} <= names
        assert {"puzzles.pdf", "puzzles-from-captures.pdf", "puzzles.pptx"} <= names
        assert len(Presentation(io.BytesIO(zf.read("puzzles.pptx"))).slides) == 1
    assert any("puzzle_001.svg" in m for m in messages)


def test_build_zip_records_failed_deck(cairosvg, results, monkeypatch) -> None:
    def broken(pngs, layout=None):
        raise RuntimeError("no deck today")

    monkeypatch.setattr(doc, "pptx_from_captures", broken)
    pages = doc.page_svgs(results)
    data = doc.build_zip(pages, make_png=True, make_pdf=True, make_pptx=True)

    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        names = set(zf.namelist())
        assert "puzzles.PPTX_ERROR.txt" in names
        assert "no deck today" in zf.read("puzzles.PPTX_ERROR.txt").decode("utf-8")
        assert "puzzles.pptx" not in names
        assert {"puzzle_001.png", "puzzles.pdf", "puzzles-from-captures.pdf"} <= names
