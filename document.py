from __future__ import annotations

import io
import zipfile
from typing import Optional, List, Sequence, Tuple

from puzzle_engine import PuzzleResult
from svg_renderer import Appearance, PageLayout, render_puzzle_svg, render_solution_svg


# -----------------------------------------------------------------------------
# Simple logger hook (optional; mirrors puzzle_engine)
# -----------------------------------------------------------------------------
_LOGGER = None  # type: Optional[callable]


def set_logger(fn) -> None:
    """Allow the UI to inject a logger callback: fn(text: str)."""
    global _LOGGER
    _LOGGER = fn


def _log(msg: str) -> None:
    if _LOGGER:
        _LOGGER(msg)
        return
    print(msg)


def page_svgs(
    results: Sequence[PuzzleResult],
    appearance: Optional[Appearance] = None,
    layout: Optional[PageLayout] = None,
    solutions: bool = False,
) -> List[Tuple[str, str]]:
    """
    Render every puzzle (and optionally its solution) to a named page SVG.
    Names are puzzle_001.svg, solution_001.svg, ...
    """
    pages: List[Tuple[str, str]] = []
    for idx, res in enumerate(results):
        pages.append((f"puzzle_{idx + 1:03d}.svg", render_puzzle_svg(res, idx, appearance, layout)))
        if solutions:
            pages.append((f"solution_{idx + 1:03d}.svg", render_solution_svg(res, idx, appearance, layout)))
    return pages


# -----------------------------------------------------------------------------
# Capture (SVG -> PNG)
# -----------------------------------------------------------------------------
def capture_pages(svgs: Sequence[str], scale: float = 2.0) -> List[bytes]:
    """Rasterize each page SVG to PNG; scale 2 gives a crisp high-DPI capture."""
    # cairosvg needs the native cairo library; only load it when capturing.
    from cairosvg import svg2png

    pngs = []
    for i, s in enumerate(svgs, 1):
        pngs.append(svg2png(bytestring=s.encode("utf-8"), scale=scale))
        _log(f"capture: page {i} rendered")
    return pngs


def pdf_pages_direct(svgs: Sequence[str]) -> List[bytes]:
    """Vector PDF straight from each page SVG: one single-page PDF per puzzle."""
    from cairosvg import svg2pdf

    return [svg2pdf(bytestring=s.encode("utf-8")) for s in svgs]


def merge_pdfs(pdfs: Sequence[bytes]) -> bytes:
    """Concatenate PDFs page by page into one document."""
    from PyPDF2 import PdfReader, PdfWriter

    if not pdfs:
        raise ValueError("no PDFs to merge")
    writer = PdfWriter()
    for pdf in pdfs:
        for page in PdfReader(io.BytesIO(pdf)).pages:
            writer.add_page(page)
    out = io.BytesIO()
    writer.write(out)
    _log(f"pdf: merged {len(pdfs)} documents, {len(writer.pages)} pages")
    return out.getvalue()


def pdf_direct(svgs: Sequence[str]) -> bytes:
    """Vector PDF straight from the page SVGs, one page per SVG."""
    return merge_pdfs(pdf_pages_direct(svgs))


# -----------------------------------------------------------------------------
# Paginators
# -----------------------------------------------------------------------------
def pdf_from_captures(pngs: Sequence[bytes], layout: Optional[PageLayout] = None) -> bytes:
    """
    One PDF page per capture. The resolution is chosen so every image spans
    the full layout page; captures of another size are resampled to match.
    """
    from PIL import Image

    if not pngs:
        raise ValueError("no captures to paginate")
    layout = layout or PageLayout()

    images = [Image.open(io.BytesIO(p)).convert("RGB") for p in pngs]
    dpi = images[0].width / layout.width_in
    target = (round(layout.width_in * dpi), round(layout.height_in * dpi))
    images = [im if im.size == target else im.resize(target) for im in images]

    out = io.BytesIO()
    images[0].save(out, format="PDF", save_all=True, append_images=images[1:], resolution=dpi)
    _log(f"pdf: {len(images)} pages at {dpi:.0f} dpi")
    return out.getvalue()


def pptx_from_captures(pngs: Sequence[bytes], layout: Optional[PageLayout] = None) -> bytes:
    """Slide deck sized to the page, one full-bleed capture per slide."""
    from pptx import Presentation
    from pptx.util import Inches

    layout = layout or PageLayout()
    prs = Presentation()
    prs.slide_width = Inches(layout.width_in)
    prs.slide_height = Inches(layout.height_in)
    blank = prs.slide_layouts[6]
    for png in pngs:
        slide = prs.slides.add_slide(blank)
        slide.shapes.add_picture(io.BytesIO(png), 0, 0, width=prs.slide_width, height=prs.slide_height)
    out = io.BytesIO()
    prs.save(out)
    _log(f"pptx: {len(pngs)} slides")
    return out.getvalue()


# -----------------------------------------------------------------------------
# ZIP bundle
# -----------------------------------------------------------------------------
def _write_or_record(zf: zipfile.ZipFile, name: str, error_name: str, build) -> Optional[bytes]:
    """Write build() under `name`; on failure log it and write `error_name` instead."""
    try:
        data = build()
    except Exception as e:
        _log(f"zip: {name} failed: {e}")
        zf.writestr(error_name, f"{name} failed:\n{e}")
        return None
    zf.writestr(name, data)
    return data


def build_zip(
    pages: Sequence[Tuple[str, str]],
    make_png: bool = True,
    make_pdf: bool = False,
    make_pptx: bool = False,
    layout: Optional[PageLayout] = None,
) -> bytes:
    """
    Bundle the page SVGs plus any requested conversions.
    Anything that fails to convert (a page, or one of the paginated
    documents) gets an *_ERROR.txt entry instead; the rest of the bundle
    is still written.
    """
    mem = io.BytesIO()
    puzzle_pngs: List[bytes] = []
    puzzle_pdfs: List[bytes] = []
    with zipfile.ZipFile(mem, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, s in pages:
            zf.writestr(name, s)

        if make_png or make_pdf or make_pptx:
            from cairosvg import svg2png, svg2pdf

            for name, s in pages:
                # captures feed the PNG entries and both paginated outputs
                try:
                    png = svg2png(bytestring=s.encode("utf-8"), scale=2.0)
                except Exception as e:
                    _log(f"zip: PNG conversion failed for {name}: {e}")
                    zf.writestr(name.replace(".svg", ".PNG_ERROR.txt"),
                                f"PNG conversion failed for {name}:\n{e}")
                else:
                    if make_png:
                        zf.writestr(name.replace(".svg", ".png"), png)
                    if name.startswith("puzzle_"):
                        puzzle_pngs.append(png)

                if make_pdf:
                    pdf = _write_or_record(
                        zf, name.replace(".svg", ".pdf"), name.replace(".svg", ".PDF_ERROR.txt"),
                        lambda: svg2pdf(bytestring=s.encode("utf-8")),
                    )
                    if pdf is not None and name.startswith("puzzle_"):
                        puzzle_pdfs.append(pdf)

        if make_pdf and puzzle_pdfs:
            _write_or_record(zf, "puzzles.pdf", "puzzles.PDF_ERROR.txt",
                             lambda: merge_pdfs(puzzle_pdfs))
        if make_pdf and puzzle_pngs:
            _write_or_record(zf, "puzzles-from-captures.pdf", "puzzles-from-captures.PDF_ERROR.txt",
                             lambda: pdf_from_captures(puzzle_pngs, layout))
        if make_pptx and puzzle_pngs:
            _write_or_record(zf, "puzzles.pptx", "puzzles.PPTX_ERROR.txt",
                             lambda: pptx_from_captures(puzzle_pngs, layout))

    _log(f"zip: {len(pages)} pages bundled")
    return mem.getvalue()
