from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, List, Sequence

from puzzle_engine import PuzzleResult, split_columns

# Physical units: SVG pages are drawn in points.
POINTS_PER_INCH = 72.0
POINTS_PER_MM = 2.83465


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


@dataclass(frozen=True)
class PageLayout:
    """
    Physical page the puzzles are laid out on.
    Passed to every renderer/paginator that needs real units.
    """
    width_in: float = 8.0
    height_in: float = 10.0
    border_mm: float = 6.35
    padding: float = 20.0  # inside the border, in points

    @property
    def width_pt(self) -> float:
        return self.width_in * POINTS_PER_INCH

    @property
    def height_pt(self) -> float:
        return self.height_in * POINTS_PER_INCH

    @property
    def border_pt(self) -> float:
        return self.border_mm * POINTS_PER_MM

    @property
    def content_width(self) -> float:
        return self.width_pt - 2 * self.border_pt

    @property
    def content_height(self) -> float:
        return self.height_pt - 2 * self.border_pt

    @property
    def inner_width(self) -> float:
        return self.content_width - 2 * self.padding


@dataclass
class Appearance:
    """
    Visual settings used by the SVG and HTML renderers.
    Keep this in sync with your UI fields.
    """
    # Page
    page_bg_color: str = "#FFFFFF"
    frame_color: str = "#CCCCCC"
    frame_thickness: float = 1.0
    title_template: str = "Word Search Puzzle {number}"
    title_font_size: int = 16

    # Grid
    max_cell_size: float = 20.0
    cell_line_color: str = "#CCCCCC"
    cell_line_thickness: float = 1.0
    grid_font_family: str = "Arial"
    grid_font_size: int = 12
    grid_font_bold: bool = True
    grid_font_color: str = "#000000"

    # Legend
    list_heading: str = "Word List:"
    list_heading_font_size: int = 14
    list_font_family: str = "Arial"
    list_font_size: int = 12
    list_font_color: str = "#000000"
    list_bullet: str = "•"

    # Solution marking
    solution_mark_color: str = "#D94242"
    solution_mark_width: float = 1.5
    solution_band_frac: float = 0.8  # band thickness as a fraction of the cell

    def title_for(self, index: int) -> str:
        return self.title_template.format(number=index + 1)


# -----------------------------------------------------------------------------
# Tiny helper to build safe SVG text (no external lib, very basic)
# -----------------------------------------------------------------------------
def _esc(s: str) -> str:
    return (
        str(s).replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def _html_escape(s: str) -> str:
    return (str(s)
            .replace("&", "&amp;")
            .replace("<", "&lt;")
            .replace(">", "&gt;"))


def _fmt(v: float) -> str:
    return f"{v:.2f}".rstrip("0").rstrip(".")


@dataclass(frozen=True)
class _PageGeometry:
    """Where things go on one page, in points."""
    title_x: float
    title_y: float
    grid_x: float
    grid_y: float
    cell: float
    list_heading_y: float
    left_col_x: float
    right_col_x: float
    list_top_y: float
    line_h: float


def _page_geometry(n: int, appearance: Appearance, layout: PageLayout) -> _PageGeometry:
    b = layout.border_pt
    inner_w = layout.inner_width
    left = b + layout.padding

    title_y = b + layout.padding + appearance.title_font_size
    cell = min(appearance.max_cell_size, inner_w / n) if n else appearance.max_cell_size
    grid_w = cell * n
    grid_x = left + (inner_w - grid_w) / 2
    grid_y = title_y + appearance.title_font_size

    heading_y = grid_y + n * cell + 30 + appearance.list_heading_font_size
    line_h = appearance.list_font_size * 1.4
    return _PageGeometry(
        title_x=layout.width_pt / 2,
        title_y=title_y,
        grid_x=grid_x,
        grid_y=grid_y,
        cell=cell,
        list_heading_y=heading_y,
        left_col_x=left,
        right_col_x=left + inner_w / 2,
        list_top_y=heading_y + appearance.list_heading_font_size * 0.5,
        line_h=line_h,
    )


def _svg_open(layout: PageLayout) -> str:
    w, h = _fmt(layout.width_pt), _fmt(layout.height_pt)
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'width="{w}pt" height="{h}pt" viewBox="0 0 {w} {h}">'
    )


def _frame_and_title(out: List[str], index: int, g: _PageGeometry, appearance: Appearance, layout: PageLayout) -> None:
    b = layout.border_pt
    out.append(
        f'<rect x="0" y="0" width="{_fmt(layout.width_pt)}" height="{_fmt(layout.height_pt)}" '
        f'fill="{appearance.page_bg_color}" stroke="none" />'
    )
    out.append(
        f'<rect x="{_fmt(b)}" y="{_fmt(b)}" width="{_fmt(layout.content_width)}" '
        f'height="{_fmt(layout.content_height)}" fill="none" '
        f'stroke="{appearance.frame_color}" stroke-width="{appearance.frame_thickness}" />'
    )
    out.append(
        f'<text x="{_fmt(g.title_x)}" y="{_fmt(g.title_y)}" text-anchor="middle" '
        f'font-family="{_esc(appearance.list_font_family)}" font-size="{appearance.title_font_size}" '
        f'font-weight="bold" fill="{appearance.list_font_color}">{_esc(appearance.title_for(index))}</text>'
    )


def _grid_cells(out: List[str], letters, g: _PageGeometry, appearance: Appearance) -> None:
    n = len(letters)
    stroke = appearance.cell_line_color
    sw = appearance.cell_line_thickness
    for r in range(n):
        for c in range(n):
            x = g.grid_x + c * g.cell
            y = g.grid_y + r * g.cell
            out.append(
                f'<rect x="{_fmt(x)}" y="{_fmt(y)}" width="{_fmt(g.cell)}" height="{_fmt(g.cell)}" '
                f'fill="none" stroke="{stroke}" stroke-width="{sw}" />'
            )


def _grid_letters(out: List[str], letters, g: _PageGeometry, appearance: Appearance) -> None:
    font_weight = "bold" if appearance.grid_font_bold else "normal"
    out.append(
        f'<g font-family="{_esc(appearance.grid_font_family)}" font-size="{appearance.grid_font_size}" '
        f'font-weight="{font_weight}" fill="{appearance.grid_font_color}">'
    )
    # Center letters in cells
    txt_dy = appearance.grid_font_size * 0.35
    for r, row in enumerate(letters):
        for c, ch in enumerate(row):
            x = g.grid_x + c * g.cell + g.cell / 2
            y = g.grid_y + r * g.cell + g.cell / 2 + txt_dy
            out.append(f'<text x="{_fmt(x)}" y="{_fmt(y)}" text-anchor="middle">{_esc(ch)}</text>')
    out.append('</g>')


def _word_list(out: List[str], placed: Sequence[str], g: _PageGeometry, appearance: Appearance) -> None:
    out.append(
        f'<text x="{_fmt(g.left_col_x)}" y="{_fmt(g.list_heading_y)}" '
        f'font-family="{_esc(appearance.list_font_family)}" font-size="{appearance.list_heading_font_size}" '
        f'text-decoration="underline" fill="{appearance.list_font_color}">{_esc(appearance.list_heading)}</text>'
    )
    left, right = split_columns(placed)
    out.append(
        f'<g class="word-list" font-family="{_esc(appearance.list_font_family)}" '
        f'font-size="{appearance.list_font_size}" fill="{appearance.list_font_color}">'
    )
    for x, column in ((g.left_col_x, left), (g.right_col_x, right)):
        for i, word in enumerate(column):
            y = g.list_top_y + (i + 1) * g.line_h
            out.append(f'<text x="{_fmt(x)}" y="{_fmt(y)}">{_esc(appearance.list_bullet)} {_esc(word)}</text>')
    out.append('</g>')


# -----------------------------------------------------------------------------
# Core renderers
# -----------------------------------------------------------------------------
def render_puzzle_svg(
    result: PuzzleResult,
    index: int = 0,
    appearance: Optional[Appearance] = None,
    layout: Optional[PageLayout] = None,
) -> str:
    """
    One full page: frame inside the border margin, title, grid, and the
    placed words split over two columns.
    """
    appearance = appearance or Appearance()
    layout = layout or PageLayout()
    g = _page_geometry(result.size, appearance, layout)

    out = [_svg_open(layout)]
    _frame_and_title(out, index, g, appearance, layout)
    _grid_cells(out, result.letters, g, appearance)
    _grid_letters(out, result.letters, g, appearance)
    _word_list(out, result.placed, g, appearance)
    out.append('</svg>')
    return "\n".join(out)


def render_solution_svg(
    result: PuzzleResult,
    index: int = 0,
    appearance: Optional[Appearance] = None,
    layout: Optional[PageLayout] = None,
) -> str:
    """
    Same page as the puzzle, with a rounded band over every placed word.
    Bands are extended to fully include the first and last letters,
    including on diagonals.
    """
    appearance = appearance or Appearance()
    layout = layout or PageLayout()
    g = _page_geometry(result.size, appearance, layout)

    out = [_svg_open(layout)]
    _frame_and_title(out, index, g, appearance, layout)
    _grid_cells(out, result.letters, g, appearance)

    band_h = max(1.0, appearance.solution_band_frac * g.cell)
    radius = band_h * 0.5
    out.append(
        f'<g class="solution" fill="none" stroke="{appearance.solution_mark_color}" '
        f'stroke-width="{appearance.solution_mark_width}">'
    )
    for pw in result.placed_words:
        (r0, c0) = pw.cells[0]
        (r1, c1) = pw.cells[-1]
        x0 = g.grid_x + (c0 + 0.5) * g.cell
        y0 = g.grid_y + (r0 + 0.5) * g.cell
        x1 = g.grid_x + (c1 + 0.5) * g.cell
        y1 = g.grid_y + (r1 + 0.5) * g.cell

        dx, dy = x1 - x0, y1 - y0
        length = math.hypot(dx, dy)
        # single-letter words: horizontal pill
        ux, uy = (dx / length, dy / length) if length > 1e-6 else (1.0, 0.0)
        ext_each = 0.5 * g.cell * (abs(ux) + abs(uy)) * 0.9

        band_w = length + 2.0 * ext_each
        cx, cy = (x0 + x1) * 0.5, (y0 + y1) * 0.5
        ang = math.degrees(math.atan2(dy, dx)) if length > 1e-6 else 0.0
        out.append(
            f'<rect x="{cx - band_w / 2:.2f}" y="{cy - band_h / 2:.2f}" '
            f'width="{band_w:.2f}" height="{band_h:.2f}" rx="{radius:.2f}" ry="{radius:.2f}" '
            f'transform="rotate({ang:.2f} {cx:.2f} {cy:.2f})" />'
        )
    out.append('</g>')

    _grid_letters(out, result.letters, g, appearance)
    _word_list(out, result.placed, g, appearance)
    out.append('</svg>')
    return "\n".join(out)


# -----------------------------------------------------------------------------
# HTML document (all puzzles, one print page each)
# -----------------------------------------------------------------------------
_HTML_STYLE = """
    body {{
      font-family: {font}, sans-serif;
      line-height: 1.6;
      margin: 0;
      padding: 0;
      box-sizing: border-box;
    }}
    .puzzle {{
      page-break-after: always;
      margin: 0;
      padding: {border}px;
      box-sizing: border-box;
      width: {width}px;
      height: {height}px;
    }}
    .puzzle-content {{
      border: 1px solid {frame};
      width: {content_w}px;
      height: {content_h}px;
      display: flex;
      flex-direction: column;
      padding: {padding}px;
      box-sizing: border-box;
    }}
    h2 {{ text-align: center; margin-top: 0; margin-bottom: 20px; }}
    .grid {{ display: flex; justify-content: center; margin-bottom: 30px; }}
    table {{ border-collapse: collapse; }}
    td {{
      width: {cell}px;
      height: {cell}px;
      text-align: center;
      font-weight: bold;
      border: 1px solid {line};
    }}
    .word-list h3 {{ margin-bottom: 10px; }}
    .columns {{ display: flex; justify-content: space-between; }}
    .column {{ width: 48%; }}
    ul {{ padding-left: 20px; margin-top: 5px; }}
    @media print {{
      @page {{ size: {width_in}in {height_in}in; margin: 0; }}
      body {{ margin: 0; padding: 0; }}
    }}
"""


def _html_puzzle_block(result: PuzzleResult, index: int, appearance: Appearance) -> str:
    parts = [
        f'<div class="puzzle" id="puzzle-{index}">',
        '<div class="puzzle-content">',
        f'<h2>{_html_escape(appearance.title_for(index))}</h2>',
        '<div class="grid"><table>',
    ]
    for row in result.letters:
        parts.append("<tr>" + "".join(f"<td>{_html_escape(ch)}</td>" for ch in row) + "</tr>")
    parts.append('</table></div>')

    left, right = split_columns(result.placed)
    parts.append('<div class="word-list">')
    parts.append(f'<h3>{_html_escape(appearance.list_heading)}</h3>')
    parts.append('<div class="columns">')
    for column in (left, right):
        items = "".join(f"<li>{_html_escape(w)}</li>" for w in column)
        parts.append(f'<div class="column"><ul>{items}</ul></div>')
    parts.append('</div></div>')
    parts.append('</div></div>')
    return "\n".join(parts)


def render_html_document(
    results: Sequence[PuzzleResult],
    appearance: Optional[Appearance] = None,
    layout: Optional[PageLayout] = None,
) -> str:
    """One HTML file holding every puzzle, one print page per puzzle."""
    appearance = appearance or Appearance()
    layout = layout or PageLayout()
    style = _HTML_STYLE.format(
        font=appearance.list_font_family,
        border=_fmt(layout.border_pt),
        width=_fmt(layout.width_pt),
        height=_fmt(layout.height_pt),
        content_w=_fmt(layout.content_width),
        content_h=_fmt(layout.content_height),
        padding=_fmt(layout.padding),
        frame=appearance.frame_color,
        line=appearance.cell_line_color,
        cell=_fmt(appearance.max_cell_size + 10),
        width_in=_fmt(layout.width_in),
        height_in=_fmt(layout.height_in),
    )
    blocks = [_html_puzzle_block(res, i, appearance) for i, res in enumerate(results)]
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n<head>\n<meta charset="UTF-8">\n'
        "<title>Word Search Puzzles</title>\n"
        f"<style>{style}</style>\n</head>\n<body>\n"
        + "\n".join(blocks)
        + "\n</body>\n</html>\n"
    )


def save_svg(svg_text: str, path: str) -> None:
    """Write an SVG (or any markup) string to disk."""
    with open(path, "w", encoding="utf-8") as f:
        f.write(svg_text)
    _log(f"saved: {path}")
