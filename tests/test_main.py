"""Tests for the command line wrapper."""

from __future__ import annotations

import pytest

import document as doc
import main
import puzzle_engine as eng
import svg_renderer as svg


@pytest.fixture(autouse=True)
def quiet_loggers():
    for mod in (eng, svg, doc):
        mod.set_logger(lambda msg: None)
    yield
    for mod in (eng, svg, doc):
        mod.set_logger(None)


def test_writes_html_and_pages(tmp_path) -> None:
    src = tmp_path / "input.txt"
    src.write_text("cat, dog, bird\nsun, moon\n", encoding="utf-8")
    out = tmp_path / "out"

    code = main.main([str(src), "--out-dir", str(out), "--seed", "s", "--size", "8",
                      "--no-captures", "--no-direct", "--solutions"])

    assert code == 0
    html = (out / "word-search-puzzles.html").read_text(encoding="utf-8")
    assert html.count('class="puzzle"') == 2
    assert sorted(p.name for p in out.glob("*.svg")) == [
        "puzzle_001.svg", "puzzle_002.svg", "solution_001.svg", "solution_002.svg",
    ]


def test_missing_input_returns_error(tmp_path) -> None:
    assert main.main([str(tmp_path / "missing.txt"), "--out-dir", str(tmp_path / "out")]) == 1


def test_rejects_bad_size(tmp_path) -> None:
    with pytest.raises(SystemExit):
        main.main([str(tmp_path / "x.txt"), "--size", "0"])


def test_vector_pdf_is_a_single_file(tmp_path) -> None:
    try:
        import cairosvg  # noqa: F401
    except (ImportError, OSError) as e:
        pytest.skip(f"cairosvg unavailable: {e}")
    from PyPDF2 import PdfReader

    src = tmp_path / "input.txt"
    src.write_text("cat, dog\nsun, moon\nred, blue\n", encoding="utf-8")
    out = tmp_path / "out"

    assert main.main([str(src), "--out-dir", str(out), "--size", "6", "--no-captures"]) == 0

    assert sorted(p.name for p in out.glob("*.pdf")) == ["word-search-puzzles.pdf"]
    assert len(PdfReader(str(out / "word-search-puzzles.pdf")).pages) == 3
