"""CLI entrypoint: word-list file in, HTML + PNG + PDF word search pages out."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import document as doc
import puzzle_engine as eng
import svg_renderer as svg


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate printable word search puzzles from comma-separated word lists",
    )
    parser.add_argument(
        "input",
        type=Path,
        nargs="?",
        default=Path("input.txt"),
        help="Word-list file: one puzzle per line, words separated by commas",
    )
    parser.add_argument("--size", type=int, default=eng.DEFAULT_SIZE, help="Grid size in cells (square)")
    parser.add_argument("--seed", type=str, default=None, help="Seed for reproducible puzzles")
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=eng.MAX_ATTEMPTS,
        help="Random placement attempts per word before it is skipped",
    )
    parser.add_argument(
        "--exhaustive",
        action="store_true",
        help="Scan every slot for words that ran out of random attempts",
    )
    parser.add_argument("--out-dir", type=Path, default=Path("output"), help="Output directory")
    parser.add_argument("--solutions", action="store_true", help="Also write solution pages")
    parser.add_argument("--no-captures", action="store_true", help="Skip PNG captures and the PDF built from them")
    parser.add_argument("--no-direct", action="store_true", help="Skip the vector PDF")
    parser.add_argument("--preview", action="store_true", help="Print each grid as ASCII")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.size <= 0:
        parser.error("--size must be a positive integer")

    try:
        word_lists = eng.read_word_lists(str(args.input))
    except OSError:
        return 1

    # Each puzzle is generated once; every output below shows the same grid.
    results = eng.generate_batch(
        word_lists,
        size=args.size,
        seed=args.seed,
        max_attempts=args.max_attempts,
        exhaustive_fallback=args.exhaustive,
    )
    if args.preview:
        for i, res in enumerate(results, 1):
            print(f"--- puzzle {i} ---")
            print(eng.render_preview_ascii(res))

    layout = svg.PageLayout()
    appearance = svg.Appearance()
    out_dir: Path = args.out_dir
    out_dir.mkdir(parents=True, exist_ok=True)

    svg.save_svg(
        svg.render_html_document(results, appearance, layout),
        str(out_dir / "word-search-puzzles.html"),
    )

    pages = doc.page_svgs(results, appearance, layout, solutions=args.solutions)
    for name, text in pages:
        svg.save_svg(text, str(out_dir / name))
    puzzle_svgs = [text for name, text in pages if name.startswith("puzzle_")]

    if not puzzle_svgs:
        print("No puzzles to paginate.")
        return 0

    if not args.no_captures:
        pngs = doc.capture_pages(puzzle_svgs)
        for i, png in enumerate(pngs, 1):
            (out_dir / f"puzzle-{i}.png").write_bytes(png)
        pdf_path = out_dir / "word-search-puzzles-from-captures.pdf"
        pdf_path.write_bytes(doc.pdf_from_captures(pngs, layout))
        print(f"Capture-based PDF: {pdf_path}")

    if not args.no_direct:
        pdf_path = out_dir / "word-search-puzzles.pdf"
        pdf_path.write_bytes(doc.pdf_direct(puzzle_svgs))
        print(f"Vector PDF: {pdf_path}")

    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
