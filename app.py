import io
import re
from pathlib import Path

import streamlit as st


def load_css(path: str | Path) -> None:
    css_path = Path(path)
    css = css_path.read_text(encoding="utf-8")
    st.markdown(f"<style>{css}</style>", unsafe_allow_html=True)


# ---- preview helper: scale an SVG to a target pixel width (keeps aspect) ----

def _scale_svg_for_preview(svg_text: str, target_width_px: int) -> tuple[str, int]:
    """
    Returns (scaled_svg_text, new_height_px).
    Only used for UI preview; original SVGs stay full size for ZIP/PNG/PDF.
    """
    s = svg_text
    m = re.search(r'viewBox="0\s+0\s+([\d.]+)\s+([\d.]+)"', s)
    if not m:
        return s, 600  # fallback
    vw, vh = float(m.group(1)), float(m.group(2))

    scale = max(0.05, float(target_width_px) / max(1.0, vw))
    new_h = max(50, int(round(vh * scale)))

    # rewrite width/height only on the <svg ...> tag
    s = re.sub(r'(<svg\b[^>]*\bwidth=")[^"]+(")',  rf'\g<1>{int(target_width_px)}\g<2>', s, count=1)
    s = re.sub(r'(<svg\b[^>]*\bheight=")[^"]+(")', rf'\g<1>{new_h}\g<2>',            s, count=1)
    if 'preserveAspectRatio' not in s[:400]:
        s = re.sub(r'<svg\b', '<svg preserveAspectRatio="xMidYMid meet"', s, count=1)
    return s, new_h


st.set_page_config(page_title="Word Search Generator", layout="wide")
load_css(Path(__file__).with_name("styles.css"))
st.title("Word Search Generator")


# --- Controls in the sidebar ---
with st.sidebar:
    tab_create, tab_settings = st.tabs(["Create Puzzles", "Settings"])

    # ---------------------------
    # TAB 1: Create Puzzles
    # ---------------------------
    with tab_create:
        grid_size = st.number_input("Grid size", 5, 40, 15, format="%d")
        seed = st.text_input("Seed (optional)", "")

        words_file = st.file_uploader("Word lists (one puzzle per line, comma-separated)", type=["txt", "csv"])
        pasted = st.text_area("…or paste word lists", "", height=140)

        go = st.button(
            "Generate", type="primary", use_container_width=True,
            disabled=(words_file is None and not pasted.strip()),
        )

    # ---------------------------
    # TAB 2: Settings
    # ---------------------------
    with tab_settings:
        st.caption("Placement")
        max_attempts = st.number_input("Attempts per word", 10, 1000, 100, format="%d")
        exhaustive = st.checkbox("Full scan when random attempts run out", value=False)

        st.caption("Output formats")
        make_png = st.checkbox("Also make PNG", value=True)
        make_pdf = st.checkbox("Also make PDF", value=False)
        make_pptx = st.checkbox("Also make PPTX (8x10 slides)", value=False)
        make_solutions = st.checkbox("Include solution pages", value=True)

        st.caption("Preview")
        size_label = st.select_slider("Preview size", options=["Small", "Medium", "Large"], value="Medium")
        PREVIEW_W = {"Small": 420, "Medium": 560, "Large": 720}[size_label]


if go:
    import document as doc
    import puzzle_engine as eng
    import svg_renderer as svg

    messages: list[str] = []
    for mod in (eng, svg, doc):
        mod.set_logger(messages.append)

    # --- Read word lists ---
    if words_file is not None:
        text = io.TextIOWrapper(words_file, encoding="utf-8-sig").read()
    else:
        text = pasted
    word_lists = eng.parse_word_lists(text)
    if not word_lists:
        st.error("No word lists found.")
        st.stop()

    # Generate each puzzle once; the puzzle page, solution page and every
    # export below all show this same grid.
    results = eng.generate_batch(
        word_lists,
        size=int(grid_size),
        seed=seed or None,
        max_attempts=int(max_attempts),
        exhaustive_fallback=exhaustive,
    )

    for idx, res in enumerate(results, 1):
        for sk in res.skipped:
            st.warning(f"Puzzle {idx}: skipped '{sk.text}' ({sk.reason})")

    layout = svg.PageLayout()
    look = svg.Appearance()
    pages = doc.page_svgs(results, look, layout, solutions=True)
    first_puz_svg = pages[0][1]
    first_sol_svg = pages[1][1]
    if not make_solutions:
        pages = [p for p in pages if p[0].startswith("puzzle_")]

    # --- Previews (tabs) ---
    tab_puz, tab_sol, tab_log = st.tabs(["Preview — Puzzle", "Preview — Solution", "Log"])

    with tab_puz:
        svgp, hp = _scale_svg_for_preview(first_puz_svg, PREVIEW_W)
        st.components.v1.html(svgp, height=hp + 6, scrolling=False)

    with tab_sol:
        svgs_, hs = _scale_svg_for_preview(first_sol_svg, PREVIEW_W)
        st.components.v1.html(svgs_, height=hs + 6, scrolling=False)

    # --- ZIP outputs ---
    bundle = None
    try:
        bundle = doc.build_zip(pages, make_png=make_png, make_pdf=make_pdf, make_pptx=make_pptx, layout=layout)
    except Exception as e:
        st.error("Failed to package outputs")
        st.exception(e)

    # log includes the zip: messages
    with tab_log:
        st.code("\n".join(messages) or "(no messages)")
    if bundle is None:
        st.stop()

    html = svg.render_html_document(results, look, layout)
    c1, c2 = st.columns(2)
    with c1:
        st.download_button("Download ZIP", data=bundle, file_name="word-search-puzzles.zip", mime="application/zip")
    with c2:
        st.download_button("Download HTML", data=html, file_name="word-search-puzzles.html", mime="text/html")
