from __future__ import annotations

import math
import random
import re
import unicodedata
from dataclasses import dataclass, field
from typing import List, Tuple, Optional, Literal, Sequence

# 8 compass directions for placement (row delta, col delta)
DIR_VECTORS = {
    "E":  (0, 1),
    "W":  (0, -1),
    "N":  (-1, 0),
    "S":  (1, 0),
    "NE": (-1, 1),
    "SE": (1, 1),
    "SW": (1, -1),
    "NW": (-1, -1),
}
DIRECTIONS: Tuple[str, ...] = tuple(DIR_VECTORS)

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
DEFAULT_SIZE = 15
MAX_ATTEMPTS = 100


# -----------------------------------------------------------------------------
# Simple logger hook
# -----------------------------------------------------------------------------
# main.py / app.py can call set_logger(my_ui_logger). If you do nothing, we print().
_LOGGER = None  # type: Optional[callable]


def set_logger(fn) -> None:
    """Allow the UI to inject a logger callback: fn(text: str). Pass None to reset."""
    global _LOGGER
    _LOGGER = fn


def _log(msg: str) -> None:
    """Log to UI if available; otherwise print. Keep messages simple."""
    if _LOGGER:
        _LOGGER(msg)
        return
    print(msg)


# -----------------------------------------------------------------------------
# Data shapes used across the app
# -----------------------------------------------------------------------------
Direction = Literal["N", "NE", "E", "SE", "S", "SW", "W", "NW"]
SkipReason = Literal["too-long", "placement-failed", "empty", "not-letters"]
Grid = Tuple[Tuple[str, ...], ...]


@dataclass(frozen=True)
class PlacedWord:
    """One placed word with its path in the grid."""
    text: str
    start: Tuple[int, int]  # (row, col)
    direction: Direction
    cells: Tuple[Tuple[int, int], ...]  # all grid coordinates used


@dataclass(frozen=True)
class SkippedWord:
    """A word the generator gave up on, and why."""
    text: str
    reason: SkipReason


@dataclass(frozen=True)
class PuzzleResult:
    """
    The outcome of the generator. This is what the renderers need.
    """
    letters: Grid                                   # final grid of letters, row-major
    placed_words: Tuple[PlacedWord, ...]            # processing order (longest-first)
    skipped: Tuple[SkippedWord, ...] = ()
    used_mask: Tuple[Tuple[bool, ...], ...] = field(default=(), repr=False)

    @property
    def size(self) -> int:
        return len(self.letters)

    @property
    def placed(self) -> List[str]:
        """Placed word texts, in placement-processing order."""
        return [pw.text for pw in self.placed_words]


# -----------------------------------------------------------------------------
# Helpers: normalization
# -----------------------------------------------------------------------------
_NON_LETTERS_RE = re.compile(r"[^A-Z]+")
_WORD_RE = re.compile(r"[A-Z]+")


def normalize_word(text: str) -> str:
    """
    Reduce a token to what the grid can hold: A-Z only.
    Accents are stripped (CAFÉ -> CAFE); spaces, punctuation and digits go.
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", str(text).upper())
    stripped = "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")
    return _NON_LETTERS_RE.sub("", stripped)


# -----------------------------------------------------------------------------
# Word-list loading (CLI and UI call these)
# -----------------------------------------------------------------------------
def parse_word_lists(text: str) -> List[List[str]]:
    """
    One puzzle per line, words separated by commas.
    Words are reduced to A-Z (see normalize_word); tokens and lines left
    empty by that are dropped.
    """
    lists: List[List[str]] = []
    for line in (text or "").splitlines():
        if not line.strip():
            continue
        words = [normalize_word(w) for w in line.split(",")]
        words = [w for w in words if w]
        if words:
            lists.append(words)
    return lists


def read_word_lists(path: str) -> List[List[str]]:
    """Read a word-list file (UTF-8, BOM tolerated) and parse it."""
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            text = f.read()
    except OSError as e:
        _log(f"wordlists error: cannot read {path}: {e}")
        raise
    lists = parse_word_lists(text)
    _log(f"wordlists: read {len(lists)} lists from {path}")
    return lists


def split_columns(placed: Sequence[str]) -> Tuple[List[str], List[str]]:
    """
    Split the legend into two columns; the left one takes the extra word.
    Every renderer goes through here so the columns match everywhere.
    """
    mid = math.ceil(len(placed) / 2)
    return list(placed[:mid]), list(placed[mid:])


# -----------------------------------------------------------------------------
# Grid building
# -----------------------------------------------------------------------------
def _empty_grid(h: int, w: int):
    return [[None for _ in range(w)] for _ in range(h)]


def _can_place_word(grid, r, c, dr, dc, word):
    """Check bounds and compatibility (allow crossing on identical letters)."""
    H = len(grid)
    W = len(grid[0]) if H else 0
    rr, cc = r, c
    for ch in word:
        if rr < 0 or rr >= H or cc < 0 or cc >= W:
            return False
        cell = grid[rr][cc]
        if cell is not None and cell != ch:
            return False
        rr += dr
        cc += dc
    return True


def _place_one_word(grid, r, c, dr, dc, word) -> Tuple[Tuple[int, int], ...]:
    """Write the word on the grid; return the cells it covers."""
    cells = []
    rr, cc = r, c
    for ch in word:
        grid[rr][cc] = ch
        cells.append((rr, cc))
        rr += dr
        cc += dc
    return tuple(cells)


def _start_range(delta: int, length: int, extent: int) -> Tuple[int, int]:
    """Inclusive range of start indices that keep a run of `length` in bounds."""
    if delta < 0:
        return length - 1, extent - 1
    if delta > 0:
        return 0, extent - length
    return 0, extent - 1


def _scan_for_slot(grid, word: str, rng: random.Random) -> Optional[Tuple[int, int, str]]:
    """
    Systematic fallback: try every in-bounds start of every direction
    (both shuffled) and return the first legal (row, col, direction).
    """
    size = len(grid)
    dir_list = list(DIRECTIONS)
    rng.shuffle(dir_list)
    for d in dir_list:
        dr, dc = DIR_VECTORS[d]
        r_min, r_max = _start_range(dr, len(word), size)
        c_min, c_max = _start_range(dc, len(word), size)
        if r_min > r_max or c_min > c_max:
            continue
        starts = [(r, c) for r in range(r_min, r_max + 1) for c in range(c_min, c_max + 1)]
        rng.shuffle(starts)
        for (r, c) in starts:
            if _can_place_word(grid, r, c, dr, dc, word):
                return r, c, d
    return None


def _try_random_slot(grid, word: str, rng: random.Random, max_attempts: int) -> Optional[Tuple[int, int, str]]:
    """Monte-Carlo placement: random direction + random start, bounded tries."""
    size = len(grid)
    for _ in range(max_attempts):
        d = rng.choice(DIRECTIONS)
        dr, dc = DIR_VECTORS[d]
        r = rng.randrange(size)
        c = rng.randrange(size)
        if _can_place_word(grid, r, c, dr, dc, word):
            return r, c, d
    return None


def fill_grid(grid, rng: random.Random) -> Grid:
    """
    Fill empty cells with random uppercase letters and freeze the grid.
    """
    out = []
    for row in grid:
        new_row = []
        for cell in row:
            if cell is None or cell == "":
                new_row.append(_rand_letter(rng))
            else:
                new_row.append(cell)
        out.append(tuple(new_row))
    return tuple(out)


def _rand_letter(rng: random.Random) -> str:
    # Uppercase A–Z
    return ALPHABET[rng.randrange(len(ALPHABET))]


def _check_size(size) -> int:
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise ValueError(f"grid size must be a positive integer, got {size!r}")
    return size


# ---------------------------------------------------------------------------
# High-level API
# ---------------------------------------------------------------------------
def generate_one_puzzle(
    words: Sequence[str],
    size: int = DEFAULT_SIZE,
    rng: Optional[random.Random] = None,
    *,
    max_attempts: int = MAX_ATTEMPTS,
    exhaustive_fallback: bool = False,
) -> PuzzleResult:
    """
    Orchestrator:
      - order words longest-first (stable, so equal lengths keep input order)
      - skip words that cannot fit the grid at all
      - place each word with up to `max_attempts` random tries
        (optionally followed by a full scan of every slot)
      - fill empty cells from the same rng and freeze the grid

    Per-word failures never raise: they are logged and returned in `skipped`.
    """
    size = _check_size(size)
    _rng = rng if rng is not None else random.Random()

    grid = _empty_grid(size, size)
    used = [[False] * size for _ in range(size)]
    placed: List[PlacedWord] = []
    skipped: List[SkippedWord] = []

    for word in sorted(words, key=len, reverse=True):
        if not word:
            skipped.append(SkippedWord(text=word, reason="empty"))
            _log("WARNING-place: empty word in list, skipping it")
            continue
        if not _WORD_RE.fullmatch(word):
            skipped.append(SkippedWord(text=word, reason="not-letters"))
            _log(f"WARNING-place: '{word}' has characters outside A-Z, skipping it")
            continue
        if len(word) > size:
            skipped.append(SkippedWord(text=word, reason="too-long"))
            _log(f"WARNING-place: '{word}' ({len(word)}) is too long for a {size}x{size} grid, skipping it")
            continue

        slot = _try_random_slot(grid, word, _rng, max_attempts)
        if slot is None and exhaustive_fallback:
            slot = _scan_for_slot(grid, word, _rng)
            if slot is not None:
                _log(f"place: '{word}' placed by full scan after {max_attempts} random tries")
        if slot is None:
            skipped.append(SkippedWord(text=word, reason="placement-failed"))
            _log(f"WARNING-place: could not place '{word}' after {max_attempts} attempts, skipping it")
            continue

        r, c, d = slot
        dr, dc = DIR_VECTORS[d]
        cells = _place_one_word(grid, r, c, dr, dc, word)
        for (rr, cc) in cells:
            used[rr][cc] = True
        placed.append(PlacedWord(text=word, start=(r, c), direction=d, cells=cells))

    letters = fill_grid(grid, _rng)
    return PuzzleResult(
        letters=letters,
        placed_words=tuple(placed),
        skipped=tuple(skipped),
        used_mask=tuple(tuple(row) for row in used),
    )


def generate(
    words: Sequence[str],
    size: int = DEFAULT_SIZE,
    rng: Optional[random.Random] = None,
) -> Tuple[Grid, List[str]]:
    """Generate one grid; returns (grid, placed words in processing order)."""
    result = generate_one_puzzle(words, size, rng)
    return result.letters, result.placed


def generate_batch(
    word_lists: Sequence[Sequence[str]],
    size: int = DEFAULT_SIZE,
    seed: Optional[str] = None,
    **kwargs,
) -> List[PuzzleResult]:
    """
    One puzzle per word list. Each puzzle gets its own rng so puzzles never
    depend on each other; with a seed, puzzle i uses "{seed}:{i}".
    """
    if seed is None or str(seed).strip() == "":
        _log("seed: none (non-deterministic)")
        seeds = [None] * len(word_lists)
    else:
        _log(f"seed: {seed}")
        seeds = [f"{seed}:{i}" for i in range(len(word_lists))]

    results: List[PuzzleResult] = []
    for words, s in zip(word_lists, seeds):
        results.append(generate_one_puzzle(words, size, random.Random(s), **kwargs))
    placed_total = sum(len(r.placed_words) for r in results)
    _log(f"batch: {len(results)} puzzles, {placed_total} words placed")
    return results


def render_preview_ascii(result: PuzzleResult) -> str:
    """
    Simple ASCII for quick debugging.
    """
    lines = []
    for row in result.letters:
        lines.append(" ".join(ch if ch else "." for ch in row))
    return "\n".join(lines)
