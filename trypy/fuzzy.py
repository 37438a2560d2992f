"""Fuzzy subsequence scoring and ranking of workspace entries.

Scores pick the best placement of the query inside each name, so a tight
contiguous match always outranks a scattered one in the same name.
"""

from __future__ import annotations

from dataclasses import replace

from .entries import Entry

MATCH_SCORE = 16
CONSECUTIVE_BONUS = 24
BOUNDARY_BONUS = 35
EXACT_CASE_BONUS = 1
GAP_STEP = 2
GAP_CAP = 40
LEADING_STEP = 3
LEADING_CAP = 15
WORD_SEPARATORS = "/_- ."


def _is_boundary(candidate: str, idx: int) -> bool:
    if idx == 0:
        return True
    prev = candidate[idx - 1]
    if prev in WORD_SEPARATORS:
        return True
    return prev.islower() and candidate[idx].isupper()


def is_subsequence(query: str, candidate: str) -> bool:
    """Return whether every query character appears in order (case-insensitive)."""
    remaining = iter(ch.casefold() for ch in candidate)
    return all(any(needle == hay for hay in remaining) for needle in (ch.casefold() for ch in query))


def fuzzy_score(query: str, candidate: str) -> int | None:
    """Score ``candidate`` against ``query``; ``None`` when it does not match.

    An empty query scores ``0`` against everything.
    """
    if not query:
        return 0
    if len(query) > len(candidate) or not is_subsequence(query, candidate):
        return None

    query_folded = [ch.casefold() for ch in query]
    cand_folded = [ch.casefold() for ch in candidate]
    n = len(candidate)

    def char_score(qi: int, cj: int) -> int:
        score = MATCH_SCORE
        if _is_boundary(candidate, cj):
            score += BOUNDARY_BONUS
        if query[qi] == candidate[cj]:
            score += EXACT_CASE_BONUS
        return score

    prev_row: list[int | None] = [None] * n
    for j in range(n):
        if cand_folded[j] == query_folded[0]:
            prev_row[j] = char_score(0, j) - min(LEADING_CAP, j * LEADING_STEP)

    for qi in range(1, len(query)):
        row: list[int | None] = [None] * n
        for j in range(qi, n):
            if cand_folded[j] != query_folded[qi]:
                continue
            best: int | None = None
            adjacent = prev_row[j - 1]
            if adjacent is not None:
                best = adjacent + CONSECUTIVE_BONUS
            for k in range(j - 1):
                earlier = prev_row[k]
                if earlier is None:
                    continue
                candidate_score = earlier - min(GAP_CAP, (j - k - 1) * GAP_STEP)
                if best is None or candidate_score > best:
                    best = candidate_score
            if best is not None:
                row[j] = best + char_score(qi, j)
        prev_row = row

    reachable = [score for score in prev_row if score is not None]
    if not reachable:
        return None
    return max(reachable) - n // 5


def rank_entries(entries: list[Entry], query: str) -> list[Entry]:
    """Filter and order ``entries`` by fuzzy match quality against ``query``.

    An empty query returns the entries in their existing order. Otherwise
    non-matching names are dropped and the rest are returned as re-scored
    copies sorted by descending ``rank_score``; ties keep input order.
    """
    if not query:
        return list(entries)

    scored: list[Entry] = []
    for entry in entries:
        score = fuzzy_score(query, entry.name)
        if score is None:
            continue
        scored.append(replace(entry, rank_score=score))
    scored.sort(key=lambda entry: entry.rank_score, reverse=True)
    return scored
