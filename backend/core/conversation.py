"""
Per-conversation memory of what was last shown.

A session remembers the numbered list from the latest list query (for "#N"
references) and the single listing discussed most recently (for "it",
"that one"). Lookups that can't be satisfied raise ListingNotFound, whose
message is meant to be shown to the user as-is.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from core.formatting import format_address, format_listing_list, format_street_line, wants_all_data
from core.listing_store import ListingStore, Row
from core.utils import normalize_text

DEFAULT_LIST_LIMIT = 100
FULL_DATA_LIST_LIMIT = 10


class ListingNotFound(LookupError):
    """A position, address or pronoun reference didn't match any listing."""


@dataclass(frozen=True)
class ResultListEntry:
    row_index: int
    display_address: str


@dataclass(frozen=True)
class LastListing:
    row_index: int
    display_address: str
    row: Row


@dataclass
class ConversationSession:
    session_id: str = "default"
    result_list: List[ResultListEntry] = field(default_factory=list)
    last_listing: Optional[LastListing] = None

    def remember(self, store: ListingStore, row_index: int) -> LastListing:
        row = store.row(row_index)
        self.last_listing = LastListing(row_index, format_address(row), row)
        return self.last_listing

    def select_position(self, store: ListingStore, position: int) -> LastListing:
        """Listing #position (1-based) of the current result list."""
        if not self.result_list:
            raise ListingNotFound(
                f"I don't have a listing #{position} because no list has been shown yet. "
                "Ask for a list first (for example, 'show me addresses in San Fernando')."
            )
        if position < 1 or position > len(self.result_list):
            raise ListingNotFound(f"I don't have a listing #{position} in the last list.")
        entry = self.result_list[position - 1]
        return self.remember(store, entry.row_index)

    def select_address(self, store: ListingStore, text: Optional[str]) -> LastListing:
        row_index = match_address(store, text)
        if row_index is None:
            raise ListingNotFound(
                "I couldn't match that address to any listing. "
                "Try copying the address as it appears in the list."
            )
        return self.remember(store, row_index)

    def last(self) -> LastListing:
        if self.last_listing is None:
            raise ListingNotFound(
                "I'm not sure which property you mean by 'it'. "
                "Ask about a specific listing first (for example, '#11')."
            )
        return self.last_listing


def match_address(store: ListingStore, text: Optional[str]) -> Optional[int]:
    """
    Index of the row whose address best matches `text`.

    Matching is case/punctuation-insensitive and compares whole tokens, both
    ways (text inside the address, or the address inside the text). An exact
    match wins outright; otherwise the shortest matching address wins so a
    short query doesn't land on a longer lookalike. Rows without a street
    line never match.
    """
    needle = normalize_text(text)
    if not needle:
        return None
    padded_needle = f" {needle} "

    best: Optional[Tuple[int, int]] = None  # (length, row index)
    for i, row in store.iter_rows():
        if not format_street_line(row):
            continue
        addr = normalize_text(format_address(row))
        if addr == needle:
            return i
        padded_addr = f" {addr} "
        if padded_needle in padded_addr or padded_addr in padded_needle:
            if best is None or len(addr) < best[0]:
                best = (len(addr), i)
    return None if best is None else best[1]


def produce_list(
    session: ConversationSession,
    store: ListingStore,
    matches: Sequence[Tuple[int, Row]],
    fields: Optional[Sequence[str]] = None,
    limit: Optional[int] = None,
) -> str:
    """Truncate, replace the session's result list, and render the numbered list."""
    effective = limit if limit and limit > 0 else DEFAULT_LIST_LIMIT
    if wants_all_data(fields):
        effective = min(effective, FULL_DATA_LIST_LIMIT)

    shown = [(i, row, format_address(row)) for i, row in list(matches)[:effective]]
    session.result_list = [ResultListEntry(i, addr) for i, _, addr in shown]
    return format_listing_list([(addr, row) for _, row, addr in shown], fields, store.columns)
