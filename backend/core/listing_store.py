"""
In-memory listing table loaded once from an MLS CSV export.

Rows are read-only mappings of column name -> string cell. A store that failed
to load is simply empty; callers treat zero rows as a normal state.
"""

from __future__ import annotations

import io
import logging
import warnings
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

logger = logging.getLogger("uvicorn.error")

Row = Mapping[str, str]

# Some MLS exports prepend a junk line such as "Full-4" above the real header.
BOGUS_HEADER_SENTINEL = "Full-4"


class ListingStore:
    """Ordered rows plus the column set, immutable after construction."""

    def __init__(self, columns: Sequence[str], rows: Sequence[Mapping[str, Any]]) -> None:
        self._columns: Tuple[str, ...] = tuple(columns)
        frozen: List[Row] = []
        for raw in rows:
            # every row carries exactly the column set
            record = {c: _cell(raw.get(c)) for c in self._columns}
            frozen.append(MappingProxyType(record))
        self._rows: Tuple[Row, ...] = tuple(frozen)

    @classmethod
    def empty(cls) -> "ListingStore":
        return cls([], [])

    @classmethod
    def from_records(cls, records: Sequence[Mapping[str, Any]]) -> "ListingStore":
        """Build a store from dicts; column order follows first appearance."""
        columns: List[str] = []
        seen = set()
        for rec in records:
            for key in rec.keys():
                if key not in seen:
                    seen.add(key)
                    columns.append(str(key))
        return cls(columns, records)

    @property
    def columns(self) -> Tuple[str, ...]:
        return self._columns

    @property
    def is_empty(self) -> bool:
        return not self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def row(self, index: int) -> Row:
        if index < 0 or index >= len(self._rows):
            raise IndexError(f"row index {index} out of range")
        return self._rows[index]

    def iter_rows(self) -> Iterator[Tuple[int, Row]]:
        return iter(enumerate(self._rows))


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and pd.isna(value):
        return ""
    return str(value).strip()


def _strip_bogus_header(text: str) -> str:
    text = text.lstrip("\ufeff")
    if text.startswith(BOGUS_HEADER_SENTINEL):
        _, _, rest = text.partition("\n")
        return rest
    return text


def parse_listings_csv(text: str) -> ListingStore:
    """Parse CSV text into a ListingStore. Raises on unreadable input."""
    text = _strip_bogus_header(text or "")
    if not text.strip():
        return ListingStore.empty()

    header = pd.read_csv(io.StringIO(text), nrows=0, dtype=str)
    n_cols = len(header.columns)

    def _truncate(bad_line: List[str]) -> List[str]:
        # rows wider than the header lose their extra fields
        return bad_line[:n_cols]

    with warnings.catch_warnings():
        # a first data row wider than the header is truncated by _truncate
        warnings.simplefilter("ignore", pd.errors.ParserWarning)
        df = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            index_col=False,
            engine="python",
            on_bad_lines=_truncate,
        )
    df = df.fillna("")
    df.columns = [str(c).strip() for c in df.columns]
    records: List[Dict[str, Any]] = df.to_dict(orient="records")
    return ListingStore(list(df.columns), records)


def load_listings(path: Optional[str]) -> ListingStore:
    """
    Load the listings CSV at `path`.

    Any failure (missing file, undecodable bytes, parser error) is logged and
    yields an empty store so the server still starts.
    """
    if not path:
        logger.warning("No listings CSV configured; starting with 0 rows")
        return ListingStore.empty()
    try:
        with open(path, encoding="utf-8-sig", newline="") as fh:
            raw = fh.read()
        store = parse_listings_csv(raw)
    except (OSError, ValueError) as exc:
        # ValueError covers UnicodeDecodeError and pandas ParserError/EmptyDataError
        logger.error("Error loading listings CSV %s: %s", path, exc)
        return ListingStore.empty()

    if store.is_empty:
        logger.warning("Listings CSV %s loaded but has 0 data rows", path)
    logger.info(
        "Loaded listings CSV with %d rows and %d columns", len(store), len(store.columns)
    )
    logger.info("First columns: %s", ", ".join(store.columns[:20]))
    return store
