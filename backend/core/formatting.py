"""
Text rendering for listing rows.

All functions are pure: they take a row (and the column set where friendly
fields have to be resolved) and return text. Nothing here touches session
state.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from core.fields import VIRTUAL_ADDRESS, field_value, resolve_field
from core.utils import group_digits, is_blank, normalize_key, parse_number

Row = Mapping[str, str]

DEFAULT_STATE = "CA"
NOT_AVAILABLE = "N/A"
NO_DATA = "No data available for this listing row."
NO_MATCHES = "There are 0 listings that match your criteria."

MONEY_COLUMNS = frozenset({"ListPrice", "CurrentPrice", "ClosePrice", "OriginalListPrice"})
AREA_COLUMNS = frozenset({"LivingArea", "BuildingAreaTotal", "ResidentialSquareFootage", "LotSizeSquareFeet"})

# Friendly fields asking for every column of a listing.
ALL_DATA_FIELDS = frozenset({"all data", "all info", "full profile", "full property profile"})

# (label, friendly field) shown when a single listing is asked about with no fields.
DEFAULT_SUMMARY_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("Price", "price"),
    ("Beds", "beds"),
    ("Baths", "baths"),
    ("Living area", "sqft"),
    ("Days on market", "days on market"),
    ("Year built", "year built"),
    ("School district", "school district"),
    ("Property type", "property type"),
    ("Remarks", "remarks"),
)


def _get(row: Row, key: str) -> str:
    return str(row.get(key) or "").strip()


# ---------------------------------------------------------------------------
# Single values
# ---------------------------------------------------------------------------

def format_street_line(row: Row) -> str:
    number = _get(row, "StreetNumberNumeric") or _get(row, "StreetNumber")
    return " ".join(
        p for p in (number, _get(row, "StreetDirPrefix"), _get(row, "StreetName"), _get(row, "StreetSuffix")) if p
    )


def format_address(row: Row) -> str:
    """Street line, city, state (default CA), zip; empty parts dropped."""
    parts = [
        format_street_line(row),
        _get(row, "City"),
        _get(row, "StateOrProvince") or DEFAULT_STATE,
        _get(row, "PostalCode"),
    ]
    return ", ".join(p for p in parts if p)


def format_currency(raw) -> str:
    if is_blank(raw):
        return ""
    num = parse_number(raw)
    if num is None:
        return str(raw).strip()
    return "$" + group_digits(num)


def format_area(raw) -> str:
    if is_blank(raw):
        return ""
    num = parse_number(raw)
    if num is None:
        return str(raw).strip()
    return f"{group_digits(num)} sq ft"


def format_value(column: Optional[str], raw) -> str:
    """Apply the per-column display rule (money, area, or plain text)."""
    if column in MONEY_COLUMNS:
        return format_currency(raw)
    if column in AREA_COLUMNS:
        return format_area(raw)
    return "" if is_blank(raw) else str(raw).strip()


def display_field(row: Row, field: str, columns: Sequence[str]) -> str:
    """Formatted value of one friendly field; '' when absent."""
    resolved = resolve_field(field, columns)
    raw = field_value(row, field, columns)
    if resolved == VIRTUAL_ADDRESS:
        return raw
    return format_value(resolved, raw)


# ---------------------------------------------------------------------------
# Composite views
# ---------------------------------------------------------------------------

def format_beds_baths(row: Row) -> str:
    beds = _get(row, "BedroomsTotal") or _get(row, "Bedrooms")
    baths = _get(row, "BathroomsTotalInteger") or _get(row, "BathroomsFull") or _get(row, "Bathrooms")

    if not _get(row, "BathroomsTotalInteger"):
        components = (
            ("BathroomsFull", 1.0),
            ("BathroomsThreeQuarter", 0.75),
            ("BathroomsHalf", 0.5),
            ("BathroomsOneQuarter", 0.25),
        )
        est = sum((parse_number(_get(row, col)) or 0.0) * weight for col, weight in components)
        if est > 0:
            baths = f"{est:g}"

    beds_text = f"{beds} beds" if beds else f"beds {NOT_AVAILABLE}"
    baths_text = f"{baths} baths" if baths else f"baths {NOT_AVAILABLE}"
    return f"{beds_text}, {baths_text}"


def format_description(row: Row) -> str:
    public = _get(row, "PublicRemarks")
    private = _get(row, "PrivateRemarks")
    parts = []
    if public:
        parts.append(f"Public remarks: {public}")
    if private:
        parts.append(f"Private remarks: {private}")
    if not parts:
        return "No remarks available for this listing."
    return "\n\n".join(parts)


def format_agent(row: Row) -> str:
    name = f"{_get(row, 'ListAgentFirstName')} {_get(row, 'ListAgentLastName')}".strip()
    return name or NOT_AVAILABLE


def format_agent_contact(row: Row) -> str:
    mobile = _get(row, "ListAgentMobilePhone") or _get(row, "CoListAgentMobilePhone")
    direct = _get(row, "ListAgentDirectPhone")
    lines = [f"Agent: {format_agent(row)}"]
    if mobile:
        lines.append(f"Mobile: {mobile}")
    if direct and direct != mobile:
        lines.append(f"Direct: {direct}")
    for label, col in (("Email", "ListAgentEmail"), ("Office", "ListOfficeName"), ("Office phone", "ListOfficePhone")):
        value = _get(row, col)
        if value:
            lines.append(f"{label}: {value}")
    return "\n".join(lines)


def format_full_profile(row: Row, columns: Sequence[str]) -> str:
    """Every non-blank column as 'Column: value', one per line."""
    lines = [f"{col}: {row.get(col)}" for col in columns if not is_blank(row.get(col))]
    if not lines:
        return NO_DATA
    return "\n".join(lines)


# friendly key -> (label, renderer) for fields that span several columns
_COMPOSITES: Dict[str, Tuple[str, Callable[[Row, Sequence[str]], str]]] = {
    "beds baths": ("Beds/Baths", lambda row, cols: format_beds_baths(row)),
    "description": ("Property description", lambda row, cols: format_description(row)),
    "property description": ("Property description", lambda row, cols: format_description(row)),
    "agent": ("Listing agent", lambda row, cols: format_agent(row)),
    "listing agent": ("Listing agent", lambda row, cols: format_agent(row)),
    "contact": ("Contact info", lambda row, cols: format_agent_contact(row)),
    "contact info": ("Contact info", lambda row, cols: format_agent_contact(row)),
}


def wants_all_data(fields: Optional[Sequence[str]]) -> bool:
    return any(normalize_key(f) in ALL_DATA_FIELDS for f in fields or [])


def _field_label(field: str, columns: Sequence[str]) -> str:
    resolved = resolve_field(field, columns)
    if resolved == VIRTUAL_ADDRESS or normalize_key(field) == "address":
        return "Address"
    return resolved or field


def format_field_line(row: Row, field: str, columns: Sequence[str]) -> str:
    """'Label: value' for one requested field; absent values show N/A."""
    key = normalize_key(field)
    if key in ALL_DATA_FIELDS:
        return "Full profile:\n" + format_full_profile(row, columns)
    if key in _COMPOSITES:
        label, render = _COMPOSITES[key]
        sep = "\n" if label in {"Property description", "Contact info"} else " "
        return f"{label}:{sep}{render(row, columns)}"
    value = display_field(row, field, columns)
    return f"{_field_label(field, columns)}: {value or NOT_AVAILABLE}"


def format_fields(row: Row, fields: Sequence[str], columns: Sequence[str]) -> str:
    return "\n".join(format_field_line(row, f, columns) for f in fields)


def format_default_summary(row: Row, columns: Sequence[str]) -> str:
    """Address plus the commonly wanted fields that have a value."""
    lines = [format_address(row)]
    for label, field in DEFAULT_SUMMARY_FIELDS:
        value = display_field(row, field, columns)
        if value:
            lines.append(f"{label}: {value}")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------

def _list_extra(row: Row, field: str, columns: Sequence[str]) -> str:
    key = normalize_key(field)
    if key in _COMPOSITES:
        label, render = _COMPOSITES[key]
        return f"{label}: {render(row, columns)}".replace("\n\n", " | ").replace("\n", ", ")
    value = display_field(row, field, columns)
    return f"{_field_label(field, columns)}: {value or NOT_AVAILABLE}"


def format_listing_list(
    rows: Sequence[Tuple[str, Row]],
    fields: Optional[Sequence[str]],
    columns: Sequence[str],
) -> str:
    """
    Numbered list of (display address, row) pairs.

    Requested fields are appended to each line; "all data" adds the full
    profile block under every entry.
    """
    if not rows:
        return NO_MATCHES

    fields = list(fields or [])
    full = wants_all_data(fields)
    inline = [f for f in fields if normalize_key(f) not in ALL_DATA_FIELDS]

    lines: List[str] = []
    for i, (address, row) in enumerate(rows, start=1):
        line = f"#{i} {address}"
        extras = [_list_extra(row, f, columns) for f in inline]
        if extras:
            line += " - " + " | ".join(extras)
        if full:
            line += "\n" + format_full_profile(row, columns) + "\n"
        lines.append(line)

    return f"Here are up to {len(rows)} matching listings:\n" + "\n".join(lines)
