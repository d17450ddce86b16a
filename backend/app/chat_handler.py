"""
Per-message orchestration: greeting short-circuit -> planner -> lookups ->
reply text. Lookups that miss become ordinary reply sentences so the
conversation can continue.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from app import planner
from app.prompts import GREETING_REPLY, SMALL_TALK_REPLY, UNKNOWN_REPLY
from core.conversation import ConversationSession, LastListing, ListingNotFound, produce_list
from core.filters import filter_rows
from core.formatting import format_default_summary, format_fields, format_full_profile
from core.listing_store import ListingStore
from core.models import Plan, PlanIntent, TargetMode
from core.utils import group_digits, normalize_key, parse_number, value_text

logger = logging.getLogger("uvicorn.error")

Render = Callable[[str, LastListing], str]


async def handle_chat(
    messages: List[Dict[str, str]],
    session: ConversationSession,
    store: ListingStore,
) -> str:
    user_text = planner.last_user_text(messages)
    if planner.is_greeting(user_text):
        return GREETING_REPLY

    plan = await planner.plan_from_conversation(messages)
    return answer_plan(plan, session, store, user_text)


def answer_plan(plan: Plan, session: ConversationSession, store: ListingStore, user_text: str = "") -> str:
    """Execute a validated plan against the store and session."""
    try:
        return _dispatch(plan, session, store, user_text)
    except ListingNotFound as exc:
        return str(exc)


def _dispatch(plan: Plan, session: ConversationSession, store: ListingStore, user_text: str) -> str:
    intent = plan.intent

    if intent == PlanIntent.list_listings:
        matches = filter_rows(store, plan.filters)
        if plan.count_only:
            return _count_reply(len(matches))
        return produce_list(session, store, matches, fields=plan.fields, limit=plan.limit)

    if intent == PlanIntent.count_listings:
        return _count_reply(len(filter_rows(store, plan.filters)))

    if intent == PlanIntent.average_price:
        return _average_price_reply(plan, store)

    if intent == PlanIntent.listing_details:
        fields = plan.fields

        def render(prefix: str, listing: LastListing) -> str:
            if fields:
                return f"{prefix}{listing.display_address}\n" + format_fields(listing.row, fields, store.columns)
            return prefix + format_default_summary(listing.row, store.columns)

        return _render_targets(plan, session, store, user_text, render)

    if intent == PlanIntent.full_profile:

        def render(prefix: str, listing: LastListing) -> str:
            return (
                f"Full profile for {prefix}{listing.display_address}:\n\n"
                + format_full_profile(listing.row, store.columns)
            )

        return _render_targets(plan, session, store, user_text, render)

    if intent == PlanIntent.small_talk:
        return SMALL_TALK_REPLY

    return UNKNOWN_REPLY


def _count_reply(n: int) -> str:
    return f"There are {n} listings that match your criteria."


def _average_price_reply(plan: Plan, store: ListingStore) -> str:
    prices: List[float] = []
    for _, row in filter_rows(store, plan.filters):
        price = parse_number(row.get("ListPrice") or row.get("CurrentPrice"))
        if price is not None and price > 0:
            prices.append(price)

    if not prices:
        return "I could not find any valid prices for that search."

    area = _area_label(plan) or "the selected area"
    avg = round(sum(prices) / len(prices))
    return (
        f"For {area}, I found {len(prices)} listings with prices.\n"
        f"Average price: ${group_digits(avg)}."
    )


def _area_label(plan: Plan) -> Optional[str]:
    for p in plan.filters:
        if normalize_key(p.column) in {"city", "zip", "zip code", "postal code", "postalcode"} and p.value is not None:
            return value_text(p.value)
    return None


def _target_mode(plan: Plan) -> TargetMode:
    if plan.target is not None:
        return plan.target
    if plan.target_positions():
        return TargetMode.index
    if plan.address:
        return TargetMode.address
    return TargetMode.last


def _render_targets(
    plan: Plan,
    session: ConversationSession,
    store: ListingStore,
    user_text: str,
    render: Render,
) -> str:
    mode = _target_mode(plan)

    if mode == TargetMode.index:
        positions = plan.target_positions()
        if not positions:
            raise ListingNotFound(
                "I couldn't tell which listing number you meant. Try something like '#11' or 'details for 11'."
            )
        chunks = []
        for n in positions:
            try:
                listing = session.select_position(store, n)
            except ListingNotFound as exc:
                chunks.append(str(exc))
                continue
            chunks.append(render(f"#{n} ", listing))
        return "\n\n".join(chunks)

    if mode == TargetMode.address:
        listing = session.select_address(store, plan.address or user_text)
        return render("", listing)

    return render("", session.last())
