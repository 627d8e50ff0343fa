"""Winning-bid selection.

The winner is the bid with the highest amount; among equal amounts the
earliest `created_at` wins (first to reach the price), then the lowest id
so the choice is total.
"""

from collections.abc import Iterable

from src.ac_auction.domain.models import Bid


def _rank(bid: Bid) -> tuple[int, object, str]:
    return (-bid.amount_cents, bid.created_at, bid.id)


def select_winning_bid(bids: Iterable[Bid]) -> Bid | None:
    ranked = sorted(bids, key=_rank)
    return ranked[0] if ranked else None
