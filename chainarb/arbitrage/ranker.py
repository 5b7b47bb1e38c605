"""Opportunity ranking."""

from collections.abc import Iterable

from chainarb.models.opportunity import Opportunity


def rank_opportunities(opportunities: Iterable[Opportunity]) -> list[Opportunity]:
    """
    Order opportunities by net profit, best first.

    The sort is stable, so equal profits keep their input order. The input is
    not modified.
    """
    return sorted(opportunities, key=lambda opp: opp.profit_ratio, reverse=True)
