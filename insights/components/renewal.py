"""Personalised renewal offers."""

from datetime import date, timedelta

import pandas as pd

from ..config import BASIC, PRO
from ..primitives import as_timestamp, days_between
from ..results import RenewalOffer
from ..store import QueryFilter
from .base import BaseAnalyzer


# offer type -> description
OFFERS = {
    "Loyalty Upgrade": "50% off first month of Pro plan for loyal members",
    "Premium Trial": "Try Premium features for 2 weeks with your renewal",
    "Renewal Discount": "10% off your next renewal as a thank you for your loyalty",
    "Last Chance": "Renew in the next 48 hours and get a free personal training session",
    "Early Bird": "Renew early and save 5% on your next membership period",
}

LOYAL_OFFERS = {
    BASIC: "Loyalty Upgrade",
    PRO: "Premium Trial",
}


class RenewalOfferGenerator(BaseAnalyzer):
    """
    Pick one offer per active member renewing within the next 30 days.

    Loyal members (>180 days) get a plan-based offer: an upgrade
    incentive on Basic, a Premium trial on Pro, a discount otherwise.
    Newer members get "Last Chance" when under a week remains and
    "Early Bird" otherwise.

    Offers start as ``pending``; delivery tracking belongs to messaging.
    """

    name = "renewal_offers"

    def fetch(self, store, today: date) -> tuple:
        members = store.query_members(QueryFilter(
            status="active",
            date_field="expiration_date",
            gte=today,
            lte=today + timedelta(days=self.config.renewal_window_days),
        ))
        return (members,)

    def choose_offer(self, plan: str, tenure_days: int, days_left: int) -> str:
        cfg = self.config
        if tenure_days > cfg.loyal_tenure_days:
            return LOYAL_OFFERS.get(plan, "Renewal Discount")
        if days_left < cfg.urgent_renewal_days:
            return "Last Chance"
        return "Early Bird"

    def analyze(self, members: pd.DataFrame, *, today: date) -> list:
        if members.empty:
            return []

        cfg = self.config
        today_ts = as_timestamp(today)
        expiration = members["expiration_date"].dt.normalize()
        upcoming = members[
            (expiration >= today_ts)
            & (expiration <= today_ts + pd.Timedelta(days=cfg.renewal_window_days))
        ]
        if "status" in upcoming.columns:
            upcoming = upcoming[upcoming["status"] == "active"]

        days_left = days_between(today_ts, upcoming["expiration_date"])
        tenure = days_between(upcoming["join_date"], today_ts)

        offers = []
        for idx, member in upcoming.iterrows():
            offer_type = self.choose_offer(
                member["membership_plan"], int(tenure[idx]), int(days_left[idx])
            )
            name = member.get("name")
            offers.append(RenewalOffer(
                member_id=member["id"],
                member_name=name if isinstance(name, str) else "",
                current_plan=member["membership_plan"],
                renewal_date=member["expiration_date"].strftime("%Y-%m-%d"),
                offer_type=offer_type,
                offer_description=OFFERS[offer_type],
            ))

        return sorted(offers, key=lambda o: (o.renewal_date, o.member_id))
