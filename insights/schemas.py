"""
Data schema definitions for the insights engine.

Uses Pandera for runtime validation of the member, attendance and payment
frames so bad exports are rejected before any analyzer sees them.
"""

from pandera import Column, Check, DataFrameSchema

from .config import PLANS


MEMBER_STATUSES = ["active", "inactive", "expired"]
ATTENDANCE_STATUSES = ["Present", "Absent"]


MEMBERS_SCHEMA = DataFrameSchema(
    {
        "id": Column(
            str,
            nullable=False,
            unique=True,
            description="Unique member identifier"
        ),
        "name": Column(
            str,
            nullable=True,
            required=False,
            description="Display name"
        ),
        "membership_plan": Column(
            str,
            nullable=False,
            checks=Check.isin(PLANS),
            description="Current membership plan"
        ),
        "join_date": Column(
            "datetime64[ns]",
            nullable=False,
            description="Date the member joined"
        ),
        "expiration_date": Column(
            "datetime64[ns]",
            nullable=False,
            description="Date the current membership period ends"
        ),
        "status": Column(
            str,
            nullable=False,
            checks=Check.isin(MEMBER_STATUSES),
            description="Membership status"
        ),
    },
    checks=[
        Check(
            lambda df: df["expiration_date"] >= df["join_date"],
            error="expiration_date must not precede join_date",
        ),
    ],
    strict=False,  # Contact details and other store columns are passed through
    coerce=True,
    description="Members as exported by the gym store"
)


ATTENDANCE_SCHEMA = DataFrameSchema(
    {
        "member_id": Column(str, nullable=False),
        "date": Column("datetime64[ns]", nullable=False),
        "status": Column(
            str,
            nullable=False,
            checks=Check.isin(ATTENDANCE_STATUSES),
        ),
        "check_in_time": Column(
            str,
            nullable=True,
            required=False,  # Not recorded by the current check-in flow
            description="Clock time of the check-in, when known"
        ),
    },
    strict=False,
    coerce=True,
    description="Daily attendance records"
)


PAYMENTS_SCHEMA = DataFrameSchema(
    {
        "member_id": Column(str, nullable=False),
        "amount": Column(
            float,
            nullable=False,
            checks=Check.greater_than_or_equal_to(0),
        ),
        "payment_date": Column("datetime64[ns]", nullable=False),
        "plan": Column(
            str,
            nullable=True,
            required=False,
            checks=Check.isin(PLANS),
            description="Plan paid for at the time of payment"
        ),
    },
    strict=False,
    coerce=True,
    description="Membership payments"
)


SCHEMAS = {
    "members": MEMBERS_SCHEMA,
    "attendance": ATTENDANCE_SCHEMA,
    "payments": PAYMENTS_SCHEMA,
}


def validate(kind: str, df):
    """Validate a frame of the given kind, returning the coerced frame."""
    try:
        schema = SCHEMAS[kind]
    except KeyError:
        raise ValueError(f"Unknown record kind: {kind}") from None
    return schema.validate(df)


__all__ = [
    "MEMBERS_SCHEMA",
    "ATTENDANCE_SCHEMA",
    "PAYMENTS_SCHEMA",
    "SCHEMAS",
    "validate",
]
