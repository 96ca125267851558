"""
Guest-capacity policy: how many people an invitee may bring.

A limit counts the invitee themself, so a limit of 3 means two additional
guests. The event-wide ``max_guests_per_invitee`` applies unless the guest
carries its own override. Both unset means unlimited.
"""

import math

from invitely.guests.dtos import GuestLimitCheck


def effective_limit(global_max: int | None, override: int | None = None) -> int | None:
    if override is not None:
        return override
    return global_max


def limit_exceeded_message(limit: int) -> str:
    allowed = limit - 1
    plural = "" if allowed == 1 else "s"
    return (
        f"You can only bring {allowed} additional guest{plural} "
        f"(total of {limit} including yourself)"
    )


def validate_guest_limit(
    global_max: int | None, additional_count: int, override: int | None = None
) -> GuestLimitCheck:
    """Check whether the invitee plus `additional_count` companions fit the limit."""
    limit = effective_limit(global_max, override)
    if limit is None:
        return GuestLimitCheck(valid=True, remaining=math.inf)

    total = 1 + additional_count
    if total > limit:
        return GuestLimitCheck(valid=False, remaining=0, error=limit_exceeded_message(limit))

    return GuestLimitCheck(valid=True, remaining=max(0, limit - total))
