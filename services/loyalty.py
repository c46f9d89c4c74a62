"""Foodie Rewards: every Nth order earns a complimentary item."""

from typing import Optional

from app.config import settings
from domain.schemas.order_schemas import LoyaltyStatus


def loyalty_status(order_count: int, cycle: Optional[int] = None) -> LoyaltyStatus:
    cycle = cycle or settings.loyalty_cycle
    progress = order_count % cycle
    return LoyaltyStatus(
        order_count=order_count,
        cycle=cycle,
        progress=progress,
        orders_until_free=cycle if progress == 0 else cycle - progress,
        reward_earned=progress == 0 and order_count > 0,
        next_order_is_reward=progress == cycle - 1,
        progress_percent=progress / cycle * 100,
    )


def checkout_notice(status: LoyaltyStatus) -> Optional[str]:
    """Message shown at checkout when the order being placed completes a cycle."""
    if status.next_order_is_reward:
        return (
            f"It's your {_ordinal(status.cycle)} order! "
            "You'll receive a complimentary item soon!"
        )
    return None


def _ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"
