"""Availability calculator: how much of a seller's synced stock is for sale.

Limit modes:
  none     — sell everything FIO reports
  max_sell — never list more than limit_quantity
  reserve  — keep limit_quantity back, list only the excess
"""

from src.cm_common.enums import LimitMode


def available_quantity(
    fio_quantity: int,
    limit_mode: str,
    limit_quantity: int | None,
) -> int:
    limit = limit_quantity or 0
    if limit_mode == LimitMode.NONE:
        return fio_quantity
    if limit_mode == LimitMode.MAX_SELL:
        return min(fio_quantity, limit)
    if limit_mode == LimitMode.RESERVE:
        return max(0, fio_quantity - limit)
    # Unknown mode: list the raw quantity
    return fio_quantity


def remaining_quantity(available: int, reserved: int) -> int:
    """Supply left after active reservations, floored at zero."""
    return max(0, available - reserved)
