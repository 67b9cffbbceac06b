"""Price parsing at the persistence boundary.

NUMERIC columns come back from asyncpg as Decimal, but legacy rows and CSV
imports may hand us text. Prices are always compared as Decimal, never as str.
"""

from decimal import Decimal, InvalidOperation


def parse_price(raw: object) -> Decimal:
    if isinstance(raw, Decimal):
        return raw
    if raw is None:
        raise ValueError("price must not be NULL")
    try:
        return Decimal(str(raw).strip())
    except InvalidOperation as exc:
        raise ValueError(f"invalid price value: {raw!r}") from exc
