"""Currency helpers for the storefront.

Storage unit: Rupiah as a fixed-point decimal with 2 places (Numeric(15, 2)).
Display unit: whole Rupiah, dot-grouped (``Rp 150.000``).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

# ─── constants ───────────────────────────────────────────────────────────────

CENT = Decimal("0.01")


# ─── helpers ─────────────────────────────────────────────────────────────────


def quantize_amount(amount: Decimal | int | str) -> Decimal:
    """Round to the stored precision (2 places, half-up)."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def format_idr(amount: Decimal | int | float) -> str:
    """Format an amount as Rupiah for display: 150000 -> 'Rp 150.000'."""
    whole = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    grouped = f"{int(whole):,}".replace(",", ".")
    return f"Rp {grouped}"
