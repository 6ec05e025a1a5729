"""Line-item aggregation feeding the pricing engine."""
from __future__ import annotations

from decimal import Decimal
from typing import Mapping, Sequence

from .models import FormPosition

ONE = Decimal("1")


def line_total(position: FormPosition) -> Decimal:
    price = position.unit_price_net if position.unit_price_net is not None else Decimal("0")
    quantity = position.quantity if position.quantity is not None else ONE
    return quantity * price


def net_total(positions: Sequence[FormPosition]) -> Decimal:
    return sum((line_total(position) for position in positions), Decimal("0"))


def has_priced_positions(positions: Sequence[FormPosition]) -> bool:
    return any((position.unit_price_net or 0) > 0 for position in positions)


def positions_missing_prices(
    positions: Sequence[FormPosition], raw_inputs: Mapping[str, str]
) -> list[FormPosition]:
    """Positions whose price field was left blank by the supplier."""
    return [position for position in positions if not (raw_inputs.get(position.id) or "").strip()]
