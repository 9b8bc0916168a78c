"""In-memory position store."""

import logging
from decimal import Decimal
from typing import Dict, Iterable, Optional

from src.core.errors import PositionNotFoundError
from src.core.models import PositionSnapshot
from src.data.clients.base import PositionStore

logger = logging.getLogger(__name__)

DEMO_POSITION = PositionSnapshot(
    total_value_usd=Decimal("125420.50"),
    current_apy=Decimal("13.52"),
    borrowed_usd=Decimal("15000"),
    borrow_capacity_usd=Decimal("62710.25"),
    position_id="pos_demo_001",
)


class InMemoryPositionStore(PositionStore):
    """Dict-backed position store, seeded with the demo position."""

    def __init__(self, positions: Optional[Iterable[PositionSnapshot]] = None):
        self._positions: Dict[str, PositionSnapshot] = {}
        for position in positions if positions is not None else (DEMO_POSITION,):
            self.save(position)

    def save(self, position: PositionSnapshot) -> None:
        if not position.position_id:
            raise ValueError("Position must have an id to be stored")
        self._positions[position.position_id] = position
        logger.debug(f"Stored position: {position.position_id}")

    def get_position(self, position_id: str) -> PositionSnapshot:
        position = self._positions.get(position_id)
        if position is None:
            raise PositionNotFoundError(position_id)
        return position
