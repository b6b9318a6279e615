# showroom/models/inventory_page.py

"""One page of inventory results as returned by a fetch."""

from dataclasses import dataclass, field

from showroom.models.vehicle import Vehicle


@dataclass
class InventoryPage:
    """Ordered vehicles for one query page plus the server-side total."""

    items: list[Vehicle] = field(
        default_factory=lambda: list[Vehicle]()
    )
    total_count: int = 0
