"""Location registry for resolving point-of-sale names.

Locations are identified by small integers. The registry maps them to the
display names used in reports and tells the aggregator which locations to
report on even when one of them has no sales in the requested window.
"""

from __future__ import annotations

from collections.abc import Mapping

DEFAULT_LOCATIONS: dict[int, str] = {
    1: "Costa del Este",
    2: "Mar de las Pampas",
    3: "Costa Esmeralda",
}


class LocationRegistry:
    """Registry of point-of-sale locations.

    Example:
        >>> registry = LocationRegistry()
        >>> registry.name_for(2)
        'Mar de las Pampas'
        >>> registry.name_for(9)
        'POS 9'
        >>> registry.list_ids()
        [1, 2, 3]

    """

    def __init__(self, locations: Mapping[int, str] | None = None) -> None:
        """Initialize the registry.

        Args:
            locations: Mapping of location id to display name. Defaults to
                the three coastal locations.

        """
        source = DEFAULT_LOCATIONS if locations is None else locations
        self._names = {int(k): str(v) for k, v in source.items()}

    def list_ids(self) -> list[int]:
        """List all registered location ids in ascending order."""
        return sorted(self._names)

    def name_for(self, location_id: int) -> str:
        """Return a location's display name, ``"POS <id>"`` when unregistered."""
        return self._names.get(int(location_id), f"POS {location_id}")

    def __contains__(self, location_id: object) -> bool:
        return location_id in self._names

    def __len__(self) -> int:
        return len(self._names)
