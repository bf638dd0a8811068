from typing import Iterable

from propmatch.domain.ports import CatalogRepository
from propmatch.domain.property import Property, PropertyConfiguration


class InMemoryCatalogRepository(CatalogRepository):
    def __init__(self) -> None:
        self._properties: dict[str, Property] = {}
        self._configurations: dict[str, PropertyConfiguration] = {}

    def upsert_properties(self, items: Iterable[Property]) -> int:
        n = 0
        for p in items:
            self._properties[p.id] = p
            n += 1
        return n

    def upsert_configurations(self, items: Iterable[PropertyConfiguration]) -> int:
        n = 0
        for c in items:
            # unnamed variants still need a slot
            key = c.id or f"{c.property_id}:{len(self._configurations)}"
            self._configurations[key] = c
            n += 1
        return n

    def list_properties(self) -> list[Property]:
        return list(self._properties.values())

    def list_configurations(self, property_id: str | None = None) -> list[PropertyConfiguration]:
        items = list(self._configurations.values())
        if property_id is None:
            return items
        return [c for c in items if c.property_id == property_id]

    def get_property(self, property_id: str) -> Property | None:
        return self._properties.get(property_id)
