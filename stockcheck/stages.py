"""
Item collections of the delivery pipeline (despatch, delivery, transit, ...)
and the REST endpoints that serve them.
"""
from enum import Enum
from pydantic import BaseModel, ConfigDict


class CollectionKind(str, Enum):
    """Stage of the factory -> godown -> transit -> delivery -> sale pipeline."""
    DESPATCH = "despatch"
    DELIVERY = "delivery"
    SELECT = "select"
    TRANSIT = "transit"
    SALES = "sales"


class CollectionConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: CollectionKind
    name: str
    endpoint: str
    id_field: str = "_id"


COLLECTIONS: dict[CollectionKind, CollectionConfig] = {
    CollectionKind.DESPATCH: CollectionConfig(kind=CollectionKind.DESPATCH, name="Despatch", endpoint="/api/despatch"),
    CollectionKind.DELIVERY: CollectionConfig(kind=CollectionKind.DELIVERY, name="Delivery", endpoint="/api/products3"),
    CollectionKind.SELECT: CollectionConfig(kind=CollectionKind.SELECT, name="Select", endpoint="/api/products2"),
    CollectionKind.TRANSIT: CollectionConfig(kind=CollectionKind.TRANSIT, name="Transit", endpoint="/api/transits"),
    CollectionKind.SALES: CollectionConfig(kind=CollectionKind.SALES, name="Sales", endpoint="/api/sales"),
}


def get_collection(kind: CollectionKind | str) -> CollectionConfig:
    """
    Look up a collection by kind.

    Raises:
        ValueError: unknown collection kind
    """
    return COLLECTIONS[CollectionKind(kind)]
