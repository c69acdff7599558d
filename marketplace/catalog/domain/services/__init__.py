from .catalog_gateway import CatalogGateway, DjangoCatalogGateway, ProductSnapshot


__all__ = [
    "CatalogGateway",
    "DjangoCatalogGateway",
    "ProductSnapshot",
]
