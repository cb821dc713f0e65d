from .loader import Catalog, load_catalog, save_catalog
from .filters import CatalogFilters, class_items, skill_items, all_skill_items

__all__ = [
    'Catalog',
    'load_catalog',
    'save_catalog',
    'CatalogFilters',
    'class_items',
    'skill_items',
    'all_skill_items',
]
