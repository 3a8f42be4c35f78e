"""Resource facade and the catalog of resource families."""

from .catalog import CATALOG
from .resources import ResourceFacade

__all__ = ["CATALOG", "ResourceFacade"]
