from waste_core.store.gateway import InMemoryTableGateway, TableGateway
from waste_core.store.publishing_gateway import PublishingTableGateway

__all__ = ["InMemoryTableGateway", "PublishingTableGateway", "TableGateway"]
