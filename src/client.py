"""
Entity clients - typed per-kind façades over the Transport.

Each EntityClient translates create/get/update/delete/list for one kind into
Transport calls and decodes the results. Listing returns a single page; the
caller decides whether to follow the cursor.
"""

from typing import Dict, Generic, Optional
from urllib.parse import quote

from entities import (
    BLUEPRINT,
    BOT,
    DATASET,
    E,
    FILE,
    INTEGRATION,
    PORTAL,
    SECRET,
    SKILLSET,
    EntityKind,
    ListPage,
    get_kind,
    to_draft,
)
from transport import Transport


def _quote(value: str) -> str:
    return quote(value, safe="")


class EntityClient(Generic[E]):
    """CRUD and listing for one resource kind."""

    def __init__(self, transport: Transport, kind: EntityKind):
        self.transport = transport
        self.kind = kind

    def _route(self, identifier: Optional[str], action: str) -> str:
        if identifier is None:
            return f"/{self.kind.name}/{action}"
        if not identifier:
            raise ValueError(f"{self.kind.name} identifier must not be empty")
        return f"/{self.kind.name}/{_quote(identifier)}/{action}"

    async def create(self, draft: E) -> E:
        """Create an entity and return it with its server-assigned fields."""
        data = await self.transport.execute(
            "POST", self._route(None, "create"), to_draft(draft)
        )
        return self.kind.decode(data)

    async def get(self, identifier: str) -> E:
        """
        Fetch an entity by identifier.

        Raises:
            NotFoundError: If the identifier does not exist remotely
        """
        data = await self.transport.execute("GET", self._route(identifier, "fetch"))
        return self.kind.decode(data)

    async def update(self, identifier: str, draft: E) -> E:
        """Overwrite every mutable field of an entity with the draft's values."""
        data = await self.transport.execute(
            "POST", self._route(identifier, "update"), to_draft(draft)
        )
        return self.kind.decode(data)

    async def delete(self, identifier: str) -> None:
        """Delete an entity. A not-found response is raised like any other error."""
        await self.transport.execute("POST", self._route(identifier, "delete"))

    async def list(self, cursor: Optional[str] = None) -> ListPage:
        """Fetch one page of entities starting at cursor."""
        path = self._route(None, "list")
        if cursor:
            path = f"{path}?cursor={_quote(cursor)}"
        data = await self.transport.execute("GET", path)
        return self.kind.decode_page(data)


class ChatBotKitClient:
    """Entity clients for every supported kind, sharing one transport."""

    def __init__(self, transport: Transport):
        self.transport = transport
        self.blueprints: EntityClient = EntityClient(transport, BLUEPRINT)
        self.bots: EntityClient = EntityClient(transport, BOT)
        self.datasets: EntityClient = EntityClient(transport, DATASET)
        self.files: EntityClient = EntityClient(transport, FILE)
        self.integrations: EntityClient = EntityClient(transport, INTEGRATION)
        self.portals: EntityClient = EntityClient(transport, PORTAL)
        self.secrets: EntityClient = EntityClient(transport, SECRET)
        self.skillsets: EntityClient = EntityClient(transport, SKILLSET)
        self._by_kind: Dict[str, EntityClient] = {
            client.kind.name: client
            for client in (
                self.blueprints,
                self.bots,
                self.datasets,
                self.files,
                self.integrations,
                self.portals,
                self.secrets,
                self.skillsets,
            )
        }

    def for_kind(self, name: str) -> EntityClient:
        """Get the entity client for a kind name (e.g. 'bot')."""
        return self._by_kind[get_kind(name).name]
