"""
Data Source Plugin Base - Read-only lookups of remote entities.

Data sources expose remote state without managing it: a singular lookup by
identifier and a plural lookup that drains every page of the listing.
Sensitive fields are always stripped from the returned records.
"""

import logging
from typing import Any, AsyncIterator, Dict, List

from entities import Entity
from errors import DecodeError, ReconcilerError
from plugins.base import KindPlugin

logger = logging.getLogger(__name__)


class DataSourcePlugin(KindPlugin):
    """Generic read-only lookup for one entity kind."""

    async def fetch_one(self, identifier: str) -> Dict[str, Any]:
        """
        Get the current state of one entity.

        Raises:
            NotFoundError: If the identifier does not exist remotely
        """
        try:
            entity = await self.client.get(identifier)
        except ReconcilerError as e:
            raise e.with_context("fetch_one", self.name, identifier)
        return self.kind.record_from_entity(entity, redact=True)

    async def iter_all(self) -> AsyncIterator[Entity]:
        """
        Iterate over every entity, one page at a time.

        The next page is requested only once the previous page's cursor is
        known. Iteration ends when a page comes back without a cursor.
        """
        cursor = None
        pages = 0
        while True:
            try:
                page = await self.client.list(cursor)
            except ReconcilerError as e:
                raise e.with_context("fetch_all", self.name)
            pages += 1

            for item in page.items:
                yield item

            if not page.cursor:
                break
            if page.cursor == cursor:
                raise DecodeError(
                    f"list cursor did not advance after page {pages}"
                ).with_context("fetch_all", self.name)
            cursor = page.cursor

        logger.debug(f"Listed {self.name} entities across {pages} page(s)")

    async def fetch_all(self) -> List[Dict[str, Any]]:
        """Get every entity of this kind, fully materialized in page order."""
        return [
            self.kind.record_from_entity(entity, redact=True)
            async for entity in self.iter_all()
        ]
