from typing import List, Optional, Protocol
from refresh_scheduler.domain.definition import JobDefinition


class JobStore(Protocol):
    async def get_definition(self, name: str) -> Optional[JobDefinition]:
        """Retrieve the active definition registered under a name."""
        ...

    async def save_definition(self, definition: JobDefinition) -> str:
        """Store a definition, replacing any stored under the same name. Return its ID."""
        ...

    async def delete_definition(self, name: str) -> bool:
        """Delete the definition stored under a name. Return True if one existed."""
        ...

    async def list_definitions(self) -> List[JobDefinition]:
        """List all stored definitions ordered by creation time."""
        ...
