"""Profile repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.profile import ItemKind, Profile, ProfileEdit


class IProfileRepository(Protocol):
    """Repository interface for Profile entities and their items."""

    async def get_by_account(self, account_id: UUID) -> Profile | None:
        """Get the profile owned by an account."""
        ...

    async def get_by_handle(self, handle: str) -> Profile | None:
        """Get a profile by normalized handle."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Create a profile together with its items."""
        ...

    async def replace_editable(self, account_id: UUID, edit: ProfileEdit) -> Profile:
        """Replace every editable field, preserving item ids and click counters."""
        ...

    async def set_display_title(self, account_id: UUID, title: str) -> None:
        """Overwrite only the display title."""
        ...

    async def increment_click(self, handle: str, item_id: UUID, kind: ItemKind) -> bool:
        """Atomically add one to an item's counter. False if nothing matched."""
        ...
