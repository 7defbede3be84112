"""
Ancestry resolver.

Reads the precomputed ancestry chain of a purchaser. The chain is written
at signup and never modified here.
"""

from typing import NamedTuple

from commission_engine.repositories.referral_repository import ReferralRepository


class AncestorRef(NamedTuple):
    """One entry of an ancestry chain."""

    ancestor_id: int
    level: int


class AncestryResolver:
    """Resolve (ancestor, level) pairs for a purchaser."""

    def __init__(self, referral_repo: ReferralRepository) -> None:
        self.referral_repo = referral_repo

    async def ancestry_of(self, purchaser_id: int) -> list[AncestorRef]:
        """
        Get ancestry chain of a purchaser.

        Ancestors are not checked for existence; removed or suspended
        accounts are handled per ancestor by the caller.

        Args:
            purchaser_id: Purchasing user ID

        Returns:
            Pairs ordered by level ascending, empty for self-registered users
        """
        rows = await self.referral_repo.get_ancestry(purchaser_id)
        return [AncestorRef(row.ancestor_id, row.level) for row in rows]
