"""Room repository for database operations."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from dataroom.db.models import RoomModel
from dataroom.repositories.base import BaseRepository


class RoomRepository(BaseRepository[RoomModel]):
    """Repository for data room operations."""

    def __init__(self):
        super().__init__(RoomModel)

    def list_by_owner(self, db: Session, owner_id: str) -> list[RoomModel]:
        """List a user's rooms, newest first.

        Args:
            db: Database session
            owner_id: Owning user ID

        Returns:
            Rooms ordered by created_at descending
        """
        stmt = (
            select(RoomModel)
            .where(RoomModel.owner_id == owner_id)
            .order_by(RoomModel.created_at.desc())
        )
        return list(db.execute(stmt).scalars().all())


# Singleton instance
room_repository = RoomRepository()
