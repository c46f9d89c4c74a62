"""
Base repository interface for data access layer.
Keeps SQLAlchemy session handling out of the services.
"""

from typing import Generic, TypeVar, Optional, Type
from sqlalchemy.orm import Session
from abc import ABC

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType], ABC):
    """Common lookups and writes shared by repositories"""

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, entity_id: str) -> Optional[ModelType]:
        """Get entity by primary key"""
        return self.db.get(self.model, entity_id)

    def save(self, entity: ModelType) -> ModelType:
        """Add (if new), commit and refresh"""
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity
