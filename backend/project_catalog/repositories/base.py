from typing import Generic, TypeVar, Type, Optional
from sqlalchemy.orm import Session
from ..core.database import Base
import logging

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with common CRUD operations"""
    
    def __init__(self, model: Type[ModelType], db: Session):
        self.model = model
        self.db = db
    
    def get(self, id: int) -> Optional[ModelType]:
        """Get a record by ID"""
        return self.db.query(self.model).filter(self.model.id == id).first()
    
    def exists(self, id: int) -> bool:
        """Check whether a record with this ID exists"""
        return self.db.query(self.model.id).filter(self.model.id == id).first() is not None
    
    def create(self, **kwargs) -> ModelType:
        """Create a new record"""
        instance = self.model(**kwargs)
        self.db.add(instance)
        self.db.flush()  # Flush instead of commit to allow rollback
        logger.debug(f"Created {self.model.__name__} with id: {instance.id}")
        return instance
    
    def update(self, id: int, **kwargs) -> Optional[ModelType]:
        """Set the given fields on a record, None values included"""
        instance = self.get(id)
        if instance:
            for key, value in kwargs.items():
                setattr(instance, key, value)
            self.db.flush()  # Flush instead of commit to allow rollback
            logger.debug(f"Updated {self.model.__name__} with id: {id}")
        return instance
    
    def delete(self, id: int) -> bool:
        """Delete a record"""
        deleted = self.db.query(self.model).filter(self.model.id == id).delete(synchronize_session=False)
        if deleted:
            logger.debug(f"Deleted {self.model.__name__} with id: {id}")
        return bool(deleted)
    
    def refresh(self, instance: ModelType) -> ModelType:
        """Reload server-generated columns"""
        self.db.refresh(instance)
        return instance
    
    def commit(self) -> None:
        """Commit the current transaction"""
        self.db.commit()
    
    def rollback(self) -> None:
        """Rollback the current transaction"""
        self.db.rollback()
