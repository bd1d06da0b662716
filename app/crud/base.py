# app/crud/base.py
import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.db.base_class import Base

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        """
        CRUD object with default methods to Create, Read, Update, Delete (CRUD).

        **Parameters**
        * `model`: A SQLAlchemy model class
        """
        self.model = model

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        return db.get(self.model, id)

    def get_multi_by_owner(
        self, db: Session, *, owner_id: str, status: Optional[str] = None
    ) -> List[ModelType]:
        """
        Records owned by ``owner_id``, newest first.

        If the ordered query fails the unordered result is returned instead so
        a listing never fails just because of the sort.
        """
        query = db.query(self.model).filter(self.model.owner_id == owner_id)
        if status:
            query = query.filter(self.model.status == status)

        try:
            return query.order_by(self.model.createdAt.desc()).all()
        except SQLAlchemyError:
            logger.warning(
                "Ordered query on %s failed; returning unordered results",
                self.model.__tablename__,
                exc_info=True,
            )
            db.rollback()
            return query.all()

    def create(
        self,
        db: Session,
        *,
        obj_in: Union[CreateSchemaType, Dict[str, Any]],
        extra: Optional[Dict[str, Any]] = None,
    ) -> ModelType:
        data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        db_obj = self.model(**data, **(extra or {}))
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def save(self, db: Session, *, db_obj: ModelType) -> ModelType:
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def remove(self, db: Session, *, db_obj: ModelType) -> ModelType:
        db.delete(db_obj)
        db.commit()
        return db_obj
