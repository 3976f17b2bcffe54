from typing import Annotated, List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lms_backend.database import get_db
from lms_backend.interface.categories import CategoryCreate, CategoryGet, CategoryUpdate
from lms_backend.permissions.auth import get_current_principal, require_permissions
from lms_backend.permissions.principal import Principal
from lms_backend.services import categories as category_service

category_router = APIRouter()

CategoryWriter = Annotated[Principal, Depends(require_permissions("write:categories"))]


@category_router.get("", response_model=List[CategoryGet])
def list_categories(principal: Annotated[Principal, Depends(get_current_principal)], db: Session = Depends(get_db)):
    return category_service.list_categories(db)


@category_router.post("", response_model=CategoryGet, status_code=201)
def create_category(principal: CategoryWriter, entity: CategoryCreate, db: Session = Depends(get_db)):
    return category_service.create_category(entity, db)


@category_router.patch("/{category_id}", response_model=CategoryGet)
def update_category(category_id: int, principal: CategoryWriter, entity: CategoryUpdate, db: Session = Depends(get_db)):
    return category_service.update_category(category_id, entity, db)


@category_router.delete("/{category_id}", status_code=204)
def delete_category(category_id: int, principal: CategoryWriter, db: Session = Depends(get_db)):
    category_service.delete_category(category_id, db)
