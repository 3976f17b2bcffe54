import logging
from typing import List
from sqlalchemy import exc
from sqlalchemy.orm import Session

from lms_backend.api.exceptions import BadRequestException, NotFoundException, integrity_error_to_conflict
from lms_backend.interface.categories import CategoryCreate, CategoryGet, CategoryUpdate
from lms_backend.model.course import CourseCategory
from lms_backend.utils import slugify

logger = logging.getLogger(__name__)


def _get_category_or_404(category_id: int, db: Session) -> CourseCategory:
    category = db.query(CourseCategory).filter(CourseCategory.id == category_id).first()

    if category is None:
        raise NotFoundException(detail=f"Category with id [{category_id}] not found")

    return category


def list_categories(db: Session) -> List[CategoryGet]:
    return [
        CategoryGet.model_validate(category, from_attributes=True)
        for category in db.query(CourseCategory).order_by(CourseCategory.name, CourseCategory.id).all()
    ]


def create_category(entity: CategoryCreate, db: Session) -> CategoryGet:
    slug = slugify(entity.name)

    if not slug:
        raise BadRequestException(detail="Category name must contain at least one letter or digit")

    try:
        category = CourseCategory(name=entity.name, slug=slug)
        db.add(category)
        db.commit()
        db.refresh(category)
    except exc.IntegrityError as e:
        db.rollback()
        raise integrity_error_to_conflict(e, "Category")

    logger.info(f"Created category {category.slug}")
    return CategoryGet.model_validate(category, from_attributes=True)


def update_category(category_id: int, entity: CategoryUpdate, db: Session) -> CategoryGet:
    category = _get_category_or_404(category_id, db)

    model_dump = entity.model_dump(exclude_unset=True, exclude_none=True)

    if "name" in model_dump and "slug" not in model_dump:
        model_dump["slug"] = slugify(model_dump["name"]) or category.slug

    try:
        for key, value in model_dump.items():
            setattr(category, key, value)
        db.commit()
        db.refresh(category)
    except exc.IntegrityError as e:
        db.rollback()
        raise integrity_error_to_conflict(e, "Category")

    return CategoryGet.model_validate(category, from_attributes=True)


def delete_category(category_id: int, db: Session):
    category = _get_category_or_404(category_id, db)

    db.delete(category)
    db.commit()

    logger.info(f"Deleted category {category_id}")
