"""
Categories API - FastAPI router for category markup management.
"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from typing import Optional

from ..engine.models import Category
from ..engine.pricing_engine import PricingEngine
from ..services.category_service import CategoryService
from .state import get_category_service, get_engine

router = APIRouter(prefix="/api/categories", tags=["categories"])


# Pydantic models for API
class CategoryCreate(BaseModel):
    """Request model for creating a category."""
    id: Optional[str] = None
    name: str
    type: Optional[str] = None
    minimum_markup: Optional[float] = None
    is_active: bool = True
    description: Optional[str] = None


class CategoryUpdate(BaseModel):
    """Request model for updating a category."""
    name: Optional[str] = None
    type: Optional[str] = None
    minimum_markup: Optional[float] = None
    is_active: Optional[bool] = None
    description: Optional[str] = None


class CategoryResponse(BaseModel):
    """Response model for a category."""
    id: Optional[str]
    name: str
    type: Optional[str]
    minimum_markup: Optional[float]
    is_active: bool
    description: Optional[str]


class ValidationResponse(BaseModel):
    """Response model for validation."""
    valid: bool
    errors: list[str]
    warnings: list[str]


# Endpoints

@router.get("", response_model=list[CategoryResponse])
def list_categories(
    include_inactive: bool = True,
    service: CategoryService = Depends(get_category_service)
):
    """List all categories in match order."""
    return [CategoryResponse(**c.__dict__) for c in service.list_categories(include_inactive)]


@router.get("/stats")
def get_stats(service: CategoryService = Depends(get_category_service)):
    """Get category statistics."""
    return service.get_stats()


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(category_id: str, service: CategoryService = Depends(get_category_service)):
    """Get a single category by ID."""
    category = service.get_category(category_id)
    if not category:
        raise HTTPException(status_code=404, detail=f"Category '{category_id}' not found")
    return CategoryResponse(**category.__dict__)


@router.post("", response_model=CategoryResponse)
def create_category(
    data: CategoryCreate,
    service: CategoryService = Depends(get_category_service),
    engine: PricingEngine = Depends(get_engine)
):
    """Create a new category."""
    try:
        created = service.create_category(Category(**data.model_dump()))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    engine.reload_data()
    return CategoryResponse(**created.__dict__)


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: str,
    updates: CategoryUpdate,
    service: CategoryService = Depends(get_category_service),
    engine: PricingEngine = Depends(get_engine)
):
    """Update an existing category."""
    # Only fields present in the body are changed, explicit nulls included
    update_dict = updates.model_dump(exclude_unset=True)

    try:
        updated = service.update_category(category_id, update_dict)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0]))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    engine.reload_data()
    return CategoryResponse(**updated.__dict__)


@router.delete("/{category_id}")
def delete_category(
    category_id: str,
    service: CategoryService = Depends(get_category_service),
    engine: PricingEngine = Depends(get_engine)
):
    """Delete a category."""
    try:
        service.delete_category(category_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0]))
    engine.reload_data()
    return {"success": True, "message": f"Category '{category_id}' deleted"}


@router.post("/validate", response_model=ValidationResponse)
def validate_category(data: CategoryCreate, service: CategoryService = Depends(get_category_service)):
    """Validate a category without saving."""
    result = service.validate_category(Category(**data.model_dump()))
    return ValidationResponse(valid=result.valid, errors=result.errors, warnings=result.warnings)
