# storefront/api/routers/products.py
import math
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, require_admin
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import NotFoundError, ValidationConflictError
from storefront.domain.schemas import (
    Pagination,
    ProductCreate,
    ProductFilters,
    ProductPage,
    ProductRead,
    ProductUpdate,
    ReviewCreate,
    ReviewRead,
    ReviewView,
    VariantCreate,
    VariantRead,
)
from storefront.services.catalog_service import CatalogService
from storefront.services.review_service import ReviewService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("/", response_model=ProductPage)
def list_products(
    category: int | None = None,
    search: str | None = None,
    min_price: Decimal | None = Query(None, alias="minPrice"),
    max_price: Decimal | None = Query(None, alias="maxPrice"),
    sort: str | None = None,
    featured: bool | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    db: Session = Depends(get_db),
):
    filters = ProductFilters(
        category_id=category,
        search=search,
        min_price=min_price,
        max_price=max_price,
        featured=featured,
    )
    products, total = CatalogService(db).list_products(
        filters,
        sort=sort,
        limit=limit,
        offset=(page - 1) * limit,
    )
    return ProductPage(
        products=[ProductRead.model_validate(p) for p in products],
        pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
    )


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: int, db: Session = Depends(get_db)):
    product = CatalogService(db).get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.post("/", response_model=ProductRead, status_code=201, dependencies=[Depends(require_admin)])
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).create_product(payload)
    except ValidationConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.patch("/{product_id}", response_model=ProductRead, dependencies=[Depends(require_admin)])
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).update_product(product_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/{product_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_product(product_id: int, db: Session = Depends(get_db)):
    try:
        CatalogService(db).delete_product(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


# variants

@router.get("/{product_id}/variants", response_model=list[VariantRead])
def list_variants(product_id: int, db: Session = Depends(get_db)):
    return CatalogService(db).list_variants(product_id)


@router.post(
    "/{product_id}/variants",
    response_model=VariantRead,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
def create_variant(product_id: int, payload: VariantCreate, db: Session = Depends(get_db)):
    service = CatalogService(db)
    if not service.get_product(product_id):
        raise HTTPException(status_code=404, detail="Product not found")
    try:
        return service.create_variant(product_id, payload)
    except ValidationConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


# reviews

@router.get("/{product_id}/reviews", response_model=list[ReviewView])
def list_reviews(product_id: int, db: Session = Depends(get_db)):
    return ReviewService(db).list_reviews(product_id)


@router.post("/{product_id}/reviews", response_model=ReviewRead, status_code=201)
def create_review(
    product_id: int,
    payload: ReviewCreate,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not CatalogService(db).get_product(product_id):
        raise HTTPException(status_code=404, detail="Product not found")
    try:
        return ReviewService(db).create_review(user.id, product_id, payload)
    except ValidationConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
