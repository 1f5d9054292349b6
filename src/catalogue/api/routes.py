"""FastAPI endpoints for the Catalogue domain."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from catalogue.api.schemas import (
    CategoryResponse,
    CreateCategoryRequest,
    CreateProductRequest,
    IdResponse,
    ProductResponse,
)
from catalogue.product.product import Price, Product, ProductFilter
from catalogue.product.service import ProductService
from identity.auth.dependencies import AdminUser

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def get_product_service(request: Request) -> ProductService:
    return request.app.state.product_service


Products = Annotated[ProductService, Depends(get_product_service)]

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])


# --- Product endpoints ---


@product_router.get("", response_model=list[ProductResponse])
def get_products(
    products: Products,
    category: Annotated[int, Query(ge=0)] = 0,
    q: str = "",
    min_price: Annotated[float, Query(alias="min-price", ge=0)] = 0,
    max_price: Annotated[float, Query(alias="max-price", ge=0)] = 0,
    discount: Annotated[int, Query(ge=0, le=100)] = 0,
    page: int = 1,
    size: Annotated[int, Query(le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
) -> list[ProductResponse]:
    product_filter = ProductFilter(min_price=min_price, max_price=max_price, discount=discount)
    found = products.products(category, q, product_filter, page, size)
    return [ProductResponse.model_validate(p) for p in found]


@product_router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, products: Products) -> ProductResponse:
    return ProductResponse.model_validate(products.product(product_id))


@product_router.post("", status_code=201, response_model=IdResponse)
def create_product(body: CreateProductRequest, products: Products, _admin: AdminUser) -> IdResponse:
    product = Product(
        name=body.name,
        category_id=body.category_id,
        price=Price(current=body.price.current, old=body.price.old),
        description=body.description,
        quantity=body.quantity,
        rating=body.rating,
    )
    return IdResponse(id=products.create_product(product))


# --- Category endpoints ---


@category_router.get("", response_model=list[CategoryResponse])
def get_categories(products: Products) -> list[CategoryResponse]:
    return [CategoryResponse.model_validate(c) for c in products.categories()]


@category_router.post("", status_code=201, response_model=IdResponse)
def create_category(body: CreateCategoryRequest, products: Products, _admin: AdminUser) -> IdResponse:
    return IdResponse(id=products.create_category(body.name))
