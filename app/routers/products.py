from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.product import ProductCreate, ProductUpdate
from app.services import product_service
from app.services.auth_middleware import get_current_user
from app.utils.response import create_response, handle_exception

router = APIRouter(
    prefix="/api/product",
    tags=["Products"],
    dependencies=[Depends(get_current_user)],
)


@router.post("/add-product", status_code=status.HTTP_201_CREATED)
def add_product(body: ProductCreate, db: Session = Depends(get_db)):
    try:
        product = product_service.add_product(db, body)
        return create_response(
            message="Product added",
            data={"product": product},
            status_code=status.HTTP_201_CREATED,
        )
    except Exception as exc:
        return handle_exception(exc)


@router.put("/edit-product/{product_id}")
def edit_product(product_id: int, body: ProductUpdate, db: Session = Depends(get_db)):
    try:
        product = product_service.edit_product(db, product_id, body)
        return create_response(message="Product updated", data={"product": product})
    except Exception as exc:
        return handle_exception(exc)


@router.get("/get-product/{product_id}")
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        product = product_service.get_product(db, product_id)
        return create_response(message="Product fetched", data={"product": product})
    except Exception as exc:
        return handle_exception(exc)


@router.get("/get-all-product")
def list_products(
    sort: Literal["newest", "oldest"] = Query("newest", description="Order by creation time."),
    db: Session = Depends(get_db),
):
    try:
        result = product_service.list_products(db, sort)
        return create_response(message="Products fetched", data=result)
    except Exception as exc:
        return handle_exception(exc)


@router.delete("/delete-product/{product_id}")
def delete_product(product_id: int, db: Session = Depends(get_db)):
    try:
        product = product_service.delete_product(db, product_id)
        return create_response(message="Product deleted", data={"product": product})
    except Exception as exc:
        return handle_exception(exc)
