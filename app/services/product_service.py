import logging

from sqlalchemy.orm import Session

from app.models.product import Product
from app.schemas.product import ProductCreate, ProductResponse, ProductUpdate
from app.utils.errors import NotFoundError, service_operation

logger = logging.getLogger(__name__)


def product_payload(product: Product) -> dict:
    return ProductResponse.model_validate(product).model_dump()


def _get_or_404(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError("Product not found")
    return product


@service_operation("Add Product Service")
def add_product(db: Session, data: ProductCreate) -> dict:
    product = Product(**data.model_dump())
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("Product %s created", product.id)
    return product_payload(product)


@service_operation("Edit Product Service")
def edit_product(db: Session, product_id: int, data: ProductUpdate) -> dict:
    product = _get_or_404(db, product_id)
    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(product, field, value)
    db.commit()
    db.refresh(product)
    return product_payload(product)


@service_operation("Get Product Service")
def get_product(db: Session, product_id: int) -> dict:
    return product_payload(_get_or_404(db, product_id))


@service_operation("Get All Products Service")
def list_products(db: Session, sort: str = "newest") -> dict:
    query = db.query(Product)
    if sort == "oldest":
        query = query.order_by(Product.created_at.asc(), Product.id.asc())
    else:
        query = query.order_by(Product.created_at.desc(), Product.id.desc())
    products = [product_payload(product) for product in query.all()]
    return {"products": products, "total": len(products)}


@service_operation("Delete Product Service")
def delete_product(db: Session, product_id: int) -> dict:
    product = _get_or_404(db, product_id)
    deleted = product_payload(product)
    db.delete(product)
    db.commit()
    logger.info("Product %s deleted", product_id)
    return deleted
