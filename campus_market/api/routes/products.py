# campus_market/api/routes/products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from campus_market.api.deps import admin_credential, get_products, get_workflow, require_admin
from campus_market.repositories.products import ProductRepository
from campus_market.schemas.product import ProductDetailOut, ProductOut
from campus_market.services.product_workflow import ProductMutationWorkflow

router = APIRouter(prefix="/products", tags=["products"])


def _form_fields(title, price, available, section, short, full, location) -> dict:
    return {
        "title": title,
        "price": price,
        "available": available,
        "section": section,
        "short": short,
        "full": full,
        "location": location,
    }


@router.get("", response_model=List[ProductDetailOut])
def list_products(products: ProductRepository = Depends(get_products)):
    """
    List products, newest first, each with its section resolved (null if the
    section has been deleted).
    """
    return [ProductDetailOut.from_model(p) for p in products.list()]


@router.get("/{product_id}", response_model=ProductDetailOut)
def get_product(product_id: str, products: ProductRepository = Depends(get_products)):
    return ProductDetailOut.from_model(products.get(product_id))


@router.post("", response_model=ProductOut)
async def create_product(
    title: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    available: Optional[str] = Form(None),
    section: Optional[str] = Form(None),
    short: Optional[str] = Form(None),
    full: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    video: Optional[UploadFile] = File(None),
    credential: Optional[str] = Depends(admin_credential),
    workflow: ProductMutationWorkflow = Depends(get_workflow),
):
    """
    Create a product (admin only). Attached `images` (repeatable) and `video`
    are uploaded to the media store first, in the order received.
    """
    fields = _form_fields(title, price, available, section, short, full, location)
    product = await workflow.create(credential, fields, images or [], video)
    return ProductOut.from_model(product)


@router.put("/{product_id}", response_model=ProductOut)
async def update_product(
    product_id: str,
    title: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    available: Optional[str] = Form(None),
    section: Optional[str] = Form(None),
    short: Optional[str] = Form(None),
    full: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    video: Optional[UploadFile] = File(None),
    credential: Optional[str] = Depends(admin_credential),
    workflow: ProductMutationWorkflow = Depends(get_workflow),
):
    """
    Replace a product's scalar fields wholesale (omitted ones become null).
    New images replace the whole image list; a new video replaces the video.
    Without attachments the stored media is kept.
    """
    fields = _form_fields(title, price, available, section, short, full, location)
    product = await workflow.update(product_id, credential, fields, images or [], video)
    return ProductOut.from_model(product)


@router.delete("/{product_id}", dependencies=[Depends(require_admin)])
def delete_product(product_id: str, products: ProductRepository = Depends(get_products)):
    products.delete(product_id)
    return {"message": "Product deleted everywhere"}
