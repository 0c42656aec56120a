# campus_market/api/deps.py
from typing import Optional

from fastapi import Header, Request

from campus_market.core.security import AccessGuard
from campus_market.repositories.products import ProductRepository
from campus_market.repositories.sections import SectionRepository
from campus_market.services.product_workflow import ProductMutationWorkflow

# Everything below is built once in create_app() and kept on app.state.


def get_guard(request: Request) -> AccessGuard:
    return request.app.state.guard


def get_sections(request: Request) -> SectionRepository:
    return request.app.state.sections


def get_products(request: Request) -> ProductRepository:
    return request.app.state.products


def get_workflow(request: Request) -> ProductMutationWorkflow:
    return request.app.state.workflow


def admin_credential(x_admin_password: Optional[str] = Header(None)) -> Optional[str]:
    """The claimed admin secret from the `x-admin-password` header, if any."""
    return x_admin_password


def require_admin(request: Request, x_admin_password: Optional[str] = Header(None)) -> None:
    """
    Dependency to require the admin secret. Raises Forbidden (403) otherwise.
    """
    get_guard(request).require(x_admin_password)
