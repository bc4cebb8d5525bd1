from fastapi import APIRouter

from .accounts import router as accounts_router
from .admin import router as admin_router
from .clients import router as clients_router
from .invoices import router as invoices_router
from .reports import router as reports_router

api_router = APIRouter(prefix="/api")
api_router.include_router(accounts_router, tags=["accounts"])
api_router.include_router(clients_router, tags=["clients"])
api_router.include_router(invoices_router, tags=["invoices"])
api_router.include_router(reports_router, tags=["reports"])
api_router.include_router(admin_router, prefix="/admin", tags=["admin"])
