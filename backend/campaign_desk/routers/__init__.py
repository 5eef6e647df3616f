"""
API routers.
"""
from .admin import router as admin_router
from .campaigns import router as campaigns_router
from .clients import router as clients_router
from .invoices import router as invoices_router
from .payments import router as payments_router
from .services import router as services_router

__all__ = [
    "admin_router",
    "campaigns_router",
    "clients_router",
    "invoices_router",
    "payments_router",
    "services_router",
]
