# api_gateway/main.py

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api_gateway.routers import health
from authentication.api import routes as authentication_routes
from authentication.api import user_routes
from common.config import get_settings
from common.error_mapper import registra_handlers
from contracts.api import installment_routes
from contracts.api import routes as contract_routes
from maintenance.api import routes as maintenance_routes
from properties.api import routes as property_routes
from tenants.api import routes as tenant_routes

app = FastAPI(
    title="Gestione Affitti API",
    description="Gestione di locatari, immobili, contratti di locazione e piani rate",
    version="1.0.0"
)

# Routers
app.include_router(health.router, prefix="/health")
app.include_router(authentication_routes.router)
app.include_router(user_routes.router)
app.include_router(tenant_routes.router)
app.include_router(property_routes.router)
app.include_router(contract_routes.router)
app.include_router(installment_routes.router)
app.include_router(maintenance_routes.router)

# 🔹 ogni errore passa da un'unica funzione di mappatura
registra_handlers(app)

origini = [o.strip() for o in get_settings().CORS_ORIGINS.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origini,
    allow_credentials="*" not in origini,
    allow_methods=["*"],
    allow_headers=["*"],
)
