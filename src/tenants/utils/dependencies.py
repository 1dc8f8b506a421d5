# tenants/utils/dependencies.py

from fastapi import Depends

from common.database_connection import get_db_connection
from tenants.infrastructure.tenant_repository import TenantRepository


def get_tenant_repository(conn=Depends(get_db_connection)) -> TenantRepository:
    return TenantRepository(conn)
