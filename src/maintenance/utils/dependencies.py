# maintenance/utils/dependencies.py

from fastapi import Depends

from common.database_connection import get_db_connection
from maintenance.infrastructure.maintenance_repository import MaintenanceRepository


def get_maintenance_repository(conn=Depends(get_db_connection)) -> MaintenanceRepository:
    return MaintenanceRepository(conn)
