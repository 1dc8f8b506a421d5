# properties/utils/dependencies.py

from fastapi import Depends

from common.database_connection import get_db_connection
from properties.infrastructure.property_repository import PropertyRepository


def get_property_repository(conn=Depends(get_db_connection)) -> PropertyRepository:
    return PropertyRepository(conn)
