# contracts/utils/dependencies.py

from datetime import date
from typing import Callable

from fastapi import Depends

from common.database_connection import get_db_connection
from contracts.infrastructure.contract_repository import ContractRepository
from contracts.infrastructure.installment_repository import InstallmentRepository


def get_contract_repository(conn=Depends(get_db_connection)) -> ContractRepository:
    return ContractRepository(conn)


def get_installment_repository(conn=Depends(get_db_connection)) -> InstallmentRepository:
    return InstallmentRepository(conn)


def get_oggi() -> Callable[[], date]:
    return date.today
