# contracts/application/installment_service.py

from datetime import date
from typing import Callable, List, Optional

from common.errors import EntityNotFound, ValidationFailed
from common.logging_factory import LoggerFactory
from contracts.domain.entities import NON_PAGATA, PAGATA, Rata
from contracts.infrastructure.installment_repository import InstallmentRepository

logger = LoggerFactory.get_logger("installment_service")


class InstallmentService:
    def __init__(self, repo: InstallmentRepository, oggi: Optional[Callable[[], date]] = None):
        self.repo = repo
        self.oggi = oggi or date.today

    def lista(self) -> List[Rata]:
        rate = self.repo.trova_tutte()
        logger.info(f"📋 Recuperate {len(rate)} rate")
        return rate

    def lista_per_email(self, email: str) -> List[Rata]:
        return self.repo.trova_per_email_utente(email)

    def lista_per_contratto(self, contratto_id: int) -> List[Rata]:
        return self.repo.trova_per_contratto(contratto_id)

    def non_pagate(self) -> List[Rata]:
        return self.repo.trova_non_pagate()

    def scadute(self) -> List[Rata]:
        oggi = self.oggi()
        rate = self.repo.trova_scadute_non_pagate(oggi)
        logger.info(f"⏰ {len(rate)} rate scadute e non pagate al {oggi.isoformat()}")
        return rate

    def trova(self, rata_id: int) -> Rata:
        logger.debug(f"🔍 Recupero rata con ID: {rata_id}")
        rata = self.repo.trova_per_id(rata_id)
        if rata is None:
            logger.warning(f"⚠️ Rata non trovata con ID: {rata_id}")
            raise EntityNotFound("Rata", rata_id)
        return rata

    def aggiorna_pagata(self, rata_id: int, pagata: str) -> Rata:
        valore = (pagata or "").strip().upper()
        if valore not in (PAGATA, NON_PAGATA):
            raise ValidationFailed(
                f"Valore pagata non valido: {pagata}",
                {"pagata": "deve essere 'S' o 'N'"},
            )

        rata = self.repo.aggiorna_pagata(rata_id, valore)
        if rata is None:
            raise EntityNotFound("Rata", rata_id)
        logger.info(f"✅ Rata {rata_id} del contratto {rata.contratto_id} segnata come pagata={valore}")
        return rata
