# maintenance/application/maintenance_service.py

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from common.errors import EntityNotFound
from common.logging_factory import LoggerFactory
from maintenance.domain.entities import Manutenzione, TipoManutenzione
from maintenance.infrastructure.maintenance_repository import MaintenanceRepository
from properties.infrastructure.property_repository import PropertyRepository
from tenants.infrastructure.tenant_repository import TenantRepository

logger = LoggerFactory.get_logger("maintenance_service")


class MaintenanceService:
    def __init__(self, repo: MaintenanceRepository, tenant_repo: TenantRepository,
                 property_repo: PropertyRepository):
        self.repo = repo
        self.tenant_repo = tenant_repo
        self.property_repo = property_repo

    def lista(self) -> List[Manutenzione]:
        manutenzioni = self.repo.trova_tutte()
        logger.info(f"📋 Recuperate {len(manutenzioni)} manutenzioni")
        return manutenzioni

    def lista_per_email(self, email: str) -> List[Manutenzione]:
        return self.repo.trova_per_email_utente(email)

    def trova(self, manutenzione_id: int) -> Manutenzione:
        logger.debug(f"🔍 Recupero manutenzione con ID: {manutenzione_id}")
        manutenzione = self.repo.trova_per_id(manutenzione_id)
        if manutenzione is None:
            logger.warning(f"⚠️ Manutenzione non trovata con ID: {manutenzione_id}")
            raise EntityNotFound("Manutenzione", manutenzione_id)
        return manutenzione

    def per_locatario_e_anno(self, locatario_id: int, anno: int) -> List[Manutenzione]:
        logger.debug(f"🔍 Manutenzioni del locatario {locatario_id} nell'anno {anno}")
        return self.repo.trova_per_locatario_e_anno(locatario_id, anno)

    def date_con_importo_maggiore(self, locatario_id: int, importo: Decimal) -> List[date]:
        logger.debug(f"🔍 Date manutenzioni del locatario {locatario_id} con importo > {importo}")
        return self.repo.date_per_locatario_con_importo_maggiore(locatario_id, importo)

    def totali_per_anno_e_citta(self) -> Dict[str, Dict[str, Decimal]]:
        """{"2024": {"Milano": Decimal("150.00")}}"""
        totali: Dict[str, Dict[str, Decimal]] = {}
        for anno, citta, totale in self.repo.totali_per_anno_e_citta():
            totali.setdefault(str(anno), {})[citta] = totale
        return totali

    def _verifica_riferimenti(self, immobile_id: int, locatario_id: int) -> None:
        if self.property_repo.trova_per_id(immobile_id) is None:
            logger.error(f"❌ Immobile non trovato con ID: {immobile_id}")
            raise EntityNotFound("Immobile", immobile_id)
        if self.tenant_repo.trova_per_id(locatario_id) is None:
            logger.error(f"❌ Locatario non trovato con ID: {locatario_id}")
            raise EntityNotFound("Locatario", locatario_id)

    def crea(self, immobile_id: int, locatario_id: int, data_man: date, importo: Decimal,
             tipo: TipoManutenzione = TipoManutenzione.STRAORDINARIA,
             descrizione: Optional[str] = None) -> Manutenzione:
        logger.info(
            f"🆕 Creazione manutenzione. Immobile ID: {immobile_id}, Locatario ID: {locatario_id}, "
            f"Tipo: {tipo.value}, Importo: {importo}"
        )
        self._verifica_riferimenti(immobile_id, locatario_id)

        manutenzione = self.repo.crea(Manutenzione(
            id=None,
            immobile_id=immobile_id,
            locatario_id=locatario_id,
            data_man=data_man,
            importo=importo,
            tipo=tipo,
            descrizione=descrizione,
        ))
        logger.info(f"✅ Manutenzione creata. ID: {manutenzione.id}")
        return manutenzione

    def aggiorna(self, manutenzione_id: int, immobile_id: int, locatario_id: int, data_man: date,
                 importo: Decimal, tipo: TipoManutenzione = TipoManutenzione.STRAORDINARIA,
                 descrizione: Optional[str] = None) -> Manutenzione:
        logger.info(f"✏️ Aggiornamento manutenzione con ID: {manutenzione_id}")
        manutenzione = self.trova(manutenzione_id)
        self._verifica_riferimenti(immobile_id, locatario_id)

        manutenzione.immobile_id = immobile_id
        manutenzione.locatario_id = locatario_id
        manutenzione.data_man = data_man
        manutenzione.importo = importo
        manutenzione.tipo = tipo
        manutenzione.descrizione = descrizione
        manutenzione = self.repo.aggiorna(manutenzione)
        logger.info(f"✅ Manutenzione aggiornata. ID: {manutenzione_id}")
        return manutenzione

    def elimina(self, manutenzione_id: int) -> None:
        logger.info(f"🗑️ Eliminazione manutenzione con ID: {manutenzione_id}")
        if not self.repo.elimina(manutenzione_id):
            logger.warning(f"⚠️ Tentativo di eliminare manutenzione inesistente con ID: {manutenzione_id}")
            raise EntityNotFound("Manutenzione", manutenzione_id)
        logger.info(f"✅ Manutenzione eliminata. ID: {manutenzione_id}")
