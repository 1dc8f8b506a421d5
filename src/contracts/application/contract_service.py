# contracts/application/contract_service.py

from datetime import date
from decimal import Decimal
from typing import List

from common.errors import BusinessRuleViolated, EntityNotFound
from common.logging_factory import LoggerFactory
from contracts.domain.entities import Contratto, FrequenzaRata
from contracts.domain.schedule_generator import genera_piano_rate
from contracts.infrastructure.contract_repository import ContractRepository
from properties.infrastructure.property_repository import PropertyRepository
from tenants.infrastructure.tenant_repository import TenantRepository

logger = LoggerFactory.get_logger("contract_service")

SOGLIA_MOROSITA = 3


class ContractService:
    def __init__(self, repo: ContractRepository, tenant_repo: TenantRepository,
                 property_repo: PropertyRepository):
        self.repo = repo
        self.tenant_repo = tenant_repo
        self.property_repo = property_repo

    def lista(self) -> List[Contratto]:
        contratti = self.repo.trova_tutti()
        logger.info(f"📋 Recuperati {len(contratti)} contratti")
        return contratti

    def lista_per_email(self, email: str) -> List[Contratto]:
        logger.debug(f"🔍 Recupero contratti per utente: {email}")
        return self.repo.trova_per_email_utente(email)

    def morosi(self, minimo_non_pagate: int = SOGLIA_MOROSITA) -> List[Contratto]:
        contratti = self.repo.trova_morosi(minimo_non_pagate)
        logger.info(f"📋 {len(contratti)} contratti con almeno {minimo_non_pagate} rate non pagate")
        return contratti

    def trova(self, contratto_id: int) -> Contratto:
        logger.debug(f"🔍 Recupero contratto con ID: {contratto_id}")
        contratto = self.repo.trova_per_id(contratto_id)
        if contratto is None:
            logger.warning(f"⚠️ Contratto non trovato con ID: {contratto_id}")
            raise EntityNotFound("Contratto", contratto_id)
        return contratto

    def _verifica_riferimenti(self, locatario_id: int, immobile_id: int) -> None:
        if self.tenant_repo.trova_per_id(locatario_id) is None:
            logger.error(f"❌ Locatario non trovato con ID: {locatario_id}")
            raise EntityNotFound("Locatario", locatario_id)
        if self.property_repo.trova_per_id(immobile_id) is None:
            logger.error(f"❌ Immobile non trovato con ID: {immobile_id}")
            raise EntityNotFound("Immobile", immobile_id)

    def crea(self, locatario_id: int, immobile_id: int, data_inizio: date, durata_anni: int,
             canone_annuo: Decimal, frequenza_rata: FrequenzaRata = FrequenzaRata.TRIMESTRALE) -> Contratto:
        logger.info(
            f"🆕 Creazione contratto. Locatario ID: {locatario_id}, Immobile ID: {immobile_id}, "
            f"Durata: {durata_anni} anni, Canone: {canone_annuo}, Frequenza: {frequenza_rata}"
        )
        self._verifica_riferimenti(locatario_id, immobile_id)

        piano = genera_piano_rate(data_inizio, durata_anni, canone_annuo, frequenza_rata)
        contratto = Contratto(
            id=None,
            locatario_id=locatario_id,
            immobile_id=immobile_id,
            data_inizio=data_inizio,
            durata_anni=durata_anni,
            canone_annuo=Decimal(str(canone_annuo)),
            frequenza_rata=FrequenzaRata(frequenza_rata),
        )
        return self.repo.crea_con_rate(contratto, piano)

    def aggiorna(self, contratto_id: int, locatario_id: int, immobile_id: int, data_inizio: date,
                 durata_anni: int, canone_annuo: Decimal,
                 frequenza_rata: FrequenzaRata = FrequenzaRata.TRIMESTRALE) -> Contratto:
        """
        Aggiorna locatario e immobile del contratto.
        Data di inizio, durata, canone e frequenza definiscono il piano rate e non si modificano.
        """
        logger.info(f"✏️ Aggiornamento contratto con ID: {contratto_id}")
        contratto = self.trova(contratto_id)

        modificati = [
            nome for nome, attuale, richiesto in (
                ("data_inizio", contratto.data_inizio, data_inizio),
                ("durata_anni", contratto.durata_anni, durata_anni),
                ("canone_annuo", contratto.canone_annuo, Decimal(str(canone_annuo))),
                ("frequenza_rata", contratto.frequenza_rata, FrequenzaRata(frequenza_rata)),
            )
            if attuale != richiesto
        ]
        if modificati:
            logger.warning(f"⚠️ Tentativo di modificare il piano rate del contratto {contratto_id}: {modificati}")
            raise BusinessRuleViolated(
                f"I termini che definiscono il piano rate non possono essere modificati: {', '.join(modificati)}"
            )
        self._verifica_riferimenti(locatario_id, immobile_id)

        contratto.locatario_id = locatario_id
        contratto.immobile_id = immobile_id
        return self.repo.aggiorna(contratto)

    def elimina(self, contratto_id: int) -> None:
        logger.info(f"🗑️ Eliminazione contratto con ID: {contratto_id}")
        if not self.repo.elimina_con_rate(contratto_id):
            logger.warning(f"⚠️ Tentativo di eliminare contratto inesistente con ID: {contratto_id}")
            raise EntityNotFound("Contratto", contratto_id)
        logger.info(f"✅ Contratto eliminato. ID: {contratto_id}")
