# tenants/application/tenant_service.py

from typing import List

from authentication.infrastructure.auth_repository import AuthRepository
from common.errors import BusinessRuleViolated, EntityNotFound
from common.logging_factory import LoggerFactory
from tenants.domain.entities import Locatario
from tenants.infrastructure.tenant_repository import TenantRepository

logger = LoggerFactory.get_logger("tenant_service")

# contratti "lunghi": durata strettamente maggiore
SOGLIA_CONTRATTO_LUNGO_ANNI = 2


class TenantService:
    def __init__(self, repo: TenantRepository, auth_repo: AuthRepository):
        self.repo = repo
        self.auth_repo = auth_repo

    def lista(self) -> List[Locatario]:
        locatari = self.repo.trova_tutti()
        logger.info(f"📋 Recuperati {len(locatari)} locatari")
        return locatari

    def trova(self, locatario_id: int) -> Locatario:
        logger.debug(f"🔍 Recupero locatario con ID: {locatario_id}")
        locatario = self.repo.trova_per_id(locatario_id)
        if locatario is None:
            logger.warning(f"⚠️ Locatario non trovato con ID: {locatario_id}")
            raise EntityNotFound("Locatario", locatario_id)
        return locatario

    def con_contratti_lunghi(self, oltre_anni: int = SOGLIA_CONTRATTO_LUNGO_ANNI) -> List[Locatario]:
        locatari = self.repo.trova_con_contratti_oltre(oltre_anni)
        logger.info(f"📋 {len(locatari)} locatari con contratti oltre {oltre_anni} anni")
        return locatari

    def trova_per_utente(self, utente_id: int) -> Locatario:
        logger.debug(f"🔍 Recupero locatario collegato all'utente {utente_id}")
        locatario = self.repo.trova_per_utente_id(utente_id)
        if locatario is None:
            logger.warning(f"⚠️ Nessun locatario collegato all'utente {utente_id}")
            raise EntityNotFound("Locatario")
        return locatario

    def crea(self, nome: str, cognome: str, cf: str, indirizzo: str, telefono: str, utente_id: int) -> Locatario:
        logger.info(f"🆕 Creazione locatario {nome} {cognome} per utente {utente_id}")

        if self.auth_repo.trova_utente_per_id(utente_id) is None:
            logger.error(f"❌ Utente non trovato con ID: {utente_id}")
            raise EntityNotFound("Utente", utente_id)

        if self.repo.trova_per_utente_id(utente_id) is not None:
            raise BusinessRuleViolated(f"L'utente {utente_id} è già collegato a un locatario")

        if self.repo.esiste_cf(cf):
            raise BusinessRuleViolated(f"Codice fiscale già registrato: {cf}")

        locatario = self.repo.crea(Locatario(
            id=None,
            nome=nome,
            cognome=cognome,
            cf=cf.upper(),
            indirizzo=indirizzo,
            telefono=telefono,
            utente_id=utente_id,
        ))
        logger.info(f"✅ Locatario creato. ID: {locatario.id}")
        return locatario

    def aggiorna(self, locatario_id: int, nome: str, cognome: str, cf: str, indirizzo: str, telefono: str) -> Locatario:
        logger.info(f"✏️ Aggiornamento locatario con ID: {locatario_id}")
        locatario = self.trova(locatario_id)

        if self.repo.esiste_cf(cf, escludi_id=locatario_id):
            raise BusinessRuleViolated(f"Codice fiscale già registrato: {cf}")

        locatario.nome = nome
        locatario.cognome = cognome
        locatario.cf = cf.upper()
        locatario.indirizzo = indirizzo
        locatario.telefono = telefono
        return self.repo.aggiorna(locatario)

    def elimina(self, locatario_id: int) -> None:
        logger.info(f"🗑️ Eliminazione locatario con ID: {locatario_id}")
        self.trova(locatario_id)
        if self.repo.ha_contratti(locatario_id):
            raise BusinessRuleViolated("Impossibile eliminare un locatario con contratti attivi")
        self.repo.elimina(locatario_id)
        logger.info(f"✅ Locatario eliminato. ID: {locatario_id}")
