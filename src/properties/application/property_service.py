# properties/application/property_service.py

from decimal import Decimal
from typing import Dict, List

from common.errors import BusinessRuleViolated, EntityNotFound
from common.logging_factory import LoggerFactory
from properties.domain.entities import DatiImmobile, Immobile, TipoImmobile, tipo_di
from properties.infrastructure.property_repository import PropertyRepository

logger = LoggerFactory.get_logger("property_service")


class PropertyService:
    def __init__(self, repo: PropertyRepository):
        self.repo = repo

    def lista(self) -> List[Immobile]:
        immobili = self.repo.trova_tutti()
        logger.info(f"📋 Recuperati {len(immobili)} immobili")
        return immobili

    def trova(self, immobile_id: int) -> Immobile:
        logger.debug(f"🔍 Recupero immobile con ID: {immobile_id}")
        immobile = self.repo.trova_per_id(immobile_id)
        if immobile is None:
            logger.warning(f"⚠️ Immobile non trovato con ID: {immobile_id}")
            raise EntityNotFound("Immobile", immobile_id)
        return immobile

    def affittati_per_citta(self) -> Dict[str, int]:
        logger.debug("🔍 Conteggio immobili affittati per città")
        return self.repo.conta_affittati_per_citta()

    def conteggio_per_tipo(self) -> Dict[str, int]:
        """Tutti i tipi compaiono, anche con zero immobili."""
        conteggi = {tipo.value: 0 for tipo in TipoImmobile}
        conteggi.update(self.repo.conta_per_tipo())
        return conteggi

    def crea(self, indirizzo: str, citta: str, superficie: Decimal, dati: DatiImmobile) -> Immobile:
        logger.info(f"🆕 Creazione immobile {tipo_di(dati).value} a {citta}")
        immobile = self.repo.crea(Immobile(
            id=None,
            indirizzo=indirizzo,
            citta=citta,
            superficie=superficie,
            dati=dati,
        ))
        logger.info(f"✅ Immobile creato. ID: {immobile.id}")
        return immobile

    def aggiorna(self, immobile_id: int, indirizzo: str, citta: str, superficie: Decimal,
                 dati: DatiImmobile) -> Immobile:
        logger.info(f"✏️ Aggiornamento immobile con ID: {immobile_id}")
        immobile = self.trova(immobile_id)

        if tipo_di(dati) != immobile.tipo:
            logger.warning(
                f"⚠️ Tentativo di cambiare tipo all'immobile {immobile_id}: "
                f"{immobile.tipo.value} -> {tipo_di(dati).value}"
            )
            raise BusinessRuleViolated("Il tipo di un immobile non può essere modificato")

        immobile.indirizzo = indirizzo
        immobile.citta = citta
        immobile.superficie = superficie
        immobile.dati = dati
        return self.repo.aggiorna(immobile)

    def elimina(self, immobile_id: int) -> None:
        logger.info(f"🗑️ Eliminazione immobile con ID: {immobile_id}")
        self.trova(immobile_id)
        if self.repo.e_referenziato(immobile_id):
            raise BusinessRuleViolated("Impossibile eliminare un immobile con contratti o manutenzioni")
        self.repo.elimina(immobile_id)
        logger.info(f"✅ Immobile eliminato. ID: {immobile_id}")
