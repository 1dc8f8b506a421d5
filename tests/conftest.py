# tests/conftest.py

import copy
import os
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

os.environ.setdefault("JWT_SECRET_KEY", "chiave-di-test-lunga-almeno-trentadue-caratteri")

from fastapi.testclient import TestClient  # noqa: E402

from api_gateway.main import app  # noqa: E402
from authentication.domain.entities import (  # noqa: E402
    ROLE_ADMIN,
    ROLE_LOCATARIO,
    ROLE_MANAGER,
    RUOLI_VALIDI,
    Utente,
)
from authentication.infrastructure.token_service import TokenService  # noqa: E402
from authentication.utils.dependencies import get_auth_repository, get_token_service  # noqa: E402
from authentication.utils.password_utils import genera_hash_password  # noqa: E402
from common.database_connection import get_db_connection  # noqa: E402
from contracts.domain.entities import NON_PAGATA, Contratto, Rata  # noqa: E402
from contracts.domain.schedule_generator import genera_piano_rate  # noqa: E402
from contracts.utils.dependencies import (  # noqa: E402
    get_contract_repository,
    get_installment_repository,
    get_oggi,
)
from maintenance.domain.entities import Manutenzione, TipoManutenzione  # noqa: E402
from maintenance.utils.dependencies import get_maintenance_repository  # noqa: E402
from properties.domain.entities import DatiAppartamento, Immobile  # noqa: E402
from properties.utils.dependencies import get_property_repository  # noqa: E402
from tenants.domain.entities import Locatario  # noqa: E402
from tenants.utils.dependencies import get_tenant_repository  # noqa: E402

ADESSO = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
OGGI = ADESSO.date()
PASSWORD = "password123"


class Orologio:
    def __init__(self, adesso: datetime):
        self.adesso = adesso

    def __call__(self) -> datetime:
        return self.adesso

    def avanza(self, delta: timedelta) -> None:
        self.adesso += delta


# --------
# Archivio in memoria e repository fittizi
# --------
class MemoriaDB:
    def __init__(self):
        self.utenti = {}
        self.locatari = {}
        self.immobili = {}
        self.contratti = {}
        self.rate = {}
        self.manutenzioni = {}
        self._contatori = {}

    def prossimo_id(self, tabella: str) -> int:
        self._contatori[tabella] = self._contatori.get(tabella, 0) + 1
        return self._contatori[tabella]

    def utente_per_email(self, email: str):
        return next((u for u in self.utenti.values() if u.email.lower() == email.lower()), None)

    def proprietario_locatario(self, locatario_id):
        locatario = self.locatari.get(locatario_id)
        return locatario.utente_id if locatario else None


class FakeAuthRepository:
    def __init__(self, db: MemoriaDB):
        self.db = db

    def trova_utente_per_email(self, email):
        return copy.deepcopy(self.db.utente_per_email(email))

    def trova_utente_per_id(self, utente_id):
        return copy.deepcopy(self.db.utenti.get(utente_id))

    def trova_tutti(self):
        return [copy.deepcopy(u) for u in sorted(self.db.utenti.values(), key=lambda u: u.id)]

    def trova_ruoli(self):
        return sorted(RUOLI_VALIDI)

    def aggiorna_profilo(self, utente_id, nome, cognome):
        utente = self.db.utenti.get(utente_id)
        if utente is None:
            return False
        utente.nome, utente.cognome = nome, cognome
        return True

    def sostituisci_ruoli(self, utente_id, ruoli):
        self.db.utenti[utente_id].ruoli = frozenset(ruoli)

    def esiste_email(self, email):
        return self.db.utente_per_email(email) is not None

    def crea_utente(self, utente):
        utente.id = self.db.prossimo_id("utenti")
        utente.data_registrazione = ADESSO
        self.db.utenti[utente.id] = copy.deepcopy(utente)
        return utente

    def aggiorna_abilitato(self, utente_id, abilitato):
        if utente_id not in self.db.utenti:
            return False
        self.db.utenti[utente_id].abilitato = abilitato
        return True


class FakeTenantRepository:
    def __init__(self, db: MemoriaDB):
        self.db = db

    def trova_tutti(self):
        return [copy.deepcopy(loc) for loc in self.db.locatari.values()]

    def trova_per_id(self, locatario_id):
        return copy.deepcopy(self.db.locatari.get(locatario_id))

    def trova_per_utente_id(self, utente_id):
        return copy.deepcopy(next((loc for loc in self.db.locatari.values() if loc.utente_id == utente_id), None))

    def trova_con_contratti_oltre(self, durata_anni):
        return [
            copy.deepcopy(loc) for loc in self.db.locatari.values()
            if any(c.locatario_id == loc.id and c.durata_anni > durata_anni for c in self.db.contratti.values())
        ]

    def esiste_cf(self, cf, escludi_id=None):
        return any(loc.cf.upper() == cf.upper() and loc.id != escludi_id for loc in self.db.locatari.values())

    def ha_contratti(self, locatario_id):
        return any(c.locatario_id == locatario_id for c in self.db.contratti.values())

    def crea(self, locatario):
        locatario.id = self.db.prossimo_id("locatari")
        self.db.locatari[locatario.id] = copy.deepcopy(locatario)
        return locatario

    def aggiorna(self, locatario):
        self.db.locatari[locatario.id] = copy.deepcopy(locatario)
        return locatario

    def elimina(self, locatario_id):
        return self.db.locatari.pop(locatario_id, None) is not None


class FakePropertyRepository:
    def __init__(self, db: MemoriaDB):
        self.db = db

    def trova_tutti(self):
        return [copy.deepcopy(i) for i in self.db.immobili.values()]

    def trova_per_id(self, immobile_id):
        return copy.deepcopy(self.db.immobili.get(immobile_id))

    def conta_affittati_per_citta(self):
        affittati = {c.immobile_id for c in self.db.contratti.values()}
        conteggi = {}
        for immobile in self.db.immobili.values():
            if immobile.id in affittati:
                conteggi[immobile.citta] = conteggi.get(immobile.citta, 0) + 1
        return conteggi

    def conta_per_tipo(self):
        conteggi = {}
        for immobile in self.db.immobili.values():
            conteggi[immobile.tipo.value] = conteggi.get(immobile.tipo.value, 0) + 1
        return conteggi

    def e_referenziato(self, immobile_id):
        return any(c.immobile_id == immobile_id for c in self.db.contratti.values()) or any(
            m.immobile_id == immobile_id for m in self.db.manutenzioni.values()
        )

    def crea(self, immobile):
        immobile.id = self.db.prossimo_id("immobili")
        self.db.immobili[immobile.id] = copy.deepcopy(immobile)
        return immobile

    def aggiorna(self, immobile):
        self.db.immobili[immobile.id] = copy.deepcopy(immobile)
        return immobile

    def elimina(self, immobile_id):
        return self.db.immobili.pop(immobile_id, None) is not None


class FakeContractRepository:
    def __init__(self, db: MemoriaDB):
        self.db = db
        self.fallisci_inserimento_rate = False

    def _con_rate(self, contratto):
        contratto = copy.deepcopy(contratto)
        contratto.rate = sorted(
            (copy.deepcopy(r) for r in self.db.rate.values() if r.contratto_id == contratto.id),
            key=lambda r: r.numero_rata,
        )
        return contratto

    def trova_tutti(self):
        return [self._con_rate(c) for c in self.db.contratti.values()]

    def trova_per_id(self, contratto_id):
        contratto = self.db.contratti.get(contratto_id)
        return self._con_rate(contratto) if contratto else None

    def trova_per_email_utente(self, email):
        utente = self.db.utente_per_email(email)
        if utente is None:
            return []
        return [
            self._con_rate(c) for c in self.db.contratti.values()
            if self.db.proprietario_locatario(c.locatario_id) == utente.id
        ]

    def trova_morosi(self, minimo_non_pagate=3):
        return [
            self._con_rate(c) for c in self.db.contratti.values()
            if sum(1 for r in self.db.rate.values() if r.contratto_id == c.id and r.pagata == NON_PAGATA)
            >= minimo_non_pagate
        ]

    def trova_utente_proprietario(self, contratto_id):
        contratto = self.db.contratti.get(contratto_id)
        return self.db.proprietario_locatario(contratto.locatario_id) if contratto else None

    def crea_con_rate(self, contratto, rate):
        # tutto o niente: nulla viene salvato prima che l'intero piano sia pronto
        contratto_id = self.db.prossimo_id("contratti")
        nuove = []
        for draft in rate:
            if self.fallisci_inserimento_rate:
                raise RuntimeError("inserimento rate fallito")
            nuove.append(Rata(
                id=self.db.prossimo_id("rate"),
                contratto_id=contratto_id,
                numero_rata=draft.numero_rata,
                data_scadenza=draft.data_scadenza,
                importo=draft.importo,
                pagata=draft.pagata,
            ))
        contratto.id = contratto_id
        contratto.rate = []
        self.db.contratti[contratto_id] = copy.deepcopy(contratto)
        for rata in nuove:
            self.db.rate[rata.id] = rata
        contratto.rate = copy.deepcopy(nuove)
        return contratto

    def aggiorna(self, contratto):
        salvato = copy.deepcopy(contratto)
        salvato.rate = []
        self.db.contratti[contratto.id] = salvato
        return contratto

    def elimina_con_rate(self, contratto_id):
        if contratto_id not in self.db.contratti:
            return False
        for rata_id in [r.id for r in self.db.rate.values() if r.contratto_id == contratto_id]:
            del self.db.rate[rata_id]
        del self.db.contratti[contratto_id]
        return True


class FakeInstallmentRepository:
    def __init__(self, db: MemoriaDB):
        self.db = db

    def _ordinate(self, rate):
        return [copy.deepcopy(r) for r in sorted(rate, key=lambda r: (r.contratto_id, r.numero_rata))]

    def trova_tutte(self):
        return self._ordinate(self.db.rate.values())

    def trova_per_id(self, rata_id):
        return copy.deepcopy(self.db.rate.get(rata_id))

    def trova_per_contratto(self, contratto_id):
        return self._ordinate(r for r in self.db.rate.values() if r.contratto_id == contratto_id)

    def trova_non_pagate(self):
        return self._ordinate(r for r in self.db.rate.values() if r.pagata == NON_PAGATA)

    def trova_scadute_non_pagate(self, data_riferimento):
        return self._ordinate(
            r for r in self.db.rate.values() if r.pagata == NON_PAGATA and r.data_scadenza < data_riferimento
        )

    def trova_per_email_utente(self, email):
        utente = self.db.utente_per_email(email)
        if utente is None:
            return []
        return self._ordinate(r for r in self.db.rate.values() if self.trova_utente_proprietario(r.id) == utente.id)

    def aggiorna_pagata(self, rata_id, pagata):
        rata = self.db.rate.get(rata_id)
        if rata is None:
            return None
        rata.pagata = pagata
        return copy.deepcopy(rata)

    def trova_utente_proprietario(self, rata_id):
        rata = self.db.rate.get(rata_id)
        if rata is None:
            return None
        contratto = self.db.contratti.get(rata.contratto_id)
        return self.db.proprietario_locatario(contratto.locatario_id) if contratto else None


class FakeMaintenanceRepository:
    def __init__(self, db: MemoriaDB):
        self.db = db

    def trova_tutte(self):
        return [copy.deepcopy(m) for m in self.db.manutenzioni.values()]

    def trova_per_id(self, manutenzione_id):
        return copy.deepcopy(self.db.manutenzioni.get(manutenzione_id))

    def trova_per_email_utente(self, email):
        utente = self.db.utente_per_email(email)
        if utente is None:
            return []
        return [
            copy.deepcopy(m) for m in self.db.manutenzioni.values()
            if self.db.proprietario_locatario(m.locatario_id) == utente.id
        ]

    def trova_utente_proprietario(self, manutenzione_id):
        manutenzione = self.db.manutenzioni.get(manutenzione_id)
        return self.db.proprietario_locatario(manutenzione.locatario_id) if manutenzione else None

    def crea(self, manutenzione):
        manutenzione.id = self.db.prossimo_id("manutenzioni")
        self.db.manutenzioni[manutenzione.id] = copy.deepcopy(manutenzione)
        return manutenzione

    def trova_per_locatario_e_anno(self, locatario_id, anno):
        return [
            copy.deepcopy(m) for m in self.db.manutenzioni.values()
            if m.locatario_id == locatario_id and m.data_man.year == anno
        ]

    def date_per_locatario_con_importo_maggiore(self, locatario_id, importo):
        return sorted(
            m.data_man for m in self.db.manutenzioni.values()
            if m.locatario_id == locatario_id and m.importo > importo
        )

    def totali_per_anno_e_citta(self):
        totali = {}
        for m in self.db.manutenzioni.values():
            chiave = (m.data_man.year, self.db.immobili[m.immobile_id].citta)
            totali[chiave] = totali.get(chiave, Decimal("0")) + m.importo
        return [(anno, citta, totale) for (anno, citta), totale in sorted(totali.items())]

    def aggiorna(self, manutenzione):
        self.db.manutenzioni[manutenzione.id] = copy.deepcopy(manutenzione)
        return manutenzione

    def elimina(self, manutenzione_id):
        return self.db.manutenzioni.pop(manutenzione_id, None) is not None


# --------
# Dati di partenza
# --------
class Scenario:
    """Un admin, un manager e due locatari (Mario e Luigi), ognuno con un contratto."""

    def __init__(self, db: MemoriaDB):
        self.db = db
        # rounds bassi: gli hash servono solo ai test di login
        password_hash = genera_hash_password(PASSWORD, rounds=4)

        self.admin = self._utente("admin@test.it", "Anna", "Admin", {ROLE_ADMIN}, password_hash)
        self.manager = self._utente("manager@test.it", "Marco", "Manager", {ROLE_MANAGER}, password_hash)
        self.mario = self._utente("mario@test.it", "Mario", "Rossi", {ROLE_LOCATARIO}, password_hash)
        self.luigi = self._utente("luigi@test.it", "Luigi", "Verdi", {ROLE_LOCATARIO}, password_hash)

        self.locatario_mario = self._locatario("Mario", "Rossi", "RSSMRA80A01H501U", self.mario.id)
        self.locatario_luigi = self._locatario("Luigi", "Verdi", "VRDLGU85B02F205X", self.luigi.id)

        self.immobile = Immobile(
            id=db.prossimo_id("immobili"),
            indirizzo="Via Roma 1",
            citta="Milano",
            superficie=Decimal("85.50"),
            dati=DatiAppartamento(piano=2, num_camere=3),
        )
        db.immobili[self.immobile.id] = self.immobile

        repo = FakeContractRepository(db)
        self.contratto_mario = self._contratto(repo, self.locatario_mario.id)
        self.contratto_luigi = self._contratto(repo, self.locatario_luigi.id)

        self.manutenzione_mario = Manutenzione(
            id=db.prossimo_id("manutenzioni"),
            immobile_id=self.immobile.id,
            locatario_id=self.locatario_mario.id,
            data_man=date(2024, 3, 10),
            importo=Decimal("150.00"),
            tipo=TipoManutenzione.ORDINARIA,
            descrizione="Sostituzione caldaia",
        )
        db.manutenzioni[self.manutenzione_mario.id] = self.manutenzione_mario

    def _utente(self, email, nome, cognome, ruoli, password_hash):
        utente = Utente(
            id=self.db.prossimo_id("utenti"),
            email=email,
            password_hash=password_hash,
            nome=nome,
            cognome=cognome,
            abilitato=True,
            ruoli=frozenset(ruoli),
            data_registrazione=ADESSO,
        )
        self.db.utenti[utente.id] = utente
        return utente

    def _locatario(self, nome, cognome, cf, utente_id):
        locatario = Locatario(
            id=self.db.prossimo_id("locatari"),
            nome=nome,
            cognome=cognome,
            cf=cf,
            indirizzo="Via Garibaldi 10",
            telefono="3331234567",
            utente_id=utente_id,
        )
        self.db.locatari[locatario.id] = locatario
        return locatario

    def _contratto(self, repo, locatario_id):
        contratto = Contratto(
            id=None,
            locatario_id=locatario_id,
            immobile_id=self.immobile.id,
            data_inizio=date(2024, 1, 15),
            durata_anni=1,
            canone_annuo=Decimal("1200.00"),
        )
        piano = genera_piano_rate(contratto.data_inizio, 1, contratto.canone_annuo)
        return repo.crea_con_rate(contratto, piano)


# --------
# Fixtures
# --------
@pytest.fixture
def orologio():
    return Orologio(ADESSO)


@pytest.fixture
def token_service(orologio):
    return TokenService(
        secret_key=os.environ["JWT_SECRET_KEY"],
        expiration=timedelta(hours=24),
        clock=orologio,
    )


@pytest.fixture
def db():
    return MemoriaDB()


@pytest.fixture
def scenario(db):
    return Scenario(db)


@pytest.fixture
def repos(db):
    return {
        "auth": FakeAuthRepository(db),
        "tenant": FakeTenantRepository(db),
        "property": FakePropertyRepository(db),
        "contract": FakeContractRepository(db),
        "installment": FakeInstallmentRepository(db),
        "maintenance": FakeMaintenanceRepository(db),
    }


@pytest.fixture
def client(scenario, repos, token_service):
    app.dependency_overrides[get_db_connection] = lambda: None
    app.dependency_overrides[get_token_service] = lambda: token_service
    app.dependency_overrides[get_auth_repository] = lambda: repos["auth"]
    app.dependency_overrides[get_tenant_repository] = lambda: repos["tenant"]
    app.dependency_overrides[get_property_repository] = lambda: repos["property"]
    app.dependency_overrides[get_contract_repository] = lambda: repos["contract"]
    app.dependency_overrides[get_installment_repository] = lambda: repos["installment"]
    app.dependency_overrides[get_maintenance_repository] = lambda: repos["maintenance"]
    app.dependency_overrides[get_oggi] = lambda: (lambda: OGGI)

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(token_service):
    def _headers(email: str) -> dict:
        return {"Authorization": f"Bearer {token_service.issue(email)}"}

    return _headers
