# authentication/manage_users.py

import argparse
import sys

from authentication.application.auth_service import AuthService
from authentication.domain.entities import RUOLI_VALIDI
from authentication.infrastructure.auth_repository import AuthRepository
from common.database_connection import chiudi_connessione, connetti_db
from common.errors import AppError
from tenants.application.tenant_service import TenantService
from tenants.infrastructure.tenant_repository import TenantRepository


def crea_utente(conn, nome, cognome, email, password, ruoli):
    service = AuthService(AuthRepository(conn), token_service=None)
    utente = service.crea_utente_con_ruoli(email, password, nome, cognome, ruoli)
    print(f"✅ Utente {email} ({', '.join(sorted(utente.ruoli))}) creato con successo. ID={utente.id}")
    return utente


def crea_locatario(conn, nome, cognome, cf, indirizzo, telefono, utente_id):
    service = TenantService(TenantRepository(conn), AuthRepository(conn))
    locatario = service.crea(nome, cognome, cf, indirizzo, telefono, utente_id)
    print(f"✅ Locatario {nome} {cognome} creato con successo. ID={locatario.id}")
    return locatario


def imposta_abilitato(conn, email, abilitato):
    service = AuthService(AuthRepository(conn), token_service=None)
    service.imposta_abilitato(email, abilitato)
    print(f"✅ Utente {email} {'abilitato' if abilitato else 'disabilitato'}.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Gestione utenti e locatari del gestionale affitti")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Crea utente
    user_parser = subparsers.add_parser("create-user", help="Crea un nuovo utente")
    user_parser.add_argument("--nome", required=True, help="Nome dell'utente")
    user_parser.add_argument("--cognome", required=True, help="Cognome dell'utente")
    user_parser.add_argument("--email", required=True, help="Email dell'utente")
    user_parser.add_argument("--password", required=True, help="Password dell'utente")
    user_parser.add_argument("--role", required=True, action="append", choices=sorted(RUOLI_VALIDI),
                             help="Ruolo dell'utente (ripetibile)")

    # Crea locatario
    tenant_parser = subparsers.add_parser("create-locatario", help="Collega un locatario a un utente esistente")
    tenant_parser.add_argument("--nome", required=True)
    tenant_parser.add_argument("--cognome", required=True)
    tenant_parser.add_argument("--cf", required=True, help="Codice fiscale")
    tenant_parser.add_argument("--indirizzo", required=True)
    tenant_parser.add_argument("--telefono", required=True)
    tenant_parser.add_argument("--utente_id", required=True, type=int, help="ID dell'utente da collegare")

    # Abilita / disabilita
    for nome, aiuto in (("enable-user", "Riabilita un utente"), ("disable-user", "Disabilita un utente")):
        sub = subparsers.add_parser(nome, help=aiuto)
        sub.add_argument("--email", required=True)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    conn = connetti_db()
    try:
        if args.command == "create-user":
            crea_utente(conn, args.nome, args.cognome, args.email, args.password, args.role)
        elif args.command == "create-locatario":
            crea_locatario(conn, args.nome, args.cognome, args.cf, args.indirizzo, args.telefono, args.utente_id)
        elif args.command in ("enable-user", "disable-user"):
            imposta_abilitato(conn, args.email, args.command == "enable-user")
    except AppError as e:
        print(f"❌ Errore: {e.message}")
        return 1
    finally:
        chiudi_connessione(conn)
    return 0


if __name__ == "__main__":
    sys.exit(main())
