# contracts/infrastructure/installment_repository.py

from datetime import date
from typing import List, Optional

from common.logging_factory import LoggerFactory
from contracts.domain.entities import Rata

logger = LoggerFactory.get_logger("installment_repository")

SELECT_RATA_COLONNE = "id, contratto_id, numero_rata, data_scadenza, importo, pagata"

SELECT_RATA = """
    SELECT r.id, r.contratto_id, r.numero_rata, r.data_scadenza, r.importo, r.pagata
    FROM rate r
"""


def riga_to_rata(row) -> Rata:
    return Rata(
        id=row[0],
        contratto_id=row[1],
        numero_rata=row[2],
        data_scadenza=row[3],
        importo=row[4],
        pagata=row[5],
    )


class InstallmentRepository:
    def __init__(self, conn):
        if conn is None:
            raise ValueError("❌ Connessione al database non disponibile (None).")
        self.conn = conn

    def _lista(self, query: str, params: tuple = ()) -> List[Rata]:
        with self.conn.cursor() as cur:
            cur.execute(query, params)
            return [riga_to_rata(r) for r in cur.fetchall()]

    def trova_tutte(self) -> List[Rata]:
        return self._lista(SELECT_RATA + " ORDER BY r.contratto_id, r.numero_rata")

    def trova_per_id(self, rata_id: int) -> Optional[Rata]:
        rate = self._lista(SELECT_RATA + " WHERE r.id = %s", (rata_id,))
        return rate[0] if rate else None

    def trova_per_contratto(self, contratto_id: int) -> List[Rata]:
        return self._lista(SELECT_RATA + " WHERE r.contratto_id = %s ORDER BY r.numero_rata", (contratto_id,))

    def trova_non_pagate(self) -> List[Rata]:
        return self._lista(SELECT_RATA + " WHERE r.pagata = 'N' ORDER BY r.data_scadenza, r.id")

    def trova_scadute_non_pagate(self, data_riferimento: date) -> List[Rata]:
        return self._lista(
            SELECT_RATA + " WHERE r.pagata = 'N' AND r.data_scadenza < %s ORDER BY r.data_scadenza, r.id",
            (data_riferimento,),
        )

    def trova_per_email_utente(self, email: str) -> List[Rata]:
        query = SELECT_RATA + """
            JOIN contratti c ON c.id = r.contratto_id
            JOIN locatari l ON l.id = c.locatario_id
            JOIN utenti u ON u.id = l.utente_id
            WHERE lower(u.email) = lower(%s)
            ORDER BY r.contratto_id, r.numero_rata
        """
        return self._lista(query, (email,))

    def aggiorna_pagata(self, rata_id: int, pagata: str) -> Optional[Rata]:
        try:
            with self.conn.cursor() as cur:
                cur.execute(
                    "UPDATE rate SET pagata = %s WHERE id = %s RETURNING " + SELECT_RATA_COLONNE,
                    (pagata, rata_id),
                )
                row = cur.fetchone()
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        return riga_to_rata(row) if row else None

    def trova_utente_proprietario(self, rata_id: int) -> Optional[int]:
        with self.conn.cursor() as cur:
            cur.execute("""
                SELECT l.utente_id
                FROM rate r
                JOIN contratti c ON c.id = r.contratto_id
                JOIN locatari l ON l.id = c.locatario_id
                WHERE r.id = %s
            """, (rata_id,))
            row = cur.fetchone()
            return row[0] if row else None
