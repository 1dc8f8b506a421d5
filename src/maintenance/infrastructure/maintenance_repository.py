# maintenance/infrastructure/maintenance_repository.py

from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from maintenance.domain.entities import Manutenzione, TipoManutenzione

_SELECT_MANUTENZIONE = """
    SELECT m.id, m.immobile_id, m.locatario_id, m.data_man, m.importo, m.tipo, m.descrizione
    FROM manutenzioni m
"""


def _riga_to_manutenzione(row) -> Manutenzione:
    return Manutenzione(
        id=row[0],
        immobile_id=row[1],
        locatario_id=row[2],
        data_man=row[3],
        importo=row[4],
        tipo=TipoManutenzione(row[5]),
        descrizione=row[6],
    )


class MaintenanceRepository:
    def __init__(self, conn):
        if conn is None:
            raise ValueError("❌ Connessione al database non disponibile (None).")
        self.conn = conn

    def _lista(self, query: str, params: tuple = ()) -> List[Manutenzione]:
        with self.conn.cursor() as cur:
            cur.execute(query, params)
            return [_riga_to_manutenzione(r) for r in cur.fetchall()]

    def trova_tutte(self) -> List[Manutenzione]:
        return self._lista(_SELECT_MANUTENZIONE + " ORDER BY m.data_man DESC, m.id")

    def trova_per_id(self, manutenzione_id: int) -> Optional[Manutenzione]:
        manutenzioni = self._lista(_SELECT_MANUTENZIONE + " WHERE m.id = %s", (manutenzione_id,))
        return manutenzioni[0] if manutenzioni else None

    def trova_per_email_utente(self, email: str) -> List[Manutenzione]:
        query = _SELECT_MANUTENZIONE + """
            JOIN locatari l ON l.id = m.locatario_id
            JOIN utenti u ON u.id = l.utente_id
            WHERE lower(u.email) = lower(%s)
            ORDER BY m.data_man DESC, m.id
        """
        return self._lista(query, (email,))

    def trova_per_locatario_e_anno(self, locatario_id: int, anno: int) -> List[Manutenzione]:
        query = _SELECT_MANUTENZIONE + """
            WHERE m.locatario_id = %s AND EXTRACT(YEAR FROM m.data_man) = %s
            ORDER BY m.data_man, m.id
        """
        return self._lista(query, (locatario_id, anno))

    def date_per_locatario_con_importo_maggiore(self, locatario_id: int, importo: Decimal) -> List[date]:
        with self.conn.cursor() as cur:
            cur.execute("""
                SELECT m.data_man
                FROM manutenzioni m
                WHERE m.locatario_id = %s AND m.importo > %s
                ORDER BY m.data_man
            """, (locatario_id, importo))
            return [r[0] for r in cur.fetchall()]

    def totali_per_anno_e_citta(self) -> List[Tuple[int, str, Decimal]]:
        with self.conn.cursor() as cur:
            cur.execute("""
                SELECT EXTRACT(YEAR FROM m.data_man)::int AS anno, i.citta, SUM(m.importo)
                FROM manutenzioni m
                JOIN immobili i ON i.id = m.immobile_id
                GROUP BY anno, i.citta
                ORDER BY anno, i.citta
            """)
            return [(r[0], r[1], r[2]) for r in cur.fetchall()]

    def trova_utente_proprietario(self, manutenzione_id: int) -> Optional[int]:
        with self.conn.cursor() as cur:
            cur.execute("""
                SELECT l.utente_id
                FROM manutenzioni m
                JOIN locatari l ON l.id = m.locatario_id
                WHERE m.id = %s
            """, (manutenzione_id,))
            row = cur.fetchone()
            return row[0] if row else None

    def crea(self, manutenzione: Manutenzione) -> Manutenzione:
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO manutenzioni (immobile_id, locatario_id, data_man, importo, tipo, descrizione)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    RETURNING id
                """, (
                    manutenzione.immobile_id,
                    manutenzione.locatario_id,
                    manutenzione.data_man,
                    manutenzione.importo,
                    manutenzione.tipo.value,
                    manutenzione.descrizione,
                ))
                manutenzione.id = cur.fetchone()[0]
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        return manutenzione

    def aggiorna(self, manutenzione: Manutenzione) -> Manutenzione:
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    UPDATE manutenzioni
                    SET immobile_id = %s, locatario_id = %s, data_man = %s, importo = %s,
                        tipo = %s, descrizione = %s
                    WHERE id = %s
                """, (
                    manutenzione.immobile_id,
                    manutenzione.locatario_id,
                    manutenzione.data_man,
                    manutenzione.importo,
                    manutenzione.tipo.value,
                    manutenzione.descrizione,
                    manutenzione.id,
                ))
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        return manutenzione

    def elimina(self, manutenzione_id: int) -> bool:
        try:
            with self.conn.cursor() as cur:
                cur.execute("DELETE FROM manutenzioni WHERE id = %s", (manutenzione_id,))
                eliminato = cur.rowcount > 0
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        return eliminato
