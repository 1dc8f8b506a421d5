# properties/infrastructure/property_repository.py

from typing import Dict, List, Optional

from psycopg2.extras import Json

from properties.domain.entities import Immobile, dati_da_dict, dati_to_dict

_SELECT_IMMOBILE = """
    SELECT i.id, i.indirizzo, i.citta, i.superficie, i.tipo, i.dati
    FROM immobili i
"""


def _riga_to_immobile(row) -> Immobile:
    # psycopg2 decodifica JSONB in dict
    return Immobile(
        id=row[0],
        indirizzo=row[1],
        citta=row[2],
        superficie=row[3],
        dati=dati_da_dict(row[4], row[5] or {}),
    )


class PropertyRepository:
    def __init__(self, conn):
        if conn is None:
            raise ValueError("❌ Connessione al database non disponibile (None).")
        self.conn = conn

    def trova_tutti(self) -> List[Immobile]:
        with self.conn.cursor() as cur:
            cur.execute(_SELECT_IMMOBILE + " ORDER BY i.id")
            return [_riga_to_immobile(r) for r in cur.fetchall()]

    def trova_per_id(self, immobile_id: int) -> Optional[Immobile]:
        with self.conn.cursor() as cur:
            cur.execute(_SELECT_IMMOBILE + " WHERE i.id = %s", (immobile_id,))
            row = cur.fetchone()
            return _riga_to_immobile(row) if row else None

    def conta_affittati_per_citta(self) -> Dict[str, int]:
        with self.conn.cursor() as cur:
            cur.execute("""
                SELECT i.citta, COUNT(DISTINCT i.id)
                FROM immobili i
                JOIN contratti c ON c.immobile_id = i.id
                GROUP BY i.citta
                ORDER BY i.citta
            """)
            return {citta: totale for citta, totale in cur.fetchall()}

    def conta_per_tipo(self) -> Dict[str, int]:
        with self.conn.cursor() as cur:
            cur.execute("SELECT tipo, COUNT(*) FROM immobili GROUP BY tipo ORDER BY tipo")
            return {tipo: totale for tipo, totale in cur.fetchall()}

    def e_referenziato(self, immobile_id: int) -> bool:
        with self.conn.cursor() as cur:
            cur.execute("""
                SELECT 1 FROM contratti WHERE immobile_id = %s
                UNION ALL
                SELECT 1 FROM manutenzioni WHERE immobile_id = %s
                LIMIT 1
            """, (immobile_id, immobile_id))
            return cur.fetchone() is not None

    def crea(self, immobile: Immobile) -> Immobile:
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO immobili (indirizzo, citta, superficie, tipo, dati)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING id
                """, (
                    immobile.indirizzo,
                    immobile.citta,
                    immobile.superficie,
                    immobile.tipo.value,
                    Json(dati_to_dict(immobile.dati)),
                ))
                immobile.id = cur.fetchone()[0]
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        return immobile

    def aggiorna(self, immobile: Immobile) -> Immobile:
        # il tipo non si aggiorna: la variante resta quella della creazione
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    UPDATE immobili
                    SET indirizzo = %s, citta = %s, superficie = %s, dati = %s
                    WHERE id = %s
                """, (
                    immobile.indirizzo,
                    immobile.citta,
                    immobile.superficie,
                    Json(dati_to_dict(immobile.dati)),
                    immobile.id,
                ))
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        return immobile

    def elimina(self, immobile_id: int) -> bool:
        try:
            with self.conn.cursor() as cur:
                cur.execute("DELETE FROM immobili WHERE id = %s", (immobile_id,))
                eliminato = cur.rowcount > 0
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        return eliminato
