# tenants/infrastructure/tenant_repository.py

from typing import List, Optional

from tenants.domain.entities import Locatario

_SELECT_LOCATARIO = """
    SELECT l.id, l.nome, l.cognome, l.cf, l.indirizzo, l.telefono, l.utente_id
    FROM locatari l
"""


def _riga_to_locatario(row) -> Locatario:
    return Locatario(
        id=row[0],
        nome=row[1],
        cognome=row[2],
        cf=row[3],
        indirizzo=row[4],
        telefono=row[5],
        utente_id=row[6],
    )


class TenantRepository:
    def __init__(self, conn):
        if conn is None:
            raise ValueError("❌ Connessione al database non disponibile (None).")
        self.conn = conn

    def _uno(self, query: str, params: tuple) -> Optional[Locatario]:
        with self.conn.cursor() as cur:
            cur.execute(query, params)
            row = cur.fetchone()
            return _riga_to_locatario(row) if row else None

    def trova_tutti(self) -> List[Locatario]:
        with self.conn.cursor() as cur:
            cur.execute(_SELECT_LOCATARIO + " ORDER BY l.cognome, l.nome, l.id")
            return [_riga_to_locatario(r) for r in cur.fetchall()]

    def trova_per_id(self, locatario_id: int) -> Optional[Locatario]:
        return self._uno(_SELECT_LOCATARIO + " WHERE l.id = %s", (locatario_id,))

    def trova_per_utente_id(self, utente_id: int) -> Optional[Locatario]:
        return self._uno(_SELECT_LOCATARIO + " WHERE l.utente_id = %s", (utente_id,))

    def trova_con_contratti_oltre(self, durata_anni: int) -> List[Locatario]:
        with self.conn.cursor() as cur:
            cur.execute(_SELECT_LOCATARIO + """
                WHERE EXISTS (
                    SELECT 1 FROM contratti c WHERE c.locatario_id = l.id AND c.durata_anni > %s
                )
                ORDER BY l.cognome, l.nome, l.id
            """, (durata_anni,))
            return [_riga_to_locatario(r) for r in cur.fetchall()]

    def esiste_cf(self, cf: str, escludi_id: Optional[int] = None) -> bool:
        with self.conn.cursor() as cur:
            cur.execute(
                "SELECT 1 FROM locatari WHERE upper(cf) = upper(%s) AND id IS DISTINCT FROM %s LIMIT 1",
                (cf, escludi_id),
            )
            return cur.fetchone() is not None

    def ha_contratti(self, locatario_id: int) -> bool:
        with self.conn.cursor() as cur:
            cur.execute("SELECT 1 FROM contratti WHERE locatario_id = %s LIMIT 1", (locatario_id,))
            return cur.fetchone() is not None

    def crea(self, locatario: Locatario) -> Locatario:
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO locatari (nome, cognome, cf, indirizzo, telefono, utente_id)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    RETURNING id
                """, (
                    locatario.nome,
                    locatario.cognome,
                    locatario.cf,
                    locatario.indirizzo,
                    locatario.telefono,
                    locatario.utente_id,
                ))
                locatario.id = cur.fetchone()[0]
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        return locatario

    def aggiorna(self, locatario: Locatario) -> Locatario:
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    UPDATE locatari
                    SET nome = %s, cognome = %s, cf = %s, indirizzo = %s, telefono = %s
                    WHERE id = %s
                """, (
                    locatario.nome,
                    locatario.cognome,
                    locatario.cf,
                    locatario.indirizzo,
                    locatario.telefono,
                    locatario.id,
                ))
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        return locatario

    def elimina(self, locatario_id: int) -> bool:
        try:
            with self.conn.cursor() as cur:
                cur.execute("DELETE FROM locatari WHERE id = %s", (locatario_id,))
                eliminato = cur.rowcount > 0
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        return eliminato
