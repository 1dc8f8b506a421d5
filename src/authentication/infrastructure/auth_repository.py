# authentication/infrastructure/auth_repository.py

from typing import Iterable, List, Optional

from authentication.domain.entities import Utente

_SELECT_UTENTE = """
    SELECT u.id, u.email, u.password_hash, u.nome, u.cognome, u.abilitato,
           COALESCE(array_agg(r.nome) FILTER (WHERE r.nome IS NOT NULL), '{}') AS ruoli,
           u.data_registrazione
    FROM utenti u
    LEFT JOIN utenti_ruoli ur ON ur.utente_id = u.id
    LEFT JOIN ruoli r ON r.id = ur.ruolo_id
"""


def _riga_to_utente(row) -> Utente:
    return Utente(
        id=row[0],
        email=row[1],
        password_hash=row[2],
        nome=row[3],
        cognome=row[4],
        abilitato=row[5],
        ruoli=frozenset(row[6] or ()),
        data_registrazione=row[7],
    )


class AuthRepository:
    def __init__(self, conn):
        if conn is None:
            raise ValueError("❌ Connessione al database non disponibile (None).")
        self.conn = conn

    def trova_utente_per_email(self, email: str) -> Optional[Utente]:
        query = _SELECT_UTENTE + """
        WHERE lower(u.email) = lower(%s)
        GROUP BY u.id
        LIMIT 1
        """
        with self.conn.cursor() as cur:
            cur.execute(query, (email,))
            row = cur.fetchone()
            if not row:
                return None
            return _riga_to_utente(row)

    def trova_utente_per_id(self, utente_id: int) -> Optional[Utente]:
        query = _SELECT_UTENTE + """
        WHERE u.id = %s
        GROUP BY u.id
        """
        with self.conn.cursor() as cur:
            cur.execute(query, (utente_id,))
            row = cur.fetchone()
            if not row:
                return None
            return _riga_to_utente(row)

    def trova_tutti(self) -> List[Utente]:
        with self.conn.cursor() as cur:
            cur.execute(_SELECT_UTENTE + " GROUP BY u.id ORDER BY u.id")
            return [_riga_to_utente(r) for r in cur.fetchall()]

    def trova_ruoli(self) -> List[str]:
        with self.conn.cursor() as cur:
            cur.execute("SELECT nome FROM ruoli ORDER BY nome")
            return [r[0] for r in cur.fetchall()]

    def esiste_email(self, email: str) -> bool:
        with self.conn.cursor() as cur:
            cur.execute("SELECT 1 FROM utenti WHERE lower(email) = lower(%s) LIMIT 1", (email,))
            return cur.fetchone() is not None

    def crea_utente(self, utente: Utente) -> Utente:
        """Inserisce utente e ruoli nella stessa transazione."""
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO utenti (email, password_hash, nome, cognome, abilitato)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING id, data_registrazione
                """, (utente.email, utente.password_hash, utente.nome, utente.cognome, utente.abilitato))
                utente_id, data_registrazione = cur.fetchone()
                self._assegna_ruoli(cur, utente_id, utente.ruoli)
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise

        utente.id = utente_id
        utente.data_registrazione = data_registrazione
        return utente

    def aggiorna_abilitato(self, utente_id: int, abilitato: bool) -> bool:
        try:
            with self.conn.cursor() as cur:
                cur.execute("UPDATE utenti SET abilitato = %s WHERE id = %s", (abilitato, utente_id))
                aggiornato = cur.rowcount > 0
            self.conn.commit()
            return aggiornato
        except Exception:
            self.conn.rollback()
            raise

    def aggiorna_profilo(self, utente_id: int, nome: str, cognome: str) -> bool:
        try:
            with self.conn.cursor() as cur:
                cur.execute(
                    "UPDATE utenti SET nome = %s, cognome = %s WHERE id = %s",
                    (nome, cognome, utente_id),
                )
                aggiornato = cur.rowcount > 0
            self.conn.commit()
            return aggiornato
        except Exception:
            self.conn.rollback()
            raise

    def sostituisci_ruoli(self, utente_id: int, ruoli: Iterable[str]) -> None:
        """Rimozione e nuova assegnazione nella stessa transazione."""
        try:
            with self.conn.cursor() as cur:
                cur.execute("DELETE FROM utenti_ruoli WHERE utente_id = %s", (utente_id,))
                self._assegna_ruoli(cur, utente_id, ruoli)
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise

    @staticmethod
    def _assegna_ruoli(cur, utente_id: int, ruoli: Iterable[str]) -> None:
        for ruolo in sorted(ruoli):
            cur.execute("""
                INSERT INTO utenti_ruoli (utente_id, ruolo_id)
                SELECT %s, id FROM ruoli WHERE nome = %s
            """, (utente_id, ruolo))
