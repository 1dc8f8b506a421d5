# contracts/infrastructure/contract_repository.py

from typing import List, Optional, Sequence

from common.logging_factory import LoggerFactory
from contracts.domain.entities import Contratto, FrequenzaRata, RataDraft
from contracts.infrastructure.installment_repository import SELECT_RATA, riga_to_rata

logger = LoggerFactory.get_logger("contract_repository")

_SELECT_CONTRATTO = """
    SELECT c.id, c.locatario_id, c.immobile_id, c.data_inizio, c.durata_anni,
           c.canone_annuo, c.frequenza_rata
    FROM contratti c
"""


def _riga_to_contratto(row) -> Contratto:
    return Contratto(
        id=row[0],
        locatario_id=row[1],
        immobile_id=row[2],
        data_inizio=row[3],
        durata_anni=row[4],
        canone_annuo=row[5],
        frequenza_rata=FrequenzaRata(row[6]),
    )


class ContractRepository:
    def __init__(self, conn):
        if conn is None:
            raise ValueError("❌ Connessione al database non disponibile (None).")
        self.conn = conn

    def _lista(self, query: str, params: tuple = ()) -> List[Contratto]:
        with self.conn.cursor() as cur:
            cur.execute(query, params)
            contratti = [_riga_to_contratto(r) for r in cur.fetchall()]
        self._carica_rate(contratti)
        return contratti

    def _carica_rate(self, contratti: List[Contratto]) -> None:
        if not contratti:
            return
        per_id = {c.id: c for c in contratti}
        with self.conn.cursor() as cur:
            cur.execute(
                SELECT_RATA + " WHERE r.contratto_id = ANY(%s) ORDER BY r.contratto_id, r.numero_rata",
                (list(per_id),),
            )
            for row in cur.fetchall():
                rata = riga_to_rata(row)
                per_id[rata.contratto_id].rate.append(rata)

    def trova_tutti(self) -> List[Contratto]:
        return self._lista(_SELECT_CONTRATTO + " ORDER BY c.id")

    def trova_per_id(self, contratto_id: int) -> Optional[Contratto]:
        contratti = self._lista(_SELECT_CONTRATTO + " WHERE c.id = %s", (contratto_id,))
        return contratti[0] if contratti else None

    def trova_per_email_utente(self, email: str) -> List[Contratto]:
        query = _SELECT_CONTRATTO + """
            JOIN locatari l ON l.id = c.locatario_id
            JOIN utenti u ON u.id = l.utente_id
            WHERE lower(u.email) = lower(%s)
            ORDER BY c.id
        """
        return self._lista(query, (email,))

    def trova_morosi(self, minimo_non_pagate: int = 3) -> List[Contratto]:
        query = _SELECT_CONTRATTO + """
            WHERE (SELECT COUNT(*) FROM rate r WHERE r.contratto_id = c.id AND r.pagata = 'N') >= %s
            ORDER BY c.id
        """
        return self._lista(query, (minimo_non_pagate,))

    def trova_utente_proprietario(self, contratto_id: int) -> Optional[int]:
        with self.conn.cursor() as cur:
            cur.execute("""
                SELECT l.utente_id
                FROM contratti c
                JOIN locatari l ON l.id = c.locatario_id
                WHERE c.id = %s
            """, (contratto_id,))
            row = cur.fetchone()
            return row[0] if row else None

    def crea_con_rate(self, contratto: Contratto, rate: Sequence[RataDraft]) -> Contratto:
        """Contratto e piano rate in un'unica transazione: o tutto o niente."""
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO contratti (locatario_id, immobile_id, data_inizio, durata_anni,
                                           canone_annuo, frequenza_rata)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    RETURNING id
                """, (
                    contratto.locatario_id,
                    contratto.immobile_id,
                    contratto.data_inizio,
                    contratto.durata_anni,
                    contratto.canone_annuo,
                    contratto.frequenza_rata.value,
                ))
                contratto_id = cur.fetchone()[0]

                cur.executemany("""
                    INSERT INTO rate (contratto_id, numero_rata, data_scadenza, importo, pagata)
                    VALUES (%s, %s, %s, %s, %s)
                """, [(contratto_id, r.numero_rata, r.data_scadenza, r.importo, r.pagata) for r in rate])

                # rilettura nella stessa transazione per avere gli id assegnati
                cur.execute(SELECT_RATA + " WHERE r.contratto_id = %s ORDER BY r.numero_rata", (contratto_id,))
                righe = cur.fetchall()
            self.conn.commit()
        except Exception as e:
            self.conn.rollback()
            logger.error(f"❌ Errore nella creazione del contratto, rollback eseguito: {e}")
            raise

        contratto.id = contratto_id
        contratto.rate = [riga_to_rata(r) for r in righe]
        logger.info(f"✅ Contratto {contratto_id} salvato con {len(contratto.rate)} rate.")
        return contratto

    def aggiorna(self, contratto: Contratto) -> Contratto:
        # i termini del piano rate restano quelli della creazione
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    UPDATE contratti
                    SET locatario_id = %s, immobile_id = %s
                    WHERE id = %s
                """, (contratto.locatario_id, contratto.immobile_id, contratto.id))
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        return contratto

    def elimina_con_rate(self, contratto_id: int) -> bool:
        try:
            with self.conn.cursor() as cur:
                cur.execute("DELETE FROM rate WHERE contratto_id = %s", (contratto_id,))
                rate_eliminate = cur.rowcount
                cur.execute("DELETE FROM contratti WHERE id = %s", (contratto_id,))
                eliminato = cur.rowcount > 0
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        logger.debug(f"🧹 Eliminate {rate_eliminate} rate del contratto {contratto_id}")
        return eliminato
