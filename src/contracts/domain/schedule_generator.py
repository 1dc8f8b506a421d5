# contracts/domain/schedule_generator.py

"""
Generazione del piano rate di un contratto.

- numero rate = durata_anni × rate_per_anno(frequenza)
- importo rata = canone_annuo / rate_per_anno(frequenza), arrotondato al centesimo
  (ROUND_HALF_UP) una sola volta e uguale per tutte le rate, senza redistribuire il resto
- scadenza rata k = data_inizio + (k-1) × (12 / rate_per_anno) mesi, sempre calcolata
  da data_inizio; il giorno viene portato all'ultimo del mese se non esiste
- durata massima DURATA_MASSIMA_ANNI anni; una scadenza oltre il calendario è un errore di regola
"""

import calendar
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import List, Union

from common.errors import BusinessRuleViolated
from contracts.domain.entities import NON_PAGATA, FrequenzaRata, RataDraft

MESI_PER_ANNO = 12
DURATA_MASSIMA_ANNI = 99
# NUMERIC(12, 2)
IMPORTO_MASSIMO = Decimal("10000000000")
CENTESIMO = Decimal("0.01")

_RATE_PER_ANNO = {
    FrequenzaRata.MENSILE: 12,
    FrequenzaRata.BIMESTRALE: 6,
    FrequenzaRata.TRIMESTRALE: 4,
    FrequenzaRata.SEMESTRALE: 2,
    FrequenzaRata.ANNUALE: 1,
}


def _frequenza(valore: Union[FrequenzaRata, str]) -> FrequenzaRata:
    try:
        return FrequenzaRata(valore)
    except ValueError:
        raise BusinessRuleViolated(f"Frequenza rata non valida: {valore}")


def rate_per_anno(frequenza: Union[FrequenzaRata, str]) -> int:
    return _RATE_PER_ANNO[_frequenza(frequenza)]


def aggiungi_mesi(data: date, mesi: int) -> date:
    indice = data.month - 1 + mesi
    anno = data.year + indice // MESI_PER_ANNO
    mese = indice % MESI_PER_ANNO + 1
    if not date.min.year <= anno <= date.max.year:
        raise BusinessRuleViolated(f"Scadenza fuori calendario: {data.isoformat()} + {mesi} mesi")
    ultimo_giorno = calendar.monthrange(anno, mese)[1]
    return date(anno, mese, min(data.day, ultimo_giorno))


def _come_decimal(valore) -> Decimal:
    if isinstance(valore, bool):
        raise BusinessRuleViolated("Canone annuo non valido")
    try:
        # float -> str -> Decimal
        importo = valore if isinstance(valore, Decimal) else Decimal(str(valore))
    except (InvalidOperation, ValueError, TypeError):
        raise BusinessRuleViolated(f"Canone annuo non valido: {valore}")
    if not importo.is_finite():
        raise BusinessRuleViolated(f"Canone annuo non valido: {valore}")
    return importo


def importo_rata(canone_annuo, frequenza: Union[FrequenzaRata, str]) -> Decimal:
    canone = _come_decimal(canone_annuo)
    return (canone / rate_per_anno(frequenza)).quantize(CENTESIMO, rounding=ROUND_HALF_UP)


def genera_piano_rate(
    data_inizio: date,
    durata_anni: int,
    canone_annuo,
    frequenza: Union[FrequenzaRata, str] = FrequenzaRata.TRIMESTRALE,
) -> List[RataDraft]:
    if not isinstance(durata_anni, int) or isinstance(durata_anni, bool) or durata_anni <= 0:
        raise BusinessRuleViolated("La durata del contratto deve essere un numero intero di anni positivo")
    if durata_anni > DURATA_MASSIMA_ANNI:
        raise BusinessRuleViolated(f"La durata del contratto non può superare {DURATA_MASSIMA_ANNI} anni")

    canone = _come_decimal(canone_annuo)
    if canone <= 0:
        raise BusinessRuleViolated("Il canone annuo deve essere positivo")
    if canone >= IMPORTO_MASSIMO:
        raise BusinessRuleViolated(f"Il canone annuo deve essere inferiore a {IMPORTO_MASSIMO}")

    freq = _frequenza(frequenza)
    per_anno = _RATE_PER_ANNO[freq]
    passo_mesi = MESI_PER_ANNO // per_anno
    importo = importo_rata(canone, freq)
    if importo <= 0:
        raise BusinessRuleViolated("Canone annuo troppo basso per la frequenza scelta")

    return [
        RataDraft(
            numero_rata=k,
            data_scadenza=aggiungi_mesi(data_inizio, (k - 1) * passo_mesi),
            importo=importo,
            pagata=NON_PAGATA,
        )
        for k in range(1, durata_anni * per_anno + 1)
    ]
