# tests/test_schedule_generator.py

from datetime import date
from decimal import Decimal

import pytest

from common.errors import BusinessRuleViolated
from contracts.domain.entities import FrequenzaRata
from contracts.domain.schedule_generator import aggiungi_mesi, genera_piano_rate, importo_rata, rate_per_anno


def test_piano_trimestrale_di_un_anno():
    piano = genera_piano_rate(date(2024, 1, 15), 1, Decimal("1200"), FrequenzaRata.TRIMESTRALE)

    assert [r.numero_rata for r in piano] == [1, 2, 3, 4]
    assert [r.importo for r in piano] == [Decimal("300.00")] * 4
    assert [r.data_scadenza for r in piano] == [
        date(2024, 1, 15),
        date(2024, 4, 15),
        date(2024, 7, 15),
        date(2024, 10, 15),
    ]
    assert all(r.pagata == "N" for r in piano)


def test_frequenza_predefinita_trimestrale():
    piano = genera_piano_rate(date(2024, 1, 15), 2, Decimal("1200"))
    assert len(piano) == 8


@pytest.mark.parametrize("frequenza, per_anno", [
    (FrequenzaRata.MENSILE, 12),
    (FrequenzaRata.BIMESTRALE, 6),
    (FrequenzaRata.TRIMESTRALE, 4),
    (FrequenzaRata.SEMESTRALE, 2),
    (FrequenzaRata.ANNUALE, 1),
])
def test_numero_rate_per_frequenza(frequenza, per_anno):
    assert rate_per_anno(frequenza) == per_anno
    piano = genera_piano_rate(date(2023, 3, 1), 3, Decimal("9000"), frequenza)
    assert len(piano) == 3 * per_anno
    assert [r.numero_rata for r in piano] == list(range(1, 3 * per_anno + 1))


def test_somma_importi_entro_arrotondamento():
    piano = genera_piano_rate(date(2024, 1, 1), 2, Decimal("1000"), FrequenzaRata.MENSILE)

    assert piano[0].importo == Decimal("83.33")
    totale = sum(r.importo for r in piano)
    assert abs(totale - Decimal("2000")) <= Decimal("0.005") * len(piano)


def test_arrotondamento_half_up():
    # 100.02 / 4 = 25.005
    assert importo_rata(Decimal("100.02"), FrequenzaRata.TRIMESTRALE) == Decimal("25.01")


def test_canone_float_convertito_senza_errori_binari():
    piano = genera_piano_rate(date(2024, 1, 15), 1, 1200.0, "TRIMESTRALE")
    assert piano[0].importo == Decimal("300.00")


def test_scadenze_fine_mese_calcolate_dalla_data_inizio():
    piano = genera_piano_rate(date(2024, 1, 31), 1, Decimal("1200"), FrequenzaRata.MENSILE)

    assert [r.data_scadenza for r in piano[:4]] == [
        date(2024, 1, 31),
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
    ]


def test_scadenze_semestrali_con_anno_bisestile():
    piano = genera_piano_rate(date(2023, 8, 31), 1, Decimal("1000"), FrequenzaRata.SEMESTRALE)
    assert [r.data_scadenza for r in piano] == [date(2023, 8, 31), date(2024, 2, 29)]


def test_aggiungi_mesi_cambio_anno():
    assert aggiungi_mesi(date(2024, 11, 30), 3) == date(2025, 2, 28)
    assert aggiungi_mesi(date(2024, 12, 15), 12) == date(2025, 12, 15)


def test_generazione_deterministica():
    args = (date(2024, 5, 31), 3, Decimal("7777.77"), FrequenzaRata.BIMESTRALE)
    assert genera_piano_rate(*args) == genera_piano_rate(*args)


@pytest.mark.parametrize("durata", [0, -1, 1.5, True, "2", 100, 8000])
def test_durata_non_valida(durata):
    with pytest.raises(BusinessRuleViolated):
        genera_piano_rate(date(2024, 1, 1), durata, Decimal("1200"))


@pytest.mark.parametrize("canone", [0, Decimal("-100"), "abc", float("nan"), True, Decimal("10000000000")])
def test_canone_non_valido(canone):
    with pytest.raises(BusinessRuleViolated):
        genera_piano_rate(date(2024, 1, 1), 1, canone)


def test_frequenza_sconosciuta():
    with pytest.raises(BusinessRuleViolated):
        genera_piano_rate(date(2024, 1, 1), 1, Decimal("1200"), "SETTIMANALE")


def test_durata_massima_ammessa():
    piano = genera_piano_rate(date(2024, 1, 15), 99, Decimal("1200"), FrequenzaRata.ANNUALE)

    assert len(piano) == 99
    assert piano[-1].data_scadenza == date(2122, 1, 15)


def test_scadenze_oltre_il_calendario():
    with pytest.raises(BusinessRuleViolated):
        genera_piano_rate(date(9990, 1, 1), 20, Decimal("1200"), FrequenzaRata.ANNUALE)


def test_aggiungi_mesi_oltre_anno_9999():
    with pytest.raises(BusinessRuleViolated):
        aggiungi_mesi(date(9999, 12, 1), 1)


def test_canone_che_arrotonda_a_zero():
    with pytest.raises(BusinessRuleViolated):
        genera_piano_rate(date(2024, 1, 1), 1, Decimal("0.04"), FrequenzaRata.MENSILE)
