from datetime import date
from finance.market import RateSnapshot, snapshot_from_dict
from finance.products import ProductType, ProductCharacteristics
from report.dashboard import montar_dashboard, resultado_to_dict, comparativo_mercado, alertas
from simulate import InvestmentInstance, calcular_investimento
import pytest

MERCADO = RateSnapshot(cdi_aa=13.0, selic_aa=13.0, ipca_aa=4.0)

def _inv(tipo, c, vp=10000.0, fim=date(2026, 1, 1)):
    return InvestmentInstance(tipo, c, vp, date(2025, 1, 1), fim, 13.0)

def test_resultado_arredondado_na_saida():
    inv = _inv(ProductType.FixedIncomeCDB, ProductCharacteristics(percentual_indexador=110))
    res = calcular_investimento(inv)
    d = resultado_to_dict(res)
    assert d["valor_bruto"] == round(res.valor_bruto, 2)
    assert d["valor_liquido"] == round(res.valor_liquido, 2)
    assert d["tipo_investimento"] == "CDB"
    # internamente nada é arredondado
    assert res.valor_bruto != d["valor_bruto"]

def test_dashboard_lca_versus_cdi():
    inv = _inv(ProductType.FixedIncomeLCA, ProductCharacteristics(garantia_fgc=True))
    res = calcular_investimento(inv)
    dash = montar_dashboard(inv, res, MERCADO)
    assert dash["rendimento"]["iof"] == 0.0
    assert dash["rendimento"]["imposto_renda"] == 0.0
    assert dash["rendimento"]["valor_liquido"] == dash["rendimento"]["valor_bruto"]
    assert dash["comparativo_mercado"]["versus_cdi"] == 0.0
    assert dash["comparativo_mercado"]["versus_ipca"] > 0
    assert dash["indicadores_mercado"] == {"selic": 13.0, "cdi": 13.0, "ipca": 4.0}
    assert dash["alertas"] == []
    assert dash["data_inicio"] == "2025-01-01"

def test_comparativo_poupanca():
    inv = _inv(ProductType.SavingsAccount, ProductCharacteristics(garantia_fgc=True))
    res = calcular_investimento(inv)
    # poupança não está entre os isentos: o IR deixa o líquido abaixo do bruto da poupança
    assert comparativo_mercado(res, MERCADO)["versus_poupanca"] < 0

def test_dashboard_sem_mercado():
    inv = _inv(ProductType.FixedIncomeCDB, ProductCharacteristics(garantia_fgc=True))
    dash = montar_dashboard(inv, calcular_investimento(inv))
    assert "comparativo_mercado" not in dash
    assert "indicadores_mercado" not in dash

def test_alertas():
    c = ProductCharacteristics(risco=5, liquidez=4, garantia_fgc=False, valor_minimo=50000.0)
    inv = _inv(ProductType.FixedIncomeCDB, c, fim=date(2025, 1, 11))
    msgs = alertas(inv, calcular_investimento(inv))
    assert len(msgs) == 5
    assert any("IOF" in m for m in msgs)
    assert any("FGC" in m for m in msgs)

def test_snapshot_from_dict():
    s = snapshot_from_dict({"cdi_aa": "13.15", "selic_aa": 13.25, "cdi_data": "01/01/2025"})
    assert s.cdi_aa == 13.15
    assert s.ipca_aa is None
    assert s.data_ref == "01/01/2025"
    with pytest.raises(ValueError):
        snapshot_from_dict({"selic_aa": 13.25})
