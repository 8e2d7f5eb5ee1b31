import os
from datetime import date
from finance.market import RateSnapshot
from finance.products import ProductType, ProductCharacteristics
from report.report import montar_series, gerar_relatorios
from simulate import criar_investimento, comparar_investimentos

def test_relatorios_arquivos(tmp_path):
    mercado = RateSnapshot(cdi_aa=12.0, selic_aa=12.0, ipca_aa=4.0, data_ref="01/01/2025")
    invs = [
        criar_investimento(ProductType.FixedIncomeCDB, ProductCharacteristics(percentual_indexador=110),
                           1000.0, date(2025, 1, 1), date(2025, 3, 1), mercado, nome="CDB"),
        criar_investimento(ProductType.SavingsAccount, ProductCharacteristics(),
                           1000.0, date(2025, 1, 1), date(2025, 2, 1), mercado, nome="Poupança"),
    ]
    series = montar_series(invs, comparar_investimentos(invs))
    assert len(series[0]["evolucao"]) == 60
    assert len(series[1]["evolucao"]) == 32
    paths = gerar_relatorios(str(tmp_path), series, mercado)
    for p in paths.values():
        assert os.path.exists(p) and os.path.getsize(p) > 0
    with open(paths["csv"], encoding="utf-8") as f:
        header = f.readline().strip()
    assert header == "Dia;CDB (bruto);Poupança (bruto)"
