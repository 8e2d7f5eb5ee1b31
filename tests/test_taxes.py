from math import isclose
from finance.products import ProductType
from finance.taxes import (
    TabelaImpostos, isento_impostos, taxa_iof, calcular_iof, aliquota_ir_por_dias, calcular_ir
)

CDB = ProductType.FixedIncomeCDB

def test_aliquota_ir_regressiva():
    assert aliquota_ir_por_dias(90) == 0.225
    assert aliquota_ir_por_dias(200) == 0.20
    assert aliquota_ir_por_dias(500) == 0.175
    assert aliquota_ir_por_dias(1000) == 0.15

def test_aliquota_ir_transicoes_exatas():
    assert aliquota_ir_por_dias(180, CDB) == 0.225
    assert aliquota_ir_por_dias(181, CDB) == 0.20
    assert aliquota_ir_por_dias(360, CDB) == 0.20
    assert aliquota_ir_por_dias(361, CDB) == 0.175
    assert aliquota_ir_por_dias(720, CDB) == 0.175
    assert aliquota_ir_por_dias(721, CDB) == 0.15

def test_iof_regressivo():
    assert isclose(taxa_iof(0), 30 * 0.0033)
    assert taxa_iof(30) == 0
    assert taxa_iof(45) == 0
    aliquotas = [taxa_iof(d) for d in range(30)]
    assert all(a > b for a, b in zip(aliquotas, aliquotas[1:]))

def test_iof_so_sobre_lucro():
    assert isclose(calcular_iof(100.0, 10, CDB), 100.0 * 20 * 0.0033)
    assert calcular_iof(100.0, 30, CDB) == 0.0
    assert calcular_iof(-50.0, 5, CDB) == 0.0

def test_ir_sobre_lucro_liquido_de_iof():
    assert isclose(calcular_ir(80.0, 0.2, CDB), 16.0)
    assert calcular_ir(-5.0, 0.2, CDB) == 0.0

def test_lci_lca_isentos():
    for tipo in (ProductType.FixedIncomeLCI, ProductType.FixedIncomeLCA):
        assert isento_impostos(tipo)
        assert calcular_iof(100.0, 1, tipo) == 0.0
        assert aliquota_ir_por_dias(10, tipo) == 0.0
        assert calcular_ir(100.0, 0.225, tipo) == 0.0
    assert not isento_impostos(CDB)
    assert not isento_impostos(ProductType.SavingsAccount)

def test_tabela_customizada():
    tab = TabelaImpostos(faixas_ir=((90, 0.3),), ir_acima=0.1, iof_diario=0.01, janela_iof=10)
    assert aliquota_ir_por_dias(90, CDB, tab) == 0.3
    assert aliquota_ir_por_dias(91, CDB, tab) == 0.1
    assert isclose(taxa_iof(5, tab), 0.05)
    assert taxa_iof(10, tab) == 0
