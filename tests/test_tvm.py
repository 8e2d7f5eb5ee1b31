from math import isclose
from finance.tvm import aa_to_ad, compor_nominal, vf_compostos, taxa_implicita, acumulado_pct, pct

def test_aa_para_ad_recompoe_ano():
    ad = aa_to_ad(0.13)
    assert isclose((1 + ad) ** 365, 1.13, rel_tol=1e-12)

def test_composicao_fisher():
    assert isclose(compor_nominal(0.06, 0.045), 1.06 * 1.045 - 1, rel_tol=1e-12)

def test_vf_compostos_fracionario():
    assert vf_compostos(1000, 0.02, 12) == 1000 * ((1 + 0.02) ** 12)
    assert isclose(vf_compostos(1000, 0.01, 0.5), 1000 * 1.01 ** 0.5)

def test_taxa_implicita():
    i = taxa_implicita(1000, 1210, 2)
    assert isclose(i, 0.1, rel_tol=1e-12)
    assert taxa_implicita(1000, 1210, 0) == 0.0

def test_acumulado_pct_e_pct():
    assert isclose(acumulado_pct(0.13, 365), 13.0, rel_tol=1e-9)
    assert pct(13.0) == 0.13
