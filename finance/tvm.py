# finance/tvm.py
from __future__ import annotations

DIAS_ANO = 365
DIAS_MES = 30

def pct(x: float) -> float:
    """Percentual -> fração: 13.0 -> 0.13"""
    return x / 100.0

def aa_to_ad(i_aa: float) -> float:
    """Converte taxa efetiva ao ano para efetiva ao dia corrido: (1+i)^(1/365) - 1"""
    return (1.0 + i_aa) ** (1.0 / DIAS_ANO) - 1.0

def compor_nominal(taxa_real_aa: float, inflacao_aa: float) -> float:
    """
    Composição de Fisher: (1+real)*(1+inflação) - 1, tudo em fração anual.
    """
    return (1.0 + taxa_real_aa) * (1.0 + inflacao_aa) - 1.0

def vf_compostos(vp: float, i: float, n: float) -> float:
    """VF juros compostos: VP*(1+i)^n (n pode ser fracionário)"""
    return vp * ((1.0 + i) ** n)

def taxa_implicita(vp: float, vf: float, n: float) -> float:
    """Taxa por período que leva VP a VF em n períodos: (VF/VP)^(1/n) - 1"""
    if n <= 0 or vp <= 0 or vf <= 0:
        return 0.0
    return (vf / vp) ** (1.0 / n) - 1.0

def acumulado_pct(i_aa: float, dias: float) -> float:
    """Rentabilidade acumulada (%) de uma taxa anual (fração) em `dias` corridos."""
    return ((1.0 + i_aa) ** (dias / DIAS_ANO) - 1.0) * 100.0
