# finance/taxes.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from .products import ProductType

# LCI e LCA: isentas de IOF e de IR para pessoa física
PRODUTOS_ISENTOS = frozenset({ProductType.FixedIncomeLCI, ProductType.FixedIncomeLCA})

@dataclass(frozen=True)
class TabelaImpostos:
    """
    Tabela regressiva (Lei 11.033/2004, art. 1º; IN RFB 1.585/2015):
    - até 180 dias: 22,5%
    - 181 a 360:    20,0%
    - 361 a 720:    17,5%
    - acima de 720: 15,0%
    IOF (Decreto 6.306/2007) aproximado linearmente: 0,33% por dia que falta para 30.
    Alíquotas em fração. Bancos com tabela própria sobrescrevem as faixas.
    """
    faixas_ir: Tuple[Tuple[int, float], ...] = ((180, 0.225), (360, 0.20), (720, 0.175))
    ir_acima: float = 0.15
    iof_diario: float = 0.0033
    janela_iof: int = 30

TABELA_PADRAO = TabelaImpostos()

def isento_impostos(tipo: ProductType) -> bool:
    return tipo in PRODUTOS_ISENTOS

def taxa_iof(dias: int, tabela: TabelaImpostos = TABELA_PADRAO) -> float:
    """Alíquota regressiva de IOF: zero a partir do fim da janela."""
    return max(0, tabela.janela_iof - dias) * tabela.iof_diario

def calcular_iof(lucro: float, dias: int, tipo: ProductType, tabela: TabelaImpostos = TABELA_PADRAO) -> float:
    """IOF incide só sobre o rendimento (nunca sobre o principal)."""
    if isento_impostos(tipo):
        return 0.0
    return max(lucro, 0.0) * taxa_iof(dias, tabela)

def aliquota_ir_por_dias(dias: int, tipo: Optional[ProductType] = None, tabela: TabelaImpostos = TABELA_PADRAO) -> float:
    """
    Alíquota de IR pelo prazo total da aplicação. Retorna fração (ex.: 0.225).
    Produtos isentos retornam 0 antes de qualquer faixa.
    """
    if tipo is not None and isento_impostos(tipo):
        return 0.0
    for limite, aliquota in tabela.faixas_ir:
        if dias <= limite:
            return aliquota
    return tabela.ir_acima

def calcular_ir(lucro_liquido_iof: float, aliquota: float, tipo: ProductType) -> float:
    """IR sobre o rendimento já descontado o IOF."""
    if isento_impostos(tipo):
        return 0.0
    return max(lucro_liquido_iof, 0.0) * aliquota
