# simulate.py
from __future__ import annotations
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Dict, Optional, Sequence, Union

import pandas as pd

from core.logger import get_logger
from finance.market import RateSnapshot
from finance.products import (
    ProductType, ProductCharacteristics, ParametrosProduto, detalhar_valor_bruto
)
from finance.taxes import (
    TabelaImpostos, isento_impostos, calcular_iof, aliquota_ir_por_dias, calcular_ir
)
from finance.tvm import DIAS_ANO, aa_to_ad, pct, taxa_implicita, vf_compostos

logger = get_logger("simulate")

Data = Union[date, datetime]


class ModoProjecao(Enum):
    VENCIMENTO = "vencimento"   # dias restantes = data_fim - hoje
    LITERAL = "literal"         # VP * (1 + taxa diária da referência)^dias_corridos


@dataclass(frozen=True)
class ParametrosCalculo:
    impostos: TabelaImpostos = field(default_factory=TabelaImpostos)
    produtos: ParametrosProduto = field(default_factory=ParametrosProduto)
    modo_projecao: ModoProjecao = ModoProjecao.VENCIMENTO


def dias_corridos(inicio: Data, fim: Data) -> int:
    """Dias corridos entre as datas, arredondando frações de dia para cima."""
    if isinstance(inicio, datetime) or isinstance(fim, datetime):
        ini = inicio if isinstance(inicio, datetime) else datetime.combine(inicio, datetime.min.time())
        fi = fim if isinstance(fim, datetime) else datetime.combine(fim, datetime.min.time())
        return math.ceil((fi - ini).total_seconds() / 86400.0)
    return (fim - inicio).days


def _como_data(d: Data) -> date:
    return d.date() if isinstance(d, datetime) else d


@dataclass(frozen=True)
class InvestmentInstance:
    """
    Uma aplicação: valor, datas e a taxa de referência (% a.a.) congelada na criação.
    Validação de entrada acontece aqui, antes de qualquer cálculo.
    """
    tipo: ProductType
    caracteristicas: ProductCharacteristics
    valor_investido: float
    data_inicio: Data
    data_fim: Data
    taxa_referencia: float
    nome: str = ""

    def __post_init__(self):
        if not self.valor_investido > 0:
            raise ValueError(f"Valor investido deve ser positivo (recebido {self.valor_investido}).")
        if not self.data_fim > self.data_inicio:
            raise ValueError("Data de fim deve ser posterior à data de início.")

    @property
    def dias(self) -> int:
        return dias_corridos(self.data_inicio, self.data_fim)

    @property
    def rotulo(self) -> str:
        return self.nome or self.tipo.value


@dataclass(frozen=True)
class ComputationResult:
    tipo: ProductType
    valor_investido: float
    dias_corridos: int
    valor_bruto: float
    iof: float
    imposto_renda: float
    valor_liquido: float
    percentual_rendimento: float     # % no período
    percentual_anualizado: float     # % a.a. (proporcional)
    valor_estimado: float            # projeção no vencimento; em "vencimento" coincide com valor_bruto, "hoje" só move valor_atual
    aliquota_ir: float = 0.0
    outras_taxas: float = 0.0        # administração + performance (fundos)
    valor_atual: float = 0.0
    dias_restantes: int = 0


def taxa_referencia_para(tipo: ProductType, caracteristicas: ProductCharacteristics, mercado: RateSnapshot) -> float:
    """Escolhe no snapshot a taxa (% a.a.) que indexa o produto."""
    if tipo in (ProductType.TreasuryFloating, ProductType.SavingsAccount):
        return mercado.selic_ou_cdi
    if (caracteristicas.indexador or "").upper() == "SELIC":
        return mercado.selic_ou_cdi
    return mercado.cdi_aa


def criar_investimento(tipo: ProductType, caracteristicas: ProductCharacteristics, valor_investido: float,
                       data_inicio: Data, data_fim: Data, mercado: RateSnapshot, nome: str = "") -> InvestmentInstance:
    return InvestmentInstance(
        tipo=tipo,
        caracteristicas=caracteristicas,
        valor_investido=valor_investido,
        data_inicio=data_inicio,
        data_fim=data_fim,
        taxa_referencia=taxa_referencia_para(tipo, caracteristicas, mercado),
        nome=nome,
    )


def calcular_rendimento(tipo: ProductType, caracteristicas: ProductCharacteristics, vp: float, dias: int,
                        taxa_ref_aa: float, params: Optional[ParametrosCalculo] = None,
                        dias_decorridos: int = 0) -> ComputationResult:
    """
    Bruto -> lucro -> IOF(lucro) -> IR(lucro - IOF) -> líquido = bruto - IOF - IR.
    A ordem das deduções é fixa.

    `dias_decorridos` é quanto do prazo já passou na data de referência ("hoje");
    serve só para o valor atual e a projeção.
    """
    if dias <= 0:
        raise ValueError(f"Prazo deve ter ao menos 1 dia (recebido {dias}).")
    params = params or ParametrosCalculo()

    valor_bruto, outras_taxas = detalhar_valor_bruto(
        tipo, caracteristicas, vp, dias, taxa_ref_aa, params.produtos
    )
    lucro = valor_bruto - vp

    if isento_impostos(tipo):
        iof = ir = aliquota = 0.0
    else:
        iof = calcular_iof(lucro, dias, tipo, params.impostos)
        aliquota = aliquota_ir_por_dias(dias, tipo, params.impostos)
        ir = calcular_ir(lucro - iof, aliquota, tipo)

    valor_liquido = valor_bruto - iof - ir
    percentual = (valor_liquido - vp) / vp * 100.0
    anualizado = percentual * DIAS_ANO / dias

    if params.modo_projecao is ModoProjecao.LITERAL:
        # "agora - agora" = 0 dias decorridos: projeta o prazo inteiro pela taxa de referência
        i_ad = aa_to_ad(pct(taxa_ref_aa))
        decorridos, restantes = 0, dias
    else:
        # taxa diária efetivamente obtida no produto
        i_ad = taxa_implicita(vp, valor_bruto, dias)
        decorridos = min(max(dias_decorridos, 0), dias)
        restantes = dias - decorridos
    valor_atual = vf_compostos(vp, i_ad, decorridos)
    valor_estimado = vf_compostos(valor_atual, i_ad, restantes)

    logger.debug("%s: %d dias, bruto=%.6f iof=%.6f ir=%.6f liquido=%.6f",
                 tipo.value, dias, valor_bruto, iof, ir, valor_liquido)
    return ComputationResult(
        tipo=tipo,
        valor_investido=vp,
        dias_corridos=dias,
        valor_bruto=valor_bruto,
        iof=iof,
        imposto_renda=ir,
        valor_liquido=valor_liquido,
        percentual_rendimento=percentual,
        percentual_anualizado=anualizado,
        valor_estimado=valor_estimado,
        aliquota_ir=aliquota,
        outras_taxas=outras_taxas,
        valor_atual=valor_atual,
        dias_restantes=restantes,
    )


def calcular_investimento(inv: InvestmentInstance, hoje: Optional[Data] = None,
                          params: Optional[ParametrosCalculo] = None) -> ComputationResult:
    """
    Calcula uma aplicação. Sem `hoje`, considera a data de início (momento da criação),
    o que mantém o resultado idêntico para entradas idênticas.
    """
    inicio = _como_data(inv.data_inicio)
    decorridos = 0 if hoje is None else (_como_data(hoje) - inicio).days
    return calcular_rendimento(inv.tipo, inv.caracteristicas, inv.valor_investido, inv.dias,
                               inv.taxa_referencia, params, dias_decorridos=decorridos)


def comparar_investimentos(investimentos: Sequence[InvestmentInstance], hoje: Optional[Data] = None,
                           params: Optional[ParametrosCalculo] = None, max_workers: int = 4) -> List[ComputationResult]:
    """
    Recalcula uma carteira em paralelo. Cada instância já carrega sua taxa congelada,
    então todo o lote enxerga o mesmo mercado. Resultados na ordem de entrada.
    """
    params = params or ParametrosCalculo()
    logger.info("Calculando %d investimento(s) com %d worker(s)", len(investimentos), max_workers)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(lambda inv: calcular_investimento(inv, hoje, params), investimentos))


def df_resultados(resultados: Sequence[ComputationResult], nomes: Optional[Sequence[str]] = None) -> pd.DataFrame:
    rows: List[Dict] = []
    for i, r in enumerate(resultados):
        rows.append({
            "Aplicação": nomes[i] if nomes else r.tipo.value,
            "Investido (R$)": r.valor_investido,
            "Dias": r.dias_corridos,
            "VF bruto (R$)": r.valor_bruto,
            "IOF (R$)": r.iof,
            "IR (R$)": r.imposto_renda,
            "VF líquido (R$)": r.valor_liquido,
            "Rend. período (%)": r.percentual_rendimento,
            "Rend. anualizado (%)": r.percentual_anualizado,
        })
    if not rows:
        return pd.DataFrame(rows)
    return pd.DataFrame(rows).sort_values("VF líquido (R$)", ascending=False).reset_index(drop=True)
