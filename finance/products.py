# finance/products.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Dict, Mapping, Tuple

import numpy as np

from .tvm import pct, aa_to_ad, compor_nominal, vf_compostos, DIAS_MES


class ProductType(Enum):
    """Produtos suportados. O valor é a etiqueta usada na persistência."""
    FixedIncomeCDB = "CDB"
    FixedIncomeLCI = "LCI"
    FixedIncomeLCA = "LCA"
    TreasuryFloating = "TESOURO_SELIC"
    TreasuryInflationLinked = "TESOURO_IPCA"
    TreasuryFixedRate = "TESOURO_PREFIXADO"
    SavingsAccount = "POUPANCA"
    FixedIncomeFund = "FUNDOS_RF"
    MultiStrategyFund = "FUNDOS_MULTI"
    Equities = "ACOES"
    RealEstateFund = "FII"

    @classmethod
    def from_tag(cls, tag: str) -> "ProductType":
        try:
            return cls(tag)
        except ValueError:
            pass
        try:
            return cls[tag]
        except KeyError:
            raise ValueError(f"Tipo de investimento desconhecido: {tag!r}") from None


# indexador natural de cada produto, quando o cadastro não informa
INDEXADOR_PADRAO = {
    ProductType.FixedIncomeCDB: "CDI",
    ProductType.FixedIncomeLCI: "CDI",
    ProductType.FixedIncomeLCA: "CDI",
    ProductType.TreasuryFloating: "SELIC",
    ProductType.TreasuryInflationLinked: "IPCA",
    ProductType.SavingsAccount: "SELIC",
}


@dataclass(frozen=True)
class ProductCharacteristics:
    """
    Características cadastradas do produto (percentuais em %, ex.: 110 = 110% do CDI).
    Campos opcionais ficam None; só o ramo de fórmula do produto os consulta.
    """
    rentabilidade_anual: Optional[float] = None   # % a.a. (prefixado, taxa real do IPCA+, fundos)
    indexador: Optional[str] = None               # CDI, SELIC, IPCA...
    percentual_indexador: Optional[float] = None  # % do indexador
    risco: int = 1                                # 1 (muito baixo) a 5 (muito alto)
    liquidez: int = 1                             # 1 (D+0) a 5 (acima de D+360)
    garantia_fgc: bool = False
    taxa_administracao: Optional[float] = None    # % a.a.
    taxa_performance: Optional[float] = None      # % sobre o que excede o benchmark
    valor_minimo: float = 0.0
    vencimento: Optional[date] = None

    @classmethod
    def from_dict(cls, d: Mapping) -> "ProductCharacteristics":
        """Monta a partir do registro JSON do produto (chaves do cadastro de bancos)."""
        risco = int(d.get("risco", 1))
        liquidez = int(d.get("liquidez", 1))
        for nome, v in (("risco", risco), ("liquidez", liquidez)):
            if not 1 <= v <= 5:
                raise ValueError(f"{nome} deve estar entre 1 e 5 (recebido {v}).")
        venc = d.get("vencimento")
        if isinstance(venc, str):
            venc = date.fromisoformat(venc[:10])
        def _opt(k):
            v = d.get(k)
            return None if v is None else float(v)
        return cls(
            rentabilidade_anual=_opt("rentabilidade_anual"),
            indexador=d.get("indexador"),
            percentual_indexador=_opt("percentual_indexador"),
            risco=risco,
            liquidez=liquidez,
            garantia_fgc=bool(d.get("garantia_fgc", False)),
            taxa_administracao=_opt("taxa_administracao"),
            taxa_performance=_opt("taxa_performance"),
            valor_minimo=float(d.get("valor_minimo", 0.0)),
            vencimento=venc,
        )

    def normalizar(self, tipo: ProductType) -> "CaracteristicasNormalizadas":
        # "|| 100" do cadastro: ausente (ou zero) vale 100% do indexador
        return CaracteristicasNormalizadas(
            rentabilidade_anual=self.rentabilidade_anual or 0.0,
            indexador=(self.indexador or INDEXADOR_PADRAO.get(tipo, "CDI")).upper(),
            percentual_indexador=self.percentual_indexador or 100.0,
            risco=self.risco,
            liquidez=self.liquidez,
            garantia_fgc=self.garantia_fgc,
            taxa_administracao=self.taxa_administracao or 0.0,
            taxa_performance=self.taxa_performance or 0.0,
            valor_minimo=self.valor_minimo,
        )


@dataclass(frozen=True)
class CaracteristicasNormalizadas:
    """Características com todos os padrões aplicados; é o que as fórmulas recebem."""
    rentabilidade_anual: float
    indexador: str
    percentual_indexador: float
    risco: int
    liquidez: int
    garantia_fgc: bool
    taxa_administracao: float
    taxa_performance: float
    valor_minimo: float


@dataclass(frozen=True)
class ParametrosProduto:
    inflacao_estimada_aa: float = 4.5      # % a.a., referência fixa p/ Tesouro IPCA+
    benchmark_fundos: float = 0.02         # fração do principal
    poupanca_limite_selic: float = 8.5     # % a.a.
    poupanca_am: float = 0.5               # % a.m. quando Selic > limite
    poupanca_fracao_selic: float = 0.70

PARAMETROS_PADRAO = ParametrosProduto()


# =========================
# Estratégias de rendimento
# =========================
class EstrategiaRendimento:
    """
    Uma fórmula por família de produto. `rendimento` devolve
    (valor bruto após custos do produto, custos descontados).
    """
    def rendimento(self, c: CaracteristicasNormalizadas, vp: float, dias: float,
                   taxa_ref_aa: float, params: ParametrosProduto) -> Tuple[float, float]:
        raise NotImplementedError


class CompostoReferencia(EstrategiaRendimento):
    """Capitalização diária pela taxa de referência, sem fórmula própria (ações, FII, padrão)."""
    def rendimento(self, c, vp, dias, taxa_ref_aa, params):
        return vf_compostos(vp, aa_to_ad(pct(taxa_ref_aa)), dias), 0.0


class PercentualIndexador(EstrategiaRendimento):
    """CDB/LCI/LCA e Tesouro Selic: taxa diária do indexador * % do indexador."""
    def rendimento(self, c, vp, dias, taxa_ref_aa, params):
        i_ad = aa_to_ad(pct(taxa_ref_aa)) * (c.percentual_indexador / 100.0)
        return vf_compostos(vp, i_ad, dias), 0.0


class TesouroIPCA(EstrategiaRendimento):
    """Taxa real + inflação estimada (constante de referência, não vem do mercado)."""
    def rendimento(self, c, vp, dias, taxa_ref_aa, params):
        nominal_aa = compor_nominal(pct(c.rentabilidade_anual), pct(params.inflacao_estimada_aa))
        return vf_compostos(vp, aa_to_ad(nominal_aa), dias), 0.0


class TesouroPrefixado(EstrategiaRendimento):
    def rendimento(self, c, vp, dias, taxa_ref_aa, params):
        return vf_compostos(vp, aa_to_ad(pct(c.rentabilidade_anual)), dias), 0.0


class Poupanca(EstrategiaRendimento):
    """
    Regra da poupança (TR considerada 0):
    - Selic > 8,5% a.a.: 0,5% a.m.
    - Selic <= 8,5% a.a.: 70% da Selic / 12 ao mês
    Capitalizada em meses de 30 dias (dias/30, fracionário).
    """
    def rendimento(self, c, vp, dias, taxa_ref_aa, params):
        if taxa_ref_aa > params.poupanca_limite_selic:
            i_am = pct(params.poupanca_am)
        else:
            i_am = pct(taxa_ref_aa * params.poupanca_fracao_selic) / 12.0
        return vf_compostos(vp, i_am, dias / DIAS_MES), 0.0


class Fundo(EstrategiaRendimento):
    """
    Fundos RF/multimercado: rentabilidade anual do fundo, menos
    - administração: (bruto - VP) * taxa_adm%
    - performance: só se o ganho % passar do benchmark, taxa_perf% * (ganho - VP*benchmark)
    Custos são anteriores ao IOF/IR.
    """
    def rendimento(self, c, vp, dias, taxa_ref_aa, params):
        bruto = vf_compostos(vp, aa_to_ad(pct(c.rentabilidade_anual)), dias)
        ganho = bruto - vp
        custo_adm = ganho * (c.taxa_administracao / 100.0)
        custo_perf = 0.0
        if ganho / vp > params.benchmark_fundos:
            custo_perf = (ganho - vp * params.benchmark_fundos) * (c.taxa_performance / 100.0)
        custos = custo_adm + custo_perf
        return bruto - custos, custos


ESTRATEGIA_PADRAO = CompostoReferencia()

ESTRATEGIAS: Dict[ProductType, EstrategiaRendimento] = {
    ProductType.FixedIncomeCDB: PercentualIndexador(),
    ProductType.FixedIncomeLCI: PercentualIndexador(),
    ProductType.FixedIncomeLCA: PercentualIndexador(),
    ProductType.TreasuryFloating: PercentualIndexador(),
    ProductType.TreasuryInflationLinked: TesouroIPCA(),
    ProductType.TreasuryFixedRate: TesouroPrefixado(),
    ProductType.SavingsAccount: Poupanca(),
    ProductType.FixedIncomeFund: Fundo(),
    ProductType.MultiStrategyFund: Fundo(),
    ProductType.Equities: ESTRATEGIA_PADRAO,
    ProductType.RealEstateFund: ESTRATEGIA_PADRAO,
}

def estrategia_para(tipo: ProductType) -> EstrategiaRendimento:
    return ESTRATEGIAS.get(tipo, ESTRATEGIA_PADRAO)

def _normalizadas(tipo, caracteristicas) -> CaracteristicasNormalizadas:
    if isinstance(caracteristicas, CaracteristicasNormalizadas):
        return caracteristicas
    return caracteristicas.normalizar(tipo)

def detalhar_valor_bruto(tipo: ProductType, caracteristicas, vp: float, dias: float, taxa_ref_aa: float,
                         params: ParametrosProduto = PARAMETROS_PADRAO) -> Tuple[float, float]:
    """Valor bruto acumulado e custos de administração/performance já descontados."""
    c = _normalizadas(tipo, caracteristicas)
    return estrategia_para(tipo).rendimento(c, vp, dias, taxa_ref_aa, params)

def calcular_valor_bruto(tipo: ProductType, caracteristicas, vp: float, dias: float, taxa_ref_aa: float,
                         params: ParametrosProduto = PARAMETROS_PADRAO) -> float:
    """
    Valor bruto acumulado de `vp` após `dias` corridos, com a taxa de referência
    `taxa_ref_aa` em % a.a. Determinística e sem efeitos colaterais.
    """
    return detalhar_valor_bruto(tipo, caracteristicas, vp, dias, taxa_ref_aa, params)[0]

def evolucao_bruta(tipo: ProductType, caracteristicas, vp: float, dias: int, taxa_ref_aa: float,
                   params: ParametrosProduto = PARAMETROS_PADRAO) -> np.ndarray:
    """Saldo bruto dia a dia (índice 0 = aplicação), para gráficos."""
    c = _normalizadas(tipo, caracteristicas)
    est = estrategia_para(tipo)
    return np.array([est.rendimento(c, vp, d, taxa_ref_aa, params)[0] for d in range(dias + 1)], dtype=float)
