# report/dashboard.py
from __future__ import annotations
from datetime import date, datetime
from typing import Dict, List, Optional

from finance.market import RateSnapshot
from finance.products import ProductType, ProductCharacteristics, calcular_valor_bruto
from finance.tvm import acumulado_pct, pct
from simulate import ComputationResult, InvestmentInstance, ParametrosCalculo

CAMPOS_MOEDA = ("valor_investido", "valor_bruto", "iof", "imposto_renda", "valor_liquido",
                "valor_estimado", "outras_taxas", "valor_atual")

def r2(x: float) -> float:
    """Arredondamento a 2 casas; só na saída, nunca nos cálculos."""
    return round(x, 2)

def resultado_to_dict(res: ComputationResult) -> Dict:
    """Registro serializável do resultado, com valores monetários em 2 casas."""
    out = {
        "tipo_investimento": res.tipo.value,
        "dias_corridos": res.dias_corridos,
        "dias_restantes": res.dias_restantes,
        "aliquota_ir": res.aliquota_ir,
        "percentual_rendimento": r2(res.percentual_rendimento),
        "percentual_anualizado": r2(res.percentual_anualizado),
    }
    for campo in CAMPOS_MOEDA:
        out[campo] = r2(getattr(res, campo))
    return out

def comparativo_mercado(res: ComputationResult, mercado: RateSnapshot,
                        params: Optional[ParametrosCalculo] = None) -> Dict[str, float]:
    """
    Diferença, em pontos percentuais, entre o rendimento líquido do período e:
    poupança, 100% do CDI (bruto) e o IPCA acumulado nos mesmos dias.
    """
    params = params or ParametrosCalculo()
    dias = res.dias_corridos
    vf_poup = calcular_valor_bruto(ProductType.SavingsAccount, ProductCharacteristics(), 100.0, dias,
                                   mercado.selic_ou_cdi, params.produtos)
    ipca = mercado.ipca_aa if mercado.ipca_aa is not None else params.produtos.inflacao_estimada_aa
    return {
        "versus_poupanca": r2(res.percentual_rendimento - (vf_poup - 100.0)),
        "versus_cdi": r2(res.percentual_rendimento - acumulado_pct(pct(mercado.cdi_aa), dias)),
        "versus_ipca": r2(res.percentual_rendimento - acumulado_pct(pct(ipca), dias)),
    }

def alertas(inv: InvestmentInstance, res: ComputationResult, params: Optional[ParametrosCalculo] = None) -> List[str]:
    params = params or ParametrosCalculo()
    c = inv.caracteristicas
    out = []
    if res.iof > 0:
        out.append(f"Resgate antes de {params.impostos.janela_iof} dias: incide IOF sobre o rendimento.")
    if not c.garantia_fgc:
        out.append("Produto sem garantia do FGC.")
    if c.risco >= 4:
        out.append(f"Risco elevado ({c.risco}/5).")
    if c.liquidez >= 4:
        out.append(f"Baixa liquidez ({c.liquidez}/5).")
    if c.valor_minimo and inv.valor_investido < c.valor_minimo:
        out.append(f"Valor investido abaixo do mínimo do produto (R$ {c.valor_minimo:,.2f}).")
    return out

def _iso(d) -> str:
    return d.isoformat() if isinstance(d, (date, datetime)) else str(d)

def montar_dashboard(inv: InvestmentInstance, res: ComputationResult, mercado: Optional[RateSnapshot] = None,
                     params: Optional[ParametrosCalculo] = None) -> Dict:
    """
    Registro entregue à persistência/relatórios. Taxas de mercado opcionais:
    sem snapshot, indicadores e comparativo ficam de fora.
    """
    out = {
        "nome": inv.rotulo,
        "tipo_investimento": inv.tipo.value,
        "valor_investido": r2(inv.valor_investido),
        "data_inicio": _iso(inv.data_inicio),
        "data_fim": _iso(inv.data_fim),
        "dias_corridos": res.dias_corridos,
        "rendimento": {
            "valor_bruto": r2(res.valor_bruto),
            "valor_liquido": r2(res.valor_liquido),
            "rentabilidade_periodo": r2(res.percentual_rendimento),
            "rentabilidade_anualizada": r2(res.percentual_anualizado),
            "imposto_renda": r2(res.imposto_renda),
            "iof": r2(res.iof),
            "outras_taxas": r2(res.outras_taxas),
        },
        "valor_atual": r2(res.valor_atual),
        "valor_projetado": r2(res.valor_estimado),
        "alertas": alertas(inv, res, params),
    }
    if mercado is not None:
        out["indicadores_mercado"] = mercado.indicadores()
        out["comparativo_mercado"] = comparativo_mercado(res, mercado, params)
    return out
