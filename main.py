# main.py
from __future__ import annotations
import os
from datetime import date, timedelta

from core.config import carregar_parametros
from core.logger import get_logger
from finance.market import RateSnapshot
from finance.products import ProductType, ProductCharacteristics
from report.dashboard import montar_dashboard
from report.report import montar_series, gerar_relatorios
from simulate import criar_investimento, calcular_investimento, comparar_investimentos, df_resultados

logger = get_logger("main")

CONFIG_PATH = os.getenv("CALCULADORA_CONFIG", "config.yaml")


# =========================
# Helpers de entrada
# =========================
def _input_float(msg: str, default: float) -> float:
    raw = input(f"{msg} [{default}]: ").strip()
    return float(raw.replace(",", ".") or default)

def _input_int(msg: str, default: int) -> int:
    raw = input(f"{msg} [{default}]: ").strip()
    return int(raw or default)

def _input_tipo(default: ProductType = ProductType.FixedIncomeCDB) -> ProductType:
    print("Tipos: " + ", ".join(t.value for t in ProductType))
    raw = input(f"Tipo de investimento [{default.value}]: ").strip().upper()
    return ProductType.from_tag(raw) if raw else default

def _input_mercado() -> RateSnapshot:
    print("\n-- Taxas de referência (% a.a.) --")
    cdi = _input_float("CDI", 13.0)
    selic = _input_float("Selic", cdi)
    ipca = _input_float("IPCA 12m", 4.5)
    return RateSnapshot(cdi_aa=cdi, selic_aa=selic, ipca_aa=ipca, data_ref=date.today().strftime("%d/%m/%Y"))

def _input_caracteristicas(tipo: ProductType) -> ProductCharacteristics:
    d = {}
    if tipo in (ProductType.FixedIncomeCDB, ProductType.FixedIncomeLCI, ProductType.FixedIncomeLCA,
                ProductType.TreasuryFloating):
        d["percentual_indexador"] = _input_float("% do indexador", 100.0)
    if tipo in (ProductType.TreasuryInflationLinked, ProductType.TreasuryFixedRate,
                ProductType.FixedIncomeFund, ProductType.MultiStrategyFund):
        d["rentabilidade_anual"] = _input_float("Rentabilidade anual (% a.a.; real no IPCA+)", 12.0)
    if tipo in (ProductType.FixedIncomeFund, ProductType.MultiStrategyFund):
        d["taxa_administracao"] = _input_float("Taxa de administração (%)", 1.0)
        d["taxa_performance"] = _input_float("Taxa de performance (%)", 20.0)
    d["garantia_fgc"] = tipo in (ProductType.FixedIncomeCDB, ProductType.FixedIncomeLCI,
                                 ProductType.FixedIncomeLCA, ProductType.SavingsAccount)
    return ProductCharacteristics.from_dict(d)


# =========================
# Menu
# =========================
def menu():
    print("\n=== Calculadora de Investimentos (IOF + IR regressivo + projeção) ===")
    print("1) Calcular um investimento")
    print("2) Comparar CDB x LCI x Tesouro Selic x Poupança x Prefixado x IPCA+")
    print("3) Relatório da comparação (CSV + PNG + PDF)")
    print("0) Sair")


def _comparacao(params):
    vp = _input_float("Valor inicial (VP)", 10000.0)
    dias = _input_int("Prazo (dias corridos)", 365)
    percentual_cdi = _input_float("CDB/LCI: % do CDI", 100.0)
    taxa_prefixada = _input_float("Tesouro Prefixado: taxa (% a.a.)", 12.0)
    taxa_real = _input_float("Tesouro IPCA+: taxa real (% a.a.)", 6.0)
    mercado = _input_mercado()

    inicio = date.today()
    fim = inicio + timedelta(days=dias)
    pc = {"percentual_indexador": percentual_cdi, "garantia_fgc": True}
    produtos = [
        ("CDB (% CDI)", ProductType.FixedIncomeCDB, pc),
        ("LCI (% CDI)", ProductType.FixedIncomeLCI, pc),
        ("Tesouro Selic", ProductType.TreasuryFloating, {}),
        ("Poupança", ProductType.SavingsAccount, {"garantia_fgc": True}),
        ("Tesouro Prefixado", ProductType.TreasuryFixedRate, {"rentabilidade_anual": taxa_prefixada}),
        ("Tesouro IPCA+", ProductType.TreasuryInflationLinked, {"rentabilidade_anual": taxa_real}),
    ]
    invs = [criar_investimento(t, ProductCharacteristics.from_dict(d), vp, inicio, fim, mercado, nome=n)
            for n, t, d in produtos]
    resultados = comparar_investimentos(invs, params=params)
    return invs, resultados, mercado


# =========================
# Ações do menu
# =========================
def acao_calcular(params):
    print("\n-- Investimento --")
    tipo = _input_tipo()
    caracteristicas = _input_caracteristicas(tipo)
    vp = _input_float("Valor investido", 10000.0)
    dias = _input_int("Prazo (dias corridos)", 365)
    mercado = _input_mercado()

    inicio = date.today()
    inv = criar_investimento(tipo, caracteristicas, vp, inicio, inicio + timedelta(days=dias), mercado)
    res = calcular_investimento(inv, params=params)
    dash = montar_dashboard(inv, res, mercado, params)

    r = dash["rendimento"]
    print(f"\nBruto=R$ {r['valor_bruto']:,.2f} | IOF=R$ {r['iof']:,.2f} | IR=R$ {r['imposto_renda']:,.2f}"
          f" | Líquido=R$ {r['valor_liquido']:,.2f}")
    print(f"Rentabilidade: {r['rentabilidade_periodo']:.2f}% no período | {r['rentabilidade_anualizada']:.2f}% a.a.")
    for k, v in dash["comparativo_mercado"].items():
        print(f"- {k}: {v:+.2f} p.p.")
    for a in dash["alertas"]:
        print(f"! {a}")


def acao_comparar(params):
    print("\n-- Comparação --")
    invs, resultados, _ = _comparacao(params)
    df = df_resultados(resultados, [i.rotulo for i in invs])
    print()
    print(df.to_string(index=False, float_format=lambda v: f"{v:,.2f}"))


def acao_relatorio(params):
    print("\n-- Relatório --")
    invs, resultados, mercado = _comparacao(params)
    series = montar_series(invs, resultados, params)
    paths = gerar_relatorios("saida_relatorio", series, mercado)

    print("\nArquivos gerados:")
    print(f"• CSV:  {paths['csv']}")
    print(f"• PNG:  {paths['png']}")
    print(f"• PDF:  {paths['pdf']}")


# =========================
# Loop principal
# =========================
def main():
    params = carregar_parametros(CONFIG_PATH if os.path.exists(CONFIG_PATH) else None)
    logger.info("Parâmetros carregados (projeção: %s)", params.modo_projecao.value)
    acoes = {"1": acao_calcular, "2": acao_comparar, "3": acao_relatorio}
    while True:
        menu()
        op = input("Escolha: ").strip()
        if op == "0":
            print("Até mais!")
            break
        acao = acoes.get(op)
        if acao is None:
            print("Opção inválida.")
            continue
        try:
            acao(params)
        except ValueError as e:
            print(f"Entrada inválida: {e}")


if __name__ == "__main__":
    main()
