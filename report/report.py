# report/report.py
from __future__ import annotations
import csv, os
from datetime import datetime
from typing import List, Dict, Optional, Sequence

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from reportlab.lib.units import cm
from reportlab.lib.utils import ImageReader

from core.logger import get_logger
from finance.market import RateSnapshot
from finance.products import evolucao_bruta
from simulate import ComputationResult, InvestmentInstance, ParametrosCalculo

logger = get_logger("report")

def montar_series(investimentos: Sequence[InvestmentInstance], resultados: Sequence[ComputationResult],
                  params: Optional[ParametrosCalculo] = None) -> List[Dict]:
    """Junta instância + resultado num dicionário por aplicação, com a curva bruta diária."""
    params = params or ParametrosCalculo()
    series = []
    for inv, res in zip(investimentos, resultados):
        evol = evolucao_bruta(inv.tipo, inv.caracteristicas, inv.valor_investido, res.dias_corridos,
                              inv.taxa_referencia, params.produtos)
        series.append({
            "nome": inv.rotulo,
            "evolucao": evol.tolist(),
            "total_investido": res.valor_investido,
            "dias": res.dias_corridos,
            "vf_bruto": res.valor_bruto,
            "iof": res.iof,
            "ir_pago": res.imposto_renda,
            "vf_liquido": res.valor_liquido,
            "rend_pct": res.percentual_rendimento,
            "rend_aa_pct": res.percentual_anualizado,
        })
    return series

def salvar_csv(csv_path: str, series: List[Dict]) -> None:
    max_len = max(len(s["evolucao"]) for s in series)
    header = ["Dia"] + [f"{s['nome']} (bruto)" for s in series]
    rows = []
    for dia in range(max_len):
        row = [dia]
        for s in series:
            row.append(round(s["evolucao"][dia], 2) if dia < len(s["evolucao"]) else "")
        rows.append(row)
    with open(csv_path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f, delimiter=";")
        w.writerow(header); w.writerows(rows)

def grafico_png(png_path: str, series: List[Dict]) -> None:
    plt.figure()
    for s in series:
        plt.plot(s["evolucao"], label=f"{s['nome']} (bruto)")
    plt.title("Evolução (dia a dia) – valores brutos antes de IOF/IR")
    plt.xlabel("Dias corridos"); plt.ylabel("Saldo (R$)")
    plt.legend(); plt.tight_layout(); plt.savefig(png_path, dpi=150); plt.close()

def pdf_relatorio(pdf_path: str, series: List[Dict], png_path: str, market: Optional[RateSnapshot] = None) -> None:
    """
    Gera PDF simples com sumário e o gráfico.
    """
    c = canvas.Canvas(pdf_path, pagesize=A4)
    w, h = A4
    x, y = 2*cm, h - 2*cm

    def draw_line(txt: str, dy=0.6*cm, bold=False):
        nonlocal y
        y -= dy
        if bold:
            c.setFont("Helvetica-Bold", 11)
        else:
            c.setFont("Helvetica", 10)
        c.drawString(x, y, txt)

    c.setFont("Helvetica-Bold", 14)
    c.drawString(x, y, "Relatório – Comparativo de Investimentos")
    c.setFont("Helvetica", 9)
    c.drawRightString(w-2*cm, y, datetime.now().strftime("%d/%m/%Y %H:%M:%S"))

    if market is not None:
        draw_line("Taxas de referência:", dy=1.0*cm, bold=True)
        draw_line(f"CDI (a.a.): {market.cdi_aa:.4f}%  (ref. {market.data_ref or '-'})")
        draw_line(f"Selic (a.a.): {market.selic_ou_cdi:.4f}%")
        if market.ipca_aa is not None:
            draw_line(f"IPCA 12m (a.a.): {market.ipca_aa:.4f}%")

    draw_line("Resultados (IOF + IR no resgate):", dy=0.8*cm, bold=True)
    c.setFont("Helvetica-Bold", 9)
    y -= 0.5*cm
    c.drawString(x, y, "Aplicação")
    c.drawRightString(x+6*cm, y, "Investido")
    c.drawRightString(x+9*cm, y, "VF Bruto")
    c.drawRightString(x+11.5*cm, y, "IOF")
    c.drawRightString(x+14*cm, y, "IR")
    c.drawRightString(w-2*cm, y, "VF Líquido")

    c.setFont("Helvetica", 9)
    for s in sorted(series, key=lambda k: k["vf_liquido"], reverse=True):
        y -= 0.5*cm
        if y < 6*cm:
            c.showPage()
            c.setFont("Helvetica", 9)
            y = h - 2*cm
        c.drawString(x, y, f"{s['nome']} ({s['dias']}d)")
        c.drawRightString(x+6*cm, y, f"R$ {s['total_investido']:,.2f}")
        c.drawRightString(x+9*cm, y, f"R$ {s['vf_bruto']:,.2f}")
        c.drawRightString(x+11.5*cm, y, f"R$ {s['iof']:,.2f}")
        c.drawRightString(x+14*cm, y, f"R$ {s['ir_pago']:,.2f}")
        c.drawRightString(w-2*cm, y, f"R$ {s['vf_liquido']:,.2f}")

    if os.path.exists(png_path):
        c.showPage()
        c.setFont("Helvetica-Bold", 12)
        c.drawString(2*cm, h - 2*cm, "Gráfico – Evolução (bruto)")
        img = ImageReader(png_path)
        img_w = 17*cm
        c.drawImage(img, 2*cm, h - 2*cm - 12*cm, width=img_w, height=12*cm, preserveAspectRatio=True, anchor='n')

    c.save()

def gerar_relatorios(outdir: str, series: List[Dict], market: Optional[RateSnapshot] = None) -> Dict[str, str]:
    """CSV + PNG + PDF num diretório; devolve os caminhos gerados."""
    os.makedirs(outdir, exist_ok=True)
    base = datetime.now().strftime("%Y%m%d_%H%M%S")
    paths = {
        "csv": os.path.join(outdir, f"evolucao_{base}.csv"),
        "png": os.path.join(outdir, f"grafico_{base}.png"),
        "pdf": os.path.join(outdir, f"relatorio_{base}.pdf"),
    }
    salvar_csv(paths["csv"], series)
    grafico_png(paths["png"], series)
    pdf_relatorio(paths["pdf"], series, paths["png"], market)
    logger.info("Relatórios gerados em %s", outdir)
    return paths
