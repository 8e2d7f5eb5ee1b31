# finance/market.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Mapping

@dataclass(frozen=True)
class RateSnapshot:
    """
    Fotografia das taxas de referência num instante (tudo em % a.a., exceto TR em % a.m.).
    Fornecida por quem coleta o mercado; o motor de cálculo apenas lê.
    """
    cdi_aa: float
    selic_aa: Optional[float] = None
    ipca_aa: Optional[float] = None
    tr_am: float = 0.0
    data_ref: str = ""
    fetch_time: str = ""

    @property
    def selic_ou_cdi(self) -> float:
        # Selic e CDI andam juntos; na falta da Selic usa-se o CDI
        return self.cdi_aa if self.selic_aa is None else self.selic_aa

    def indicadores(self) -> dict:
        return {"selic": self.selic_ou_cdi, "cdi": self.cdi_aa, "ipca": self.ipca_aa}

def snapshot_from_dict(market: Mapping) -> RateSnapshot:
    """
    Aceita o dicionário de mercado usado pelos relatórios (chaves cdi_aa, selic_aa,
    ipca_aa, tr_am, cdi_data, fetch_time), com taxas em %.
    """
    if "cdi_aa" not in market:
        raise ValueError("Snapshot de mercado sem CDI (cdi_aa).")
    def _opt(k):
        v = market.get(k)
        return None if v is None else float(v)
    return RateSnapshot(
        cdi_aa=float(market["cdi_aa"]),
        selic_aa=_opt("selic_aa"),
        ipca_aa=_opt("ipca_aa"),
        tr_am=float(market.get("tr_am") or 0.0),
        data_ref=str(market.get("cdi_data", "")),
        fetch_time=str(market.get("fetch_time", "")),
    )
