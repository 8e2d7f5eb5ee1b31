"""Configuração em YAML: parâmetros de impostos, produtos e projeção."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml

from finance.products import ParametrosProduto
from finance.taxes import TabelaImpostos
from simulate import ModoProjecao, ParametrosCalculo

_SENTINEL = object()


def load_config(path: str) -> dict:
    """Carrega o YAML. FileNotFoundError se o arquivo não existir."""
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Arquivo de configuração não encontrado: {path}")
    with open(file_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_setting(config: dict, key: str, default: Any = _SENTINEL) -> Any:
    """Acesso com notação de ponto: 'impostos.iof_diario'.

    Args:
        config: dicionário carregado.
        key: caminho separado por pontos.
        default: valor se a chave faltar. Sem default, levanta KeyError.
    """
    parts = key.split(".")
    current = config
    for part in parts:
        if isinstance(current, dict) and part in current:
            current = current[part]
        elif default is not _SENTINEL:
            return default
        else:
            raise KeyError(f"Chave de configuração não encontrada: {key}")
    return current


def parametros_from_config(config: dict) -> ParametrosCalculo:
    tab, prod = TabelaImpostos(), ParametrosProduto()
    faixas = get_setting(config, "impostos.faixas_ir", default=None)
    if faixas is not None:
        faixas = tuple(sorted((int(f["ate_dias"]), float(f["aliquota"])) for f in faixas))
    tabela = TabelaImpostos(
        faixas_ir=faixas or tab.faixas_ir,
        ir_acima=float(get_setting(config, "impostos.ir_acima", tab.ir_acima)),
        iof_diario=float(get_setting(config, "impostos.iof_diario", tab.iof_diario)),
        janela_iof=int(get_setting(config, "impostos.janela_iof", tab.janela_iof)),
    )
    produtos = ParametrosProduto(
        inflacao_estimada_aa=float(get_setting(config, "produtos.inflacao_estimada_aa", prod.inflacao_estimada_aa)),
        benchmark_fundos=float(get_setting(config, "produtos.benchmark_fundos", prod.benchmark_fundos)),
        poupanca_limite_selic=float(get_setting(config, "produtos.poupanca.limite_selic", prod.poupanca_limite_selic)),
        poupanca_am=float(get_setting(config, "produtos.poupanca.taxa_am", prod.poupanca_am)),
        poupanca_fracao_selic=float(get_setting(config, "produtos.poupanca.fracao_selic", prod.poupanca_fracao_selic)),
    )
    modo = ModoProjecao(get_setting(config, "projecao.modo", ModoProjecao.VENCIMENTO.value))
    return ParametrosCalculo(impostos=tabela, produtos=produtos, modo_projecao=modo)


def carregar_parametros(path: Optional[str] = None) -> ParametrosCalculo:
    """Parâmetros do motor de cálculo; sem caminho, os padrões embutidos."""
    if path is None:
        return ParametrosCalculo()
    return parametros_from_config(load_config(path))
