"""
Exportação do estoque para CSV no mesmo formato aceito pela importação.

Não há aspas: vírgulas dentro dos campos são trocadas por espaço.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Union

from almoxarifado.domain.models import ItemEstoque
from almoxarifado.infra.logger import log_file_operation


CABECALHO = "SKU,NOME,DESCRICAO,LOCAL,QUANTIDADE"


def _campo(val) -> str:
    return str(val).replace(",", " ")


def exportar_csv(itens: Iterable[ItemEstoque]) -> str:
    linhas = [CABECALHO]
    for i in itens:
        valores = [i.sku, i.nome, i.descricao or "", i.local, str(i.quantidade)]
        linhas.append(",".join(_campo(v) for v in valores))
    return "\n".join(linhas)


def salvar_csv(itens: Iterable[ItemEstoque], path: Union[str, Path]) -> int:
    """Grava o CSV em UTF-8 e retorna o número de itens exportados."""
    itens = list(itens)
    Path(path).write_text(exportar_csv(itens), encoding="utf-8")
    log_file_operation("export", str(path), rows_processed=len(itens))
    return len(itens)
