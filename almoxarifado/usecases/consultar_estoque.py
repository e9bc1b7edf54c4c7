# almoxarifado/usecases/consultar_estoque.py
"""
UC: Consultar e exportar o estoque.

- filtrar_itens(): busca, filtro de estoque baixo e ordenação
- run_listar(): lê o banco e aplica os filtros
- run_exportar(): grava o resultado filtrado em CSV
"""
from __future__ import annotations

from typing import Any, Dict, List

from almoxarifado.config import DB_PATH
from almoxarifado.adapters.exportador import salvar_csv
from almoxarifado.domain.models import ItemEstoque
from almoxarifado.infra.migrations import apply_migrations
from almoxarifado.infra.repositories import EstoqueRepo
from almoxarifado.infra.logger import log_system_event, log_transaction


CAMPOS_ORDENACAO = ("sku", "nome", "local", "quantidade")


def filtrar_itens(
    itens: List[ItemEstoque],
    busca: str = "",
    estoque_baixo: int = 0,
    ordenar_por: str = "nome",
    descendente: bool = False,
) -> List[ItemEstoque]:
    """Filtra e ordena itens como a tela de estoque.

    Args:
        busca: Trecho procurado (sem distinção de maiúsculas) em sku, nome e local.
        estoque_baixo: Se > 0, mantém apenas itens com quantidade <= valor.
        ordenar_por: sku | nome | local | quantidade.
        descendente: Inverte a ordem.
    """
    if ordenar_por not in CAMPOS_ORDENACAO:
        raise ValueError(f"Campo de ordenação inválido: {ordenar_por}")

    termo = (busca or "").lower()
    out = [
        i for i in itens
        if termo in i.sku.lower() or termo in i.nome.lower() or termo in i.local.lower()
    ]
    if estoque_baixo and estoque_baixo > 0:
        out = [i for i in out if i.quantidade <= estoque_baixo]

    if ordenar_por == "quantidade":
        chave = lambda i: i.quantidade  # noqa: E731
    else:
        chave = lambda i: str(getattr(i, ordenar_por)).lower()  # noqa: E731
    return sorted(out, key=chave, reverse=descendente)


def run_listar(
    db_path: str = DB_PATH,
    busca: str = "",
    estoque_baixo: int = 0,
    ordenar_por: str = "nome",
    descendente: bool = False,
) -> List[ItemEstoque]:
    apply_migrations(db_path)
    itens = EstoqueRepo(db_path).listar_todos()
    return filtrar_itens(itens, busca, estoque_baixo, ordenar_por, descendente)


def run_exportar(destino: str, db_path: str = DB_PATH, **filtros: Any) -> Dict[str, Any]:
    """Exporta o estoque (completo ou filtrado) para `destino`."""
    log_system_event("exportacao_start", {"destino": destino, "filtros": filtros})
    try:
        itens = run_listar(db_path=db_path, **filtros)
        n = salvar_csv(itens, destino)
        out = {"arquivo": destino, "itens_exportados": n, "filtrado": bool(filtros.get("busca") or filtros.get("estoque_baixo"))}
        log_transaction("exportacao", {"destino": destino}, result=out)
        return out
    except Exception as e:
        log_transaction("exportacao", {"destino": destino}, error=str(e))
        raise
