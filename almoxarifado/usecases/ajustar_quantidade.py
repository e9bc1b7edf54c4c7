# almoxarifado/usecases/ajustar_quantidade.py
"""
UC: Ajuste manual de quantidade (+1 / -1).

O ajuste é um plano `definir` de uma linha só, aplicado pelo mesmo
caminho da importação.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from almoxarifado.config import DB_PATH
from almoxarifado.domain.erros import ItemNaoEncontradoError
from almoxarifado.domain.models import ItemEstoque
from almoxarifado.domain.reconciliacao import plano_ajuste
from almoxarifado.infra.migrations import apply_migrations
from almoxarifado.infra.repositories import EstoqueRepo
from almoxarifado.infra.logger import log_transaction, log_importacao, log_system_event
from almoxarifado.usecases.importar_estoque import aplicar_plano


Confirmacao = Callable[[ItemEstoque, int], bool]


def run_ajuste(
    sku: str,
    delta: int,
    db_path: str = DB_PATH,
    confirmar: Optional[Confirmacao] = None,
) -> Dict[str, Any]:
    """Soma `delta` à quantidade do SKU (mínimo 0).

    Args:
        sku: SKU existente no estoque.
        delta: Variação, normalmente +1 ou -1.
        db_path: Caminho do SQLite.
        confirmar: Callback opcional chamado com (item, nova_quantidade);
            se retornar False nada é gravado.
    """
    log_system_event("ajuste_start", {"sku": sku, "delta": delta})
    try:
        apply_migrations(db_path)
        repo = EstoqueRepo(db_path)
        # o snapshot completo é o mesmo que a tela de estoque exibe
        item = next((i for i in repo.listar_todos() if i.sku == sku), None)
        if item is None:
            raise ItemNaoEncontradoError(sku)

        plano = plano_ajuste(item, delta)
        nova = plano.payload()[0].quantidade
        out: Dict[str, Any] = {
            "sku": sku,
            "quantidade_anterior": item.quantidade,
            "quantidade_nova": nova,
            "sucesso": False,
            "cancelado": False,
        }

        if confirmar is not None and not confirmar(item, nova):
            out["cancelado"] = True
            log_system_event("ajuste_cancelado", {"sku": sku})
            return out

        res = aplicar_plano(plano, repo)
        out["sucesso"] = res.sucesso
        log_importacao("ajuste", plano.estrategia.value, sku, nova, anterior=item.quantidade)
        log_transaction("ajuste", {"sku": sku, "delta": delta}, result=out)
        return out

    except Exception as e:
        log_transaction("ajuste", {"sku": sku, "delta": delta}, error=str(e))
        log_system_event("ajuste_error", {"sku": sku, "error": str(e)}, level="error")
        raise
