# almoxarifado/usecases/importar_estoque.py
"""
UC: Importar ESTOQUE a partir de CSV.

Pipeline: arquivo -> parser -> plano (contra o snapshot atual) -> gravação.

Obs.:
- O plano é calculado por inteiro antes de qualquer escrita.
- As contagens criados/modificados vêm do snapshot anterior ao lote e são
  uma estimativa para o operador, não um retorno do banco.
- `substituir` apaga e reinsere dentro de uma única transação.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

from almoxarifado.config import DB_PATH
from almoxarifado.adapters.parsers import ler_arquivo_csv, parse_csv_detalhado
from almoxarifado.domain.erros import ArquivoInvalidoError
from almoxarifado.domain.models import (
    EstrategiaImportacao,
    PlanoReconciliacao,
    ResultadoAplicacao,
)
from almoxarifado.domain.reconciliacao import planejar
from almoxarifado.infra.migrations import apply_migrations
from almoxarifado.infra.repositories import EstoqueRepo
from almoxarifado.infra.logger import (
    log_transaction, log_importacao, log_system_event, log_file_operation, print_system
)


MSG_NADA_A_PROCESSAR = "Nenhum registro a processar com as regras selecionadas"


def aplicar_plano(plano: PlanoReconciliacao, repo: EstoqueRepo) -> ResultadoAplicacao:
    """Grava o plano no banco e relê o estoque.

    Levanta `ErroArmazenamento` se a gravação falhar. Plano vazio não
    gera escrita e é tratado como sucesso.
    """
    estrategia = plano.estrategia.value
    if plano.vazio:
        log_importacao("noop", estrategia, ignoradas=plano.ignoradas)
        return ResultadoAplicacao(criados=0, modificados=0, sucesso=True)

    payload = plano.payload()
    for linha in payload:
        log_importacao("apply", estrategia, linha.sku, linha.quantidade)

    if plano.substitui_tudo:
        repo.substituir_todos(payload)
        itens = repo.listar_todos()
        return ResultadoAplicacao(criados=0, modificados=0, sucesso=True, itens=itens)

    criados, modificados = plano.criados, plano.modificados
    repo.upsert_many(payload)
    itens = repo.listar_todos()
    return ResultadoAplicacao(criados=criados, modificados=modificados, sucesso=True, itens=itens)


def _mensagem(plano: PlanoReconciliacao, res: ResultadoAplicacao) -> str:
    if plano.vazio:
        return MSG_NADA_A_PROCESSAR
    if plano.substitui_tudo:
        return f"Estoque substituído com sucesso ({len(res.itens)} itens)"
    return f"Processado: {res.criados} inseridos, {res.modificados} atualizados"


def run_importacao_texto(
    texto: str,
    estrategia: Union[EstrategiaImportacao, str],
    db_path: str = DB_PATH,
    arquivo: Optional[str] = None,
) -> Dict[str, Any]:
    """Importa o conteúdo de um CSV já carregado em memória."""
    estrategia = EstrategiaImportacao.from_value(estrategia)
    origem = arquivo or "<texto>"
    log_system_event("importacao_start", {"arquivo": origem, "estrategia": estrategia.value})

    try:
        parse = parse_csv_detalhado(texto)
        if not parse.linhas:
            raise ArquivoInvalidoError(origem)
        log_file_operation("import", origem, rows_processed=len(parse.linhas), descartadas=parse.descartadas)

        apply_migrations(db_path)
        repo = EstoqueRepo(db_path)
        snapshot = repo.listar_todos()

        plano = planejar(estrategia, snapshot, parse.linhas, descartadas_parse=parse.descartadas)
        log_importacao(
            "plan", estrategia.value,
            aplicaveis=len(plano.aplicaveis), ignoradas=plano.ignoradas,
        )

        res = aplicar_plano(plano, repo)
        out = {
            "arquivo": origem,
            "estrategia": estrategia.value,
            "linhas_lidas": len(parse.linhas),
            "descartadas": parse.descartadas,
            "ignoradas": plano.ignoradas,
            "gravadas": len(plano.payload()),
            "criados": res.criados,
            "modificados": res.modificados,
            "total_itens": len(res.itens) if not plano.vazio else len(snapshot),
            "sucesso": res.sucesso,
            "mensagem": _mensagem(plano, res),
        }
        print_system(f">> {out['mensagem']}")
        log_transaction("importacao", {"arquivo": origem, "estrategia": estrategia.value}, result=out)
        log_system_event("importacao_success", {"arquivo": origem, "gravadas": out["gravadas"]})
        return out

    except Exception as e:
        error_msg = str(e)
        log_transaction("importacao", {"arquivo": origem, "estrategia": estrategia.value}, error=error_msg)
        log_system_event("importacao_error", {"arquivo": origem, "error": error_msg}, level="error")
        raise


def run_importacao(
    path: Union[str, Path],
    estrategia: Union[EstrategiaImportacao, str],
    db_path: str = DB_PATH,
) -> Dict[str, Any]:
    """Lê um CSV do disco e importa com a estratégia escolhida."""
    try:
        texto = ler_arquivo_csv(path)
    except (OSError, UnicodeDecodeError) as e:
        log_system_event("importacao_error", {"arquivo": str(path), "error": str(e)}, level="error")
        raise ArquivoInvalidoError(str(path)) from e
    return run_importacao_texto(texto, estrategia, db_path=db_path, arquivo=str(path))
