# almoxarifado/adapters/cli.py
"""
CLI do almoxarifado (Typer).

Comandos principais:
- migrate                  -> aplica migrações
- params set/get/show      -> gerencia parâmetros globais
- listar                   -> lista o estoque (busca, estoque baixo, ordenação)
- importar <csv>           -> importa um CSV com a estratégia escolhida
- ajustar <sku> --delta N  -> ajuste manual de quantidade
- mais/menos <sku>         -> atalhos para +1 / -1
- exportar <csv>           -> exporta o estoque (completo ou filtrado)
- rel resumo/estoque-baixo -> relatórios
- logs [tipo]              -> últimas linhas dos arquivos de log
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from almoxarifado.config import DB_PATH, DEFAULTS
from almoxarifado.domain.erros import AlmoxarifadoError
from almoxarifado.domain.models import EstrategiaImportacao, ItemEstoque
from almoxarifado.infra.logger import get_log_summary
from almoxarifado.infra.migrations import apply_migrations
from almoxarifado.infra.repositories import ParamsRepo
from almoxarifado.usecases.ajustar_quantidade import run_ajuste
from almoxarifado.usecases.consultar_estoque import run_exportar, run_listar
from almoxarifado.usecases.importar_estoque import run_importacao
from almoxarifado.usecases.relatorios import relatorio_estoque_baixo, relatorio_resumo


app = typer.Typer(help="Almoxarifado — CLI")
console = Console()


DESCRICAO_ESTRATEGIAS = {
    EstrategiaImportacao.DEFINIR: "Define a quantidade exata do CSV (cria ou sobrescreve).",
    EstrategiaImportacao.ENTRADA: "Soma a quantidade do CSV ao estoque atual.",
    EstrategiaImportacao.SAIDA: "Subtrai a quantidade do CSV; ignora itens inexistentes.",
    EstrategiaImportacao.INSERIR: "Adiciona somente SKUs que ainda não existem.",
    EstrategiaImportacao.ATUALIZAR: "Atualiza somente SKUs já cadastrados.",
    EstrategiaImportacao.SUBSTITUIR: "APAGA TODO o estoque e insere apenas o CSV.",
}


# -----------------------
# util
# -----------------------

def _print_json(obj) -> None:
    typer.echo(json.dumps(obj, ensure_ascii=False, indent=2))


def _falhar(e: Exception) -> None:
    console.print(f"[bold red]Erro:[/] {e}")
    raise typer.Exit(code=1)


def _display_itens(itens: List[ItemEstoque], title: str, estoque_baixo: int = 0) -> None:
    if not itens:
        console.print(Panel("Nenhum item encontrado", title=title, border_style="yellow"))
        return
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("SKU")
    table.add_column("Nome")
    table.add_column("Local")
    table.add_column("Quantidade", justify="right")
    table.add_column("Descrição")
    for i in itens:
        qtd = str(i.quantidade)
        if estoque_baixo > 0 and i.quantidade <= estoque_baixo:
            qtd = f"[bold red]{qtd}[/]"
        table.add_row(i.sku, i.nome, i.local, qtd, i.descricao or "")
    console.print(table)
    console.print(f"[dim]{len(itens)} itens[/dim]")


def _display_importacao(info: Dict[str, Any]) -> None:
    linhas = [
        f"Estratégia: {info['estrategia']}",
        f"Linhas válidas: {info['linhas_lidas']}",
        f"Linhas descartadas (sem SKU/nome/local): {info['descartadas']}",
        f"Ignoradas pela estratégia: {info['ignoradas']}",
    ]
    if info["estrategia"] != EstrategiaImportacao.SUBSTITUIR.value:
        linhas.append(f"Inseridos: {info['criados']}")
        linhas.append(f"Atualizados: {info['modificados']}")
    linhas.append(f"Itens no estoque: {info['total_itens']}")
    console.print(Panel("\n".join(linhas), title="Importação de Estoque"))
    estilo = "green" if info["gravadas"] else "yellow"
    console.print(f"[{estilo}]{info['mensagem']}[/]")


def _display_dict(data: List[Dict[str, Any]], title: str) -> None:
    if not data:
        console.print(Panel("Nenhum dado encontrado", title=title, border_style="yellow"))
        return
    table = Table(title=title, box=box.ROUNDED)
    columns = list(data[0].keys())
    for column in columns:
        justify = "right" if column in ("quantidade", "itens", "unidades") else "left"
        table.add_column(column, justify=justify)
    for row in data:
        table.add_row(*[str(row.get(col, "")) for col in columns])
    console.print(table)


# -----------------------
# comandos de infra
# -----------------------

@app.command("migrate")
def cmd_migrate(db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite")):
    """Aplica migrações no banco."""
    apply_migrations(db_path)
    typer.echo(f">> Migrações aplicadas em: {db_path}")


params_app = typer.Typer(help="Gerenciar parâmetros globais (estoque baixo e confirmação de ajustes).")
app.add_typer(params_app, name="params")


@params_app.command("set")
def cmd_params_set(
    estoque_baixo: Optional[int] = typer.Option(None, help="Limite de estoque baixo (0 desativa)"),
    confirmar_ajustes: Optional[bool] = typer.Option(
        None, "--confirmar-ajustes/--sem-confirmar-ajustes", help="Pedir confirmação nos ajustes manuais"
    ),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Define parâmetros globais (apenas os informados são alterados)."""
    apply_migrations(db_path)
    repo = ParamsRepo(db_path)
    items: List[tuple[str, str]] = []
    if estoque_baixo is not None:
        items.append(("estoque_baixo", str(estoque_baixo)))
    if confirmar_ajustes is not None:
        items.append(("confirmar_ajustes", "1" if confirmar_ajustes else "0"))
    if not items:
        typer.echo("Nada a alterar. Informe pelo menos um parâmetro.")
        raise typer.Exit(code=1)
    repo.set_many(items)
    typer.echo(">> Parâmetros atualizados.")


@params_app.command("get")
def cmd_params_get(
    chave: str = typer.Argument(..., help="Ex.: estoque_baixo | confirmar_ajustes"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Mostra um parâmetro específico."""
    apply_migrations(db_path)
    val = ParamsRepo(db_path).get(chave)
    typer.echo("(None)" if val is None else val)


@params_app.command("show")
def cmd_params_show(
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Exibe os parâmetros efetivos (com fallback para defaults) em JSON."""
    apply_migrations(db_path)
    repo = ParamsRepo(db_path)
    _print_json({
        "estoque_baixo": repo.get_int("estoque_baixo", DEFAULTS.estoque_baixo),
        "confirmar_ajustes": repo.get_bool("confirmar_ajustes", DEFAULTS.confirmar_ajustes),
        "_defaults": {
            "estoque_baixo": DEFAULTS.estoque_baixo,
            "confirmar_ajustes": DEFAULTS.confirmar_ajustes,
        },
        "_db": db_path,
    })


# -----------------------
# consulta e exportação
# -----------------------

@app.command("listar")
def cmd_listar(
    busca: str = typer.Option("", "--busca", "-b", help="Trecho de SKU, nome ou local"),
    estoque_baixo: int = typer.Option(0, "--estoque-baixo", help="Mostra só itens com quantidade <= N"),
    ordenar: str = typer.Option("nome", "--ordenar", help="sku | nome | local | quantidade"),
    desc: bool = typer.Option(False, "--desc", help="Ordem decrescente"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Lista o estoque."""
    try:
        itens = run_listar(db_path, busca, estoque_baixo, ordenar, desc)
    except (AlmoxarifadoError, ValueError) as e:
        _falhar(e)
    destaque = estoque_baixo or ParamsRepo(db_path).get_int("estoque_baixo", DEFAULTS.estoque_baixo)
    _display_itens(itens, "Estoque", estoque_baixo=destaque)


@app.command("exportar")
def cmd_exportar(
    destino: str = typer.Argument(..., help="Arquivo CSV de saída"),
    busca: str = typer.Option("", "--busca", "-b", help="Trecho de SKU, nome ou local"),
    estoque_baixo: int = typer.Option(0, "--estoque-baixo", help="Exporta só itens com quantidade <= N"),
    ordenar: str = typer.Option("nome", "--ordenar", help="sku | nome | local | quantidade"),
    desc: bool = typer.Option(False, "--desc", help="Ordem decrescente"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Exporta o estoque (completo ou filtrado) para CSV."""
    try:
        info = run_exportar(
            destino, db_path=db_path,
            busca=busca, estoque_baixo=estoque_baixo, ordenar_por=ordenar, descendente=desc,
        )
    except (AlmoxarifadoError, ValueError, OSError) as e:
        _falhar(e)
    typer.echo(f">> {info['itens_exportados']} itens exportados para {info['arquivo']}")


# -----------------------
# importação e ajustes
# -----------------------

@app.command("importar")
def cmd_importar(
    arquivo: str = typer.Argument(..., help="CSV com cabeçalho SKU,NOME,DESCRICAO,LOCAL,QUANTIDADE"),
    estrategia_nome: str = typer.Option(
        DEFAULTS.estrategia_padrao, "--estrategia", "-e",
        help="definir | entrada | saida | inserir | atualizar | substituir (aceita set, increment, ...)",
    ),
    sim: bool = typer.Option(False, "--sim", "-y", help="Não pedir confirmação para 'substituir'"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Importa um CSV de estoque."""
    try:
        estrategia = EstrategiaImportacao.from_value(estrategia_nome)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--estrategia")
    console.print(f"[dim]{estrategia.value}: {DESCRICAO_ESTRATEGIAS[estrategia]}[/dim]")
    if estrategia is EstrategiaImportacao.SUBSTITUIR and not sim:
        typer.confirm("Isto APAGA TODO o estoque atual. Continuar?", abort=True)
    try:
        info = run_importacao(arquivo, estrategia, db_path=db_path)
    except AlmoxarifadoError as e:
        _falhar(e)
    _display_importacao(info)


def _ajustar(sku: str, delta: int, confirmar: Optional[bool], db_path: str) -> None:
    apply_migrations(db_path)
    if confirmar is None:
        confirmar = ParamsRepo(db_path).get_bool("confirmar_ajustes", DEFAULTS.confirmar_ajustes)

    def _pergunta(item: ItemEstoque, nova: int) -> bool:
        return typer.confirm(f"Atualizar quantidade do SKU {item.sku} de {item.quantidade} para {nova}?")

    try:
        res = run_ajuste(sku, delta, db_path=db_path, confirmar=_pergunta if confirmar else None)
    except AlmoxarifadoError as e:
        _falhar(e)
    if res["cancelado"]:
        typer.echo(">> Ajuste cancelado.")
        return
    typer.echo(f">> {sku}: {res['quantidade_anterior']} -> {res['quantidade_nova']}")


@app.command("ajustar")
def cmd_ajustar(
    sku: str = typer.Argument(..., help="SKU do item"),
    delta: int = typer.Option(..., "--delta", "-d", help="Variação da quantidade (ex.: 1 ou -1)"),
    confirmar: Optional[bool] = typer.Option(
        None, "--confirmar/--sem-confirmar", help="Sobrescreve o parâmetro confirmar_ajustes"
    ),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Ajusta manualmente a quantidade de um item (mínimo 0)."""
    _ajustar(sku, delta, confirmar, db_path)


@app.command("mais")
def cmd_mais(
    sku: str = typer.Argument(..., help="SKU do item"),
    confirmar: Optional[bool] = typer.Option(None, "--confirmar/--sem-confirmar"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Soma 1 à quantidade do item."""
    _ajustar(sku, 1, confirmar, db_path)


@app.command("menos")
def cmd_menos(
    sku: str = typer.Argument(..., help="SKU do item"),
    confirmar: Optional[bool] = typer.Option(None, "--confirmar/--sem-confirmar"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Subtrai 1 da quantidade do item (mínimo 0)."""
    _ajustar(sku, -1, confirmar, db_path)


# -----------------------
# relatórios
# -----------------------

rel_app = typer.Typer(help="Relatórios de estoque")
app.add_typer(rel_app, name="rel")


@rel_app.command("resumo")
def rel_resumo(
    limite: Optional[int] = typer.Option(None, help="Limite de estoque baixo (padrão: parâmetro)"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Totais do estoque e por local."""
    res = relatorio_resumo(db_path=db_path, limite=limite)
    console.print(Panel(
        "\n".join([
            f"Itens: {res['total_itens']}",
            f"Unidades: {res['total_unidades']}",
            f"Estoque baixo (<= {res['limite_estoque_baixo']}): {res['itens_estoque_baixo']}",
        ]),
        title="Resumo do Estoque",
    ))
    _display_dict(res["por_local"], "Por Local")


@rel_app.command("estoque-baixo")
def rel_estoque_baixo(
    limite: Optional[int] = typer.Option(None, help="Quantidade máxima (padrão: parâmetro)"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Itens com quantidade igual ou abaixo do limite."""
    res = relatorio_estoque_baixo(limite=limite, db_path=db_path)
    _display_dict(res, "Estoque Baixo")


# -----------------------
# logs
# -----------------------

TIPOS_LOG = ("transactions", "importacoes", "database", "system")


@app.command("logs")
def cmd_logs(
    tipo: str = typer.Argument("transactions", help="transactions | importacoes | database | system"),
    linhas: int = typer.Option(50, "--linhas", "-n", help="Quantidade de linhas recentes"),
):
    """Mostra as últimas linhas de um arquivo de log."""
    if tipo not in TIPOS_LOG:
        raise typer.BadParameter(f"tipo deve ser um de: {', '.join(TIPOS_LOG)}", param_hint="tipo")
    conteudo = get_log_summary(tipo, lines=linhas)
    if conteudo is None:
        console.print(Panel("Logging desabilitado (defina ALMOXARIFADO_LOG=1)", title="Logs", border_style="yellow"))
        return
    typer.echo(conteudo.rstrip("\n"))


# Entry point opcional:
def main():
    app()


if __name__ == "__main__":
    main()
