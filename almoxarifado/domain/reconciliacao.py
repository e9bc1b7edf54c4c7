"""
Planejador de reconciliação de importações de estoque.

Dado o snapshot atual do estoque e as linhas lidas de um arquivo, decide
para cada linha se ela será gravada e se a gravação cria ou modifica um
item. A função é pura: não acessa o banco, não registra logs e não altera
os argumentos recebidos.

Regras por estratégia (a ordem do arquivo é sempre preservada):

- ``definir``    grava a quantidade do arquivo; cria se o SKU não existir.
- ``entrada``    soma ao existente; se o SKU não existir, cria com a quantidade do arquivo.
- ``saida``      subtrai do existente com mínimo 0; SKUs ausentes são ignorados.
- ``inserir``    grava apenas SKUs ausentes.
- ``atualizar``  grava apenas SKUs existentes, com a quantidade do arquivo.
- ``substituir`` todas as linhas viram itens novos (troca completa da base).

A classificação criar/modificar é feita contra o snapshot anterior ao lote,
nunca contra o estado intermediário do próprio plano.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional, Union

from .models import (
    Classificacao,
    Disposicao,
    EntradaPlano,
    EstrategiaImportacao,
    ItemEstoque,
    LinhaImportacao,
    PlanoReconciliacao,
)


Snapshot = Union[Mapping[str, Any], Iterable[Any]]


def _quantidade_de(item: Any) -> int:
    if isinstance(item, Mapping):
        val = item.get("quantidade")
    else:
        val = getattr(item, "quantidade", 0)
    try:
        return int(val or 0)
    except (TypeError, ValueError):
        return 0


def _sku_de(item: Any) -> Optional[str]:
    if isinstance(item, Mapping):
        return item.get("sku")
    return getattr(item, "sku", None)


def indexar_por_sku(itens_atuais: Snapshot) -> Dict[str, int]:
    """Reduz o snapshot a ``{sku: quantidade}``."""
    if isinstance(itens_atuais, Mapping):
        return {str(sku): _quantidade_de(item) for sku, item in itens_atuais.items()}
    out: Dict[str, int] = {}
    for item in itens_atuais or []:
        sku = _sku_de(item)
        if sku:
            out[str(sku)] = _quantidade_de(item)
    return out


def _decidir(
    estrategia: EstrategiaImportacao,
    linha: LinhaImportacao,
    existentes: Dict[str, int],
) -> EntradaPlano:
    existe = linha.sku in existentes
    classe = Classificacao.MODIFICAR if existe else Classificacao.CRIAR
    final = linha
    aplicar = True

    if estrategia is EstrategiaImportacao.ENTRADA:
        if existe:
            final = linha.com_quantidade(existentes[linha.sku] + linha.quantidade)
    elif estrategia is EstrategiaImportacao.SAIDA:
        if existe:
            final = linha.com_quantidade(max(0, existentes[linha.sku] - linha.quantidade))
        else:
            aplicar = False
    elif estrategia is EstrategiaImportacao.INSERIR:
        aplicar = not existe
    elif estrategia is EstrategiaImportacao.ATUALIZAR:
        aplicar = existe
    elif estrategia is EstrategiaImportacao.SUBSTITUIR:
        # a base anterior é descartada inteira; tudo é criação
        classe = Classificacao.CRIAR

    return EntradaPlano(
        linha=linha,
        final=final,
        disposicao=Disposicao.APLICAR if aplicar else Disposicao.IGNORAR,
        classificacao=classe,
    )


def planejar(
    estrategia: Union[EstrategiaImportacao, str],
    itens_atuais: Snapshot,
    linhas: Iterable[LinhaImportacao],
    descartadas_parse: int = 0,
) -> PlanoReconciliacao:
    """Monta o plano de reconciliação de um lote.

    Args:
        estrategia: Estratégia do lote inteiro (enum ou valor textual).
        itens_atuais: Snapshot do estoque: lista de ``ItemEstoque``/dicts
            ou um mapeamento ``sku -> item``.
        linhas: Linhas já validadas pelo parser, na ordem do arquivo.
        descartadas_parse: Linhas descartadas pelo parser, apenas repassadas
            ao plano para exibição.

    Returns:
        ``PlanoReconciliacao`` com uma entrada por linha recebida.
    """
    estrategia = EstrategiaImportacao.from_value(estrategia)
    existentes = indexar_por_sku(itens_atuais)
    entradas = [_decidir(estrategia, linha, existentes) for linha in linhas]
    return PlanoReconciliacao(
        estrategia=estrategia,
        entradas=entradas,
        descartadas_parse=descartadas_parse,
    )


def plano_ajuste(item: ItemEstoque, delta: int) -> PlanoReconciliacao:
    """Plano ``definir`` de uma única linha para o ajuste manual +1/-1."""
    linha = LinhaImportacao.from_item(item)
    linha = linha.com_quantidade(max(0, int(item.quantidade) + int(delta)))
    return planejar(EstrategiaImportacao.DEFINIR, [item], [linha])
