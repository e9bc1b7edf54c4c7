import pytest

from almoxarifado.domain.models import (
    Classificacao,
    Disposicao,
    EstrategiaImportacao as E,
    ItemEstoque,
    LinhaImportacao,
)
from almoxarifado.domain.reconciliacao import planejar, plano_ajuste


def _item(sku, qtd, nome=None, local="P1"):
    return ItemEstoque(sku=sku, nome=nome or f"Item {sku}", local=local, quantidade=qtd)


def _linha(sku, qtd, nome=None, local="P1"):
    return LinhaImportacao(sku=sku, nome=nome or f"Item {sku}", local=local, quantidade=qtd)


ATUAIS = [_item("A", 10), _item("B", 3)]


def _finais(plano):
    return {l.sku: l.quantidade for l in plano.payload()}


def test_definir_sobrescreve_e_cria():
    plano = planejar(E.DEFINIR, ATUAIS, [_linha("A", 2), _linha("C", 5)])
    assert _finais(plano) == {"A": 2, "C": 5}
    assert plano.criados == 1
    assert plano.modificados == 1


def test_entrada_soma_existente_e_cria_ausente():
    plano = planejar(E.ENTRADA, ATUAIS, [_linha("A", 2), _linha("C", 5)])
    assert _finais(plano) == {"A": 12, "C": 5}
    assert [e.classificacao for e in plano.entradas] == [Classificacao.MODIFICAR, Classificacao.CRIAR]


def test_saida_subtrai_com_piso_zero_e_ignora_ausente():
    plano = planejar(E.SAIDA, ATUAIS, [_linha("A", 2), _linha("B", 50), _linha("C", 5)])
    assert _finais(plano) == {"A": 8, "B": 0}
    assert plano.entradas[2].disposicao is Disposicao.IGNORAR
    assert plano.ignoradas == 1
    assert plano.criados == 0


def test_inserir_apenas_novos():
    plano = planejar(E.INSERIR, ATUAIS, [_linha("A", 2), _linha("C", 5)])
    assert _finais(plano) == {"C": 5}
    assert plano.criados == 1 and plano.modificados == 0


def test_inserir_so_existentes_gera_plano_vazio():
    plano = planejar(E.INSERIR, ATUAIS, [_linha("A", 1), _linha("B", 1)])
    assert plano.vazio
    assert plano.payload() == []
    assert plano.ignoradas == 2


def test_atualizar_apenas_existentes_com_valor_do_arquivo():
    plano = planejar(E.ATUALIZAR, ATUAIS, [_linha("A", 2), _linha("C", 5)])
    assert _finais(plano) == {"A": 2}
    assert plano.modificados == 1 and plano.criados == 0


def test_substituir_aplica_tudo_como_criacao():
    plano = planejar(E.SUBSTITUIR, ATUAIS, [_linha("A", 2), _linha("C", 5)])
    assert plano.substitui_tudo
    assert _finais(plano) == {"A": 2, "C": 5}
    assert all(e.classificacao is Classificacao.CRIAR for e in plano.entradas)


def test_ordem_do_arquivo_preservada():
    linhas = [_linha("Z", 1), _linha("A", 1), _linha("M", 1)]
    plano = planejar(E.DEFINIR, [], linhas)
    assert [e.linha.sku for e in plano.entradas] == ["Z", "A", "M"]
    assert [l.sku for l in plano.payload()] == ["Z", "A", "M"]


def test_sku_duplicado_ultima_ocorrencia_prevalece():
    plano = planejar(E.DEFINIR, ATUAIS, [_linha("C", 1), _linha("A", 4), _linha("C", 9)])
    payload = plano.payload()
    assert [l.sku for l in payload] == ["A", "C"]
    assert _finais(plano) == {"A": 4, "C": 9}
    # contagem feita contra o snapshot anterior: as duas linhas de C contam como criação
    assert plano.criados == 2


def test_classificacao_contra_snapshot_anterior():
    plano = planejar(E.ENTRADA, [], [_linha("N", 1), _linha("N", 2)])
    assert [e.classificacao for e in plano.entradas] == [Classificacao.CRIAR, Classificacao.CRIAR]
    assert _finais(plano) == {"N": 2}


def test_planejar_nao_altera_entradas():
    atuais = [_item("A", 10)]
    linhas = [_linha("A", 3)]
    planejar(E.SAIDA, atuais, linhas)
    assert atuais[0].quantidade == 10
    assert linhas[0].quantidade == 3


def test_snapshot_como_dicts_ou_mapa():
    linhas = [_linha("A", 1)]
    por_lista = planejar(E.ENTRADA, [{"sku": "A", "quantidade": 10}], linhas)
    por_mapa = planejar(E.ENTRADA, {"A": _item("A", 10)}, linhas)
    assert _finais(por_lista) == _finais(por_mapa) == {"A": 11}


def test_plano_vazio_sem_linhas():
    plano = planejar(E.DEFINIR, ATUAIS, [])
    assert plano.vazio
    assert plano.criados == 0 and plano.modificados == 0


@pytest.mark.parametrize(
    "valor,esperado",
    [
        ("definir", E.DEFINIR),
        ("ENTRADA", E.ENTRADA),
        ("replace-all", E.SUBSTITUIR),
        ("insert_only", E.INSERIR),
        (E.SAIDA, E.SAIDA),
    ],
)
def test_estrategia_from_value(valor, esperado):
    assert E.from_value(valor) is esperado


def test_estrategia_desconhecida():
    with pytest.raises(ValueError):
        planejar("apagar", ATUAIS, [])


def test_plano_ajuste_soma_e_subtrai_com_piso():
    item = _item("A", 1)
    assert plano_ajuste(item, +1).payload()[0].quantidade == 2
    assert plano_ajuste(item, -1).payload()[0].quantidade == 0
    assert plano_ajuste(_item("B", 0), -1).payload()[0].quantidade == 0
    plano = plano_ajuste(item, -1)
    assert plano.estrategia is E.DEFINIR
    assert plano.modificados == 1
