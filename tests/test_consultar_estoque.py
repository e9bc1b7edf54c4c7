import pytest

from almoxarifado.adapters.exportador import CABECALHO, exportar_csv
from almoxarifado.adapters.parsers import parse_csv_estoque
from almoxarifado.domain.models import ItemEstoque, LinhaImportacao
from almoxarifado.infra.migrations import apply_migrations
from almoxarifado.infra.repositories import EstoqueRepo
from almoxarifado.usecases.consultar_estoque import filtrar_itens, run_exportar


ITENS = [
    ItemEstoque(sku="PAR-01", nome="Parafuso", local="Prateleira A", quantidade=40),
    ItemEstoque(sku="POR-02", nome="Porca", local="Prateleira B", quantidade=3),
    ItemEstoque(sku="ALI-03", nome="Alicate", local="Armário", quantidade=1, descricao="Corte, bico"),
]


def test_filtro_busca_sem_diferenciar_maiusculas():
    assert [i.sku for i in filtrar_itens(ITENS, busca="prateleira")] == ["PAR-01", "POR-02"]
    assert [i.sku for i in filtrar_itens(ITENS, busca="ali")] == ["ALI-03"]
    assert [i.sku for i in filtrar_itens(ITENS, busca="por-02")] == ["POR-02"]


def test_filtro_estoque_baixo():
    assert [i.sku for i in filtrar_itens(ITENS, estoque_baixo=3)] == ["ALI-03", "POR-02"]
    assert len(filtrar_itens(ITENS, estoque_baixo=0)) == 3


@pytest.mark.parametrize(
    "campo,desc,esperado",
    [
        ("nome", False, ["ALI-03", "PAR-01", "POR-02"]),
        ("quantidade", False, ["ALI-03", "POR-02", "PAR-01"]),
        ("quantidade", True, ["PAR-01", "POR-02", "ALI-03"]),
        ("sku", True, ["POR-02", "PAR-01", "ALI-03"]),
        ("local", False, ["ALI-03", "PAR-01", "POR-02"]),
    ],
)
def test_ordenacao(campo, desc, esperado):
    assert [i.sku for i in filtrar_itens(ITENS, ordenar_por=campo, descendente=desc)] == esperado


def test_ordenacao_invalida():
    with pytest.raises(ValueError):
        filtrar_itens(ITENS, ordenar_por="preco")


def test_exportar_csv_troca_virgulas_e_reimporta():
    texto = exportar_csv(ITENS)
    linhas = texto.split("\n")
    assert linhas[0] == CABECALHO
    assert linhas[3] == "ALI-03,Alicate,Corte  bico,Armário,1"
    assert linhas[2] == "POR-02,Porca,,Prateleira B,3"

    reimportadas = parse_csv_estoque(texto)
    assert [(l.sku, l.quantidade) for l in reimportadas] == [(i.sku, i.quantidade) for i in ITENS]
    assert reimportadas[1].descricao is None


def test_run_exportar_filtrado(tmp_path):
    db_path = str(tmp_path / "almox_test.sqlite")
    apply_migrations(db_path)
    EstoqueRepo(db_path).upsert_many([LinhaImportacao.from_item(i) for i in ITENS])
    destino = tmp_path / "estoque_filtrado.csv"
    out = run_exportar(str(destino), db_path=db_path, estoque_baixo=3)
    assert out["itens_exportados"] == 2
    assert out["filtrado"] is True
    conteudo = destino.read_text(encoding="utf-8").split("\n")
    assert conteudo[0] == CABECALHO
    assert [c.split(",")[0] for c in conteudo[1:]] == ["ALI-03", "POR-02"]
