import pytest
from almoxarifado.adapters.parsers import (
    parse_csv_detalhado,
    parse_csv_estoque,
    parse_quantidade,
    ler_arquivo_csv,
)


@pytest.mark.parametrize(
    "raw,esperado",
    [
        ("1.234,5", 1234),
        ("-5", 0),
        ("abc", 0),
        ("", 0),
        (None, 0),
        ("10", 10),
        ("2,9", 2),
        ("1.000.000", 1000000),
        ("0,5", 0),
        ("inf", 0),
        ("nan", 0),
        ("1_000", 0),
    ],
)
def test_parse_quantidade(raw, esperado):
    assert parse_quantidade(raw) == esperado


def test_parse_csv_basico():
    texto = (
        "SKU,NOME,DESCRICAO,LOCAL,QUANTIDADE\n"
        "A1,Parafuso,Sextavado,Prateleira 1,10\n"
        "B2,Porca,,Prateleira 2,3\n"
    )
    linhas = parse_csv_estoque(texto)
    assert [l.sku for l in linhas] == ["A1", "B2"]
    assert linhas[0].nome == "Parafuso"
    assert linhas[0].descricao == "Sextavado"
    assert linhas[0].local == "Prateleira 1"
    assert linhas[0].quantidade == 10
    assert linhas[1].descricao is None


def test_parse_csv_crlf_espacos_e_linhas_em_branco():
    texto = "\r\n  sku , nome , local , quantidade \r\n\r\n A1 , Parafuso , P1 , 7 \r\n   \r\n"
    linhas = parse_csv_estoque(texto)
    assert len(linhas) == 1
    assert linhas[0].sku == "A1"
    assert linhas[0].nome == "Parafuso"
    assert linhas[0].local == "P1"
    assert linhas[0].quantidade == 7
    assert linhas[0].descricao is None


def test_parse_csv_colunas_em_qualquer_ordem_e_extras_ignoradas():
    texto = "quantidade,extra,local,nome,sku\n5,xx,P1,Arruela,C3\n"
    linhas = parse_csv_estoque(texto)
    assert len(linhas) == 1
    assert (linhas[0].sku, linhas[0].nome, linhas[0].local, linhas[0].quantidade) == ("C3", "Arruela", "P1", 5)


@pytest.mark.parametrize(
    "texto",
    [
        "",
        None,
        "   \n \r\n",
        "sku,nome,descricao,quantidade\nA1,X,,1\n",    # sem local
        "nome,local,quantidade\nX,P1,1\n",             # sem sku
        "sku,nome,local\nA1,X,P1\n",                   # sem quantidade
    ],
)
def test_parse_csv_invalido_retorna_vazio(texto):
    assert parse_csv_estoque(texto) == []


def test_parse_csv_descarta_linhas_sem_campos_obrigatorios():
    texto = (
        "sku,nome,descricao,local,quantidade\n"
        "A1,Parafuso,,P1,1\n"
        ",SemSku,,P1,1\n"
        "B2,,,P1,1\n"
        "C3,SemLocal,,,1\n"
        "D4,Curta\n"
        "E5,Ok,,P2,2\n"
    )
    res = parse_csv_detalhado(texto)
    assert res.cabecalho_valido
    assert [l.sku for l in res.linhas] == ["A1", "E5"]
    assert res.descartadas == 4


def test_parse_csv_quantidade_ausente_vale_zero():
    texto = "sku,nome,local,quantidade\nA1,Parafuso,P1\nB2,Porca,P1,-3\n"
    linhas = parse_csv_estoque(texto)
    assert [l.quantidade for l in linhas] == [0, 0]


def test_parse_csv_cabecalho_duplicado_usa_primeira_ocorrencia():
    texto = "sku,nome,local,quantidade,quantidade\nA1,X,P1,4,9\n"
    assert parse_csv_estoque(texto)[0].quantidade == 4


def test_parse_csv_sku_diferencia_maiusculas():
    texto = "sku,nome,local,quantidade\nabc,X,P1,1\nABC,Y,P1,2\n"
    assert [l.sku for l in parse_csv_estoque(texto)] == ["abc", "ABC"]


def test_ler_arquivo_csv_aceita_bom(tmp_path):
    p = tmp_path / "estoque.csv"
    p.write_bytes("\ufeffsku,nome,local,quantidade\nA1,Ção,P1,1\n".encode("utf-8"))
    linhas = parse_csv_estoque(ler_arquivo_csv(p))
    assert linhas[0].sku == "A1"
    assert linhas[0].nome == "Ção"
