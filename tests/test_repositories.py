import sqlite3

import pytest

from almoxarifado.domain.erros import ErroArmazenamento
from almoxarifado.domain.models import LinhaImportacao
from almoxarifado.infra.migrations import apply_migrations
from almoxarifado.infra.repositories import EstoqueRepo, ParamsRepo


def _repo(tmp_path):
    db_path = str(tmp_path / "almox_test.sqlite")
    apply_migrations(db_path)
    return EstoqueRepo(db_path)


def test_migrations_idempotentes(tmp_path):
    db_path = str(tmp_path / "almox_test.sqlite")
    apply_migrations(db_path)
    apply_migrations(db_path)
    with sqlite3.connect(db_path) as c:
        assert c.execute("PRAGMA user_version;").fetchone()[0] == 2


def test_upsert_preserva_item_id_e_created_at(tmp_path):
    repo = _repo(tmp_path)
    primeiro = repo.upsert_many([LinhaImportacao(sku="A", nome="Alicate", local="P1", quantidade=1)])[0]
    segundo = repo.upsert_many([LinhaImportacao(sku="A", nome="Alicate 2", local="P2", quantidade=5)])[0]
    assert segundo.item_id == primeiro.item_id
    assert segundo.created_at == primeiro.created_at
    assert (segundo.nome, segundo.local, segundo.quantidade) == ("Alicate 2", "P2", 5)


def test_listar_ordenado_por_nome(tmp_path):
    repo = _repo(tmp_path)
    repo.upsert_many([
        LinhaImportacao(sku="1", nome="Serra", local="P1"),
        LinhaImportacao(sku="2", nome="Alicate", local="P1"),
        LinhaImportacao(sku="3", nome="Martelo", local="P1"),
    ])
    assert [i.nome for i in repo.listar_todos()] == ["Alicate", "Martelo", "Serra"]


def test_apagar_todos(tmp_path):
    repo = _repo(tmp_path)
    repo.upsert_many([LinhaImportacao(sku="A", nome="Alicate", local="P1")])
    assert repo.apagar_todos() == 1
    assert repo.listar_todos() == []


def test_substituir_todos_faz_rollback_quando_insercao_falha(tmp_path):
    repo = _repo(tmp_path)
    repo.upsert_many([LinhaImportacao(sku="A", nome="Alicate", local="P1", quantidade=10)])
    ruins = [
        {"sku": "X", "nome": "Xis", "local": "P1", "quantidade": 1},
        {"sku": "Y", "nome": "Ípsilon", "local": "P1", "quantidade": -1},  # viola CHECK
    ]
    with pytest.raises(ErroArmazenamento):
        repo.substituir_todos(ruins)
    assert [(i.sku, i.quantidade) for i in repo.listar_todos()] == [("A", 10)]


def test_banco_sem_tabela_gera_erro_de_armazenamento(tmp_path):
    repo = EstoqueRepo(str(tmp_path / "vazio.sqlite"))
    with pytest.raises(ErroArmazenamento):
        repo.listar_todos()


def test_params_repo(tmp_path):
    db_path = str(tmp_path / "almox_test.sqlite")
    apply_migrations(db_path)
    repo = ParamsRepo(db_path)
    assert repo.get_int("estoque_baixo", 5) == 5
    assert repo.get_bool("confirmar_ajustes", True) is True
    repo.set_many([("estoque_baixo", "12"), ("confirmar_ajustes", "0")])
    assert repo.get_int("estoque_baixo", 5) == 12
    assert repo.get_bool("confirmar_ajustes", True) is False
    assert repo.get("inexistente") is None


def test_substituir_todos_com_quantidade_grande_demais_faz_rollback(tmp_path):
    repo = _repo(tmp_path)
    repo.upsert_many([LinhaImportacao(sku="A", nome="Alicate", local="P1", quantidade=10)])
    with pytest.raises(ErroArmazenamento):
        repo.substituir_todos([LinhaImportacao(sku="Z", nome="Zarcão", local="P9", quantidade=2**63)])
    with pytest.raises(ErroArmazenamento):
        repo.upsert_many([LinhaImportacao(sku="Z", nome="Zarcão", local="P9", quantidade=2**63)])
    assert [(i.sku, i.quantidade) for i in repo.listar_todos()] == [("A", 10)]
