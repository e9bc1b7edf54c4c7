# almoxarifado/infra/repositories.py
"""
Repositórios (DAO) para acesso e manipulação de dados no SQLite.

Classes:
- ParamsRepo
- EstoqueRepo

Erros do SQLite são convertidos em `ErroArmazenamento`; cada método abre
uma conexão e grava tudo em uma única transação.
"""

from __future__ import annotations

import sqlite3
import uuid
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .db import agora_iso, connect
from almoxarifado.domain.erros import ErroArmazenamento
from almoxarifado.domain.models import ItemEstoque
from almoxarifado.infra.logger import log_database_operation


# -------------------------
# Helpers
# -------------------------

# limite conservador de variáveis por instrução no SQLite
_MAX_VARS = 900

_COLUNAS_ESTOQUE = "item_id, sku, nome, descricao, local, quantidade, created_at, updated_at"


def _as_dict(row: Any) -> Dict[str, Any]:
    if isinstance(row, dict):
        return row
    if is_dataclass(row):
        return asdict(row)
    raise TypeError("row must be dict or dataclass")


def _chunks(seq: List[Any], size: int) -> Iterable[List[Any]]:
    for i in range(0, len(seq), size):
        yield seq[i:i + size]


# -------------------------
# Params
# -------------------------

class ParamsRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def set_many(self, items: Iterable[Tuple[str, str]]) -> None:
        try:
            with connect(self.db_path) as c:
                c.executemany(
                    """
                    INSERT INTO params (chave, valor)
                    VALUES (?, ?)
                    ON CONFLICT(chave) DO UPDATE SET valor=excluded.valor
                    """,
                    list(items),
                )
        except sqlite3.Error as e:
            raise ErroArmazenamento(f"Erro ao gravar parâmetros: {e}") from e

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        try:
            with connect(self.db_path) as c:
                row = c.execute("SELECT valor FROM params WHERE chave = ?", (key,)).fetchone()
                return row[0] if row else default
        except sqlite3.Error as e:
            raise ErroArmazenamento(f"Erro ao ler parâmetro {key}: {e}") from e

    def get_int(self, key: str, default: int) -> int:
        v = self.get(key, None)
        if v is None:
            return default
        try:
            return int(float(v))
        except ValueError:
            return default

    def get_bool(self, key: str, default: bool) -> bool:
        v = self.get(key, None)
        if v is None:
            return default
        s = str(v).strip().lower()
        if s in {"1", "true", "t", "sim", "s", "y", "yes"}:
            return True
        if s in {"0", "false", "f", "nao", "não", "n", "no"}:
            return False
        return default


# -------------------------
# Estoque
# -------------------------

class EstoqueRepo:
    """
    Cliente da tabela `estoque`.

    Operações usadas pela importação:
    - listar_todos()      -> snapshot ordenado por nome
    - upsert_many(rows)   -> insere ou sobrescreve por sku
    - apagar_todos()      -> remove todos os itens
    - substituir_todos()  -> apaga e reinsere na mesma transação
    """

    table = "estoque"

    def __init__(self, db_path: str):
        self.db_path = db_path

    # --------- leitura ---------

    def listar_todos(self) -> List[ItemEstoque]:
        try:
            with connect(self.db_path) as c:
                cur = c.execute(
                    f"SELECT {_COLUNAS_ESTOQUE} FROM estoque ORDER BY nome ASC, sku ASC"
                )
                itens = [ItemEstoque.from_mapping(dict(r)) for r in cur.fetchall()]
        except sqlite3.Error as e:
            raise ErroArmazenamento(f"Erro ao carregar estoque: {e}") from e
        log_database_operation(self.table, "SELECT_ALL", len(itens))
        return itens

    def buscar_por_sku(self, sku: str) -> Optional[ItemEstoque]:
        try:
            with connect(self.db_path) as c:
                row = c.execute(
                    f"SELECT {_COLUNAS_ESTOQUE} FROM estoque WHERE sku = ?", (sku,)
                ).fetchone()
        except sqlite3.Error as e:
            raise ErroArmazenamento(f"Erro ao buscar SKU {sku}: {e}") from e
        return ItemEstoque.from_mapping(dict(row)) if row else None

    # --------- escrita ---------

    @staticmethod
    def _payload(rows: Iterable[Any]) -> List[Dict[str, Any]]:
        agora = agora_iso()
        out = []
        for r in rows:
            d = _as_dict(r)
            out.append({
                "item_id": d.get("item_id") or uuid.uuid4().hex,
                "sku": d["sku"],
                "nome": d["nome"],
                "descricao": d.get("descricao"),
                "local": d["local"],
                "quantidade": int(d.get("quantidade") or 0),
                "created_at": agora,
                "updated_at": agora,
            })
        return out

    @staticmethod
    def _upsert(conn: sqlite3.Connection, payload: List[Dict[str, Any]]) -> List[ItemEstoque]:
        # item_id e created_at de itens existentes são preservados
        conn.executemany(
            """
            INSERT INTO estoque
                (item_id, sku, nome, descricao, local, quantidade, created_at, updated_at)
            VALUES
                (:item_id, :sku, :nome, :descricao, :local, :quantidade, :created_at, :updated_at)
            ON CONFLICT(sku) DO UPDATE SET
                nome=excluded.nome,
                descricao=excluded.descricao,
                local=excluded.local,
                quantidade=excluded.quantidade,
                updated_at=excluded.updated_at
            """,
            payload,
        )
        skus = list(dict.fromkeys(p["sku"] for p in payload))
        gravados: List[ItemEstoque] = []
        for bloco in _chunks(skus, _MAX_VARS):
            marks = ",".join("?" for _ in bloco)
            cur = conn.execute(
                f"SELECT {_COLUNAS_ESTOQUE} FROM estoque WHERE sku IN ({marks}) ORDER BY nome ASC",
                bloco,
            )
            gravados.extend(ItemEstoque.from_mapping(dict(r)) for r in cur.fetchall())
        return gravados

    def upsert_many(self, rows: Iterable[Any]) -> List[ItemEstoque]:
        """Insere ou sobrescreve itens por `sku` em uma única transação.

        Returns:
            Os itens afetados como ficaram gravados (com item_id e timestamps).
        """
        payload = self._payload(rows)
        if not payload:
            return []
        try:
            with connect(self.db_path) as c:
                gravados = self._upsert(c, payload)
        except (sqlite3.Error, OverflowError) as e:
            raise ErroArmazenamento(f"Erro ao importar estoque: {e}") from e
        log_database_operation(self.table, "UPSERT", len(payload))
        return gravados

    def apagar_todos(self) -> int:
        try:
            with connect(self.db_path) as c:
                n = c.execute("DELETE FROM estoque").rowcount
        except sqlite3.Error as e:
            raise ErroArmazenamento(f"Erro ao apagar estoque: {e}") from e
        log_database_operation(self.table, "DELETE_ALL", n)
        return n

    def substituir_todos(self, rows: Iterable[Any]) -> List[ItemEstoque]:
        """Troca a base inteira: DELETE + INSERT na mesma transação.

        Se qualquer etapa falhar, o rollback mantém o estoque anterior.
        """
        payload = self._payload(rows)
        try:
            with connect(self.db_path) as c:
                apagados = c.execute("DELETE FROM estoque").rowcount
                gravados = self._upsert(c, payload) if payload else []
        except (sqlite3.Error, OverflowError) as e:
            raise ErroArmazenamento(f"Erro ao substituir estoque: {e}") from e
        log_database_operation(self.table, "REPLACE_ALL", len(payload), apagados=apagados)
        return gravados
