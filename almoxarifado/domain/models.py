# almoxarifado/domain/models.py
"""
Modelos (dataclasses) do domínio.

Observação importante:
- Os repositórios devolvem `ItemEstoque`; `LinhaImportacao` é transitória
  e existe apenas durante uma importação.
- O plano de reconciliação é calculado sem I/O e só depois aplicado.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


@dataclass
class ItemEstoque:
    """Item persistido na tabela `estoque` (chave única: sku)."""
    sku: str
    nome: str
    local: str
    quantidade: int = 0
    descricao: Optional[str] = None
    item_id: Optional[str] = None      # atribuído pelo banco
    created_at: Optional[str] = None   # atribuído pelo banco
    updated_at: Optional[str] = None   # atribuído pelo banco

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "ItemEstoque":
        return cls(
            sku=str(row["sku"]),
            nome=row.get("nome") or "",
            local=row.get("local") or "",
            quantidade=int(row.get("quantidade") or 0),
            descricao=row.get("descricao"),
            item_id=row.get("item_id"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


@dataclass(frozen=True)
class LinhaImportacao:
    """Linha validada de um arquivo de importação."""
    sku: str
    nome: str
    local: str
    quantidade: int = 0
    descricao: Optional[str] = None

    @classmethod
    def from_item(cls, item: ItemEstoque) -> "LinhaImportacao":
        return cls(
            sku=item.sku,
            nome=item.nome,
            local=item.local,
            quantidade=item.quantidade,
            descricao=item.descricao,
        )

    def com_quantidade(self, quantidade: int) -> "LinhaImportacao":
        return LinhaImportacao(
            sku=self.sku,
            nome=self.nome,
            local=self.local,
            quantidade=quantidade,
            descricao=self.descricao,
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "sku": self.sku,
            "nome": self.nome,
            "descricao": self.descricao,
            "local": self.local,
            "quantidade": self.quantidade,
        }


class EstrategiaImportacao(str, Enum):
    """Regra de mesclagem escolhida pelo operador para o lote inteiro."""
    DEFINIR = "definir"          # quantidade = valor do arquivo (upsert)
    ENTRADA = "entrada"          # soma ao existente; cria se ausente
    SAIDA = "saida"              # subtrai (mínimo 0); ignora ausentes
    INSERIR = "inserir"          # apenas SKUs novos
    ATUALIZAR = "atualizar"      # apenas SKUs existentes
    SUBSTITUIR = "substituir"    # apaga tudo e insere o arquivo

    @classmethod
    def from_value(cls, value: Any) -> "EstrategiaImportacao":
        if isinstance(value, cls):
            return value
        s = str(value or "").strip().lower().replace("-", "_")
        s = _ALIASES_ESTRATEGIA.get(s, s)
        for e in cls:
            if e.value == s:
                return e
        validas = ", ".join(e.value for e in cls)
        raise ValueError(f"Estratégia de importação desconhecida: {value!r} (válidas: {validas})")


# nomes em inglês usados em planilhas antigas
_ALIASES_ESTRATEGIA = {
    "set": "definir",
    "increment": "entrada",
    "decrement": "saida",
    "insert_only": "inserir",
    "update_only": "atualizar",
    "replace_all": "substituir",
}


class Disposicao(str, Enum):
    APLICAR = "aplicar"
    IGNORAR = "ignorar"


class Classificacao(str, Enum):
    CRIAR = "criar"
    MODIFICAR = "modificar"


@dataclass(frozen=True)
class EntradaPlano:
    """Uma linha do arquivo e o que o plano decidiu sobre ela."""
    linha: LinhaImportacao
    final: LinhaImportacao
    disposicao: Disposicao
    classificacao: Classificacao

    @property
    def aplicar(self) -> bool:
        return self.disposicao is Disposicao.APLICAR


@dataclass
class PlanoReconciliacao:
    """
    Resultado puro do planejador.

    `entradas` preserva a ordem do arquivo, inclusive as linhas ignoradas.
    `payload()` devolve as linhas a gravar, com uma única linha por SKU
    (a última ocorrência no arquivo prevalece).
    """
    estrategia: EstrategiaImportacao
    entradas: List[EntradaPlano] = field(default_factory=list)
    descartadas_parse: int = 0

    @property
    def aplicaveis(self) -> List[EntradaPlano]:
        return [e for e in self.entradas if e.aplicar]

    @property
    def ignoradas(self) -> int:
        return sum(1 for e in self.entradas if not e.aplicar)

    @property
    def vazio(self) -> bool:
        return not self.aplicaveis

    @property
    def substitui_tudo(self) -> bool:
        return self.estrategia is EstrategiaImportacao.SUBSTITUIR

    @property
    def criados(self) -> int:
        return sum(1 for e in self.aplicaveis if e.classificacao is Classificacao.CRIAR)

    @property
    def modificados(self) -> int:
        return sum(1 for e in self.aplicaveis if e.classificacao is Classificacao.MODIFICAR)

    def payload(self) -> List[LinhaImportacao]:
        ultimas: Dict[str, LinhaImportacao] = {}
        for e in self.aplicaveis:
            # reinsere para que a posição acompanhe a última ocorrência
            ultimas.pop(e.final.sku, None)
            ultimas[e.final.sku] = e.final
        return list(ultimas.values())


@dataclass
class ResultadoAplicacao:
    """Contagens (aproximadas) e snapshot relido após a gravação."""
    criados: int = 0
    modificados: int = 0
    sucesso: bool = True
    itens: List[ItemEstoque] = field(default_factory=list)
