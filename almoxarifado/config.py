# almoxarifado/config.py
"""
Configurações globais e valores padrão do almoxarifado.
"""

import os
from dataclasses import dataclass
from pathlib import Path


# Caminho padrão do banco de dados SQLite
DB_PATH = os.environ.get("ALMOXARIFADO_DB", os.path.join(os.getcwd(), "almoxarifado.db"))

# Diretório dos arquivos de log
LOGS_DIR = Path(os.environ.get("ALMOXARIFADO_LOGS", Path(__file__).parent / "logs"))


@dataclass
class DefaultConfig:
    """Valores padrão para parâmetros do sistema."""
    estoque_baixo: int = 5              # limite para alerta de estoque baixo
    confirmar_ajustes: bool = True      # pede confirmação nos ajustes +1/-1
    estrategia_padrao: str = "definir"


# Instância global dos valores padrão
DEFAULTS = DefaultConfig()
