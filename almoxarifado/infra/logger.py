# almoxarifado/infra/logger.py
"""
Sistema de logging para operações do almoxarifado.

Este módulo configura e fornece loggers para registrar as operações
críticas do sistema: importações, ajustes manuais, exportações e
operações no banco de dados.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional

from almoxarifado.config import LOGS_DIR


def _env_flag(name: str, default: bool = False) -> bool:
    val = os.environ.get(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "sim", "yes", "on"}


# Flag global para habilitar/desabilitar logging
ENABLE_LOGGING = _env_flag("ALMOXARIFADO_LOG")
# Flag global para habilitar/desabilitar prints/output
ENABLE_OUTPUT = _env_flag("ALMOXARIFADO_OUTPUT")

def print_system(*args, **kwargs):
    """Print controlado pelo ENABLE_OUTPUT."""
    if ENABLE_OUTPUT:
        print(*args, **kwargs)

# Configuração base dos loggers
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

def setup_logger(name: str, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """
    Configura um logger específico com arquivo de saída.

    O arquivo só é aberto na primeira mensagem (``delay=True``), então
    importar o módulo não cria arquivos enquanto o logging estiver
    desabilitado.

    Args:
        name: Nome do logger
        log_file: Caminho do arquivo de log
        level: Nível de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Logger configurado
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    # Remove handlers existentes (reimportação em testes)
    while logger.handlers:
        logger.removeHandler(logger.handlers[0])

    file_handler = logging.FileHandler(log_file, encoding='utf-8', delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    return logger


def _ensure_logs_dir() -> None:
    Path(LOGS_DIR).mkdir(parents=True, exist_ok=True)


# Loggers específicos para cada operação
transaction_logger = setup_logger(
    'almoxarifado.transactions',
    str(Path(LOGS_DIR) / 'transactions.log')
)

importacao_logger = setup_logger(
    'almoxarifado.importacoes',
    str(Path(LOGS_DIR) / 'importacoes.log')
)

database_logger = setup_logger(
    'almoxarifado.database',
    str(Path(LOGS_DIR) / 'database.log')
)

system_logger = setup_logger(
    'almoxarifado.system',
    str(Path(LOGS_DIR) / 'system.log')
)


def log_transaction(operation: str, data: Dict[str, Any], result: Optional[Any] = None, error: Optional[str] = None) -> None:
    """
    Registra uma transação completa no log.

    Args:
        operation: Tipo de operação (importacao, ajuste, exportacao...)
        data: Dados da transação
        result: Resultado da operação (opcional)
        error: Mensagem de erro (opcional)
    """
    if not ENABLE_LOGGING:
        return
    _ensure_logs_dir()
    if error:
        transaction_logger.error(f"TRANSACTION_FAILED: {operation} - {error} - Data: {data}")
    else:
        transaction_logger.info(f"TRANSACTION_SUCCESS: {operation} - Result: {result} - Data: {data}")

def log_importacao(action: str, estrategia: str, sku: str = None, quantidade: Any = None, **kwargs) -> None:
    """
    Log específico para importações e ajustes de estoque.

    Args:
        action: Ação realizada (plan, apply, skip, ajuste)
        estrategia: Estratégia de importação do lote
        sku: SKU envolvido (opcional)
        quantidade: Quantidade final gravada (opcional)
        **kwargs: Dados adicionais
    """
    if not ENABLE_LOGGING:
        return
    _ensure_logs_dir()
    log_data = {
        "action": action,
        "estrategia": estrategia,
        "sku": sku,
        "quantidade": quantidade,
        **kwargs
    }
    importacao_logger.info(f"IMPORTACAO_{action.upper()}: {log_data}")

def log_database_operation(table: str, operation: str, affected_rows: int = 0, **kwargs) -> None:
    """
    Log específico para operações no banco de dados.

    Args:
        table: Nome da tabela
        operation: Operação SQL (UPSERT, DELETE, SELECT)
        affected_rows: Número de linhas afetadas
        **kwargs: Dados adicionais
    """
    if not ENABLE_LOGGING:
        return
    _ensure_logs_dir()
    log_data = {
        "table": table,
        "operation": operation,
        "affected_rows": affected_rows,
        **kwargs
    }
    database_logger.info(f"DB_{operation}: {log_data}")

def log_system_event(event: str, details: Dict[str, Any] = None, level: str = "info") -> None:
    """
    Log para eventos do sistema.

    Args:
        event: Descrição do evento
        details: Detalhes adicionais (opcional)
        level: Nível do log (info, warning, error)
    """
    if not ENABLE_LOGGING:
        return
    _ensure_logs_dir()
    log_data = {
        "event": event,
        "details": details or {}
    }
    log_method = getattr(system_logger, level.lower(), system_logger.info)
    log_method(f"SYSTEM_EVENT: {event} - {log_data}")

def log_file_operation(operation: str, file_path: str, rows_processed: int = 0, **kwargs) -> None:
    """
    Log para operações de arquivo (importação/exportação).

    Args:
        operation: Tipo de operação (import, export)
        file_path: Caminho do arquivo
        rows_processed: Número de linhas processadas
        **kwargs: Dados adicionais
    """
    if not ENABLE_LOGGING:
        return
    _ensure_logs_dir()
    log_data = {
        "operation": operation,
        "file_path": file_path,
        "rows_processed": rows_processed,
        "timestamp": datetime.now().isoformat(),
        **kwargs
    }
    system_logger.info(f"FILE_{operation.upper()}: {log_data}")

def get_log_summary(log_type: str = "transactions", lines: int = 100) -> Optional[str]:
    """
    Obtém um resumo dos logs recentes.

    Args:
        log_type: Tipo de log (transactions, importacoes, database, system)
        lines: Número de linhas a retornar

    Returns:
        Conteúdo do log como string
    """
    if not ENABLE_LOGGING:
        return None

    log_files = {
        "transactions": Path(LOGS_DIR) / "transactions.log",
        "importacoes": Path(LOGS_DIR) / "importacoes.log",
        "database": Path(LOGS_DIR) / "database.log",
        "system": Path(LOGS_DIR) / "system.log",
    }

    log_file = log_files.get(log_type)
    if not log_file or not log_file.exists():
        return f"Log {log_type} não encontrado."

    try:
        with open(log_file, 'r', encoding='utf-8') as f:
            all_lines = f.readlines()
            recent_lines = all_lines[-lines:] if len(all_lines) > lines else all_lines
            return ''.join(recent_lines)
    except OSError as e:
        return f"Erro ao ler log {log_type}: {str(e)}"
