# src/dcd/core/config/errors.py
"""
Exceções canônicas da camada de configuração do dcd.

Este módulo define a hierarquia oficial de exceções utilizadas durante
o carregamento, merge e validação das settings do executor.

As exceções aqui definidas representam **configuração inválida**,
e não falhas de execução de Steps.

Invariantes:
    - Todas as exceções de configuração herdam de `SettingsError`
    - Nenhuma exceção representa erro de pipeline ou de backend

Limites explícitos:
    - Não executa pipeline
    - Não realiza fallback ou recovery
"""


class SettingsError(Exception):
    """
    Exceção base para erros relacionados às settings do dcd.

    Permite captura genérica de erros de configuração pela CLI,
    distinguindo-os de falhas de pre-flight ou de backend.
    """


class SettingsNotFoundError(SettingsError):
    """
    Arquivo de settings explicitamente informado não existe.

    Decisões arquiteturais:
        - Um caminho informado pelo operador é obrigatório
        - Não há fallback silencioso para os defaults embutidos
    """


class UnsupportedSettingsFormatError(SettingsError):
    """
    Formato do arquivo de settings não suportado.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidSettingsFormatError(SettingsError):
    """
    O arquivo de settings não pôde ser lido ou interpretado.

    Cobre YAML/JSON malformado, bytes que não são UTF-8 e falhas de leitura.
    A exceção original é preservada como causa.
    """


class InvalidSettingsRootTypeError(SettingsError):
    """O conteúdo raiz do arquivo de settings não é um dicionário."""


class SettingsTypeConflictError(SettingsError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - defaults: {"engine": {"event_buffer": 32}}
        - override: {"engine": "fast"}

    Nenhum merge parcial é produzido em caso de conflito.
    """


class InvalidSettingsValueError(SettingsError):
    """Valor presente nas settings é estruturalmente válido, mas inaceitável (ex.: buffer <= 0)."""
