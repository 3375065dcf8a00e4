# src/spaceflow/core/config/errors.py
"""
Exceções canônicas da camada de configuração do Spaceflow.

Este módulo define a hierarquia de exceções usada durante o carregamento
e a resolução da configuração do engine (políticas de flow, limite do
log e catálogo de tipos de módulo).

Princípios fundamentais:
    - Exceções são tipadas e semânticas
    - Erros estruturais de configuração são falhas fatais
    - Nenhum fallback silencioso é aplicado

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção aqui representa erro de validação de conexão
"""


class ConfigError(Exception):
    """
    Exceção base para erros de configuração do Spaceflow.

    Permite captura genérica de falhas de configuração, separando-as de
    erros de grafo (`SpaceflowException`) e de rejeições de conexão.
    """


class DefaultsNotFoundError(ConfigError):
    """
    Arquivo de configuração base (defaults) não encontrado.

    Sem defaults não existe catálogo de módulos nem política de flow,
    portanto o GraphStore não pode ser construído.
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Formato de arquivo de configuração não suportado.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """Conteúdo raiz da configuração não é um dicionário."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"flow": {"stop_on_error": true}}
        - override: {"flow": "strict"}

    Nenhum merge parcial é produzido em caso de conflito.
    """
