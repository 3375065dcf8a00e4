"""
Spaceflow — Canonical Connection Validation Errors (v1)

Este módulo define o padrão canônico de erros de validação de conexão.
Uma proposta de conexão rejeitada não é uma exceção: é um resultado
tipado devolvido ao chamador (UI) para ser exibido ao usuário.

Esses erros devem ser:

- explícitos
- serializáveis
- acionáveis

Nenhuma correção implícita é aplicada: o chamador apenas não recebe a
aresta e pode tentar outra proposta.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConnectionErrorPayload:
    """
    Payload canônico de rejeição de conexão.

    Campos:
    - kind: código estável do erro (um dos sete códigos do validator)
    - message: mensagem curta, humana e objetiva
    - details: ids envolvidos e dados relevantes para diagnóstico
    - hint: ação sugerida ao usuário
    """

    kind: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de códigos (ordem de avaliação do validator)
# ---------------------------------------------------------------------------

MODULE_NOT_FOUND = "MODULE_NOT_FOUND"
MODULE_NOT_DONE = "MODULE_NOT_DONE"
EMPTY_OUTPUT = "EMPTY_OUTPUT"
PORT_NOT_FOUND = "PORT_NOT_FOUND"
TYPE_MISMATCH = "TYPE_MISMATCH"
MODULE_RUNNING = "MODULE_RUNNING"
CIRCULAR_DEPENDENCY = "CIRCULAR_DEPENDENCY"

VALIDATION_ORDER = (
    MODULE_NOT_FOUND,
    MODULE_NOT_DONE,
    EMPTY_OUTPUT,
    PORT_NOT_FOUND,
    TYPE_MISMATCH,
    MODULE_RUNNING,
    CIRCULAR_DEPENDENCY,
)


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def module_not_found(
    *,
    missing_module_ids: list,
    hint: str = "Atualize o canvas: um dos módulos da conexão foi removido.",
) -> ConnectionErrorPayload:
    return ConnectionErrorPayload(
        kind=MODULE_NOT_FOUND,
        message="Módulo não encontrado no space",
        details={"missing_module_ids": list(missing_module_ids)},
        hint=hint,
    )


def module_not_done(
    *,
    source_module_id: str,
    status: str,
    hint: str = "Execute o módulo de origem antes de conectá-lo.",
) -> ConnectionErrorPayload:
    return ConnectionErrorPayload(
        kind=MODULE_NOT_DONE,
        message="O módulo de origem ainda não terminou",
        details={"source_module_id": source_module_id, "status": status},
        hint=hint,
    )


def empty_output(
    *,
    source_module_id: str,
    source_port_id: str,
    hint: str = "Escolha uma porta de saída que produza dados.",
) -> ConnectionErrorPayload:
    return ConnectionErrorPayload(
        kind=EMPTY_OUTPUT,
        message="Não há dados disponíveis para conectar a partir desta porta",
        details={"source_module_id": source_module_id, "source_port_id": source_port_id},
        hint=hint,
    )


def port_not_found(
    *,
    target_module_id: str,
    target_port_id: str,
    hint: str = "Conecte a uma porta de entrada existente do módulo de destino.",
) -> ConnectionErrorPayload:
    return ConnectionErrorPayload(
        kind=PORT_NOT_FOUND,
        message="Porta de entrada inválida",
        details={"target_module_id": target_module_id, "target_port_id": target_port_id},
        hint=hint,
    )


def type_mismatch(
    *,
    data_type: str,
    accepted_types: list,
    hint: str = "Conecte uma saída cujo tipo seja aceito por esta entrada.",
) -> ConnectionErrorPayload:
    return ConnectionErrorPayload(
        kind=TYPE_MISMATCH,
        message="Este módulo não aceita o tipo de dado que está sendo conectado",
        details={"data_type": data_type, "accepted_types": list(accepted_types)},
        hint=hint,
    )


def module_running(
    *,
    target_module_id: str,
    hint: str = "Aguarde o módulo de destino terminar antes de conectar novas entradas.",
) -> ConnectionErrorPayload:
    return ConnectionErrorPayload(
        kind=MODULE_RUNNING,
        message="O módulo de destino está em execução",
        details={"target_module_id": target_module_id},
        hint=hint,
    )


def circular_dependency(
    *,
    source_module_id: str,
    target_module_id: str,
    hint: str = "Remova a conexão que fecha o laço ou reorganize o fluxo.",
) -> ConnectionErrorPayload:
    return ConnectionErrorPayload(
        kind=CIRCULAR_DEPENDENCY,
        message="Não é possível criar laços entre módulos",
        details={"source_module_id": source_module_id, "target_module_id": target_module_id},
        hint=hint,
    )
