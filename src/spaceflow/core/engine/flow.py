# src/spaceflow/core/engine/flow.py
"""
Flow Runner — execução de um Space em ordem topológica ("run flow").

Este módulo percorre os módulos de um GraphStore na ordem produzida pelo
scheduler, delegando a lógica de cada módulo ao `ModuleExecutor`
registrado para o seu `kind` e aplicando as transições de status através
do próprio store (o que mantém log, invalidação e observadores
consistentes).

Decisões arquiteturais:
    - Um módulo só executa se todos os módulos diretamente a montante
      estiverem `done` ou `warning`; caso contrário é pulado
    - Exceções de executores viram status `error` com mensagem legível;
      nenhuma stack trace chega ao Space
    - Ausência de executor para um `kind` é tratada como `error`
    - `flow.stop_on_error` interrompe o agendamento na primeira falha
    - `stop()` e `pause()` apenas suprimem o agendamento seguinte: a
      execução em andamento nunca é cancelada

Invariantes:
    - Cada módulo é executado no máximo uma vez por `run`
    - Um módulo nunca executa antes de suas dependências

Limites explícitos:
    - Execução síncrona, um módulo por vez
    - Não persiste o Space
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from spaceflow.core.graph.types import ERROR_STATUSES, ModuleStatus
from spaceflow.core.traceability.log import LogLevel

from .executor import ExecutionOutcome, ModuleExecutor
from .store import GraphStore


_READY_UPSTREAM = frozenset({ModuleStatus.DONE, ModuleStatus.WARNING})


@dataclass
class FlowExecutionState:
    """Estado observável da execução corrente."""

    is_running: bool = False
    is_paused: bool = False
    current_module_id: Optional[str] = None
    execution_order: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FlowResult:
    """
    Resultado agregado de um `run`.

    Campos:
        - statuses: status final de cada módulo visitado
        - skipped: módulos pulados por dependência não concluída
        - errors: mensagem de erro por módulo que falhou
        - stopped: o agendamento foi interrompido (stop ou stop_on_error)
        - paused: o agendamento foi pausado e pode ser retomado
    """

    statuses: Dict[str, ModuleStatus] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)
    stopped: bool = False
    paused: bool = False


class FlowRunner:
    """Executor de flows sobre um GraphStore (scheduler + executores)."""

    def __init__(self, store: GraphStore, executors: Mapping[str, ModuleExecutor]):
        self.store = store
        self.executors: Dict[str, ModuleExecutor] = dict(executors)
        self.state = FlowExecutionState()
        self._cursor = 0
        self._stop_requested = False

    def _stop_on_error(self) -> bool:
        flow_cfg = (self.store.config or {}).get("flow", {}) or {}
        return bool(flow_cfg.get("stop_on_error", True))

    # ------------------------------------------------------------------
    # Controle
    # ------------------------------------------------------------------
    def stop(self) -> None:
        """Impede o agendamento de novos módulos no run corrente."""
        self._stop_requested = True

    def pause(self) -> None:
        """Suspende o agendamento após o módulo em andamento."""
        if self.state.is_running:
            self.state.is_paused = True

    # ------------------------------------------------------------------
    # Execução
    # ------------------------------------------------------------------
    def run(self) -> FlowResult:
        """
        Planeja e executa o Space inteiro.

        Raises:
            GraphCycleError: se o grafo contiver ciclo (não deveria ocorrer
                em um Space construído via GraphStore).
        """
        order = self.store.execution_order()
        self.state = FlowExecutionState(is_running=True, execution_order=list(order))
        self._cursor = 0
        self._stop_requested = False

        self.store.log.log(
            level=LogLevel.INFO,
            event="flow_started",
            message=f"Execução iniciada ({len(order)} módulo(s))",
            execution_order=list(order),
        )
        return self._drive(FlowResult())

    def resume(self, previous: FlowResult) -> FlowResult:
        """Retoma um run pausado a partir do próximo módulo agendado."""
        if not self.state.is_paused:
            return previous
        self.state.is_paused = False
        self.store.log.log(
            level=LogLevel.INFO,
            event="flow_resumed",
            message="Execução retomada",
        )
        return self._drive(
            FlowResult(
                statuses=dict(previous.statuses),
                skipped=list(previous.skipped),
                errors=dict(previous.errors),
            )
        )

    def _drive(self, partial: FlowResult) -> FlowResult:
        statuses = dict(partial.statuses)
        skipped = list(partial.skipped)
        errors = dict(partial.errors)
        stopped = False

        order = self.state.execution_order
        while self._cursor < len(order):
            if self._stop_requested:
                stopped = True
                break
            if self.state.is_paused:
                self.state.current_module_id = None
                self.store.log.log(
                    level=LogLevel.INFO,
                    event="flow_paused",
                    message="Execução pausada",
                    next_module_id=order[self._cursor],
                )
                return FlowResult(statuses=statuses, skipped=skipped, errors=errors, paused=True)

            module_id = order[self._cursor]
            self._cursor += 1

            module = self.store.get_module(module_id)
            if module is None:
                # removido durante a execução
                continue

            blocked = self._blocked_by(module_id)
            if blocked:
                skipped.append(module_id)
                statuses[module_id] = module.status
                self.store.log.log(
                    level=LogLevel.WARNING,
                    event="module_skipped",
                    message=f"'{module.name}' pulado: dependência não concluída",
                    module_id=module.id,
                    module_name=module.name,
                    blocked_by=blocked,
                )
                continue

            self.state.current_module_id = module_id
            outcome = self._execute(module_id)
            self.store.update_module(
                module_id,
                status=outcome.status,
                outputs=outcome.outputs,
                error_message=outcome.error_message,
            )
            statuses[module_id] = outcome.status

            if outcome.status in ERROR_STATUSES:
                errors[module_id] = outcome.error_message or outcome.status.value
                if self._stop_on_error():
                    stopped = True
                    break

        self.state.is_running = False
        self.state.is_paused = False
        self.state.current_module_id = None

        self.store.log.log(
            level=LogLevel.ERROR if errors else LogLevel.SUCCESS,
            event="flow_finished",
            message="Execução interrompida" if stopped else "Execução concluída",
            failed=sorted(errors),
            skipped=list(skipped),
            stopped=stopped,
        )
        return FlowResult(statuses=statuses, skipped=skipped, errors=errors, stopped=stopped)

    def _blocked_by(self, module_id: str) -> List[str]:
        blocked: List[str] = []
        for c in self.store.space.incoming(module_id):
            source = self.store.get_module(c.source_module_id)
            if source is None or source.status not in _READY_UPSTREAM:
                if c.source_module_id not in blocked:
                    blocked.append(c.source_module_id)
        return blocked

    def _execute(self, module_id: str) -> ExecutionOutcome:
        module = self.store.get_module(module_id)
        executor = self.executors.get(module.kind)
        if executor is None:
            return ExecutionOutcome(
                status=ModuleStatus.ERROR,
                error_message=f"Nenhum executor registrado para o tipo '{module.kind}'",
            )

        self.store.update_module(module_id, status=ModuleStatus.RUNNING, error_message=None)
        upstream = self.store.upstream_outputs(module_id)

        try:
            outcome = executor.execute(module, upstream)
            if not isinstance(outcome, ExecutionOutcome):
                raise TypeError("ModuleExecutor.execute must return ExecutionOutcome")
            return outcome
        except Exception as e:
            return ExecutionOutcome(
                status=ModuleStatus.ERROR,
                error_message=str(e) or e.__class__.__name__,
            )
