# Check Mate Engine - main entry point

import json
import logging
from datetime import datetime
from typing import Optional
from uuid import uuid4

from checkmate_core.adapters.memory import (
    InMemoryMessageBus,
    InMemoryResultStore,
    InMemorySettingsStore,
    RecordingStatusPresenter,
)
from checkmate_core.collaborators import (
    MessageBus,
    ResultStore,
    SettingsError,
    SettingsStore,
    StatusPresenter,
)
from checkmate_core.config import CheckMateConfig
from checkmate_core.pipeline.errors import PipelineRequestError
from checkmate_core.pipeline.orchestrator import ClaimPipeline, ClaimVerifier, PipelineOutcome
from checkmate_core.schema.messages import AnalysisRequest, CompletionSignal
from checkmate_core.schema.verdict import AggregateStatus
from checkmate_core.tools.sonar_client import SonarClient
from checkmate_core.utils.trace import Trace
from checkmate_core.verification.concurrency import shared_gate

logger = logging.getLogger(__name__)


def _new_trace_id() -> str:
    return f"{datetime.now().strftime('%Y-%m-%d_%H-%M-%S')}_{str(uuid4())[:6]}"


class CheckMateEngine:
    """
    The main entry point: handles one analysis request end to end.

    Reads the policy from the settings store, runs the claim pipeline, stores
    the result, updates the status badge and always sends a completion signal.
    Request-level failures become `CompletionSignal(success=False)`; nothing
    is raised past `handle_request`.
    """

    def __init__(
        self,
        config: CheckMateConfig,
        *,
        settings: Optional[SettingsStore] = None,
        results: Optional[ResultStore] = None,
        bus: Optional[MessageBus] = None,
        presenter: Optional[StatusPresenter] = None,
        verifier: Optional[ClaimVerifier] = None,
    ):
        self.config = config
        runtime = config.runtime

        threshold = config.confidence_threshold
        if threshold is None:
            threshold = runtime.verdict.default_threshold
        self.settings = settings or InMemorySettingsStore(credential=config.api_key or "", threshold=threshold)
        self.results = results or InMemoryResultStore()
        self.bus = bus or InMemoryMessageBus()
        self.presenter = presenter or RecordingStatusPresenter()

        self._owns_verifier = verifier is None
        self.verifier = verifier or SonarClient(
            api_url=config.oracle_url,
            model=config.oracle_model,
            timeout_s=runtime.oracle.timeout_sec,
            max_retries=runtime.oracle.max_retries,
            retry_delays_s=runtime.oracle.retry_delays_sec,
            gate=shared_gate(runtime.oracle.concurrency),
        )
        self.pipeline = ClaimPipeline(self.verifier, runtime=runtime)

        logger.debug("Effective config: %s", json.dumps(runtime.to_safe_log_dict(), ensure_ascii=False))

    async def __aenter__(self) -> "CheckMateEngine":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_verifier and isinstance(self.verifier, SonarClient):
            await self.verifier.close()

    async def analyze(self, text: str, request_id: Optional[str] = None) -> PipelineOutcome:
        """
        Run the pipeline with the current settings, without touching collaborators.

        Raises:
            SettingsError, PipelineRequestError
        """
        policy = self.settings.load_policy()
        return await self.pipeline.run(text, request_id or str(uuid4()), policy)

    async def handle_request(self, request: AnalysisRequest) -> CompletionSignal:
        Trace.start(_new_trace_id(), request_id=request.request_id, runtime=self.config.runtime)
        Trace.event("engine.request.start", {"request_id": request.request_id, "text_len": len(request.text)})
        try:
            try:
                outcome = await self.analyze(request.text, request.request_id)
            except (PipelineRequestError, SettingsError) as e:
                logger.warning("[Engine] Request %s failed: %s", request.request_id, e)
                return self._complete(request.request_id, AggregateStatus.NONE, error=str(e))
            except Exception as e:
                logger.exception("[Engine] Request %s crashed: %s", request.request_id, e)
                return self._complete(request.request_id, AggregateStatus.NONE, error=f"Analysis failed: {e}")

            try:
                self.results.save(outcome.result)
            except Exception as e:
                logger.exception("[Engine] Could not store result for %s: %s", request.request_id, e)
                return self._complete(request.request_id, AggregateStatus.NONE, error=f"Could not store result: {e}")

            return self._complete(request.request_id, outcome.status)
        finally:
            Trace.stop()

    def _complete(self, request_id: str, status: AggregateStatus, *, error: Optional[str] = None) -> CompletionSignal:
        signal = CompletionSignal(request_id=request_id, success=error is None, error=error)
        try:
            self.presenter.show(status)
        except Exception as e:
            logger.exception("[Engine] Status presenter failed: %s", e)
        try:
            self.bus.send(signal)
        except Exception as e:
            logger.exception("[Engine] Completion signal for %s not delivered: %s", request_id, e)
        Trace.event("engine.request.done", signal.to_dict())
        return signal

    def clear(self) -> None:
        """Reset the status badge (e.g. on install or when leaving the page)."""
        self.presenter.show(AggregateStatus.NONE)
