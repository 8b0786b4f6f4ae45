"""Deterministic seven-step Mama Brain pipeline.

Steps run strictly in order: receive, keyboard correction, knowledge lookup,
emotional tone, response selection, refinement and send preparation. Every
status change is pushed to the registered observers as a fresh snapshot.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .classifiers import analyze_emotional_tone, detect_civic_empowerment
from .config import PipelineConfig
from .errors import InvalidTransitionError
from .keyboard import correct_persian_keyboard
from .knowledge import FaqLookup, lookup_faq
from .logging import get_logger
from .selector import select_civic_response, select_empathetic_response
from .utils import PerfTimer, measure_async, refine_response

LOGGER = get_logger(__name__)


class StepStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"


class ResponseSource(str, Enum):
    FAQ = "faq"
    EMPATHETIC = "empathetic"
    CIVIC_EMPOWERMENT = "civic-empowerment"


_ALLOWED_TRANSITIONS = {
    StepStatus.PENDING: {StepStatus.ACTIVE},
    StepStatus.ACTIVE: {StepStatus.COMPLETED, StepStatus.FAILED},
    StepStatus.COMPLETED: set(),
    StepStatus.FAILED: set(),
}


@dataclass(frozen=True)
class PipelineStep:
    id: int
    name: str
    status: StepStatus
    description: str


STEP_DEFINITIONS: Tuple[Tuple[int, str, str], ...] = (
    (1, "دریافت پیام", "پیام کاربر دریافت شد"),
    (2, "اصلاح کیبورد", "بررسی و اصلاح کیبورد فارسی"),
    (3, "جستجوی دانش", "جستجو در بانک دانش ماما"),
    (4, "تحلیل احساسی", "تحلیل احساسات پیام"),
    (5, "انتخاب پاسخ", "انتخاب بهترین پاسخ"),
    (6, "پالایش نهایی", "پالایش و بهینه‌سازی پاسخ"),
    (7, "آماده‌سازی", "آماده‌سازی برای ارسال"),
)

StepObserver = Callable[[List[PipelineStep]], None]


class PipelineStateMachine:
    """Ordered step statuses with validated transitions and snapshot broadcasting."""

    def __init__(self, observers: Sequence[StepObserver] = ()) -> None:
        self._steps: List[PipelineStep] = [
            PipelineStep(id=step_id, name=name, status=StepStatus.PENDING, description=description)
            for step_id, name, description in STEP_DEFINITIONS
        ]
        self._observers: List[StepObserver] = list(observers)

    def subscribe(self, observer: StepObserver) -> None:
        self._observers.append(observer)

    def snapshot(self) -> List[PipelineStep]:
        return list(self._steps)

    def status_of(self, step_id: int) -> StepStatus:
        return self._steps[self._position(step_id)].status

    def _position(self, step_id: int) -> int:
        for position, step in enumerate(self._steps):
            if step.id == step_id:
                return position
        raise InvalidTransitionError(f"Unknown pipeline step {step_id}")

    def transition(self, step_id: int, status: StepStatus) -> None:
        position = self._position(step_id)
        current = self._steps[position]
        if status not in _ALLOWED_TRANSITIONS[current.status]:
            raise InvalidTransitionError(
                f"Step {step_id} cannot move from {current.status.value} to {status.value}"
            )
        self._steps[position] = replace(current, status=status)
        self._notify()

    def _notify(self) -> None:
        for observer in self._observers:
            observer(self.snapshot())

    def active_step(self) -> Optional[PipelineStep]:
        return next((step for step in self._steps if step.status is StepStatus.ACTIVE), None)

    def failed_step(self) -> Optional[PipelineStep]:
        return next((step for step in self._steps if step.status is StepStatus.FAILED), None)

    def abort(self) -> Optional[PipelineStep]:
        """Mark the run as failed and return the failed step.

        The step in flight is failed; when none is in flight (the error came
        after a step completed) the next pending step is failed instead. The
        status is recorded before observers are told, so the snapshot is
        accurate even if an observer raises.
        """
        target = self.active_step() or next(
            (step for step in self._steps if step.status is StepStatus.PENDING), None
        )
        if target is None:
            return None
        failed = replace(target, status=StepStatus.FAILED)
        self._steps[self._position(target.id)] = failed
        self._notify()
        return failed


@dataclass
class PipelineFeedback:
    correction_applied: bool = False
    faq_match_found: bool = False
    response_source: ResponseSource = ResponseSource.EMPATHETIC
    empathetic_index: Optional[int] = None
    steps_summary: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "correction_applied": self.correction_applied,
            "faq_match_found": self.faq_match_found,
            "response_source": self.response_source.value,
            "empathetic_index": self.empathetic_index,
            "steps_summary": list(self.steps_summary),
        }


@dataclass
class PipelineResult:
    response_content: str
    feedback: PipelineFeedback
    selected_template_key: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "response_content": self.response_content,
            "feedback": self.feedback.to_dict(),
            "selected_template_key": self.selected_template_key,
        }


async def run_mama_pipeline(
    user_message: str,
    faq_lookup: FaqLookup,
    on_step_update: Optional[StepObserver] = None,
    last_template_key: Optional[str] = None,
    aggregate_seed: Optional[int] = None,
    *,
    config: Optional[PipelineConfig] = None,
) -> PipelineResult:
    """Run ``user_message`` through the seven pipeline steps.

    A failing knowledge lookup is recorded in the feedback and the pipeline
    falls back to the template banks. Any other exception marks the active
    step as failed and propagates to the caller.
    """
    config = config or PipelineConfig()
    machine = PipelineStateMachine([on_step_update] if on_step_update else ())
    feedback = PipelineFeedback()
    timer = PerfTimer("Mama pipeline")

    async def begin(step_id: int) -> None:
        machine.transition(step_id, StepStatus.ACTIVE)
        delay = config.step_delays.get(step_id, 0.0)
        if delay > 0:
            await asyncio.sleep(delay)

    def finish(step_id: int, summary: str) -> None:
        feedback.steps_summary.append(summary)
        machine.transition(step_id, StepStatus.COMPLETED)
        timer.lap(f"step {step_id}")

    try:
        await begin(1)
        finish(1, "پیام دریافت شد")

        await begin(2)
        correction = correct_persian_keyboard(user_message)
        message = correction.corrected
        feedback.correction_applied = correction.was_changed
        finish(2, "کیبورد اصلاح شد" if correction.was_changed else "نیاز به اصلاح نبود")

        await begin(3)
        faq_match = None
        try:
            faq_match = await measure_async("Knowledge lookup", lambda: lookup_faq(faq_lookup, message))
        except Exception as exc:
            LOGGER.warning("Knowledge lookup failed: %s", type(exc).__name__)
            lookup_summary = "خطا در جستجوی دانش"
        else:
            lookup_summary = "پاسخ در دانش یافت شد" if faq_match else "پاسخ در دانش یافت نشد"
        feedback.faq_match_found = faq_match is not None
        finish(3, lookup_summary)

        await begin(4)
        tone = analyze_emotional_tone(message)
        finish(4, f"لحن احساسی: {tone.value}")

        await begin(5)
        selected_key: Optional[str] = None
        is_civic = detect_civic_empowerment(message)
        if is_civic and not (faq_match is not None and config.faq_overrides_civic):
            selection = select_civic_response(message, last_template_key, aggregate_seed)
            response = selection.content
            selected_key = selection.key
            feedback.response_source = ResponseSource.CIVIC_EMPOWERMENT
            summary = "پاسخ توانمندسازی مدنی انتخاب شد"
        elif faq_match is not None:
            response = refine_response(faq_match.answer)
            feedback.response_source = ResponseSource.FAQ
            summary = "پاسخ از دانش انتخاب شد"
        else:
            selection = select_empathetic_response(message, last_template_key, aggregate_seed)
            response = selection.content
            selected_key = selection.key
            feedback.empathetic_index = selection.index
            feedback.response_source = ResponseSource.EMPATHETIC
            summary = "پاسخ همدلانه انتخاب شد"
        finish(5, summary)

        await begin(6)
        response = refine_response(response)
        finish(6, "پاسخ پالایش شد")

        await begin(7)
        finish(7, "آماده ارسال")
    except Exception:
        try:
            machine.abort()
        except Exception:
            LOGGER.exception("Step observer raised while reporting a pipeline failure")
        failed = machine.failed_step()
        if failed is not None:
            LOGGER.error("Pipeline failed at step %d (%s)", failed.id, failed.name)
        raise

    timer.end()
    LOGGER.info(
        "Pipeline completed: source=%s key=%s corrected=%s",
        feedback.response_source.value,
        selected_key,
        feedback.correction_applied,
    )
    return PipelineResult(response_content=response, feedback=feedback, selected_template_key=selected_key)
