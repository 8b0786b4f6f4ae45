"""Mama Brain: deterministic Persian response engine."""

from .angles import AngleCandidate, AngleType, derive_angle_candidates, get_all_angle_keys, select_primary_angle
from .bias import BiasSignal, apply_bias_to_angles, calculate_angle_bias, derive_aggregate_seed
from .brain import compose_depth_response, get_mama_response
from .classifiers import (
    AnonymizedSignal,
    EmotionalTone,
    analyze_emotional_tone,
    derive_anonymized_signals,
    detect_civic_empowerment,
)
from .config import MamaBrainConfig, load_config
from .keyboard import CorrectionResult, correct_persian_keyboard
from .knowledge import FaqEntry, InMemoryFaqStore, import_faq_entries, load_faq_file
from .pipeline import (
    PipelineFeedback,
    PipelineResult,
    PipelineStateMachine,
    PipelineStep,
    ResponseSource,
    StepStatus,
    run_mama_pipeline,
)
from .selector import SelectionResult, select_civic_response, select_empathetic_response
from .templates import DepthTemplate, generate_deep_response, get_all_depth_template_keys, get_depth_template
from .utils import enforce_mama_prefix, normalize_persian_text, sanitize_user_prompt

__all__ = [
    "AngleCandidate",
    "AngleType",
    "AnonymizedSignal",
    "BiasSignal",
    "CorrectionResult",
    "DepthTemplate",
    "EmotionalTone",
    "FaqEntry",
    "InMemoryFaqStore",
    "MamaBrainConfig",
    "PipelineFeedback",
    "PipelineResult",
    "PipelineStateMachine",
    "PipelineStep",
    "ResponseSource",
    "SelectionResult",
    "StepStatus",
    "analyze_emotional_tone",
    "apply_bias_to_angles",
    "calculate_angle_bias",
    "compose_depth_response",
    "correct_persian_keyboard",
    "derive_aggregate_seed",
    "derive_angle_candidates",
    "derive_anonymized_signals",
    "detect_civic_empowerment",
    "enforce_mama_prefix",
    "generate_deep_response",
    "get_all_angle_keys",
    "get_all_depth_template_keys",
    "get_depth_template",
    "get_mama_response",
    "import_faq_entries",
    "load_config",
    "load_faq_file",
    "normalize_persian_text",
    "run_mama_pipeline",
    "sanitize_user_prompt",
    "select_civic_response",
    "select_empathetic_response",
    "select_primary_angle",
]

__version__ = "0.1.0"
