"""
Natural-language commentary on pipeline results

The commentary service asks an external text-generation model to explain
training metrics, interpret a single prediction, or extract features from a
free-text description. Calls run as asyncio tasks off the numeric path. Any
failure is logged and replaced with a fallback message; numeric results are
never affected.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Optional

from ..core.data_types import Label, PredictionResult, TrainingReport
from ..detection.predictor import Predictor
from .llm_client import CommentaryClient, CommentaryError, CommentaryRequest

ANALYSIS_FALLBACK = "Failed to load expert insights. Please ensure the commentary service is configured."
ANALYSIS_EMPTY = "No analysis generated."
INTERPRETATION_FALLBACK = "Interpretation unavailable."
PARSE_FALLBACK = "I couldn't parse the data properly. Please provide RT in ms and GSR Mean in uS."


def analysis_prompt(report: TrainingReport) -> str:
    metrics = report.metrics
    importance_lines = "\n".join(
        f"- {item.feature}: {item.importance * 100:.1f}%" for item in report.importances
    ) or "- (none reported)"

    return f"""Act as a senior biomedical signal processing researcher.
Analyze the following ML model results for Drowsiness Detection using GSR and Stroop tests:

Metrics:
- Accuracy: {metrics.accuracy * 100:.1f}%
- Precision: {metrics.precision * 100:.1f}%
- Recall: {metrics.recall * 100:.1f}%
- F1 Score: {metrics.f1 * 100:.1f}%

Feature Importances:
{importance_lines}

Explain:
1. Why the metrics are at this level.
2. Why certain features (like Stroop RT or GSR Mean) dominate the classification.
3. Suggestions for improving accuracy (e.g., HRV, EOG, or deep learning).

Keep the explanation academic yet accessible for a final-year engineering student."""


def clinical_prompt(rt_ms: float, gsr_mean: float, peak_count: int, label: Label) -> str:
    return f"""As a biomedical researcher, provide a brief (2-3 sentences) clinical interpretation for these subject values:
- Reaction Time: {rt_ms} ms
- GSR Mean: {gsr_mean} uS
- SCR Peak Count: {peak_count}
- Predicted State: {label.value}

Explain the physiological significance of these specific values."""


def parse_prompt(message: str) -> str:
    return f"""You are a medical assistant for a drowsiness monitoring platform.
The user will provide details about a subject's current state (Reaction Time, GSR levels, etc.).

Your tasks:
1. Extract numerical features: 'rtMs' (Stroop Reaction Time in milliseconds), 'gsrMean' (GSR Mean value in uS), and 'peakCount' (Number of phasic peaks).
2. If values are missing, leave them null.
3. Provide a brief, professional interpretation of these values from a biomedical perspective in 'explanation'.

Answer with a single JSON object with the keys rtMs, gsrMean, peakCount and explanation.

User message: "{message}\""""


@dataclass
class ParsedQuery:
    """Features extracted from a free-text message, and the resulting prediction"""
    explanation: str
    rt_ms: Optional[float] = None
    gsr_mean: Optional[float] = None
    peak_count: Optional[int] = None
    prediction: Optional[PredictionResult] = None


def _optional_number(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class CommentaryService:
    """
    Async front end to a CommentaryClient

    Without a client every call returns its fallback message immediately.
    """

    def __init__(self, client: Optional[CommentaryClient] = None,
                 predictor: Optional[Predictor] = None):
        self.client = client
        self.predictor = predictor if predictor is not None else Predictor()

    def _generate(self, req: CommentaryRequest) -> str:
        if self.client is None:
            raise CommentaryError("No commentary client configured")
        return self.client.generate(req).text

    async def _generate_async(self, req: CommentaryRequest) -> str:
        # Client calls block on network I/O; keep them off the event loop
        return await asyncio.to_thread(self._generate, req)

    async def analyze_results(self, report: TrainingReport) -> str:
        """Expert explanation of training metrics and importances"""
        try:
            text = await self._generate_async(CommentaryRequest(prompt=analysis_prompt(report)))
        except Exception as e:
            logging.error(f"Results analysis failed: {e}")
            return ANALYSIS_FALLBACK
        return text.strip() or ANALYSIS_EMPTY

    async def clinical_commentary(self, rt_ms: float, gsr_mean: float,
                                  peak_count: int, label: Label) -> str:
        """Short interpretation of one prediction"""
        try:
            text = await self._generate_async(
                CommentaryRequest(prompt=clinical_prompt(rt_ms, gsr_mean, peak_count, label), max_tokens=256)
            )
        except Exception as e:
            logging.error(f"Clinical commentary failed: {e}")
            return INTERPRETATION_FALLBACK
        return text.strip() or INTERPRETATION_FALLBACK

    async def parse_and_predict(self, message: str) -> ParsedQuery:
        """
        Extract (rtMs, gsrMean, peakCount) from free text and predict

        The prediction is made locally by the predictor once reaction time
        and GSR mean are both known; a missing peak count counts as zero.
        """
        try:
            text = await self._generate_async(
                CommentaryRequest(prompt=parse_prompt(message), json_response=True, temperature=0.0)
            )
            parsed = json.loads(text)
            if not isinstance(parsed, dict):
                raise ValueError("Commentary response is not a JSON object")
        except Exception as e:
            logging.error(f"Message parsing failed: {e}")
            return ParsedQuery(explanation=PARSE_FALLBACK)

        rt_ms = _optional_number(parsed.get("rtMs"))
        gsr_mean = _optional_number(parsed.get("gsrMean"))
        peaks = _optional_number(parsed.get("peakCount"))
        peak_count = int(peaks) if peaks is not None else None

        prediction = None
        if rt_ms is not None and gsr_mean is not None:
            prediction = self.predictor.predict(rt_ms, gsr_mean, peak_count or 0)

        return ParsedQuery(
            explanation=str(parsed.get("explanation") or PARSE_FALLBACK),
            rt_ms=rt_ms,
            gsr_mean=gsr_mean,
            peak_count=peak_count,
            prediction=prediction,
        )

    def schedule_analysis(self, report: TrainingReport) -> "asyncio.Task[str]":
        """Start results analysis as a task on the running loop"""
        return asyncio.get_running_loop().create_task(self.analyze_results(report))

    def schedule_clinical(self, rt_ms: float, gsr_mean: float,
                          peak_count: int, label: Label) -> "asyncio.Task[str]":
        """Start clinical commentary as a task on the running loop"""
        return asyncio.get_running_loop().create_task(
            self.clinical_commentary(rt_ms, gsr_mean, peak_count, label)
        )
