"""Wizard state for one upload → preferences → result session."""

from __future__ import annotations

import dataclasses
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from .errors import AnalysisError, ValidationError
from .models import AnalysisResult, FlyerSubmission, Preferences
from .request import build_request

if TYPE_CHECKING:
    from .analysis import FlyerAnalyzer

logger = logging.getLogger(__name__)


class Step(Enum):
    COLLECTING = "collecting"
    SUBMITTING = "submitting"
    SHOWING_RESULT = "showing_result"


class Event(Enum):
    SELECT_FILE = "select_file"
    CLEAR_FILE = "clear_file"
    EDIT_PREFERENCES = "edit_preferences"
    SUBMIT = "submit"
    SUCCEED = "succeed"
    FAIL = "fail"
    RESET = "reset"


class InvalidTransition(RuntimeError):
    def __init__(self, step: Step, event: Event) -> None:
        super().__init__(f"{step.value} では {event.value} を実行できません")
        self.step = step
        self.event = event


_TRANSITIONS: dict[tuple[Step, Event], Step] = {
    (Step.COLLECTING, Event.SELECT_FILE): Step.COLLECTING,
    (Step.COLLECTING, Event.CLEAR_FILE): Step.COLLECTING,
    (Step.COLLECTING, Event.EDIT_PREFERENCES): Step.COLLECTING,
    (Step.COLLECTING, Event.SUBMIT): Step.SUBMITTING,
    (Step.SUBMITTING, Event.SUCCEED): Step.SHOWING_RESULT,
    (Step.SUBMITTING, Event.FAIL): Step.COLLECTING,
}


def transition(step: Step, event: Event) -> Step:
    """Return the step reached from ``step`` on ``event``.

    RESET leads back to COLLECTING from anywhere.

    Raises:
        InvalidTransition: The event is not allowed in ``step``.
    """
    if event is Event.RESET:
        return Step.COLLECTING
    try:
        return _TRANSITIONS[(step, event)]
    except KeyError:
        raise InvalidTransition(step, event) from None


class FlyerChefSession:
    """Holds the input, result and error state a front end renders from.

    Only one analysis can be in flight: ``submit`` is rejected while the
    session is SUBMITTING.
    """

    def __init__(
        self,
        analyzer: FlyerAnalyzer,
        default_preferences: Preferences | None = None,
    ) -> None:
        self._analyzer = analyzer
        self._defaults = default_preferences or Preferences()
        self._step = Step.COLLECTING
        self.preferences = dataclasses.replace(self._defaults)
        self.submission: FlyerSubmission | None = None
        self.result: AnalysisResult | None = None
        self.error: str | None = None

    @property
    def step(self) -> Step:
        return self._step

    @property
    def can_submit(self) -> bool:
        """True when the file and budget preconditions hold."""
        if self._step is not Step.COLLECTING:
            return False
        try:
            build_request(self.submission, self.preferences)
        except ValidationError:
            return False
        return True

    def _fire(self, event: Event) -> None:
        previous = self._step
        self._step = transition(previous, event)
        logger.debug("状態遷移: %s --%s--> %s", previous.value, event.value, self._step.value)

    def _release_submission(self) -> None:
        if self.submission is not None:
            self.submission.release()
            self.submission = None

    def select_file(self, submission: FlyerSubmission) -> None:
        self._fire(Event.SELECT_FILE)
        if self.submission is not submission:
            self._release_submission()
        self.submission = submission
        self.error = None

    def clear_file(self) -> None:
        self._fire(Event.CLEAR_FILE)
        self._release_submission()
        self.result = None
        self.error = None

    def update_preferences(self, **changes: Any) -> Preferences:
        """Replace fields of the current preferences, e.g. ``budget=1500``."""
        self._fire(Event.EDIT_PREFERENCES)
        self.preferences = dataclasses.replace(self.preferences, **changes)
        return self.preferences

    async def submit(self) -> AnalysisResult | None:
        """Validate, analyze, and move to the result step.

        Returns the result, or None when validation or analysis failed;
        the message is then available as ``error``.
        """
        if self._step is not Step.COLLECTING:
            raise InvalidTransition(self._step, Event.SUBMIT)

        try:
            request = build_request(self.submission, self.preferences)
        except ValidationError as e:
            self.error = str(e)
            return None

        self.error = None
        self._fire(Event.SUBMIT)
        try:
            result = await self._analyzer.analyze(request)
        except AnalysisError as e:
            if self._step is Step.SUBMITTING:
                self._fire(Event.FAIL)
                self.error = str(e)
            return None
        except BaseException:
            if self._step is Step.SUBMITTING:
                self._fire(Event.FAIL)
            raise

        if self._step is not Step.SUBMITTING:
            logger.info("解析中にリセットされたため結果を破棄します")
            return None

        self._fire(Event.SUCCEED)
        self.result = result
        self._release_submission()
        return result

    def reset(self) -> None:
        self._fire(Event.RESET)
        self._release_submission()
        self.result = None
        self.error = None
        self.preferences = dataclasses.replace(self._defaults)

    def summary(self) -> str:
        """Format the current result for terminal display."""
        if self._step is not Step.SHOWING_RESULT or self.result is None:
            raise RuntimeError("表示する解析結果がありません")
        return self.result.display(self.preferences)
