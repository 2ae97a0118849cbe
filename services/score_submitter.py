"""
Score Submission Service

Posts the results of completed timed tests to the remote scoring endpoint.
The typing session never knows whether a submission succeeded; the outcome is
exposed only through the submitter's status.
"""
import enum
import logging
import os
from typing import Any, Dict, Optional

import requests
from pydantic import BaseModel, Field

from models.typing_config import Language, TestMode
from models.typing_session import TypingSession

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:3000"
DEFAULT_TIMEOUT = 10  # seconds
SCORES_PATH = "/api/scores"


class SubmissionStatus(str, enum.Enum):
    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


class ScoreSubmission(BaseModel):
    """Request body for the scores endpoint"""

    wpm: int = Field(..., ge=0)
    accuracy: int = Field(..., ge=0, le=100)
    language: Language
    duration: int = Field(..., gt=0)

    @classmethod
    def from_session(cls, session: TypingSession) -> "ScoreSubmission":
        """Build the payload from a completed session.

        Raises:
            ValueError: if the session is not complete.
        """
        if not session.is_test_complete or session.results is None:
            raise ValueError("Only completed sessions can be submitted")
        return cls(
            wpm=session.results.wpm,
            accuracy=session.results.accuracy,
            language=session.language,
            duration=session.duration,
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class ScoreSubmitter:
    """
    Client for the scores endpoint.

    Submits each completed timed run at most once. Network and HTTP errors
    are logged and reflected in `status`, never raised.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: int = DEFAULT_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        """
        Args:
            base_url: Server root. Defaults to DEVTYPE_API_URL or localhost.
            timeout: Request timeout in seconds
            headers: Extra request headers, e.g. an auth cookie
        """
        self.base_url = (base_url or os.environ.get("DEVTYPE_API_URL", DEFAULT_API_URL)).rstrip("/")
        self.timeout = timeout
        self.headers = dict(headers or {})
        self.status = SubmissionStatus.IDLE
        self._attempted = False

    @property
    def scores_url(self) -> str:
        return f"{self.base_url}{SCORES_PATH}"

    def submit(self, submission: ScoreSubmission) -> SubmissionStatus:
        """POST one score and record the outcome."""
        self.status = SubmissionStatus.SAVING
        try:
            response = requests.post(
                self.scores_url,
                json=submission.to_dict(),
                headers=self.headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Error saving score: %s", e)
            self.status = SubmissionStatus.ERROR
            return self.status

        if response.ok:
            self.status = SubmissionStatus.SAVED
        else:
            logger.error("Score endpoint returned %s", response.status_code)
            self.status = SubmissionStatus.ERROR
        return self.status

    def auto_save(self, session: TypingSession) -> SubmissionStatus:
        """Submit the session's score once per completed timed run.

        Seeing a session that is not complete re-arms the submitter for the
        next run.
        """
        if not session.is_test_complete:
            self._attempted = False
            self.status = SubmissionStatus.IDLE
            return self.status
        if self._attempted or session.mode is not TestMode.TIMED:
            return self.status

        self._attempted = True
        return self.submit(ScoreSubmission.from_session(session))
