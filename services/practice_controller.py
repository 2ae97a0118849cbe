"""
PracticeController: drives a TypingSession the way the typing screen does.

Loads saved settings, feeds snippets for the configured language, forwards
input and timer ticks, chains snippets during a run, and hands completed
timed runs to the score submitter.
"""
import logging
from typing import Optional

from models.typing_config import Language, TestMode
from models.typing_session import SessionResults, SessionState, TypingSession
from services.score_submitter import ScoreSubmitter
from services.snippet_library import SnippetLibrary

logger = logging.getLogger(__name__)


class PracticeController:
    def __init__(
        self,
        session: TypingSession,
        library: Optional[SnippetLibrary] = None,
        submitter: Optional[ScoreSubmitter] = None,
    ) -> None:
        self.session = session
        self.library = library or SnippetLibrary()
        self.submitter = submitter
        self.snippets_completed = 0

    def load(self) -> None:
        """Apply saved settings and progress, then pick the first snippet."""
        saved = self.session.progress.load_settings(self.session.config)
        if saved != self.session.config:
            self.session.config = saved
            self.session.time_remaining = saved.duration
        self.session.load_progress()
        self.load_snippet()

    def load_snippet(self, language: Optional[Language] = None) -> str:
        snippet = self.library.get_random_snippet(language or self.session.language)
        self.session.assign_target(snippet.code)
        return snippet.code

    def handle_input(self, text: str) -> None:
        """Forward an input change, starting the run on the first keystroke."""
        if self.session.state is SessionState.CONFIGURED:
            self.session.start()
        self.session.apply_input(text)
        if self.session.target_text and text == self.session.target_text:
            self.on_snippet_complete()

    def on_snippet_complete(self) -> None:
        """Chain the next snippet without resetting the run's counters."""
        if not self.session.is_test_active:
            return
        self.snippets_completed += 1
        self.load_snippet()

    def tick(self) -> Optional[SessionResults]:
        """Forward the one-second timer; returns results when the run just ended."""
        if not self.session.is_test_active or self.session.is_paused:
            return None
        self.session.tick()
        if self.session.is_test_complete:
            self._after_complete()
            return self.session.results
        return None

    def stop(self) -> SessionResults:
        """End the run now (practice mode's explicit stop)."""
        results = self.session.finalize()
        self._after_complete()
        return results

    def _after_complete(self) -> None:
        if self.submitter is not None:
            status = self.submitter.auto_save(self.session)
            logger.info("Score submission status: %s", status.value)

    def restart(self) -> None:
        self.snippets_completed = 0
        if self.session.state is not SessionState.IDLE:
            self.session.reset()
        self.load_snippet()
        self._rearm_submitter()

    def change_config(
        self,
        duration: Optional[int] = None,
        language: Optional[Language] = None,
        mode: Optional[TestMode] = None,
    ) -> None:
        """Apply new settings and start over on a fresh snippet."""
        self.snippets_completed = 0
        if self.session.state is not SessionState.IDLE:
            self.session.reset()
        self.session.configure(duration=duration, language=language, mode=mode)
        self.load_snippet()
        self._rearm_submitter()

    def exit(self) -> None:
        """Leave the results screen; the next keystroke starts a new run on a fresh snippet."""
        self.snippets_completed = 0
        if self.session.state is not SessionState.IDLE:
            self.session.reset()
        self.load_snippet()
        self._rearm_submitter()

    def _rearm_submitter(self) -> None:
        if self.submitter is not None:
            self.submitter.auto_save(self.session)
