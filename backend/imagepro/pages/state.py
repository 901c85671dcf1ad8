"""Feature page state: an immutable snapshot replaced on every transition, and a
session that applies operation outcomes last-write-wins via a generation counter."""
import logging
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Optional

from imagepro.compression.models import SourceImage
from imagepro.errors import ImageProError

logger = logging.getLogger("imagepro.pages")

GENERIC_FAILURE = "Something went wrong, please try again"


@dataclass(frozen=True)
class PageState:
    source: Optional[SourceImage] = None
    result: Any = None
    error: Optional[str] = None
    in_flight: bool = False

    def select(self, source: SourceImage) -> "PageState":
        """A new source discards any previous result and error."""
        return PageState(source=source)

    def reject(self, message: str) -> "PageState":
        """Failed selection: keep what was shown, replace only the error."""
        return replace(self, error=message)

    def begin(self) -> "PageState":
        return replace(self, result=None, error=None, in_flight=True)

    def succeed(self, result: Any) -> "PageState":
        return replace(self, result=result, error=None, in_flight=False)

    def fail(self, message: str) -> "PageState":
        return replace(self, result=None, error=message, in_flight=False)


class FeatureSession:
    """Owns the current PageState of one feature page."""

    def __init__(self, state: Optional[PageState] = None):
        self._state = state or PageState()
        self._generation = 0

    @property
    def state(self) -> PageState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    def select(self, source: SourceImage) -> PageState:
        # Supersedes any operation still running for the previous source.
        self._generation += 1
        self._state = self._state.select(source)
        return self._state

    def reject(self, message: str) -> PageState:
        self._state = self._state.reject(message)
        return self._state

    async def run(self, operation: Callable[[], Awaitable[Any]]) -> PageState:
        """Run one operation. Its outcome is applied only if nothing started since."""
        self._generation += 1
        token = self._generation
        self._state = self._state.begin()
        result: Any = None
        error: Optional[str] = None
        try:
            result = await operation()
        except ImageProError as e:
            logger.info("Operation failed: %s", e.message)
            error = e.message
        except Exception as e:
            logger.exception("Operation failed unexpectedly: %s", e)
            error = GENERIC_FAILURE

        if token != self._generation:
            logger.debug("Discarding stale result (generation %s, current %s)", token, self._generation)
            return self._state
        if error is not None:
            self._state = self._state.fail(error)
        else:
            self._state = self._state.succeed(result)
        return self._state
