import threading
import time

from mobile_wallets.domain.exceptions import DeadlineExceeded, RequestCancelled


class RequestContext:
    """Deadline and cancellation signal shared by one verification call.

    Children created with ``with_timeout`` share their parent's cancellation
    event, and their deadline never extends past the parent's.
    """

    def __init__(self, *, deadline=None, cancel_event=None, clock=time.monotonic):
        self.deadline = deadline
        self._cancel_event = cancel_event
        self._clock = clock

    @classmethod
    def background(cls):
        return cls()

    @classmethod
    def with_cancel(cls, *, timeout=None, clock=time.monotonic):
        deadline = None if timeout is None else clock() + timeout
        return cls(deadline=deadline, cancel_event=threading.Event(), clock=clock)

    def with_timeout(self, seconds):
        if seconds is None:
            return RequestContext(
                deadline=self.deadline,
                cancel_event=self._cancel_event,
                clock=self._clock,
            )
        deadline = self._clock() + seconds
        if self.deadline is not None:
            deadline = min(deadline, self.deadline)
        return RequestContext(
            deadline=deadline,
            cancel_event=self._cancel_event,
            clock=self._clock,
        )

    @property
    def cancellable(self):
        return self._cancel_event is not None

    @property
    def cancelled(self):
        return self._cancel_event is not None and self._cancel_event.is_set()

    @property
    def expired(self):
        return self.deadline is not None and self._clock() >= self.deadline

    def cancel(self):
        if self._cancel_event is None:
            raise RuntimeError("background context cannot be cancelled")
        self._cancel_event.set()

    def remaining(self):
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - self._clock())

    def raise_if_done(self, operation=None):
        if self.cancelled:
            raise RequestCancelled("context cancelled", operation=operation)
        if self.expired:
            raise DeadlineExceeded("context deadline exceeded", operation=operation)
