from django.test import SimpleTestCase

from mobile_wallets.domain.exceptions import DeadlineExceeded, RequestCancelled
from mobile_wallets.integrations.context import RequestContext


class FakeClock:
    def __init__(self, value=100.0):
        self.value = value

    def __call__(self):
        return self.value


class RequestContextTests(SimpleTestCase):
    def test_background_context_never_expires(self):
        context = RequestContext.background()

        self.assertIsNone(context.remaining())
        self.assertFalse(context.expired)
        self.assertFalse(context.cancellable)
        context.raise_if_done()

    def test_background_context_cannot_be_cancelled(self):
        with self.assertRaises(RuntimeError):
            RequestContext.background().cancel()

    def test_child_timeout_is_bounded_by_parent_deadline(self):
        clock = FakeClock()
        parent = RequestContext(deadline=clock() + 2, clock=clock)

        child = parent.with_timeout(30)

        self.assertEqual(child.remaining(), 2)

    def test_child_timeout_shorter_than_parent_wins(self):
        clock = FakeClock()
        parent = RequestContext(deadline=clock() + 30, clock=clock)

        child = parent.with_timeout(5)

        self.assertEqual(child.remaining(), 5)

    def test_expired_context_raises_deadline_exceeded(self):
        clock = FakeClock()
        context = RequestContext(deadline=clock() + 1, clock=clock)
        clock.value += 1

        with self.assertRaises(DeadlineExceeded) as ctx:
            context.raise_if_done("sending authentication request")
        self.assertEqual(ctx.exception.operation, "sending authentication request")

    def test_cancel_propagates_to_children(self):
        parent = RequestContext.with_cancel()
        child = parent.with_timeout(10)

        parent.cancel()

        self.assertTrue(child.cancelled)
        with self.assertRaises(RequestCancelled) as ctx:
            child.raise_if_done()
        self.assertNotIsInstance(ctx.exception, DeadlineExceeded)
