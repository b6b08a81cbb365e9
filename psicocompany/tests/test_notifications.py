import asyncio
import unittest
from unittest.mock import patch

from psicocompany.notifications import (
    NotificationCenter,
    NotificationQueue,
    Severity,
)
from psicocompany.tests.fakes import FakeScheduler


class NotificationQueueTests(unittest.TestCase):
    def setUp(self):
        self.scheduler = FakeScheduler()
        self.queue = NotificationQueue(scheduler=self.scheduler)

    def test_present_until_duration_elapses(self):
        self.queue.enqueue("Salvo!", Severity.SUCCESS, duration=5)
        self.assertEqual([n.message for n in self.queue.active()], ["Salvo!"])

        self.scheduler.advance(4)
        self.assertEqual(len(self.queue), 1)

        self.scheduler.advance(1)
        self.assertEqual(self.queue.active(), [])

    def test_default_duration_and_severity(self):
        self.queue.enqueue("hello")
        notification = self.queue.active()[0]
        self.assertEqual(notification.severity, Severity.INFO)
        self.assertEqual(notification.duration, 5.0)
        self.assertEqual(len(self.scheduler.timers), 1)

    def test_non_positive_duration_is_sticky(self):
        self.queue.enqueue("stay", duration=0)
        self.queue.enqueue("stay too", duration=-1)
        self.assertEqual(self.scheduler.timers, [])

        self.scheduler.advance(3600)
        self.assertEqual(len(self.queue), 2)
        self.assertIsNone(self.queue.remaining(self.queue.active()[0]))

    def test_dismiss_removes_and_cancels_timer(self):
        self.queue.enqueue("bye", duration=5)
        notification = self.queue.active()[0]

        self.queue.dismiss(notification.id)

        self.assertNotIn(notification.id, self.queue)
        self.assertTrue(self.scheduler.timers[0].cancelled)
        self.scheduler.advance(10)
        self.assertFalse(self.scheduler.timers[0].fired)

    def test_dismiss_unknown_id_is_noop(self):
        self.queue.enqueue("a", duration=0)
        before = self.queue.active()

        self.queue.dismiss(12345)

        self.assertEqual(self.queue.active(), before)

    def test_dismiss_is_idempotent(self):
        self.queue.enqueue("a", duration=5)
        notification_id = self.queue.active()[0].id
        self.queue.dismiss(notification_id)
        self.queue.dismiss(notification_id)
        self.scheduler.advance(5)
        self.assertEqual(self.queue.active(), [])

    def test_insertion_order_preserved(self):
        messages = [f"toast {i}" for i in range(10)]
        for message in messages:
            self.queue.enqueue(message, duration=5)
        self.assertEqual([n.message for n in self.queue.active()], messages)

        self.queue.dismiss(self.queue.active()[3].id)
        expected = messages[:3] + messages[4:]
        self.assertEqual([n.message for n in self.queue.active()], expected)

    def test_identifiers_are_unique_and_increasing(self):
        for _ in range(5):
            self.queue.enqueue("x", duration=1)
        ids = [n.id for n in self.queue.active()]
        self.assertEqual(ids, sorted(set(ids)))

        self.scheduler.advance(1)
        self.queue.enqueue("y", duration=1)
        self.assertGreater(self.queue.active()[0].id, ids[-1])

    def test_expiry_is_independent_per_notification(self):
        self.queue.enqueue("short", duration=1)
        self.queue.enqueue("long", duration=3)

        self.scheduler.advance(1)
        self.assertEqual([n.message for n in self.queue.active()], ["long"])
        self.scheduler.advance(2)
        self.assertEqual(self.queue.active(), [])

    def test_remaining(self):
        self.queue.enqueue("x", duration=5)
        self.scheduler.advance(2)
        notification = self.queue.active()[0]
        self.assertAlmostEqual(self.queue.remaining(notification), 3.0)

    def test_accepts_severity_strings(self):
        self.queue.enqueue("oops", "error")
        self.assertEqual(self.queue.active()[0].severity, Severity.ERROR)
        with self.assertRaises(ValueError):
            self.queue.enqueue("oops", "fatal")

    def test_clear(self):
        self.queue.enqueue("a")
        self.queue.enqueue("b")
        self.queue.clear()
        self.assertEqual(self.queue.active(), [])
        self.assertTrue(all(t.cancelled for t in self.scheduler.timers))

    def test_as_dict_includes_icon(self):
        self.queue.enqueue("ok", Severity.WARNING)
        payload = self.queue.active()[0].as_dict()
        self.assertEqual(payload["severity"], "warning")
        self.assertEqual(payload["icon"], "⚠️")


class NotificationQueueWithoutLoopTests(unittest.TestCase):
    @patch("psicocompany.notifications.time")
    def test_expiry_enforced_on_read(self, mock_time):
        mock_time.monotonic.return_value = 100.0
        queue = NotificationQueue()
        queue.enqueue("lazy", duration=2)
        self.assertEqual(len(queue), 1)

        mock_time.monotonic.return_value = 102.0
        self.assertEqual(queue.active(), [])


class NotificationQueueEventLoopTests(unittest.IsolatedAsyncioTestCase):
    async def test_timer_evicts_on_running_loop(self):
        queue = NotificationQueue()
        queue.enqueue("soon gone", duration=0.05)
        self.assertEqual(len(queue._entries), 1)

        await asyncio.sleep(0.1)

        self.assertEqual(queue._entries, {})

    async def test_dismiss_before_timer_fires(self):
        queue = NotificationQueue()
        queue.enqueue("a", duration=0.05)
        queue.enqueue("b", duration=0.05)
        first = queue.active()[0]
        queue.dismiss(first.id)

        await asyncio.sleep(0.1)

        self.assertEqual(queue.active(), [])


class NotificationCenterTests(unittest.TestCase):
    def test_one_queue_per_session(self):
        center = NotificationCenter(scheduler=FakeScheduler())
        a = center.queue_for("a")
        self.assertIs(center.queue_for("a"), a)
        self.assertIsNot(center.queue_for("b"), a)

        a.enqueue("only for a")
        self.assertEqual(center.queue_for("b").active(), [])

    def test_ids_unique_across_sessions(self):
        center = NotificationCenter(scheduler=FakeScheduler())
        center.queue_for("a").enqueue("x")
        center.queue_for("b").enqueue("y")
        ids = [
            center.queue_for("a").active()[0].id,
            center.queue_for("b").active()[0].id,
        ]
        self.assertEqual(len(set(ids)), 2)

    def test_expired_queue_is_dropped(self):
        scheduler = FakeScheduler()
        center = NotificationCenter(scheduler=scheduler)
        center.queue_for("a").enqueue("x", duration=1)
        center.queue_for("b").enqueue("y", duration=10)

        scheduler.advance(1)

        self.assertEqual(list(center.queues), ["b"])

    def test_dismissing_last_toast_drops_queue(self):
        center = NotificationCenter(scheduler=FakeScheduler())
        queue = center.queue_for("a")
        queue.enqueue("x", duration=0)
        queue.enqueue("y", duration=0)

        queue.dismiss(queue.active()[0].id)
        self.assertIn("a", center.queues)
        queue.dismiss(queue.active()[0].id)
        self.assertNotIn("a", center.queues)

    def test_session_releases_empty_queue(self):
        center = NotificationCenter(scheduler=FakeScheduler())
        with center.session("a") as queue:
            self.assertIs(center.queues["a"], queue)
        self.assertEqual(center.queues, {})

        with center.session("b") as queue:
            queue.enqueue("kept", duration=0)
        self.assertEqual(list(center.queues), ["b"])

    def test_held_queue_survives_expiry(self):
        scheduler = FakeScheduler()
        center = NotificationCenter(scheduler=scheduler)
        with center.session("a") as queue:
            queue.enqueue("x", duration=1)
            scheduler.advance(1)
            self.assertIs(center.queues["a"], queue)
            queue.enqueue("after expiry", duration=0)
        self.assertEqual([n.message for n in center.queue_for("a").active()], ["after expiry"])

    def test_nested_sessions_share_the_lease(self):
        center = NotificationCenter(scheduler=FakeScheduler())
        with center.session("a") as outer:
            with center.session("a") as inner:
                self.assertIs(inner, outer)
            self.assertIn("a", center.queues)
        self.assertNotIn("a", center.queues)

    @patch("psicocompany.notifications.time")
    def test_prune_drops_lazily_expired_queues(self, mock_time):
        mock_time.monotonic.return_value = 10.0
        center = NotificationCenter()
        center.queue_for("a").enqueue("x", duration=1)
        center.queue_for("b").enqueue("y", duration=10)
        center.queue_for("c")

        mock_time.monotonic.return_value = 11.0

        self.assertEqual(center.prune(), 2)
        self.assertEqual(list(center.queues), ["b"])

    @patch("psicocompany.notifications.time")
    def test_sessions_sweep_periodically(self, mock_time):
        mock_time.monotonic.return_value = 10.0
        center = NotificationCenter(prune_interval=2)
        center.queue_for("stale").enqueue("x", duration=1)
        mock_time.monotonic.return_value = 20.0

        with center.session("a"):
            pass
        self.assertIn("stale", center.queues)
        with center.session("b"):
            pass
        self.assertEqual(center.queues, {})


if __name__ == "__main__":
    unittest.main()
