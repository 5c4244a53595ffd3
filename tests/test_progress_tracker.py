"""Tests for thread-safe progress tracking."""

import threading
import unittest

from sites_liberation.logger import FINISHED_STATUS, ProgressTracker

from helpers import RecordingListener


class TestProgressTracker(unittest.TestCase):
    def test_concurrent_increments_finish_once(self):
        listener = RecordingListener()
        tracker = ProgressTracker(5, listener)
        barrier = threading.Barrier(5)

        def work():
            barrier.wait()
            tracker.increment()

        threads = [threading.Thread(target=work) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(tracker.progress_fraction, 1.0)
        self.assertTrue(tracker.is_finished)
        self.assertEqual(listener.statuses.count(FINISHED_STATUS), 1)
        self.assertEqual(listener.progress[-1], 1.0)
        self.assertEqual(listener.progress, sorted(listener.progress))

    def test_outcomes_are_counted(self):
        tracker = ProgressTracker(3, RecordingListener())
        tracker.increment('success')
        tracker.increment('skipped')
        tracker.increment('failed')
        stats = tracker.get_stats()
        self.assertEqual((stats['successful'], stats['skipped'], stats['failed']), (1, 1, 1))
        self.assertEqual(stats['completed'], 3)

    def test_extra_increments_are_ignored(self):
        listener = RecordingListener()
        tracker = ProgressTracker(1, listener)
        tracker.increment()
        tracker.increment()
        self.assertEqual(tracker.completed, 1)
        self.assertEqual(listener.statuses.count(FINISHED_STATUS), 1)
        self.assertEqual(listener.progress, [1.0])

    def test_not_finished_before_total(self):
        listener = RecordingListener()
        tracker = ProgressTracker(4, listener)
        tracker.increment()
        self.assertEqual(tracker.progress_fraction, 0.25)
        self.assertFalse(tracker.is_finished)
        self.assertNotIn(FINISHED_STATUS, listener.statuses)

    def test_zero_total_rejected(self):
        with self.assertRaises(ValueError):
            ProgressTracker(0, RecordingListener())

    def test_format_elapsed(self):
        self.assertEqual(ProgressTracker._format_elapsed(12.34), '12.3s')
        self.assertEqual(ProgressTracker._format_elapsed(125), '2m 5s')
        self.assertEqual(ProgressTracker._format_elapsed(3725), '1h 2m 5s')


if __name__ == '__main__':
    unittest.main()
