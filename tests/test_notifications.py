import logging
import unittest

from prizewheel.notifications import LoggingNotifier, Notification, NotificationKind


class LoggingNotifierTests(unittest.TestCase):
    def test_levels_follow_kind(self):
        log = logging.getLogger("prizewheel.tests.notifier")
        notifier = LoggingNotifier(log)
        with self.assertLogs(log, level="INFO") as captured:
            notifier.notify(NotificationKind.SUCCESS, "Congratulations!", "You won")
            notifier.notify(NotificationKind.ERROR, "Error", "Please complete all fields")

        self.assertEqual([r.levelno for r in captured.records], [logging.INFO, logging.ERROR])
        self.assertIn("[success] Congratulations!: You won", captured.output[0])
        self.assertIn("Please complete all fields", captured.output[1])
        self.assertEqual(
            notifier.last,
            Notification(NotificationKind.ERROR, "Error", "Please complete all fields"),
        )


if __name__ == "__main__":
    unittest.main()
