import threading
import unittest

from tgbatch.runner import CancellationToken


class TestCancellationToken(unittest.TestCase):
    def test_starts_uncancelled(self) -> None:
        token = CancellationToken()
        self.assertFalse(token.is_cancelled)
        self.assertFalse(token.wait(0.01))

    def test_cancel_is_idempotent(self) -> None:
        token = CancellationToken()
        token.cancel()
        token.cancel()
        self.assertTrue(token.is_cancelled)
        self.assertTrue(token.wait(0))

    def test_wait_wakes_on_cancel_from_other_thread(self) -> None:
        token = CancellationToken()
        timer = threading.Timer(0.05, token.cancel)
        timer.start()
        try:
            self.assertTrue(token.wait(5))
        finally:
            timer.cancel()


if __name__ == "__main__":
    unittest.main()
