import gc
import unittest

from application.locks import KeyedLocks


class KeyedLocksTests(unittest.TestCase):
    def setUp(self) -> None:
        self.locks = KeyedLocks()

    def test_same_key_shares_a_lock(self):
        lock = self.locks.for_key("alice")
        self.assertIs(self.locks.for_key("alice"), lock)
        self.assertIsNot(self.locks.for_key("bob"), lock)

    def test_held_lock_is_seen_by_other_callers(self):
        lock = self.locks.for_key("alice")
        with lock:
            self.assertFalse(self.locks.for_key("alice").acquire(blocking=False))

    def test_released_locks_are_forgotten(self):
        for i in range(100):
            with self.locks.for_key(f"user{i}"):
                pass
        gc.collect()
        self.assertEqual(len(self.locks), 0)

    def test_lock_in_use_is_kept(self):
        lock = self.locks.for_key("alice")
        gc.collect()
        self.assertEqual(len(self.locks), 1)
        del lock
        gc.collect()
        self.assertEqual(len(self.locks), 0)


if __name__ == "__main__":
    unittest.main()
