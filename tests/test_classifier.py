import unittest

from application.classifier import COMMAND_PRIORITY, classify
from domain.models import Intent


class ClassifyTests(unittest.TestCase):
    def test_every_trigger_is_found_anywhere_in_the_text(self):
        for intent in COMMAND_PRIORITY:
            for text in (
                intent.trigger,
                f"{intent.trigger} some words",
                f"prefix {intent.trigger}",
                f"xx{intent.trigger}yy",
            ):
                with self.subTest(intent=intent, text=text):
                    self.assertEqual(classify(text, Intent.UNKNOWN), intent)

    def test_trigger_wins_over_training_context(self):
        self.assertEqual(classify("/stop", Intent.START_TRAINING), Intent.STOP_TRAINING)
        self.assertEqual(classify("/add cat γάτα", Intent.ANSWER), Intent.ADD_WORD)

    def test_priority_order_decides_between_triggers(self):
        self.assertEqual(classify("/add /start", Intent.UNKNOWN), Intent.START)
        self.assertEqual(classify("/random /training", Intent.UNKNOWN), Intent.START_TRAINING)

    def test_free_text_during_training_is_an_answer(self):
        self.assertEqual(classify("σκύλος", Intent.START_TRAINING), Intent.ANSWER)
        self.assertEqual(classify("σκύλος", Intent.ANSWER), Intent.ANSWER)

    def test_empty_text_is_never_an_answer(self):
        self.assertEqual(classify("", Intent.ANSWER), Intent.UNKNOWN)
        self.assertEqual(classify("", Intent.START_TRAINING), Intent.UNKNOWN)
        self.assertEqual(classify("   ", Intent.ANSWER), Intent.UNKNOWN)

    def test_free_text_outside_training_is_unknown(self):
        for last in (Intent.START, Intent.ADD_WORD, Intent.STOP_TRAINING, Intent.UNKNOWN):
            with self.subTest(last=last):
                self.assertEqual(classify("hello there", last), Intent.UNKNOWN)

    def test_answer_trigger_is_recognised(self):
        self.assertEqual(classify("/answer σκύλος", Intent.START), Intent.ANSWER)


if __name__ == "__main__":
    unittest.main()
