"""Tests for the command-line request descriptor."""

import unittest

from pysimplenote.exceptions import RequestValidationError
from pysimplenote.services.notes.request import (
    Action,
    RequestDescriptor,
    validate_key,
)

KEY = "a" * 32


class RequestDescriptorTest(unittest.TestCase):
    def test_flag_defaults(self):
        request = RequestDescriptor(action=Action.LIST)

        self.assertEqual(request.limit, -1)
        self.assertFalse(request.include_deleted)
        self.assertFalse(request.permanently)

    def test_flag_parsing(self):
        request = RequestDescriptor(
            action=Action.LIST,
            flags={"n": "5", "deleted": "true", "permanently": "True"},
        )

        self.assertEqual(request.limit, 5)
        self.assertTrue(request.include_deleted)
        self.assertTrue(request.permanently)

    def test_unparsable_limit_means_unlimited(self):
        self.assertEqual(RequestDescriptor(flags={"n": "many"}).limit, -1)

    def test_key_required_for_keyed_actions(self):
        for action in (Action.GET, Action.EDIT, Action.DELETE):
            with self.subTest(action=action):
                with self.assertRaises(RequestValidationError):
                    RequestDescriptor(action=action).validate()
                with self.assertRaises(RequestValidationError):
                    RequestDescriptor(action=action, key="a" * 31).validate()
                RequestDescriptor(action=action, key=KEY).validate()

    def test_key_not_required_otherwise(self):
        for action in (Action.LIST, Action.CREATE, Action.VERSION, Action.NONE):
            with self.subTest(action=action):
                RequestDescriptor(action=action).validate()

    def test_validate_key_returns_key(self):
        self.assertEqual(validate_key(KEY), KEY)

    def test_padded_key_is_rejected(self):
        for key in (f" {KEY} ", f"{KEY}\n", " " + KEY[1:]):
            with self.subTest(key=key):
                with self.assertRaises(RequestValidationError):
                    validate_key(key)
                with self.assertRaises(RequestValidationError):
                    RequestDescriptor(action=Action.GET, key=key).validate()


if __name__ == "__main__":
    unittest.main()
