import unittest

from rest_framework import status

from apps.api.utils import error_response, parse_int


class ErrorResponseTests(unittest.TestCase):
    def test_default_status_mapping_and_details(self):
        resp = error_response("NOT_FOUND", "missing", {"id": 1})
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["error"]["code"], "NOT_FOUND")
        self.assertEqual(resp.data["error"]["status"], status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["error"]["details"], {"id": 1})

    def test_domain_codes(self):
        self.assertEqual(error_response("SLOT_UNAVAILABLE", "full").status_code, 409)
        self.assertEqual(error_response("REGISTRATION_REQUIRED", "pending").status_code, 409)
        self.assertEqual(error_response("CART_EMPTY", "empty").status_code, 400)
        self.assertEqual(error_response("PAYMENT_ERROR", "stripe").status_code, 502)

    def test_custom_status_override(self):
        resp = error_response("UNKNOWN", "oops", http_status=status.HTTP_202_ACCEPTED)
        self.assertEqual(resp.status_code, status.HTTP_202_ACCEPTED)
        self.assertEqual(resp.data["error"]["message"], "oops")

    def test_error_response_supports_hint_and_extra(self):
        resp = error_response(
            "NOT_FOUND",
            "Cart item not found",
            hint="Reload the cart",
            extra={"redirect": "/"},
        )
        payload = resp.data["error"]
        self.assertEqual(payload["hint"], "Reload the cart")
        self.assertEqual(payload["extra"], {"redirect": "/"})


class ParseIntTests(unittest.TestCase):
    def test_parse_int(self):
        self.assertEqual(parse_int("12"), 12)
        self.assertIsNone(parse_int("twelve"))
        self.assertIsNone(parse_int(None))
        self.assertIsNone(parse_int(True))
