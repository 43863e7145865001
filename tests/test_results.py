"""Unit tests for validation result types."""

import unittest

from tidyapi_auth.results import (
    ApiError,
    ErrorCode,
    RequestEnvelope,
    TidyApiError,
    ValidationFailure,
    ValidationSuccess,
    failure,
)


class TestErrorCode(unittest.TestCase):
    """Error code values are fixed."""

    def test_values(self):
        self.assertEqual(int(ErrorCode.InvalidAuthorization), 102)
        self.assertEqual(int(ErrorCode.InvalidRequestObject), 103)
        self.assertEqual(int(ErrorCode.InvalidTime), 104)
        self.assertEqual(len(ErrorCode), 3)

    def test_lookup_by_value(self):
        self.assertIs(ErrorCode(104), ErrorCode.InvalidTime)


class TestResults(unittest.TestCase):
    """Test the success/failure result types."""

    def test_failure(self):
        result = failure(ErrorCode.InvalidTime, "Invalid Time:abc")

        self.assertFalse(result.ok)
        self.assertEqual(result.code, ErrorCode.InvalidTime)
        self.assertEqual(result.message, "Invalid Time:abc")
        self.assertEqual(result.error.to_dict(), {"code": 104, "message": "Invalid Time:abc"})

    def test_error_data(self):
        error = ApiError(ErrorCode.InvalidRequestObject, "bad", data={"member": "id"})
        self.assertEqual(error.to_dict(), {"code": 103, "message": "bad", "data": {"member": "id"}})

    def test_success(self):
        document = {"tidyapi": 1, "method": "ping", "id": "abc", "params": [1]}
        envelope = RequestEnvelope.from_document(document)
        result = ValidationSuccess(request=envelope, end_point_name="orders", unix_seconds=1, access_key="ak1")

        self.assertTrue(result.ok)
        self.assertEqual(result.request.params, [1])
        self.assertEqual(result.request.to_dict(), document)
        self.assertIsNot(result.request.to_dict(), document)

    def test_ok_is_not_an_init_argument(self):
        with self.assertRaises(TypeError):
            ValidationFailure(error=ApiError(ErrorCode.InvalidTime, "x"), ok=True)

    def test_tidyapi_error(self):
        error = TidyApiError(ErrorCode.InvalidAuthorization, "Missing AccessKey")

        self.assertIsInstance(error, ValueError)
        self.assertEqual(str(error), "Missing AccessKey")
        self.assertEqual(error.code, ErrorCode.InvalidAuthorization)
        self.assertEqual(error.error, ApiError(ErrorCode.InvalidAuthorization, "Missing AccessKey"))


if __name__ == "__main__":
    unittest.main()
