#!/usr/bin/env python
from datetime import datetime, timedelta, timezone
from unittest import TestCase

from awssigner.exc import MissingCredentialsError
from awssigner.request import Credentials, RequestDescriptor, SigningScope

class CredentialsTest(TestCase):
    def test_from_environ(self):
        creds = Credentials.from_environ({
            "APP_AWS_KEY": "AKIDEXAMPLE",
            "APP_AWS_SECRET": "secret",
            "APP_AWS_SESSION": "",
        })
        self.assertEqual(creds.access_key_id, "AKIDEXAMPLE")
        self.assertEqual(creds.secret_access_key, "secret")
        self.assertIsNone(creds.session_token)
        creds.validate()

    def test_validate(self):
        with self.assertRaises(MissingCredentialsError):
            Credentials(secret_access_key="secret").validate()

        with self.assertRaises(MissingCredentialsError):
            Credentials(access_key_id="AKID", secret_access_key="").validate()

        with self.assertRaises(MissingCredentialsError):
            Credentials.from_environ({}).validate()

    def test_repr_hides_secrets(self):
        text = repr(Credentials("AKID", "very-secret", "token-value"))
        self.assertIn("AKID", text)
        self.assertNotIn("very-secret", text)
        self.assertNotIn("token-value", text)

    def test_bad_types(self):
        with self.assertRaises(TypeError):
            Credentials(access_key_id=1)

        with self.assertRaises(TypeError):
            Credentials(secret_access_key=b"secret")

class SigningScopeTest(TestCase):
    def test_fields(self):
        scope = SigningScope("us-east-1", "execute-api", "20240101T000000Z")
        self.assertEqual(scope.date, "20240101")
        self.assertEqual(scope.amz_date, "20240101T000000Z")
        self.assertEqual(
            scope.credential_scope,
            "20240101/us-east-1/execute-api/aws4_request")

    def test_offset_converted_to_utc(self):
        scope = SigningScope("eu-west-1", "s3", "2023-12-31T20:30:00-08:00")
        self.assertEqual(scope.amz_date, "20240101T043000Z")
        self.assertEqual(scope.date, "20240101")

    def test_datetimes(self):
        naive = datetime(2024, 2, 29, 23, 59, 59, 999999)
        self.assertEqual(
            SigningScope("r", "s", naive).amz_date, "20240229T235959Z")

        aware = datetime(2024, 3, 1, 1, 0, 0,
                         tzinfo=timezone(timedelta(hours=2)))
        self.assertEqual(
            SigningScope("r", "s", aware).amz_date, "20240229T230000Z")

    def test_now_is_fresh(self):
        before = datetime.now(timezone.utc).replace(microsecond=0)
        scope = SigningScope.now("us-east-1", "execute-api")
        after = datetime.now(timezone.utc)
        self.assertTrue(before <= scope.timestamp <= after)
        self.assertEqual(scope.date, scope.timestamp.strftime("%Y%m%d"))

    def test_bad_values(self):
        with self.assertRaises(ValueError):
            SigningScope("us-east-1", "s3", "yesterday")

        with self.assertRaises(TypeError):
            SigningScope("us-east-1", "s3", 12345)

        with self.assertRaises(TypeError):
            SigningScope("", "s3")

        with self.assertRaises(TypeError):
            SigningScope("us-east-1", None)

class RequestDescriptorTest(TestCase):
    def test_defaults(self):
        request = RequestDescriptor()
        self.assertEqual(request.method, "GET")
        self.assertEqual(request.url, "/")
        self.assertEqual(request.headers, {})
        self.assertEqual(request.query, [])
        self.assertIsNone(request.body)
        self.assertIsNone(request.body_bytes())

    def test_method_upper_cased(self):
        self.assertEqual(RequestDescriptor(method="post").method, "POST")

    def test_header_case_insensitive(self):
        request = RequestDescriptor(headers={"Content-Type": "text/plain"})
        self.assertEqual(request.get_header("content-type"), "text/plain")

        request.set_header("CONTENT-TYPE", "application/json")
        self.assertEqual(request.headers, {"CONTENT-TYPE": "application/json"})

        request.remove_header("content-type")
        self.assertEqual(request.headers, {})
        self.assertEqual(request.get_header("Content-Type", "-"), "-")

    def test_numeric_header_values(self):
        request = RequestDescriptor(headers={"X-Count": 3})
        self.assertEqual(request.headers["X-Count"], "3")

    def test_body_bytes(self):
        self.assertEqual(
            RequestDescriptor(body="ü").body_bytes(), "ü".encode("utf-8"))
        self.assertEqual(RequestDescriptor(body=b"x").body_bytes(), b"x")

class BadInitializer(TestCase):
    def test_method(self):
        with self.assertRaises(TypeError):
            RequestDescriptor(method=None)

    def test_url(self):
        with self.assertRaises(TypeError):
            RequestDescriptor(url=None)

    def test_headers(self):
        with self.assertRaises(TypeError):
            RequestDescriptor(headers=[("Host", "x")])

        with self.assertRaises(TypeError):
            RequestDescriptor(headers={"Host": ["x"]})

        with self.assertRaises(TypeError):
            RequestDescriptor(headers={0: "Foo"})

    def test_body(self):
        with self.assertRaises(TypeError):
            RequestDescriptor(body={"a": 1})

    def test_query(self):
        with self.assertRaises(TypeError):
            RequestDescriptor(query=[("a",)])

        with self.assertRaises(TypeError):
            RequestDescriptor(query=[("a", 1)])

    def test_unknown_attribute(self):
        with self.assertRaises(TypeError):
            RequestDescriptor(params={})
