#!/usr/bin/env python
import os
from re import match
from shutil import rmtree
from tempfile import mkdtemp
from unittest import TestCase

from awssigner import responselog
from awssigner.responselog import (
    FileLogAppender, MemoryLogAppender, ResponseLogger)

class Appenders(TestCase):
    def setUp(self):
        self.tmpdir = mkdtemp()

    def tearDown(self):
        rmtree(self.tmpdir)

    def test_file_appender(self):
        log_dir = os.path.join(self.tmpdir, "logs")
        appender = FileLogAppender(log_dir)
        appender.append("errors", "first")
        appender.append("errors", "second")

        with open(os.path.join(log_dir, "errors.log")) as fd:
            lines = fd.read().splitlines()

        self.assertEqual(len(lines), 2)
        self.assertTrue(lines[0].endswith("] first"))
        self.assertTrue(
            match(r"^\[\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d\.\d{3}Z\] second$",
                  lines[1]))
        self.assertFalse(os.path.exists(os.path.join(log_dir, "debug.log")))

    def test_unknown_destination(self):
        with self.assertRaises(ValueError):
            FileLogAppender(self.tmpdir).append("other", "x")

        with self.assertRaises(ValueError):
            MemoryLogAppender().append("other", "x")

    def test_memory_appender(self):
        appender = MemoryLogAppender()
        appender.append("debug", "hello] world")
        self.assertEqual(appender.messages("debug"), ["hello] world"])
        self.assertEqual(appender.messages("errors"), [])

class Helpers(TestCase):
    def test_snippet(self):
        self.assertEqual(responselog.snippet("abc", 5), "abc")
        self.assertEqual(responselog.snippet("abcdef", 5), "abcde...")
        self.assertEqual(
            len(responselog.snippet("x" * 600)), 503)

    def test_body_text(self):
        self.assertEqual(responselog.body_text(None, "<none>"), "<none>")
        self.assertEqual(responselog.body_text(b"", "<none>"), "<none>")
        self.assertEqual(responselog.body_text(b"\xc3\xa9", "-"), "é")
        self.assertEqual(responselog.body_text("text", "-"), "text")
        self.assertEqual(
            responselog.body_text({"a": 1}, "-"), '{\n  "a": 1\n}')

    def test_format_context_vars(self):
        self.assertEqual(
            responselog.format_context_vars({}), "[No Context Vars Found]")
        self.assertEqual(
            responselog.format_context_vars({"id": 1, "tags": ["a"]}),
            '[Context Vars: id: 1, tags: ["a"]]')

class ResponseLoggerTest(TestCase):
    def logger(self, debug_log_body=False, response_log_body=True):
        self.appender = MemoryLogAppender()
        return ResponseLogger(self.appender, debug_log_body=debug_log_body,
                              response_log_body=response_log_body)

    def test_success(self):
        self.logger().log_response("GET", "/status", 200, "ok", "-")
        self.assertEqual(
            self.appender.messages("responses"),
            ["200 GET /status | Response Snippet: ok"])
        self.assertEqual(self.appender.messages("errors"), [])

    def test_redirect_is_success(self):
        self.logger().log_response("GET", "/old", 302, "", "-")
        self.assertEqual(len(self.appender.messages("responses")), 1)

    def test_error_with_request_body(self):
        self.logger(debug_log_body=True).log_response(
            "POST", "/items", 500, "boom", '{"a":1}')
        self.assertEqual(
            self.appender.messages("errors"),
            ['500 POST /items | Response Snippet: boom\n'
             'REQUEST BODY: {"a":1}'])

    def test_error_without_request_body(self):
        self.logger().log_response("POST", "/items", 403, "denied", "body")
        self.assertEqual(
            self.appender.messages("errors"),
            ["403 POST /items | Response Snippet: denied"])

    def test_response_logging_disabled(self):
        logger = self.logger(debug_log_body=True, response_log_body=False)
        logger.log_response("GET", "/a", 200, "ok", "-")
        logger.log_response("GET", "/a", 404, "missing", "-")
        logger.log_response("GET", "/a", 101, "", "-")
        for destination in responselog.DESTINATIONS:
            self.assertEqual(self.appender.messages(destination), [])

    def test_other_status(self):
        self.logger().log_response("GET", "/ws", 101, "", "-")
        self.assertEqual(
            self.appender.messages("debug"),
            ["[Other Status] 101 GET /ws | Response Snippet: "])

    def test_no_response_always_logged(self):
        self.logger(response_log_body=False).log_response(
            "GET", "/status", None, "", "-")
        self.assertEqual(
            self.appender.messages("errors"),
            ["No response received for GET /status."])

    def test_long_response_truncated(self):
        self.logger().log_response("GET", "/big", 200, "y" * 501, "-")
        message = self.appender.messages("responses")[0]
        self.assertTrue(message.endswith("y" * 500 + "..."))

    def test_custom_log(self):
        logger = self.logger()
        logger.custom_log("INFO", "hello", {"a": 1})
        logger.custom_log("ERROR", "failed", {}, '{"x":1}')
        self.assertEqual(
            self.appender.messages("debug"),
            ["[INFO] [Context Vars: a: 1] | hello"])
        self.assertEqual(
            self.appender.messages("errors"),
            ['[ERROR] [No Context Vars Found] | failed\n'
             '\tREQUEST BODY: {"x":1}'])
