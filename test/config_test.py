#!/usr/bin/env python
from unittest import TestCase

from awssigner.config import SignerConfig
from awssigner.sigv4 import RequestSigner

class SignerConfigTest(TestCase):
    def test_defaults(self):
        config = SignerConfig.from_environ({})
        self.assertEqual(config.region, "us-east-1")
        self.assertEqual(config.service, "execute-api")
        self.assertIsNone(config.target_host)
        self.assertEqual(config.log_dir, "./artillery-logs")
        self.assertFalse(config.debug_log_body)
        self.assertFalse(config.response_log_body)
        self.assertIsNone(config.credentials.access_key_id)

    def test_from_environ(self):
        config = SignerConfig.from_environ({
            "APP_AWS_KEY": "AKID",
            "APP_AWS_SECRET": "secret",
            "APP_AWS_SESSION": "token",
            "AWS_REGION": "us-east-2",
            "TARGET_HOST": "api.example.com",
            "SIGV4_SERVICE": "lambda",
            "LOG_DIR": "/tmp/logs",
            "DEBUG_LOG_BODY": "true",
            "RESPONSE_LOG_BODY_ENABLED": "true",
        })
        self.assertEqual(config.credentials.access_key_id, "AKID")
        self.assertEqual(config.credentials.session_token, "token")
        self.assertEqual(config.region, "us-east-2")
        self.assertEqual(config.service, "lambda")
        self.assertEqual(config.target_host, "api.example.com")
        self.assertEqual(config.log_dir, "/tmp/logs")
        self.assertTrue(config.debug_log_body)
        self.assertTrue(config.response_log_body)

    def test_flags_need_literal_true(self):
        config = SignerConfig.from_environ({
            "DEBUG_LOG_BODY": "1", "RESPONSE_LOG_BODY_ENABLED": "TRUE"})
        self.assertFalse(config.debug_log_body)
        self.assertFalse(config.response_log_body)

    def test_signer_from_config(self):
        config = SignerConfig.from_environ({
            "APP_AWS_KEY": "AKID", "APP_AWS_SECRET": "secret",
            "AWS_REGION": "eu-west-1", "TARGET_HOST": "api.example.com"})
        signer = RequestSigner.from_config(config)
        self.assertIs(signer.credentials, config.credentials)
        self.assertEqual(signer.region, "eu-west-1")
        self.assertEqual(signer.host, "api.example.com")
