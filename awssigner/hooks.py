"""
Entry points for the load generator: sign each request before it is sent and
record each response after it arrives.
"""

from logging import getLogger

from .exc import SigningError
from .responselog import (
    ERRORS, FileLogAppender, NO_REQUEST_BODY, NO_RESPONSE_BODY,
    ResponseLogger, body_text)
from .sigv4 import RequestSigner

log = getLogger("awssigner.hooks")

class SigningHooks(object):
    """
    Per-process hook set built from a SignerConfig.

    appender defaults to a FileLogAppender writing under config.log_dir.
    """

    def __init__(self, config, appender=None):
        super(SigningHooks, self).__init__()
        if appender is None:
            appender = FileLogAppender(config.log_dir)

        self.config = config
        self.appender = appender
        self.signer = RequestSigner.from_config(config)
        self.response_logger = ResponseLogger(
            appender, debug_log_body=config.debug_log_body,
            response_log_body=config.response_log_body)
        return

    def before_request(self, descriptor, variables, timestamp=None):
        """
        before_request(descriptor, variables, timestamp=None) -> SignedResult

        Sign descriptor in place. A signing failure is written to the error
        log and re-raised so the request is aborted rather than sent
        unsigned.
        """
        try:
            return self.signer.sign(descriptor, variables, timestamp)
        except SigningError as e:
            log.error("SigV4 signing failed for %s %s: %s",
                      descriptor.method, descriptor.url, e)
            self.appender.append(ERRORS, "SigV4 Signing Failed: %s" % e)
            raise

    def after_response(self, descriptor, status_code, response_body):
        """
        after_response(descriptor, status_code, response_body)

        Log the outcome of a sent request. status_code is None if no
        response was received. Never raises for 4xx/5xx responses.
        """
        self.response_logger.log_response(
            descriptor.method, descriptor.url, status_code,
            body_text(response_body, NO_RESPONSE_BODY),
            body_text(descriptor.body, NO_REQUEST_BODY))
        return

    def capture_error(self, descriptor, status_code, status_message=None):
        """
        Report a failed (>= 400) request on the process log.
        """
        if status_code is not None and status_code >= 400:
            log.error("Request failed: %s - %s %s", descriptor.url,
                      status_code, status_message or "Unknown Status Message")
        return
