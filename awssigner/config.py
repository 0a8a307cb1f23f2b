"""
Process configuration for the signing hooks, read once at start-up from an
environment-like mapping.
"""

from logging import getLogger

from .request import Credentials

log = getLogger("awssigner.config")

DEFAULT_REGION = "us-east-1"
DEFAULT_SERVICE = "execute-api"
DEFAULT_LOG_DIR = "./artillery-logs"

def _flag(environ, name):
    # Only the literal string "true" enables a flag.
    return environ.get(name, "") == "true"

class SignerConfig(object):
    """
    Settings shared by every request of a load-test run.

    credentials: The Credentials to sign with.
    region: The signing region.
    service: The signing service name.
    target_host: The Host header to sign; requests may override it.
    log_dir: Directory holding responses.log, errors.log and debug.log.
    debug_log_body: Echo request bodies into error log entries.
    response_log_body: Write response entries to the log files at all.
    """

    def __init__(self, credentials=None, region=DEFAULT_REGION,
                 service=DEFAULT_SERVICE, target_host=None,
                 log_dir=DEFAULT_LOG_DIR, debug_log_body=False,
                 response_log_body=False):
        # pylint: disable=R0913
        super(SignerConfig, self).__init__()
        self.credentials = credentials if credentials else Credentials()
        self.region = region
        self.service = service
        self.target_host = target_host
        self.log_dir = log_dir
        self.debug_log_body = debug_log_body
        self.response_log_body = response_log_body
        return

    @classmethod
    def from_environ(cls, environ):
        """
        SignerConfig.from_environ(environ) -> SignerConfig

        Recognized keys: APP_AWS_KEY, APP_AWS_SECRET, APP_AWS_SESSION,
        AWS_REGION, TARGET_HOST, SIGV4_SERVICE, LOG_DIR, DEBUG_LOG_BODY,
        RESPONSE_LOG_BODY_ENABLED.
        """
        config = cls(
            credentials=Credentials.from_environ(environ),
            region=environ.get("AWS_REGION") or DEFAULT_REGION,
            service=environ.get("SIGV4_SERVICE") or DEFAULT_SERVICE,
            target_host=environ.get("TARGET_HOST") or None,
            log_dir=environ.get("LOG_DIR") or DEFAULT_LOG_DIR,
            debug_log_body=_flag(environ, "DEBUG_LOG_BODY"),
            response_log_body=_flag(environ, "RESPONSE_LOG_BODY_ENABLED"))

        log.debug("Loaded signer configuration: region=%s service=%s "
                  "host=%s credentials=%r", config.region, config.service,
                  config.target_host, config.credentials)
        return config
