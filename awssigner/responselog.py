"""
Append-only response, error, and debug logs for a load-test run.

The log destinations are reached through an appender object exposing
append(destination, message); the signing code never opens files itself.
"""

from datetime import datetime
import json
from logging import getLogger
import os
from threading import Lock

from pytz import UTC

RESPONSES = "responses"
ERRORS = "errors"
DEBUG = "debug"
DESTINATIONS = (RESPONSES, ERRORS, DEBUG)

# Characters of a request or response body kept in a log line
SNIPPET_LENGTH = 500

NO_RESPONSE_BODY = "<no response body>"
NO_REQUEST_BODY = "<no request body>"

log = getLogger("awssigner.responselog")

def _check_destination(destination):
    if destination not in DESTINATIONS:
        raise ValueError("Unknown log destination: %r" % (destination,))

def _timestamped(message):
    timestamp = datetime.now(UTC).isoformat(timespec="milliseconds")
    return "[%s] %s" % (timestamp.replace("+00:00", "Z"), message)

class FileLogAppender(object):
    """
    Writes each message as a timestamped line to <log_dir>/<destination>.log.
    """

    def __init__(self, log_dir):
        super(FileLogAppender, self).__init__()
        self.log_dir = os.path.abspath(log_dir)
        self._lock = Lock()
        return

    def path(self, destination):
        """
        The file backing destination.
        """
        _check_destination(destination)
        return os.path.join(self.log_dir, destination + ".log")

    def append(self, destination, message):
        path = self.path(destination)
        line = _timestamped(message) + "\n"

        with self._lock:
            os.makedirs(self.log_dir, exist_ok=True)
            with open(path, "a", encoding="utf-8") as fd:
                fd.write(line)
        return

class MemoryLogAppender(object):
    """
    Keeps timestamped lines in memory, keyed by destination.
    """

    def __init__(self):
        super(MemoryLogAppender, self).__init__()
        self.lines = dict((destination, []) for destination in DESTINATIONS)
        self._lock = Lock()
        return

    def append(self, destination, message):
        _check_destination(destination)
        with self._lock:
            self.lines[destination].append(_timestamped(message))
        return

    def messages(self, destination):
        """
        The messages appended to destination, without timestamps.
        """
        return [line.split("] ", 1)[1] for line in self.lines[destination]]

def snippet(text, length=SNIPPET_LENGTH):
    """
    snippet(text, length=500) -> str

    The first length characters of text, with "..." appended if anything
    was cut.
    """
    if len(text) > length:
        return text[:length] + "..."

    return text

def body_text(body, placeholder):
    """
    body_text(body, placeholder) -> str

    Render a request or response body for logging: bytes are decoded as
    UTF-8, strings are used as-is, and anything else is pretty-printed as
    JSON. An empty body yields placeholder.
    """
    if not body:
        return placeholder

    if isinstance(body, bytes):
        return body.decode("utf-8", "replace")

    if isinstance(body, str):
        return body

    try:
        return json.dumps(body, indent=2)
    except (TypeError, ValueError):
        return repr(body)

def format_context_vars(variables):
    """
    format_context_vars(variables) -> str

    All variables on one line: [Context Vars: a: 1, b: {"c": 2}]
    """
    if not variables:
        return "[No Context Vars Found]"

    details = []
    for key, value in variables.items():
        if isinstance(value, (dict, list)):
            value = json.dumps(value)
        details.append("%s: %s" % (key, value))

    return "[Context Vars: %s]" % ", ".join(details)

class ResponseLogger(object):
    """
    Routes completed requests to the responses, errors, or debug log
    according to status code and the two verbosity flags.
    """

    def __init__(self, appender, debug_log_body=False,
                 response_log_body=False):
        super(ResponseLogger, self).__init__()
        self.appender = appender
        self.debug_log_body = debug_log_body
        self.response_log_body = response_log_body
        return

    def log_response(self, method, url, status_code, response_body_text,
                     request_body_text):
        # pylint: disable=R0913
        """
        log_response(method, url, status_code, response_body_text,
                     request_body_text)

        status_code is None when no response was received at all; that case
        is always written to the error log. 4xx/5xx go to the error log,
        2xx/3xx to the response log, and anything else to the debug log,
        each only when response body logging is enabled.
        """
        request_line = "%s %s" % (method, url)

        if status_code is None:
            message = "No response received for %s." % request_line
            if self.debug_log_body:
                message += " Request Body: %s" % snippet(request_body_text)
            log.warning(message)
            self.appender.append(ERRORS, message)
            return

        message = "%s %s | Response Snippet: %s" % (
            status_code, request_line, snippet(response_body_text))

        if status_code >= 400:
            if self.debug_log_body:
                message += "\nREQUEST BODY: %s" % snippet(request_body_text)
                log.error("ERROR %s for %s", status_code, request_line)

            if self.response_log_body:
                self.appender.append(ERRORS, message)
        elif 200 <= status_code < 400:
            if self.response_log_body:
                self.appender.append(RESPONSES, message)
        elif self.response_log_body:
            self.appender.append(DEBUG, "[Other Status] " + message)

        return

    def custom_log(self, kind, message, variables=None,
                   request_body_snippet=None):
        """
        custom_log(kind, message, variables=None, request_body_snippet=None)

        Write a free-form line tagged with kind and the current context
        variables. ERROR lines carry the request body snippet if one is
        given and go to the error log; everything else goes to the debug
        log.
        """
        line = "[%s] %s | %s" % (kind, format_context_vars(variables), message)

        if kind == "ERROR":
            if request_body_snippet is not None:
                line += "\n\tREQUEST BODY: %s" % request_body_snippet
            self.appender.append(ERRORS, line)
        else:
            self.appender.append(DEBUG, line)

        return
