"""
Request, credential, and scope objects passed through the signing pipeline.
"""

from datetime import datetime

from .dateutil import (
    format_amz_date, format_amz_timestamp, parse_iso8601, to_utc, utc_now)
from .exc import MissingCredentialsError

# pylint: disable=C0103

_aws4_request = "aws4_request"

# Environment keys read by Credentials.from_environ
_env_access_key = "APP_AWS_KEY"
_env_secret_key = "APP_AWS_SECRET"
_env_session_token = "APP_AWS_SESSION"

def _check_optional_string(name, value):
    if value is not None and not isinstance(value, str):
        raise TypeError("Expected %s to be a string or None." % name)

class Credentials(object):
    """
    AWS credentials used to sign a request. These are read-only inputs to
    signing; nothing in this package derives or refreshes them.
    """

    def __init__(self, access_key_id=None, secret_access_key=None,
                 session_token=None):
        """
        Credentials(
            access_key_id: Optional[str],
            secret_access_key: Optional[str],
            session_token: Optional[str]=None)

        Absent values are allowed at construction time; validate() (called
        before every signature) rejects them.
        """
        super(Credentials, self).__init__()
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key
        self.session_token = session_token
        return

    @classmethod
    def from_environ(cls, environ):
        """
        Credentials.from_environ(environ) -> Credentials

        Read APP_AWS_KEY, APP_AWS_SECRET and APP_AWS_SESSION from an
        environment-like mapping. Empty values are treated as absent.
        """
        return cls(
            access_key_id=environ.get(_env_access_key) or None,
            secret_access_key=environ.get(_env_secret_key) or None,
            session_token=environ.get(_env_session_token) or None)

    @property
    def access_key_id(self):
        """
        The AWS access key id (AKID...).
        """
        return self._access_key_id

    @access_key_id.setter
    def access_key_id(self, value):
        _check_optional_string("access_key_id", value)
        self._access_key_id = value
        return

    @property
    def secret_access_key(self):
        """
        The secret key used to derive signing keys.
        """
        return self._secret_access_key

    @secret_access_key.setter
    def secret_access_key(self, value):
        _check_optional_string("secret_access_key", value)
        self._secret_access_key = value
        return

    @property
    def session_token(self):
        """
        The temporary session token, or None for long-term credentials.
        """
        return self._session_token

    @session_token.setter
    def session_token(self, value):
        _check_optional_string("session_token", value)
        self._session_token = value or None
        return

    def validate(self):
        """
        Raise MissingCredentialsError unless both the access key id and the
        secret access key are present.
        """
        if not self.access_key_id:
            raise MissingCredentialsError("Access key id is not set")

        if not self.secret_access_key:
            raise MissingCredentialsError("Secret access key is not set")

        return

    def __repr__(self):
        # Never include the secret or the token.
        return "Credentials(access_key_id=%r, session_token=%s)" % (
            self.access_key_id,
            "<set>" if self.session_token else None)

class SigningScope(object):
    """
    The (date, region, service) triple a signing key is bound to, together
    with the exact timestamp placed in the X-Amz-Date header.

    A scope is built for a single signing call; the date must agree with
    the request timestamp, so a scope is never reused across calls.
    """

    def __init__(self, region, service, timestamp=None):
        """
        SigningScope(
            region: str,
            service: str,
            timestamp: Optional[Union[datetime, str]]=None)

        timestamp may be an aware datetime, a naive datetime (taken as UTC),
        or an ISO 8601 string. If omitted, the current time is used.
        """
        super(SigningScope, self).__init__()
        self.region = region
        self.service = service
        self.timestamp = timestamp
        return

    @classmethod
    def now(cls, region, service):
        """
        A scope for the current instant.
        """
        return cls(region, service, utc_now())

    @property
    def region(self):
        """
        The region (or pseudo-region) of the target service.
        """
        return self._region

    @region.setter
    def region(self, value):
        if not isinstance(value, str) or not value:
            raise TypeError("Expected region to be a non-empty string.")

        self._region = value
        return

    @property
    def service(self):
        """
        The signing name of the target service (e.g. execute-api, s3).
        """
        return self._service

    @service.setter
    def service(self, value):
        if not isinstance(value, str) or not value:
            raise TypeError("Expected service to be a non-empty string.")

        self._service = value
        return

    @property
    def timestamp(self):
        """
        The signing time as an aware UTC datetime.
        """
        return self._timestamp

    @timestamp.setter
    def timestamp(self, value):
        if value is None:
            value = utc_now()
        elif isinstance(value, str):
            parsed = parse_iso8601(value)
            if parsed is None:
                raise ValueError(
                    "Timestamp is not a valid ISO 8601 string: %r" % value)
            value = parsed
        elif not isinstance(value, datetime):
            raise TypeError("Expected timestamp to be a datetime or string.")

        self._timestamp = to_utc(value)
        return

    @property
    def date(self):
        """
        The UTC date of the signing time in YYYYMMDD format.
        """
        return format_amz_date(self.timestamp)

    @property
    def amz_date(self):
        """
        The signing time in the X-Amz-Date format (YYYYMMDDTHHMMSSZ).
        """
        return format_amz_timestamp(self.timestamp)

    @property
    def credential_scope(self):
        """
        date/region/service/aws4_request
        """
        return "/".join(
            [self.date, self.region, self.service, _aws4_request])

    def __repr__(self):
        return "SigningScope(region=%r, service=%r, timestamp=%r)" % (
            self.region, self.service, self.amz_date)

class RequestDescriptor(object):
    # pylint: disable=R0902
    """
    An outbound HTTP request as handed over by the load generator.

    Before signing, url may be a template (`/users/{{ id }}?page=1`) and
    the payload may be held in json as an unserialized structure. The
    signing pipeline resolves and serializes these, then updates url, path,
    query, headers, and body in place.
    """

    def __init__(self, **kw):
        """
        RequestDescriptor(
            method: str="GET",
            url: str="/",
            host: Optional[str]=None,
            headers: Dict[str, str]={},
            body: Optional[Union[bytes, str]]=None,
            json: Any=None,
            query: List[Tuple[str, str]]=[])

        method: The HTTP method; stored upper-cased.
        url: Path and query (or an absolute URL); may contain placeholders.
        host: The target host (and port, if non-default).
        headers: Header name to value. Lookups via get_header() ignore case.
        body: The request body, if already serialized.
        json: A structured payload to be serialized to JSON before signing.
        query: (key, value) pairs in URL form. Signing adds these to the
            pairs parsed from url and writes the merged list back.
        """
        super(RequestDescriptor, self).__init__()
        self._method = "GET"
        self._url = "/"
        self._host = None
        self._headers = {}
        self._body = None
        self._json = None
        self._path = "/"
        self._query = []

        for key, value in kw.items():
            if not hasattr(type(self), key):
                raise TypeError("Unknown request attribute %r" % key)
            setattr(self, key, value)
        return

    @property
    def method(self):
        """
        The HTTP method (GET, POST, PUT, ...), upper-cased.
        """
        return self._method

    @method.setter
    def method(self, value):
        if not isinstance(value, str) or not value:
            raise TypeError("Expected method to be a non-empty string.")

        self._method = value.upper()
        return

    @property
    def url(self):
        """
        The request target: a path with optional query string, or an
        absolute URL.
        """
        return self._url

    @url.setter
    def url(self, value):
        if not isinstance(value, str):
            raise TypeError("Expected url to be a string.")

        self._url = value
        return

    @property
    def host(self):
        """
        The Host header value to sign and send.
        """
        return self._host

    @host.setter
    def host(self, value):
        _check_optional_string("host", value)
        self._host = value or None
        return

    @property
    def path(self):
        """
        The path component of the resolved url.
        """
        return self._path

    @path.setter
    def path(self, value):
        if not isinstance(value, str):
            raise TypeError("Expected path to be a string.")

        self._path = value
        return

    @property
    def query(self):
        """
        The query parameters as an ordered list of (key, value) pairs.
        Repeated keys appear once per value.
        """
        return self._query

    @query.setter
    def query(self, value):
        pairs = []
        for i, pair in enumerate(value):
            try:
                key, item = pair
            except (TypeError, ValueError):
                raise TypeError(
                    "Query parameter %d must be a (key, value) pair" % i)

            if not isinstance(key, str) or not isinstance(item, str):
                raise TypeError(
                    "Query parameter %d must be a pair of strings" % i)
            pairs.append((key, item))

        self._query = pairs
        return

    @property
    def headers(self):
        """
        The HTTP headers to send, keyed by name in the caller's casing.
        """
        return self._headers

    @headers.setter
    def headers(self, value):
        if value is None:
            value = {}

        if not isinstance(value, dict):
            raise TypeError("Expected headers to be a dict.")

        new_headers = {}
        for key, header_value in value.items():
            if not isinstance(key, str):
                raise TypeError("Header must be a string: %r" % (key,))

            if isinstance(header_value, (int, float)):
                header_value = str(header_value)
            elif not isinstance(header_value, str):
                raise TypeError(
                    "Header %r value must be a string: %r" %
                    (key, type(header_value).__name__))

            new_headers[key] = header_value

        self._headers = new_headers
        return

    @property
    def body(self):
        """
        The serialized request body, or None.
        """
        return self._body

    @body.setter
    def body(self, value):
        if value is not None and not isinstance(value, (bytes, str)):
            raise TypeError("Expected body to be bytes, str, or None.")

        self._body = value
        return

    @property
    def json(self):
        """
        A structured payload still to be serialized, or None.
        """
        return self._json

    @json.setter
    def json(self, value):
        self._json = value
        return

    def get_header(self, name, default=None):
        """
        Return the value of header name, ignoring case.
        """
        lower = name.lower()
        for key, value in self._headers.items():
            if key.lower() == lower:
                return value

        return default

    def set_header(self, name, value):
        """
        Set header name to value, replacing any header that differs only in
        case.
        """
        self.remove_header(name)
        self._headers[name] = value
        return

    def remove_header(self, name):
        """
        Remove every header matching name, ignoring case.
        """
        lower = name.lower()
        for key in [key for key in self._headers if key.lower() == lower]:
            del self._headers[key]
        return

    def body_bytes(self):
        """
        The body as it will be transmitted: UTF-8 encoded if it is a str,
        or None if there is no body.
        """
        if isinstance(self._body, str):
            return self._body.encode("utf-8")

        return self._body

    def __repr__(self):
        return "RequestDescriptor(method=%r, host=%r, url=%r)" % (
            self.method, self.host, self.url)

# Local variables:
# mode: Python
# tab-width: 8
# indent-tabs-mode: nil
# End:
# vi: set expandtab tabstop=8
