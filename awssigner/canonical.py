"""
SigV4 canonical request construction.
"""

from collections import OrderedDict
from hashlib import sha256
from logging import getLogger
from re import compile as re_compile
from string import ascii_letters, digits

from .exc import CanonicalizationError

# pylint: disable=C0103

# Algorithm for AWS SigV4
AWS4_HMAC_SHA256 = "AWS4-HMAC-SHA256"

# Unreserved bytes from RFC 3986.
_rfc3986_unreserved = frozenset((ascii_letters + digits + "-._~")
                                .encode("utf-8"))

# ASCII code for '%'
_ascii_percent = ord(b"%")

# ASCII code for '+'
_ascii_plus = ord(b"+")

_date = "date"
_host = "host"
_x_amz_date_lower = "x-amz-date"

# Headers that are never signed: they are rewritten by proxies and HTTP
# clients, or (authorization) carry the signature itself.
UNSIGNABLE_HEADERS = frozenset([
    "authorization",
    "connection",
    "expect",
    "presigned-expires",
    "range",
    "user-agent",
    "x-amzn-trace-id",
])

# SHA-256 digest of an empty string
SHA256_EMPTY_DIGEST = (
    "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855")

# Match for multiple slashes
_multislash = re_compile(r"//+")

# A double-quoted string (kept verbatim) or a run of whitespace
_quoted_or_space = re_compile(r'("(?:[^"\\]|\\.)*")|\s+')

# Logging instance
log = getLogger("awssigner.canonical")

class CanonicalRequest(object):
    """
    The canonical form of a request and the string to sign derived from it.
    """

    def __init__(self, method, uri_path, query_string, headers, payload_hash,
                 scope):
        """
        CanonicalRequest(
            method: str,
            uri_path: str,
            query_string: str,
            headers: OrderedDict[str, str],
            payload_hash: str,
            scope: SigningScope)

        All values must already be canonical; use canonicalize() to build
        one from a RequestDescriptor.
        """
        super(CanonicalRequest, self).__init__()
        self.method = method
        self.uri_path = uri_path
        self.query_string = query_string
        self.headers = headers
        self.payload_hash = payload_hash
        self.scope = scope
        return

    @property
    def signed_headers(self):
        """
        The semicolon-separated list of signed header names.
        """
        return ";".join(self.headers.keys())

    @property
    def canonical_request(self):
        """
        The AWS SigV4 canonical request:
            request_method + '\n' +
            canonical_uri_path + '\n' +
            canonical_query_string + '\n' +
            canonical_headers + '\n' +
            signed_headers + '\n' +
            sha256(body).hexdigest()

        canonical_headers ends with its own newline, so an empty line
        separates it from signed_headers.
        """
        header_lines = "".join(
            ["%s:%s\n" % item for item in self.headers.items()])

        return (self.method + "\n" +
                self.uri_path + "\n" +
                self.query_string + "\n" +
                header_lines + "\n" +
                self.signed_headers + "\n" +
                self.payload_hash)

    @property
    def string_to_sign(self):
        """
        The AWS SigV4 string being signed.
        """
        return (AWS4_HMAC_SHA256 + "\n" +
                self.scope.amz_date + "\n" +
                self.scope.credential_scope + "\n" +
                sha256(self.canonical_request.encode("utf-8")).hexdigest())

def canonicalize(descriptor, scope, headers=None):
    """
    canonicalize(descriptor, scope, headers=None) -> CanonicalRequest

    Build the canonical request for descriptor. headers is the exact set of
    headers to sign (defaulting to descriptor.headers); it must contain a
    Host header and an X-Amz-Date (or Date) header.

    A CanonicalizationError is raised if the path or query string cannot be
    canonicalized or a required header is missing.
    """
    if headers is None:
        headers = descriptor.headers

    if scope.service == "s3":
        uri_path = get_s3_canonical_uri_path(descriptor.path)
    else:
        uri_path = get_canonical_uri_path(descriptor.path)

    query_string = get_canonical_query_string(descriptor.query)
    canonical_headers = get_canonical_headers(headers)

    if _host not in canonical_headers:
        raise CanonicalizationError("Host header is required for signing")

    if (_x_amz_date_lower not in canonical_headers and
            _date not in canonical_headers):
        raise CanonicalizationError(
            "X-Amz-Date or Date header is required for signing")

    result = CanonicalRequest(
        method=descriptor.method.upper(),
        uri_path=uri_path,
        query_string=query_string,
        headers=canonical_headers,
        payload_hash=get_payload_hash(descriptor.body_bytes()),
        scope=scope)

    log.debug("Canonical request:\n%s", result.canonical_request)
    return result

def get_payload_hash(body):
    """
    get_payload_hash(body) -> str

    The lower-case hex SHA-256 digest of body. A missing body hashes as the
    empty byte string.
    """
    if not body:
        return SHA256_EMPTY_DIGEST

    return sha256(body).hexdigest()

def normalize_uri_path_component(path_component, plus_is_space=False):
    """
    normalize_uri_path_component(path_component, plus_is_space=False) -> str

    Normalize the path component according to RFC 3986.  This performs the
    following operations:
    * Alpha, digit, and the symbols '-', '.', '_', and '~' (unreserved
      characters) are left alone.
    * Characters outside this range are percent-encoded.
    * Percent-encoded values are upper-cased ('%2a' becomes '%2A')
    * Percent-encoded values in the unreserved space (%41-%5A, %61-%7A,
      %30-%39, %2D, %2E, %5F, %7E) are converted to normal characters.
    * A plus sign is a literal character ('%2B') in paths. With
      plus_is_space, as in form-encoded query strings, it is taken as an
      encoded space and becomes '%20'.

    If a percent encoding is incomplete, the percent is encoded as %25.

    A CanonicalizationError is raised if a percent encoding includes non-hex
    characters (e.g. %3z).
    """
    result = bytearray()

    i = 0
    path_component = path_component.encode("utf-8")
    while i < len(path_component):
        c = path_component[i]
        if c in _rfc3986_unreserved:
            result.append(c)
            i += 1
        elif c == _ascii_percent: # percent, '%', 0x25, 37
            if i + 2 >= len(path_component):
                result.extend(b"%25")
                i += 1
                continue
            try:
                value = int(path_component[i+1:i+3], 16)
            except ValueError:
                raise CanonicalizationError(
                    "Invalid %% encoding at position %d" % i)

            if value in _rfc3986_unreserved:
                result.append(value)
            else:
                result.extend(("%%%02X" % value).encode("ascii"))

            i += 3
        elif c == _ascii_plus and plus_is_space:
            result.extend(b"%20")
            i += 1
        else:
            result.extend(("%%%02X" % c).encode("ascii"))
            i += 1

    return result.decode("ascii")

def get_canonical_uri_path(uri_path):
    """
    get_canonical_uri_path(uri_path) -> str

    Normalizes the specified URI path component, removing redundant slashes
    and relative path components.

    A CanonicalizationError is raised if:
    * The URI path is not empty and not absolute (does not start with '/').
    * A parent relative path element ('..') attempts to go beyond the top.
    * An invalid percent-encoding is encountered.
    """
    # Special case: empty path is converted to '/'
    if uri_path == "" or uri_path == "/":
        return "/"

    # All other paths must be absolute.
    if not uri_path.startswith("/"):
        raise CanonicalizationError("URI path is not absolute: %r" % uri_path)

    # Replace double slashes; this makes it easier to handle slashes at the
    # end.
    uri_path = _multislash.sub("/", uri_path)

    # Examine each path component for relative directories.
    components = uri_path.split("/")[1:]
    i = 0
    while i < len(components):
        # Fix % encodings.
        component = normalize_uri_path_component(components[i])
        components[i] = component

        if components[i] == ".":
            # Relative current directory.  Remove this.
            del components[i]

            # Don't increment i; with the deletion, we're now pointing to
            # the next element in the path.
        elif components[i] == "..":
            # Relative path: parent directory.  Remove this and the previous
            # component.
            if i == 0:
                # Not allowed at the beginning!
                raise CanonicalizationError(
                    "URI path attempts to go beyond root")
            del components[i-1:i+1]

            # Since we've deleted two components, we need to back up one to
            # examine what's now the next component.
            i -= 1
        else:
            # Leave it alone; proceed to the next component.
            i += 1

    return "/" + "/".join(components)

def get_s3_canonical_uri_path(uri_path):
    """
    get_s3_canonical_uri_path(uri_path) -> str

    This is similar to get_canonical_uri_path(), but with multiple slashes
    and dots preserved: "/a//b" is a distinct S3 object from "/a/b".
    """
    if uri_path == "":
        return "/"

    if not uri_path.startswith("/"):
        raise CanonicalizationError("URI path is not absolute: %r" % uri_path)

    # Do *not* handle ., .., etc; these are valid in S3 URLs.
    return "/".join(
        [normalize_uri_path_component(el) for el in uri_path.split("/")])

def parse_query_string(query_string):
    """
    parse_query_string(query_string) -> List[Tuple[str, str]]

    Split a raw query string into (key, value) pairs in their original
    order, without decoding. Empty components ("a=1&&b=2") are skipped and
    a key without '=' gets an empty value.
    """
    result = []
    if not query_string:
        return result

    for component in query_string.split("&"):
        if component == "":
            continue

        try:
            key, value = component.split("=", 1)
        except ValueError:
            key = component
            value = ""

        result.append((key, value))

    return result

def get_canonical_query_string(query):
    """
    get_canonical_query_string(query) -> str

    Percent-normalize each (key, value) pair and join them, sorted by key
    and then value, as key=value with '&'. Repeated keys stay separate
    pairs.
    """
    pairs = [
        (normalize_uri_path_component(key, plus_is_space=True),
         normalize_uri_path_component(value, plus_is_space=True))
        for key, value in query]

    return "&".join(["%s=%s" % pair for pair in sorted(pairs)])

def normalize_header_value(value):
    """
    normalize_header_value(value) -> str

    Trim leading and trailing whitespace and collapse internal runs of
    whitespace (including folded lines) to a single space. Text inside
    double quotes is left untouched.
    """
    def replace(match):
        quoted = match.group(1)
        return quoted if quoted is not None else " "

    return _quoted_or_space.sub(replace, value.strip())

def get_canonical_headers(headers):
    """
    get_canonical_headers(headers) -> OrderedDict

    Lower-case header names, normalize values and sort by name. Headers
    whose names differ only in case are combined, in order, with ','.
    """
    combined = {}
    for name, value in headers.items():
        key = name.strip().lower()
        value = normalize_header_value(value)
        if key in combined:
            combined[key] = combined[key] + "," + value
        else:
            combined[key] = value

    return OrderedDict(sorted(combined.items()))

def is_signable_header(name):
    """
    Indicates whether a header may take part in the signature.
    """
    return name.strip().lower() not in UNSIGNABLE_HEADERS

# Local variables:
# mode: Python
# tab-width: 8
# indent-tabs-mode: nil
# End:
# vi: set expandtab tabstop=8
