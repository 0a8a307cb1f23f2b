"""
SigV4 request signing routines.
"""

from hashlib import sha256
import hmac
import json
from logging import getLogger
from urllib.parse import urlsplit

from .canonical import (
    AWS4_HMAC_SHA256, canonicalize, get_payload_hash, is_signable_header,
    parse_query_string)
from .exc import CanonicalizationError, SigningComputationError
from .request import Credentials, RequestDescriptor, SigningScope
from .template import resolve_template

# pylint: disable=C0103

_aws4 = b"AWS4"
_aws4_request_bytes = b"aws4_request"

# Header names
_authorization = "Authorization"
_content_type = "Content-Type"
_host = "Host"
_x_amz_content_sha256 = "X-Amz-Content-Sha256"
_x_amz_date = "X-Amz-Date"
_x_amz_security_token = "X-Amz-Security-Token"

# Headers the signer always sets itself
_signer_headers = frozenset([
    _authorization.lower(), _host.lower(), _x_amz_content_sha256.lower(),
    _x_amz_date.lower(), _x_amz_security_token.lower()])

_application_json = "application/json"

# Characters of a signed body echoed to the debug log
_body_log_length = 100

# Logging instance
log = getLogger("awssigner.sigv4")

class SignedResult(object):
    """
    The outcome of signing a request: the final headers and body, which
    must be sent exactly as returned.
    """

    def __init__(self, headers, body, canonical_request, signature):
        super(SignedResult, self).__init__()
        self.headers = headers
        self.body = body
        self.canonical_request = canonical_request
        self.signature = signature
        return

    @property
    def authorization(self):
        """
        The Authorization header value.
        """
        return self.headers[_authorization]

    def __repr__(self):
        return "SignedResult(signed_headers=%r, signature=%r)" % (
            self.canonical_request.signed_headers, self.signature)

def derive_signing_key(secret_access_key, scope):
    """
    derive_signing_key(secret_access_key, scope) -> bytes

    Derive the key bound to scope's date, region, and service:
        k_date = HMAC("AWS4" + secret, date)
        k_region = HMAC(k_date, region)
        k_service = HMAC(k_region, service)
        k_signing = HMAC(k_service, "aws4_request")
    """
    k_secret = _aws4 + secret_access_key.encode("utf-8")
    k_date = hmac.new(k_secret, scope.date.encode("utf-8"), sha256).digest()
    k_region = hmac.new(k_date, scope.region.encode("utf-8"),
                        sha256).digest()
    k_service = hmac.new(k_region, scope.service.encode("utf-8"),
                         sha256).digest()
    return hmac.new(k_service, _aws4_request_bytes, sha256).digest()

def sign(string_to_sign, credentials, scope):
    """
    sign(string_to_sign, credentials, scope) -> str

    Compute the lower-case hex signature of string_to_sign with the signing
    key derived from credentials for scope.

    MissingCredentialsError is raised if the access key id or secret is
    absent; nothing is computed in that case.
    """
    credentials.validate()

    try:
        signing_key = derive_signing_key(credentials.secret_access_key, scope)
        return hmac.new(signing_key, string_to_sign.encode("utf-8"),
                        sha256).hexdigest()
    except (TypeError, ValueError) as e:
        raise SigningComputationError("Unable to compute signature: %s" % e)

def get_authorization_header(credentials, scope, signed_headers, signature):
    """
    get_authorization_header(credentials, scope, signed_headers, signature)
        -> str

    AWS4-HMAC-SHA256 Credential=<akid>/<scope>, SignedHeaders=<list>,
    Signature=<hex>
    """
    return "%s Credential=%s/%s, SignedHeaders=%s, Signature=%s" % (
        AWS4_HMAC_SHA256, credentials.access_key_id, scope.credential_scope,
        signed_headers, signature)

def split_url(url):
    """
    split_url(url) -> (netloc, path, query_string)

    Split a resolved request URL. Absolute URLs are parsed with urlsplit;
    anything else is taken as path[?query], so a path such as "//a" is not
    mistaken for a network location. Fragments are dropped.
    """
    if "://" in url:
        try:
            parts = urlsplit(url)
        except ValueError as e:
            raise CanonicalizationError("Malformed URL %r: %s" % (url, e))
        return parts.netloc, parts.path or "/", parts.query

    url = url.split("#", 1)[0]
    path, _, query_string = url.partition("?")
    return None, path or "/", query_string

def serialize_payload(payload, variables):
    """
    serialize_payload(payload, variables) -> bytes

    Serialize a structured payload to compact JSON and resolve placeholders
    in the serialized text.
    """
    try:
        text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise SigningComputationError(
            "Request payload is not JSON serializable: %s" % e)

    return resolve_template(text, variables).encode("utf-8")

def merge_query(url_pairs, extra_pairs):
    """
    merge_query(url_pairs, extra_pairs) -> List[Tuple[str, str]]

    The query pairs parsed from the URL followed by extra_pairs. A pair in
    extra_pairs that the URL already carries is not repeated, so signing a
    descriptor twice does not duplicate its parameters.
    """
    remaining = list(url_pairs)
    result = list(url_pairs)
    for pair in extra_pairs:
        if pair in remaining:
            remaining.remove(pair)
        else:
            result.append(pair)

    return result

def sign_request(descriptor, variables, credentials, scope, host=None,
                 sign_session_token=True):
    # pylint: disable=R0913,R0914
    """
    sign_request(descriptor, variables, credentials, scope, host=None,
                 sign_session_token=True) -> SignedResult

    Resolve placeholders in descriptor's url and body, canonicalize the
    result, sign it, and write the final url, path, query, headers, and
    body back into descriptor.

    host overrides descriptor.host; if neither is set, the network location
    of an absolute url is used. When sign_session_token is False, the
    X-Amz-Security-Token header is attached after signing instead of being
    part of the signed headers.

    Any failure raises a SigningError subclass and leaves descriptor
    untouched.
    """
    credentials.validate()

    url = resolve_template(descriptor.url, variables)
    netloc, path, query_string = split_url(url)

    host = host or descriptor.host or netloc
    if not host:
        raise CanonicalizationError("No target host for %r" % url)

    if descriptor.json is not None:
        body = serialize_payload(descriptor.json, variables)
    elif isinstance(descriptor.body, str):
        body = resolve_template(descriptor.body, variables).encode("utf-8")
    else:
        body = descriptor.body

    url_query = parse_query_string(query_string)
    query = merge_query(url_query, [
        (resolve_template(key, variables),
         resolve_template(value, variables))
        for key, value in descriptor.query])

    # Pairs given only in descriptor.query are appended to the sent url.
    extra = ["%s=%s" % pair for pair in query[len(url_query):]]
    if extra:
        query_string = "&".join(
            ([query_string] if query_string else []) + extra)

    resolved = RequestDescriptor(
        method=descriptor.method, url=url, host=host, body=body,
        path=path, query=query)

    # Headers the caller supplied that go out unsigned.
    unsigned = {}
    to_sign = {}
    for name, value in descriptor.headers.items():
        if name.lower() in _signer_headers:
            continue
        if is_signable_header(name):
            to_sign[name] = value
        else:
            unsigned[name] = value

    if (descriptor.json is not None and
            descriptor.get_header(_content_type) is None):
        to_sign[_content_type] = _application_json

    to_sign[_host] = host
    to_sign[_x_amz_date] = scope.amz_date

    if scope.service == "s3":
        to_sign[_x_amz_content_sha256] = get_payload_hash(body)

    token = credentials.session_token
    if token and sign_session_token:
        to_sign[_x_amz_security_token] = token

    canonical = canonicalize(resolved, scope, to_sign)
    signature = sign(canonical.string_to_sign, credentials, scope)

    headers = dict(unsigned)
    headers.update(to_sign)
    if token and not sign_session_token:
        headers[_x_amz_security_token] = token
    headers[_authorization] = get_authorization_header(
        credentials, scope, canonical.signed_headers, signature)

    # Signing succeeded; only now is the caller's descriptor changed.
    descriptor.host = host
    descriptor.url = path + ("?" + query_string if query_string else "")
    descriptor.path = path
    descriptor.query = resolved.query
    descriptor.headers = headers
    descriptor.body = body
    descriptor.json = None

    log.debug("Signed %s %s for %s (%s)", descriptor.method, descriptor.url,
              host, scope.region)
    if body:
        log.debug("Signed body content: %s",
                  body[:_body_log_length].decode("utf-8", "replace"))

    return SignedResult(
        headers=headers, body=body, canonical_request=canonical,
        signature=signature)

class RequestSigner(object):
    """
    Signs requests for one target host, region, and service with a fixed
    set of credentials. A new SigningScope is computed for every request.
    """

    def __init__(self, **kw):
        """
        RequestSigner(
            credentials: Credentials,
            region: str="us-east-1",
            service: str="execute-api",
            host: Optional[str]=None,
            sign_session_token: bool=True)

        Create a new RequestSigner instance. Properties can be specified
        as keyword arguments.
        """
        super(RequestSigner, self).__init__()
        self._credentials = Credentials()
        self._region = "us-east-1"
        self._service = "execute-api"
        self._host = None
        self._sign_session_token = True

        for key, value in kw.items():
            setattr(self, key, value)
        return

    @classmethod
    def from_config(cls, config):
        """
        Build a signer from a SignerConfig.
        """
        return cls(
            credentials=config.credentials, region=config.region,
            service=config.service, host=config.target_host)

    @property
    def credentials(self):
        """
        The credentials used to sign every request.
        """
        return self._credentials

    @credentials.setter
    def credentials(self, value):
        if not isinstance(value, Credentials):
            raise TypeError("Expected credentials to be a Credentials.")

        self._credentials = value
        return

    @property
    def region(self):
        """
        The region the target service is running in.
        """
        return self._region

    @region.setter
    def region(self, value):
        if not isinstance(value, str):
            raise TypeError("Expected region to be a string.")

        self._region = value
        return

    @property
    def service(self):
        """
        The signing name of the target service.
        """
        return self._service

    @service.setter
    def service(self, value):
        if not isinstance(value, str):
            raise TypeError("Expected service to be a string.")

        self._service = value
        return

    @property
    def host(self):
        """
        The target host, used when a request does not carry its own.
        """
        return self._host

    @host.setter
    def host(self, value):
        if value is not None and not isinstance(value, str):
            raise TypeError("Expected host to be a string or None.")

        self._host = value or None
        return

    @property
    def sign_session_token(self):
        """
        Whether X-Amz-Security-Token is included in the signed headers.
        """
        return self._sign_session_token

    @sign_session_token.setter
    def sign_session_token(self, value):
        self._sign_session_token = bool(value)
        return

    def sign(self, descriptor, variables=None, timestamp=None):
        """
        sign(descriptor, variables=None, timestamp=None) -> SignedResult

        Sign descriptor in place. timestamp pins the signing time (mainly
        for tests); by default the current time is used.
        """
        scope = SigningScope(self.region, self.service, timestamp)
        return sign_request(
            descriptor, variables or {}, self.credentials, scope,
            host=descriptor.host or self.host,
            sign_session_token=self.sign_session_token)

# Local variables:
# mode: Python
# tab-width: 8
# indent-tabs-mode: nil
# End:
# vi: set expandtab tabstop=8
