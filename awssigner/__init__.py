#!/usr/bin/env python
"""
AWS SigV4 request signing for load-test harnesses.
"""

from .canonical import CanonicalRequest, canonicalize
from .config import SignerConfig
from .exc import (
    CanonicalizationError, MissingCredentialsError, SigningComputationError,
    SigningError)
from .request import Credentials, RequestDescriptor, SigningScope
from .sigv4 import RequestSigner, SignedResult, sign, sign_request
from .template import resolve_template

# Local variables:
# mode: Python
# tab-width: 8
# indent-tabs-mode: nil
# End:
# vi: set expandtab tabstop=8
