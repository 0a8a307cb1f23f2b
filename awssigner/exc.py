#!/usr/bin/env python
"""
AWS request signing exceptions.
"""

class SigningError(Exception):
    """
    Base class for failures that prevent a request from being signed. A
    request that raises this must not be sent.
    """
    pass

class MissingCredentialsError(SigningError):
    """
    The access key id or secret access key is absent or empty.
    """
    pass

class CanonicalizationError(SigningError, ValueError):
    """
    The request URL, path, or query string could not be put into canonical
    form (e.g. an invalid percent-encoding or a path that escapes the root).
    """
    pass

class SigningComputationError(SigningError):
    """
    An unexpected internal failure while preparing or signing the request,
    such as a structured payload that cannot be serialized to JSON.
    """
    pass

# Local variables:
# mode: Python
# tab-width: 8
# indent-tabs-mode: nil
# End:
# vi: set expandtab tabstop=8
