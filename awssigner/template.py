"""
Placeholder substitution for request URLs and bodies.

Templates use the load generator's `{{ name }}` syntax. Substitution must
happen before a request is canonicalized: the bytes that are hashed into the
signature have to be the bytes that are sent.
"""

from logging import getLogger
from re import compile as re_compile

# {{ name }}, whitespace around the name ignored
_placeholder_regex = re_compile(r"{{\s*([^}]+?)\s*}}")

# Logging instance
log = getLogger("awssigner.template")

def resolve_template(template, variables):
    """
    resolve_template(template, variables) -> str

    Replace every `{{ name }}` marker in template with the string form of
    variables[name]. Names missing from variables are replaced by the empty
    string; this never raises. Non-string templates are returned unchanged.
    """
    if not isinstance(template, str) or not template:
        return template

    if variables is None:
        variables = {}

    def substitute(match):
        name = match.group(1).strip()
        value = variables.get(name)
        if value is None:
            log.debug("Template variable %r is not set; substituting ''",
                      name)
            return ""

        return value_to_string(value)

    return _placeholder_regex.sub(substitute, template)

def value_to_string(value):
    """
    value_to_string(value) -> str

    Booleans are rendered as JSON literals (true/false) so they remain valid
    when substituted into a serialized JSON body.
    """
    if isinstance(value, bool):
        return "true" if value else "false"

    return str(value)
