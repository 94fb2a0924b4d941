"""
Constants shared across the triage pipeline.
"""

import re
from typing import Pattern

# Allow-list verdicts
WHITELIST_TOPIC = 'whitelist'

# Classifier fallback
FALLBACK_TOPIC = 'unknown'
FALLBACK_REASONS = {
    'UNSUBSCRIBE': 'API error - defaulting to unsubscribe',
    'KEEP': 'API error - defaulting to keep',
}

# Link extraction
UNSUBSCRIBE_HEADER = 'List-Unsubscribe'
UNSUBSCRIBE_KEYWORD = 'unsubscribe'

HEADER_URL_PATTERN: Pattern = re.compile(r'<\s*([^>]+?)\s*>')

# Quoted-printable soft line break
SOFT_LINE_BREAK_PATTERN: Pattern = re.compile(r'=\r?\n')

# Unsubscribe request email
DEFAULT_UNSUBSCRIBE_SUBJECT = 'Unsubscribe'
DEFAULT_UNSUBSCRIBE_BODY = 'Please unsubscribe me from this mailing list.'

# Executor method names
METHOD_HTTP_GET = 'http_get'
METHOD_EMAIL = 'email_reply'
