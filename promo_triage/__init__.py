"""
Promo Triage: decide, per promotional email, whether to keep it or
unsubscribe, and carry out the unsubscribe.
"""

__version__ = '1.0.0'
