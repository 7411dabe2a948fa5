"""
Business operations behind the HTTP routes.

Services take the authenticated account id explicitly, raise
:mod:`taskhub.errors` exceptions on failure, and return plain dicts ready
for the response envelope.
"""
