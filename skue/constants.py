"""
MIME types and HTTP header names used across skue.
"""

MIME_XML = "application/xml"
MIME_JSON = "application/json"
MIME_ANY = "*/*"

HEADER_ACCEPT = "Accept"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_API_KEY = "X-API-KEY"

# Verbs a resource route can receive; the unmapped ones answer 405.
HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")
