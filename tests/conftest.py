"""
Pytest configuration shared by the whole suite.

Loaded before any test module, so Langfuse is switched off before
``langfuse.observe`` wraps the chat service, the resolver and the tool loop.
"""

import logging
import os

os.environ["LANGFUSE_TRACING_ENABLED"] = "false"
os.environ.setdefault("TESTING", "true")

# Must run before pytest configures logging
for _name in ("langfuse", "httpx", "google_genai"):
    _quiet = logging.getLogger(_name)
    _quiet.setLevel(logging.CRITICAL)
    _quiet.propagate = False
