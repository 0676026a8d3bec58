"""
Deal Feed

Polls a Bluesky account's post history, turns each free-form post into a
structured deal record (link, price, platform tag) and serves the result
as a JSON feed for a polling client.
"""

__version__ = "0.1.0"
__author__ = "Deal Feed Team"
