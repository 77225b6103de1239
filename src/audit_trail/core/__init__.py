"""Core audit-trail modules."""
