"""Dynamic form system: field definition store, submission API and form client."""

__version__ = "0.1.0"
