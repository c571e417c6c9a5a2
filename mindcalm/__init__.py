"""MindCalm: evidence-based GAD self-management API."""
