"""
Push notification gate: quiet hours suppression and Redis-backed rate limiting.
"""
