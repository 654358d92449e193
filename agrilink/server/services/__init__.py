"""
Business services. Each service wraps one request-scoped ``AsyncSession`` and
commits once per operation.
"""
