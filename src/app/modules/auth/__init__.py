"""
Authentication module.

API Endpoints:
- POST /auth/register, /auth/login, /auth/logout, /auth/refresh
- GET /auth/me, PUT /auth/profile
- POST /auth/forgot-password, /auth/reset-password
"""
