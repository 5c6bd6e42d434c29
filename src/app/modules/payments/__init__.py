"""
Payments module - payment records for subscriptions.

API Endpoints:
- POST /payments/create - Start a payment for a pending subscription
- POST /payments/verify - Confirm a payment (gateway callback or manual)
- GET /payments/history - Caller's payments
- POST /payments/webhook/stripe - Card gateway webhook
"""
