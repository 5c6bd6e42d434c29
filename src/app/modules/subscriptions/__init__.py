"""
Subscriptions module - plans, feature gating and subscription lifecycle.

API Endpoints:
- GET /subscriptions/plans - Purchasable plans
- POST /subscriptions/create - Start a pending subscription
- GET /subscriptions/my-subscriptions - Subscription history
- GET /subscriptions/current - Plan in force and its features
- POST /subscriptions/{id}/activate - Activate a pending subscription

Background Jobs (via APScheduler):
- expire_subscriptions: hourly, expires lapsed subscriptions and downgrades users
"""
