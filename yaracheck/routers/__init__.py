"""
YaraCheck - Routers Package

FastAPI route handlers.

Routers:
- auth: Login, registration, password change
- pricing: Submission fee quotes
- reports: Free submission, tracking search, my reports, anonymous tips
- payments: Checkout, verification, Paystack webhook
- admin_reports: Report moderation and country statistics
- admin_users: Admin account management and audit trail
- dashboard: Admin capabilities and landing
- roi: ROI distributions and withdrawals
- assets: Company assets
- support: Support tickets and live chat
"""
