"""
Constants Module
"""

# Question status
QUESTION_STATUS = {
    "PENDING": "pending",
    "RESEARCHING": "researching",
    "ANSWERED": "answered",
}

# Payment types
PAYMENT_TYPE = {
    "ONE_TIME": "one_time",
    "SUBSCRIPTION": "subscription",
}

# Subscription status
SUBSCRIPTION_STATUS = {
    "ACTIVE": "active",
    "INACTIVE": "inactive",
    "CANCELLED": "cancelled",
    "PAST_DUE": "past_due",
}

# Stripe subscription status -> local subscription status
STRIPE_SUBSCRIPTION_STATUS_MAP = {
    "active": SUBSCRIPTION_STATUS["ACTIVE"],
    "canceled": SUBSCRIPTION_STATUS["CANCELLED"],
    "past_due": SUBSCRIPTION_STATUS["PAST_DUE"],
}

# Admin console
ADMIN_ROLE = "admin"
ADMIN_QUESTIONS_DEFAULT_LIMIT = 50
ADMIN_RECENT_QUESTIONS_LIMIT = 10

# Share slug alphabet for Bad Decision Calculator results
SHARE_SLUG_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"

# Security headers returned on admin responses
SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": "default-src 'self'; script-src 'self' 'unsafe-inline'; style-src 'self' 'unsafe-inline';",
}
