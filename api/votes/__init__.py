"""
Vote submission, admin vote listing and the webhook notification.
"""
