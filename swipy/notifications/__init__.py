"""
Notification package.

Responsibilities:
- Persist in-app notifications for users.
- Dispatch push messages through the Expo push service.
"""
