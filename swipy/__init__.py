"""
Swipy backend: choose restaurants together.

Responsibilities:
- Serve the REST API used by the mobile client and the landing page.
- Discover restaurants by criteria and distance.
- Store users, reservations, chat messages and notifications.
"""
