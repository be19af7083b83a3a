"""
Services Layer

Slot allocation and waitlist logic that:
- Accepts domain inputs (sessions, model instances, IDs)
- Returns domain outputs (models, dataclasses, dicts)
- Reports rule violations with its own exception types, translated to HTTP
  status codes by the routes
- Commits its own writes; read-only projections never mutate
"""
