"""
auth — User authentication module.

Provides:
  • Credential store (``UserStore``) with case-insensitive unique e-mails
  • Password hashing (bcrypt)
  • JWT token issuing & validation (HS256, issuer/audience checked)
  • HTTP-only session cookie handling
  • ``AuthService`` orchestration and the ``/api/auth`` routes
"""
