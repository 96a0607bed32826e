"""
auth — User authentication module.

Provides:
  • JWT token issuance & verification (``TokenService``)
  • Password hashing (bcrypt, off the event loop)
  • ``Authenticator`` register / login rules
  • Register / Login API routes
  • ``get_current_user`` / ``get_optional_user`` FastAPI dependencies
"""
