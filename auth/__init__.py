"""
auth — credential and session-token lifecycle.

Provides:
  • Password hashing (bcrypt, per-call salt, constant-time verify)
  • JWT token issuance (HS256, issue-only)
  • ``CredentialService`` — register / login / profile update
  • The credential error taxonomy
"""
