"""
auth — User authentication module.

Provides:
  • Signed bearer token issuing & verification
  • Password hashing (bcrypt, fixed work factor)
  • Register / Login API routes
  • ``get_current_user_id`` FastAPI dependency
"""
