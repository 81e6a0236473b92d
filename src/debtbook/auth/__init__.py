"""Authentication.

Learn: Users register with a username/password and receive a signed,
30-day bearer token. Every record route resolves that token back to a
User before any business logic runs — there is no other way in.
"""
