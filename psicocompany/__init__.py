"""
Psicocompany web front-end.

This package provides a FastAPI application that renders the signup,
profile, therapist listing and navigation screens on top of a
backend-as-a-service (Supabase), plus the toast notification queue the
screens share.
"""
