"""
Editorial Dashboard

A FastAPI dashboard for a small publishing application backed by Supabase.
Provides sign-in/sign-up, a tabbed content view and a seed-data test action.
"""

__version__ = "1.0.0"
