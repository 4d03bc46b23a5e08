"""
Module 09D - Wallet Submission API (FastAPI)

HTTP API for the signup form:
- GET /api/wallet-submissions - List submitted wallets, newest first
- POST /api/wallet-submissions - Record a wallet address
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
