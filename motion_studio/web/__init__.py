"""HTTP interface for Motion Studio.

Usage:
    python -m motion_studio.web [--port 3000] [--host 0.0.0.0]
"""
