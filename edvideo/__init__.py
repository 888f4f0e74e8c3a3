"""
Educational Video Platform - list and upload videos to S3.

This package contains the complete application:
- core: Framework-agnostic catalog logic
- infrastructure: Object storage integration
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
