"""
Command-line tools for the hosting API client.
"""

from hostapi_client.cli.auth_token import main as auth_token_main
