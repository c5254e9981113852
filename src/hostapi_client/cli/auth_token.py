"""
Command-line interface for getting hosting API bearer tokens.

This module acquires a token with the configured private key (or returns the
configured token while it is valid) and prints it.
"""

import argparse
import json
import sys
from datetime import datetime, timezone

import jwt

from hostapi_client.client import create_auth_coordinator
from hostapi_client.errors import HostApiError
from hostapi_client.utils.config import load_config
from hostapi_client.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Get a hosting API bearer token")

    parser.add_argument("--config", "-c", help="Path of a YAML or JSON config file")
    parser.add_argument("--account-name", help="Account name to request the token for")
    parser.add_argument("--private-key-path", help="Path of the PEM encoded private key")
    parser.add_argument(
        "--read-only",
        help="Request a read-only token",
        action="store_true",
        default=None,
    )
    parser.add_argument(
        "--demo",
        help="Use the provider's demo token",
        action="store_true",
        default=None,
    )
    parser.add_argument(
        "--claims",
        help="Also print the unverified token header and claims",
        action="store_true",
    )
    parser.add_argument(
        "--output", "-o",
        help="Output format (json or text)",
        choices=["json", "text"],
        default="text",
    )
    return parser


def main(argv=None):
    """Main entry point for the auth token CLI."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(
            args.config,
            account_name=args.account_name,
            private_key_path=args.private_key_path,
            read_only=args.read_only,
            demo_mode=args.demo,
        )
        configure_logging(config.log_level)

        token = create_auth_coordinator(config).acquire()
        expires_at = datetime.fromtimestamp(token.expiry, tz=timezone.utc).isoformat()

        if args.output == "json":
            output = {"token": token.raw, "expiry": token.expiry, "expires_at": expires_at}
            if args.claims:
                output["header"] = jwt.get_unverified_header(token.raw)
                output["claims"] = jwt.decode(token.raw, options={"verify_signature": False})
            print(json.dumps(output, indent=2))
        else:
            print(token.raw)
            print(f"Expires At: {expires_at}", file=sys.stderr)
            if args.claims:
                header = jwt.get_unverified_header(token.raw)
                claims = jwt.decode(token.raw, options={"verify_signature": False})
                for key, value in {**header, **claims}.items():
                    print(f"{key}: {value}", file=sys.stderr)

        return 0

    except (HostApiError, jwt.PyJWTError) as e:
        logger.error("Failed to get auth token", error=str(e))

        if args.output == "json":
            print(json.dumps({"error": str(e)}))
        else:
            print(f"Error: {e}", file=sys.stderr)

        return 1


if __name__ == "__main__":
    sys.exit(main())
