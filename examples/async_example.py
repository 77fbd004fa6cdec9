#!/usr/bin/env python3
"""
Example: Using the imgurs client

Walks through an anonymous call, the PIN login flow and a refreshed user call.

Usage:
    python examples/async_example.py --client-id ID --client-secret SECRET
    python examples/async_example.py --client-id ID --client-secret SECRET --pin 1234567890
"""

import asyncio
import argparse
import logging
import sys

from imgurs import BasicClient, ClientError, ClientID, ClientSecret, PINCode
from imgurs.auth import AuthorizationMethod, get_authentication_url, login_with_pin, with_fresh_tokens
from imgurs.endpoints import get_account, get_account_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
log = logging.getLogger(__name__)


async def anonymous_example(client: BasicClient, username: str):
    """Anonymous calls only need the Client-ID header."""
    log.info("=== Anonymous API Example ===")
    response = await get_account(client, username)
    account = response.result()
    log.info(f"   Account {username}: reputation {account.get('reputation')}")
    for name, value in response.rate_limits().items():
        log.info(f"   {name}: {value}")


async def user_example(client: BasicClient, pin: str):
    """Exchange a PIN for tokens and call a user endpoint."""
    log.info("\n=== User API Example ===")
    authenticated = await login_with_pin(client, PINCode(pin))
    try:
        authenticated = await with_fresh_tokens(authenticated)
        settings = (await get_account_settings(authenticated)).result()
        log.info(f"   Account settings for {settings.get('account_url')}")
    finally:
        await authenticated.close()


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="imgurs examples")
    parser.add_argument('--client-id', required=True, help='Registered application client id')
    parser.add_argument('--client-secret', required=True, help='Registered application client secret')
    parser.add_argument('--username', default='ghostinspector', help='Account to look up')
    parser.add_argument('--pin', help='PIN obtained from the authorization URL')

    args = parser.parse_args()

    client = BasicClient(ClientID(args.client_id), ClientSecret(args.client_secret))
    try:
        await anonymous_example(client, args.username)

        if args.pin:
            await user_example(client, args.pin)
        else:
            url = get_authentication_url(client, AuthorizationMethod.PIN)
            log.info(f"\nOpen {url} to get a PIN, then rerun with --pin")

        log.info("\n✓ Examples completed successfully")

    except ClientError as e:
        log.error(f"Error: {e}", exc_info=True)
        return 1
    finally:
        await client.close()

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
