"""
Test: anonymous account lookup against the live API
Usage:
  CLIENT_ID=... CLIENT_SECRET=... python tests/functional/test_account.py [username]
"""

import asyncio
import sys
from pathlib import Path

# Add repo root to path for package imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))


async def main():
    from imgurs.config import basic_client_from_env
    from imgurs.endpoints import get_account
    from imgurs.exceptions import ConfigError

    username = sys.argv[1] if len(sys.argv) > 1 else "ghostinspector"
    try:
        client = basic_client_from_env()
    except ConfigError as e:
        print(f"Missing credentials: {e}. Set CLIENT_ID and CLIENT_SECRET")
        return
    async with client:
        response = await get_account(client, username)
        print("Account:", response.result())
        print("Rate limits:", response.rate_limits())


if __name__ == "__main__":
    asyncio.run(main())
