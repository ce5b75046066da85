"""Command-line access to the classifieds API.

Examples:
    python main.py get "properties?status=active" --page-url http://localhost:8080
    python main.py post favorites --data '{"propertyId": "p1"}' --token "$TOKEN"
    python main.py get banners --base-url https://homes.example.com/api -v
"""

import argparse
import asyncio
import json
import logging
import sys

from estate_api import ApiError, EstateApiError, PageLocation, create_api, create_config
from estate_api.logging_config import configure_logging
from estate_api.storage import SQLiteStorage, TOKEN_KEY


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Call the classifieds API")
    parser.add_argument("method", choices=["get", "post", "put", "delete"])
    parser.add_argument("endpoint", help="Logical endpoint, e.g. 'properties?status=active'")
    parser.add_argument("--data", help="JSON body for post/put")
    parser.add_argument("--token", help="Bearer token (overrides the stored one)")
    parser.add_argument("--save-token", action="store_true", help="Store --token for later calls")
    parser.add_argument("--page-url", help="Page location used for environment detection")
    parser.add_argument("--base-url", help="Explicit API base URL")
    parser.add_argument("--session", default="~/.estate/session.db", help="Session storage file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    location = PageLocation.from_url(args.page_url) if args.page_url else None
    overrides = {"base_url": args.base_url} if args.base_url else {}
    config = create_config(location, **overrides)

    storage = SQLiteStorage(args.session)
    if args.token and args.save_token:
        await storage.set(TOKEN_KEY, args.token)

    async with create_api(config, storage) as api:
        try:
            if args.method in ("post", "put"):
                data = json.loads(args.data) if args.data else None
                result = await getattr(api, args.method)(args.endpoint, data, args.token)
            else:
                result = await getattr(api, args.method)(args.endpoint, args.token)
        except ApiError as e:
            print(f"Error ({e.status}): {e}", file=sys.stderr)
            return 1
        except EstateApiError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2
        finally:
            storage.close()

    print(json.dumps(result["data"], indent=2, ensure_ascii=False))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
