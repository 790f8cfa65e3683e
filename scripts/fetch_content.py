#!/usr/bin/env python3
"""
Fetch page content from the Wurd content API and print it as JSON.

Handy for checking what a site will render without starting the site, e.g.

    python scripts/fetch_content.py --app wurd-example-simple common home --lang fr
"""

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import List, Optional

import httpx

from shared.config import WurdConfig, get_config
from shared.logging import configure_logging
from wurd_client import Wurd
from wurd_client.caching import ContentCache


async def fetch(
    *,
    app: str,
    pages: List[str],
    language: Optional[str],
    draft: bool,
    api_url: Optional[str] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> dict:
    """Load the pages through a throwaway client and return the content."""
    config = WurdConfig(api_url=api_url) if api_url else get_config()
    cache = ContentCache(config.cache_max_age_seconds)

    if http_client is not None:
        wurd = Wurd(app, draft=draft, cache=cache, config=config, http_client=http_client)
        return await wurd.load(pages, language=language)

    async with httpx.AsyncClient(timeout=config.http_timeout_seconds) as client:
        wurd = Wurd(app, draft=draft, cache=cache, config=config, http_client=client)
        return await wurd.load(pages, language=language)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch Wurd page content and print it as JSON.")
    parser.add_argument("pages", nargs="+", help="Page names to load")
    parser.add_argument("--app", required=True, help="Wurd app name")
    parser.add_argument("--lang", default=None, help="Language code, e.g. 'en' or 'fr'")
    parser.add_argument("--draft", action="store_true", help="Load unpublished draft content")
    parser.add_argument("--api-url", default=None, help="Content API base URL (defaults to WURD_API_URL)")
    parser.add_argument("--log-level", default=os.getenv("WURD_LOG_LEVEL", "warning"), help="Log level")
    parser.add_argument("--output", type=Path, default=None, help="Optional path to write the JSON content")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    configure_logging("wurd.fetch_content", args.log_level, stream=sys.stderr)
    try:
        content = asyncio.run(
            fetch(
                app=args.app,
                pages=args.pages,
                language=args.lang,
                draft=args.draft,
                api_url=args.api_url,
            )
        )
    except KeyboardInterrupt:
        return 130
    except Exception as exc:  # pragma: no cover - CLI surface
        print(f"[fetch-content] failed: {exc}", file=sys.stderr)
        return 1

    rendered = json.dumps(content, indent=2, ensure_ascii=False)
    print(rendered)

    if args.output:
        args.output.write_text(rendered)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
