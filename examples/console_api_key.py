#!/usr/bin/env python3
"""Console OAuth to create an API key (non-blocking).

By default the authorization result is captured by the local callback
listener. With ``--paste`` the ``code#state`` string is read from stdin.

Usage:
    python examples/console_api_key.py
    python examples/console_api_key.py --paste
"""

import argparse
import asyncio
import sys

from dotenv import load_dotenv

from anthropic_auth import (
    AnthropicAuthError,
    AsyncHttpxTransport,
    AsyncOAuthClient,
    AuthSettings,
    BrowserLaunchError,
    CallbackListener,
    OAuthMode,
    open_browser,
    setup_logging,
)

load_dotenv()

CALLBACK_TIMEOUT = 300


def _show_url(url: str) -> None:
    try:
        open_browser(url)
        print("✅ Browser opened! Please authorize in your browser.")
    except BrowserLaunchError as e:
        print(f"⚠️  Could not open browser: {e}")
        print(f"Please manually visit: {url}")


async def run(paste: bool) -> int:
    settings = AuthSettings()
    logger = setup_logging(__name__, level=settings.log_level)

    async with AsyncHttpxTransport(timeout=settings.http_timeout) as transport:
        client = AsyncOAuthClient(settings.to_oauth_config(), transport=transport)
        flow = client.start_flow(OAuthMode.KEY_ISSUANCE)

        try:
            if paste:
                _show_url(flow.authorization_url)
                response = input("Paste the authorization response (code#state format): ")
                session = await client.complete_flow(flow, response.strip())
            else:
                async with CallbackListener(
                    flow.csrf_state, port=settings.redirect_port, host=settings.callback_host
                ) as listener:
                    _show_url(flow.authorization_url)
                    print("⏳ Waiting for authorization...")
                    result = await asyncio.wait_for(listener.wait(), timeout=CALLBACK_TIMEOUT)
                code, _ = result.unwrap(flow.csrf_state)
                # State was already validated by the listener
                session = await client.complete_flow(flow, code)

            print("\n🔑 Creating API key...")
            api_key = await client.issue_api_key(session)
        except TimeoutError:
            logger.error(f"No authorization received within {CALLBACK_TIMEOUT}s")
            return 1
        except AnthropicAuthError as e:
            logger.error(f"Authorization failed: {e}")
            return 1

    print("\n✅ Success!")
    print(f"API Key: {api_key}")
    print("\n💡 Save this API key securely - it won't be shown again!")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Create an Anthropic API key via OAuth")
    parser.add_argument(
        "--paste",
        action="store_true",
        help="Paste the code#state response instead of running the callback listener",
    )
    args = parser.parse_args()
    return asyncio.run(run(args.paste))


if __name__ == "__main__":
    sys.exit(main())
