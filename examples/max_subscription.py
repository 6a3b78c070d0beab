#!/usr/bin/env python3
"""Claude Pro/Max subscription OAuth flow (blocking).

Opens the authorization page in a browser, then asks for the
``code#state`` string the provider displays after you approve.

Usage:
    python examples/max_subscription.py
"""

import sys

from dotenv import load_dotenv

from anthropic_auth import (
    AnthropicAuthError,
    AuthSettings,
    BrowserLaunchError,
    HttpxTransport,
    OAuthClient,
    OAuthMode,
    open_browser,
    setup_logging,
)

load_dotenv()


def main() -> int:
    settings = AuthSettings()
    logger = setup_logging(__name__, level=settings.log_level)

    with HttpxTransport(timeout=settings.http_timeout) as transport:
        client = OAuthClient(settings.to_oauth_config(), transport=transport)
        flow = client.start_flow(OAuthMode.SUBSCRIPTION)

        print("🌐 Opening browser for authorization...")
        try:
            open_browser(flow.authorization_url)
            print("✅ Browser opened! Please authorize in your browser.")
        except BrowserLaunchError as e:
            print(f"⚠️  Could not open browser: {e}")
            print(f"Please manually visit: {flow.authorization_url}")

        response = input("Paste the authorization response (code#state format): ").strip()

        try:
            session = client.complete_flow(flow, response)
        except AnthropicAuthError as e:
            logger.error(f"Authorization failed: {e}")
            return 1

    tokens = session.tokens
    print("\n✅ Success!")
    print(f"Access token: {tokens.access_token[:30]}...")
    print(f"Expires in: {tokens.expires_in()}s")
    print("\n💡 Tip: Save these tokens securely to avoid re-authentication!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
