"""Static page content: links, donation addresses, notices."""

PAGE_TITLE = "Market Cap Tracker"
HEADLINE = "NVIDIA vs Crypto Market Cap"
SUBTITLE = "Real-time comparison"

UPDATE_FREQUENCIES: list[str] = [
    "NVIDIA: Every hour",
    "Crypto: Every hour (synced for consistency)",
]
UPDATE_FREQUENCY_NOTE = "Both cached for performance"

COMMUNITY_LINKS: list[dict[str, str]] = [
    {"name": "Twitter Profile", "label": "@0xgokhan", "url": "https://x.com/0xgokhan"},
]

DONATION_ADDRESSES: list[dict[str, str]] = [
    {
        "label": "Buy me a Mac Mini",
        "event_label": "Mac Mini Donation",
        "address": "0x36de990133D36d7E3DF9a820aA3eDE5a2320De71",
    },
]

PRIVACY_NOTICE = (
    "This site records anonymous usage events (page views, link clicks) to "
    "understand how it is used. No personal data is stored on our servers."
)

DISCLAIMER = (
    "Figures are estimates for informational purposes only and are not "
    "financial advice. NVIDIA market cap is derived from the latest share "
    "price and a fixed share-count estimate; crypto figures come from CoinGecko."
)
