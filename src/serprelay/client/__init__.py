"""SerpRelay Python SDK — Client library for the SerpRelay API.

Provides both async and sync clients for interacting with a SerpRelay server.

Quick start::

    from serprelay.client import SerpRelayClient

    client = SerpRelayClient("http://localhost:8080", api_key="change-me")

    response = client.search("coffee shops", num=5)
    for result in response["organic"]:
        print(result["position"], result["title"])
"""

from serprelay.client.client import AsyncSerpRelayClient, SerpRelayClient

__all__ = ["AsyncSerpRelayClient", "SerpRelayClient"]
