#!/usr/bin/env python3
"""
Weather Lookup Example

Fetches current conditions for a few cities concurrently, sharing one
HTTP client.
"""

import asyncio

import httpx

from order import WeatherError, fetch_weather, format_weather

CITIES = ["Los Angeles", "New York", "Tokyo"]


async def lookup(client: httpx.AsyncClient, city: str) -> list[str]:
    try:
        current = await fetch_weather(city, client=client)
    except WeatherError as e:
        return [f"{city}: {e}"]
    return format_weather(city, current)


async def main():
    async with httpx.AsyncClient() as client:
        results = await asyncio.gather(*(lookup(client, city) for city in CITIES))

    for lines in results:
        print("\n".join(lines))
        print("-" * 40)


if __name__ == "__main__":
    asyncio.run(main())
