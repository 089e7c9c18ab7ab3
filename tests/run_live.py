"""Live smoke test — OMF ingress SDK against a real ingress service."""

import asyncio
import os
import random
import sys
from datetime import datetime, timezone

# Add src to path for development
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from omf_ingress import AsyncIngressClient, OmfIngressError, load_settings

TYPE_ID = "omf_ingress_live_type"
CONTAINER_ID = "omf_ingress_live_container"

passed = 0
failed = 0

def check(condition, msg):
    global passed, failed
    if condition:
        print(f"  PASS: {msg}")
        passed += 1
    else:
        print(f"  FAIL: {msg}")
        failed += 1


async def step(name, coro):
    try:
        await coro
        check(True, name)
    except OmfIngressError as e:
        check(False, f"{name}: {e.code}: {e}")


async def main():
    settings = load_settings(os.environ.get("OMF_INGRESS_SETTINGS"))

    async with AsyncIngressClient.from_settings(settings) as client:
        print("\n=== Token ===")
        token = await client.tokens.get_token()
        check(bool(token), "Access token acquired")

        print("\n=== Types + Containers ===")
        schema = (
            '{"id": "%s", "type": "object", "classification": "dynamic", "properties": {'
            '"Time": {"type": "string", "format": "date-time", "isindex": true},'
            '"Value": {"type": "number"}}}' % TYPE_ID
        )
        await step("Type created", client.create_types([schema]))
        await step("Container created", client.create_containers([{"id": CONTAINER_ID, "type_id": TYPE_ID}]))

        print("\n=== Values ===")
        for use_compression in (False, True):
            client.use_compression = use_compression
            values = [{
                "stream_id": CONTAINER_ID,
                "values": [{"Time": datetime.now(timezone.utc).isoformat(), "Value": random.random()}],
            }]
            await step(f"Values sent (compression={use_compression})", client.send_values(values))

    print(f"\n{passed} passed, {failed} failed")
    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    asyncio.run(main())
