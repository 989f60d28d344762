"""
Drive a running Ads Generator API end-to-end for one brand image.

Usage: python scripts/run_campaign.py path/to/brand.png ["custom instruction"]
"""
import base64
import os
import sys
import time
from pathlib import Path
import httpx
from dotenv import load_dotenv

from adsgen.logging_config import setup_logger

logger = setup_logger(__name__)
load_dotenv()

API_URL = os.environ.get("API_URL", "http://localhost:8000")
POLL_INTERVAL = 5  # seconds


def main():
    if len(sys.argv) < 2:
        logger.error("Usage: run_campaign.py IMAGE [INSTRUCTION]")
        sys.exit(1)

    image_path = Path(sys.argv[1])
    instruction = sys.argv[2] if len(sys.argv) > 2 else ""
    image_data = base64.b64encode(image_path.read_bytes()).decode()

    with httpx.Client(base_url=API_URL, timeout=60.0) as client:
        session = client.post("/sessions").json()
        session_id = session["id"]
        logger.info(f"Session {session_id} created")

        response = client.post(
            f"/sessions/{session_id}/images",
            json={"images": [{"data": image_data, "filename": image_path.name}]}
        )
        response.raise_for_status()

        if instruction:
            client.put(f"/sessions/{session_id}/settings", json={"user_instruction": instruction}).raise_for_status()

        response = client.post(f"/sessions/{session_id}/generate")
        response.raise_for_status()
        state = response.json()

        while state["is_processing"]:
            time.sleep(POLL_INTERVAL)
            state = client.get(f"/sessions/{session_id}").json()
            logger.info(f"[{state['phase']}] {state['progress']}% {state['progress_message']}")

    if state["error"]:
        logger.error(f"Campaign failed: {state['error']}")
        sys.exit(1)

    for asset in state["assets"]:
        logger.info(f"{asset['aspect_ratio']} {asset['type']} {asset['status']}: {asset['url'] or asset.get('error')}")
    if state["ad_copy"]:
        logger.info(f"Headline: {state['ad_copy'].get('headline')}")


if __name__ == "__main__":
    main()
