"""Trigger the shadow race cron endpoints by hand (local stand-in for the scheduler)."""
import argparse
import json
import os
import sys

import httpx
from dotenv import load_dotenv


JOBS = {
    "run-today": "/api/v1/cron/shadow/run-today-all",
    "nightly": "/api/v1/cron/shadow/nightly-smooth",
    "taunt": "/api/v1/cron/shadow/taunt-maybe",
    "weekly": "/api/v1/cron/shadow/weekly-summarize",
}


def trigger(client: httpx.Client, name: str, secret: str) -> dict:
    response = client.post(JOBS[name], headers={"x-cron-secret": secret})
    response.raise_for_status()
    return response.json()


def main():
    load_dotenv()
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("jobs", nargs="*", help=f"jobs to run, any of {', '.join(JOBS)} (default: all)")
    parser.add_argument("--base-url", default=os.getenv("API_BASE_URL", "http://localhost:8000"))
    parser.add_argument("--timeout", type=float, default=120.0)
    args = parser.parse_args()
    unknown = [name for name in args.jobs if name not in JOBS]
    if unknown:
        parser.error(f"unknown job(s): {', '.join(unknown)}")

    secret = os.getenv("CRON_SECRET", "")
    if not secret:
        print("CRON_SECRET is not set")
        sys.exit(1)

    with httpx.Client(base_url=args.base_url, timeout=args.timeout) as client:
        for name in args.jobs or list(JOBS):
            print(f"== {name} ==")
            try:
                result = trigger(client, name, secret)
            except httpx.HTTPError as e:
                print(f"  failed: {e}")
                continue
            print(json.dumps(result, indent=2, default=str))


if __name__ == "__main__":
    main()
