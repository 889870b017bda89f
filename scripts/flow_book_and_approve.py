#!/usr/bin/env python3
"""
Booking request, conflict and approval flow script.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Usage:
    python scripts/flow_book_and_approve.py --start 2026-05-01T10:00:00Z --end 2026-05-01T11:00:00Z
    python scripts/flow_book_and_approve.py --location-id <UUID> --start ... --end ... --keep

Flow:
    1. Create booking (PENDING)
    2. Approve booking
    3. Create overlapping booking (recorded as DENIED)
    4. Try to approve the denied booking (rejected)
    5. Create touching booking (PENDING)
    6. Delete the bookings created by this run
"""

import argparse
import json
import sys
import uuid
from datetime import datetime, timedelta

import httpx

BASE_URL = "http://localhost:8000"
BOOKINGS = "/api/v1/bookings"


def api_request(method: str, endpoint: str, data: dict | None = None) -> dict:
    """Make API request."""
    url = f"{BASE_URL}{endpoint}"

    if method == "GET":
        response = httpx.get(url, timeout=10.0, follow_redirects=True)
    elif method == "POST":
        response = httpx.post(url, json=data or {}, timeout=10.0, follow_redirects=True)
    elif method == "DELETE":
        response = httpx.delete(url, timeout=10.0, follow_redirects=True)
    else:
        raise ValueError(f"Unknown method: {method}")

    return {"status": response.status_code, "data": response.json() if response.text else {}}


def print_step(step: int, title: str):
    """Print step header."""
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("="*60)


def print_result(result: dict, fields: list[str] | None = None, expect_error: bool = False):
    """Print result, optionally filtering fields."""
    if result["status"] >= 400:
        print(f"{'EXPECTED ' if expect_error else ''}ERROR ({result['status']}): {json.dumps(result['data'], indent=2)}")
        return expect_error

    print(f"Status: {result['status']}")
    if fields:
        filtered = {k: result["data"].get(k) for k in fields if k in result["data"]}
        print(json.dumps(filtered, indent=2))
    else:
        print(json.dumps(result["data"], indent=2))
    return not expect_error


def booking_payload(org_id: str, location_id: str, start: datetime, end: datetime, title: str) -> dict:
    return {
        "orgId": org_id,
        "contact": {"name": "Flow Script", "email": "flow@example.com"},
        "event": {
            "title": title,
            "locationId": location_id,
            "start": start.isoformat(),
            "end": end.isoformat(),
            "details": "Created by flow_book_and_approve.py",
        },
        "requestNote": "Automated flow check",
    }


def parse_time(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def main():
    parser = argparse.ArgumentParser(description="Booking request and approval flow")
    parser.add_argument("--location-id", default=str(uuid.uuid4()), help="Location UUID")
    parser.add_argument("--org-id", default=str(uuid.uuid4()), help="Organization UUID")
    parser.add_argument("--start", required=True, help="Event start (ISO-8601, UTC)")
    parser.add_argument("--end", required=True, help="Event end (ISO-8601, UTC)")
    parser.add_argument("--keep", action="store_true", help="Do not delete created bookings")
    args = parser.parse_args()

    start, end = parse_time(args.start), parse_time(args.end)
    half = (end - start) / 2
    fields = ["id", "status", "event", "updatedAt"]
    created: list[str] = []

    # Step 1: Create booking
    print_step(1, "Create booking")
    result = api_request("POST", f"{BOOKINGS}/", booking_payload(args.org_id, args.location_id, start, end, "Main show"))
    if not print_result(result, fields):
        sys.exit(1)
    booking_id = result["data"]["id"]
    created.append(booking_id)

    # Step 2: Approve booking
    print_step(2, "Approve booking")
    result = api_request("POST", f"{BOOKINGS}/{booking_id}/approve")
    if not print_result(result, fields):
        sys.exit(1)

    # Step 3: Overlapping request
    print_step(3, "Create overlapping booking (expect DENIED)")
    result = api_request(
        "POST", f"{BOOKINGS}/",
        booking_payload(args.org_id, args.location_id, start + half, end + half, "Overlapping show"),
    )
    if not print_result(result, fields):
        sys.exit(1)
    denied_id = result["data"]["id"]
    created.append(denied_id)
    print(f"\nOverlapping booking status: {result['data']['status']}")

    # Step 4: Approving a denied booking is rejected
    print_step(4, "Approve denied booking (expect 400)")
    result = api_request("POST", f"{BOOKINGS}/{denied_id}/approve")
    if not print_result(result, expect_error=True):
        sys.exit(1)

    # Step 5: Touching request
    print_step(5, "Create touching booking (expect PENDING)")
    result = api_request(
        "POST", f"{BOOKINGS}/",
        booking_payload(args.org_id, args.location_id, end, end + timedelta(hours=1), "Encore"),
    )
    if not print_result(result, fields):
        sys.exit(1)
    created.append(result["data"]["id"])

    if args.keep:
        print("\n" + "="*60)
        print("FLOW COMPLETE (bookings kept)")
        print("="*60)
        return

    # Step 6: Clean up
    print_step(6, "Delete created bookings")
    for created_id in created:
        result = api_request("DELETE", f"{BOOKINGS}/{created_id}")
        if not print_result(result):
            sys.exit(1)

    print("\n" + "="*60)
    print("FULL FLOW COMPLETE")
    print("="*60)


if __name__ == "__main__":
    main()
