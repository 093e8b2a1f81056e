"""
Quick local smoke test: post the preset example URLs to a running PhishShield
API and print one JSON line per scan, followed by the counter totals.

Run: python3 tools/run_local_smoke.py --base-url http://127.0.0.1:5050
"""
import os
import json
import argparse

import requests

from phishshield.app.scanner import EXAMPLE_URLS


def main():
    parser = argparse.ArgumentParser(description="Scan the example URLs against a running API")
    parser.add_argument('--base-url', default=os.getenv('BACKEND_URL', 'http://127.0.0.1:5050'))
    parser.add_argument('--api-key', default=os.getenv('PHISHSHIELD_API_KEY'))
    parser.add_argument('urls', nargs='*', help='URLs to scan (defaults to the built-in examples)')
    args = parser.parse_args()

    headers = {'X-API-Key': args.api_key} if args.api_key else {}
    session = requests.Session()

    for u in args.urls or EXAMPLE_URLS:
        try:
            r = session.post(f'{args.base_url}/scan', json={'url': u}, headers=headers, timeout=15)
            r.raise_for_status()
            verdict = r.json()['verdict']
        except requests.RequestException as e:
            print(json.dumps({"url": u, "error": str(e)}))
            continue
        print(json.dumps({
            "url": u,
            "riskScore": verdict['riskScore'],
            "status": verdict['status'],
            "factors": [f['name'] for f in verdict['factors']],
        }))

    r = session.get(f'{args.base_url}/stats', headers=headers, timeout=15)
    r.raise_for_status()
    print("stats:", json.dumps(r.json()))


if __name__ == '__main__':
    main()
