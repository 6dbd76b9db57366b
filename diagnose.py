"""Diagnostic script to check QuickBase credentials and the local HTTP API."""

import os
import sys
from datetime import datetime

import requests

from QBMCP.utils.env_config import env_flag, get_int, get_str, load_env_file

BASE_URL = "http://127.0.0.1:8000"
QB_API_URL = "https://api.quickbase.com/v1"


def print_header(text):
    print("\n" + "=" * 80)
    print(text)
    print("=" * 80)


def quickbase_headers():
    return {
        "QB-Realm-Hostname": get_str("QB_REALM", ""),
        "Authorization": f"QB-USER-TOKEN {get_str('QB_USER_TOKEN', '')}",
        "Content-Type": "application/json",
        "User-Agent": "QuickBase-MCP-Server/1.0.0 (diagnose)",
    }


def test_environment():
    """Check that the required variables are set."""
    print_header("TEST 1: Environment")
    missing = [name for name in ("QB_REALM", "QB_USER_TOKEN", "QB_APP_ID") if not os.getenv(name, "").strip()]
    if missing:
        print(f"[FAIL] Missing required environment variables: {', '.join(missing)}")
        print("  Set them in the environment or in a .env file")
        return False
    print(f"[OK] Realm: {os.getenv('QB_REALM')}")
    print(f"  App ID: {os.getenv('QB_APP_ID')}")
    print(f"  Read-only: {env_flag('QB_READONLY')}  Destructive tools: {env_flag('QB_ALLOW_DESTRUCTIVE')}")
    return True


def test_quickbase_app():
    """Fetch the application and its tables straight from QuickBase."""
    print_header("TEST 2: QuickBase Application")
    app_id = os.getenv("QB_APP_ID")
    timeout = get_int("QB_DEFAULT_TIMEOUT", 30000, min_value=1000) / 1000.0
    try:
        response = requests.get(f"{QB_API_URL}/apps/{app_id}", headers=quickbase_headers(), timeout=timeout)
        if response.status_code != 200:
            print(f"[FAIL] QuickBase returned status {response.status_code}")
            print(f"  Response: {response.text[:200]}")
            return False
        print(f"[OK] App: {response.json().get('name')}")

        response = requests.get(
            f"{QB_API_URL}/tables", params={"appId": app_id}, headers=quickbase_headers(), timeout=timeout
        )
        if response.status_code != 200:
            print(f"[FAIL] Listing tables returned status {response.status_code}")
            return False
        tables = response.json()
        print(f"  Tables: {len(tables)}")
        for table in tables[:10]:
            print(f"    {table.get('id')}: {table.get('name')}")
        return True
    except requests.exceptions.ConnectionError:
        print("[FAIL] Cannot connect to QuickBase")
        return False
    except requests.exceptions.Timeout:
        print("[FAIL] Request timed out")
        return False


def test_backend_health():
    """Test if the HTTP API is running."""
    print_header("TEST 3: HTTP API Health Check")
    try:
        response = requests.get(f"{BASE_URL}/health", timeout=5)
        if response.status_code == 200:
            print(f"[OK] HTTP API is running")
            print(f"  Response: {response.json()}")
            return True
        print(f"[FAIL] HTTP API returned status {response.status_code}")
        return False
    except requests.exceptions.ConnectionError:
        print("[SKIP] HTTP API is not running")
        print("  Start it with: python -m uvicorn backend.main:app --host 127.0.0.1 --port 8000")
        return None


def test_tool_catalogue():
    """List tools and run one read-only call through the HTTP API."""
    print_header("TEST 4: Tool Catalogue")
    try:
        response = requests.get(f"{BASE_URL}/api/tools", timeout=10)
        if response.status_code != 200:
            print(f"[FAIL] Tool listing returned status {response.status_code}")
            return False
        tools = response.json().get("tools", [])
        print(f"[OK] {len(tools)} tools advertised")

        response = requests.post(f"{BASE_URL}/api/tools/quickbase_test_connection", json={}, timeout=60)
        if response.status_code != 200:
            print(f"[FAIL] quickbase_test_connection returned status {response.status_code}")
            print(f"  Response: {response.text[:200]}")
            return False
        print(f"  {response.json()['result']['message']}")
        return True
    except requests.exceptions.Timeout:
        print("[FAIL] Request timed out")
        return False


def main():
    load_env_file()
    print_header("QUICKBASE MCP DIAGNOSTIC TOOL")
    print(f"Time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    results = [("Environment", test_environment())]
    if results[0][1]:
        results.append(("QuickBase Application", test_quickbase_app()))

    health = test_backend_health()
    if health is not None:
        results.append(("HTTP API Health", health))
    if health:
        results.append(("Tool Catalogue", test_tool_catalogue()))

    # Summary
    print_header("SUMMARY")
    passed = sum(1 for _, result in results if result)
    total = len(results)

    for name, result in results:
        status = "[PASS]" if result else "[FAIL]"
        print(f"  {status}: {name}")

    print(f"\nResults: {passed}/{total} checks passed")
    return 0 if passed == total else 1


if __name__ == "__main__":
    sys.exit(main())
