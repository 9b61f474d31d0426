#!/usr/bin/env python3

"""
Development utility for the GitHub OAuth relay
"""

import argparse
import asyncio
import os
import subprocess
import sys
from pathlib import Path

import httpx
from dotenv import load_dotenv

REQUIRED_VARS = ["OAUTH_CLIENT_ID", "OAUTH_CLIENT_SECRET", "ALLOWED_ORIGINS"]

def run_server():
    """Run the relay with auto-reload"""
    port = os.getenv("PORT", "3000")
    print(f"🚀 Starting development server on port {port}...")
    env = dict(os.environ, ENVIRONMENT=os.getenv("ENVIRONMENT", "development"))
    subprocess.run(
        [sys.executable, "-m", "uvicorn", "main:build_app", "--factory", "--reload", "--port", port],
        env=env,
        check=False,
    )

def run_tests() -> int:
    """Run the pytest suite"""
    print("🧪 Running tests...")
    return subprocess.run([sys.executable, "-m", "pytest", "tests"], check=False).returncode

def check_env() -> bool:
    """Check environment configuration"""
    print("🔍 Checking environment configuration...")
    load_dotenv()

    missing_required = [var for var in REQUIRED_VARS if not os.getenv(var)]

    if missing_required:
        print(f"❌ Missing required variables: {', '.join(missing_required)}")
        return False

    print("✅ Environment configuration looks good!")

    print("\n📋 Current configuration:")
    print(f"   Environment: {os.getenv('ENVIRONMENT', 'production')}")
    print(f"   Host: {os.getenv('HOST', '0.0.0.0')}")
    print(f"   Port: {os.getenv('PORT', '3000')}")
    print(f"   Client ID: {os.getenv('OAUTH_CLIENT_ID')}")
    print(f"   Allowed origins: {os.getenv('ALLOWED_ORIGINS')}")

    if "*" in [origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "").split(",")]:
        print("⚠️  ALLOWED_ORIGINS contains '*', any browser origin will be accepted")

    return True

async def fetch_health(base_url: str) -> dict:
    async with httpx.AsyncClient() as client:
        response = await client.get(f"{base_url}/health", timeout=5)
        response.raise_for_status()
        return response.json()

def status(base_url: str) -> bool:
    """Show server status"""
    print("📊 Server Status:")
    try:
        health = asyncio.run(fetch_health(base_url))
    except httpx.HTTPError as e:
        print(f"❌ Relay at {base_url} is not reachable: {e}")
        return False

    print(f"✅ Relay at {base_url} is running")
    print(f"   Status: {health.get('status')}")
    return True

def main():
    """Main CLI interface"""
    parser = argparse.ArgumentParser(
        description="Development utility for the GitHub OAuth relay",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Available commands:
  run         Run development server
  test        Run tests
  check       Check environment configuration
  status      Show server status

Examples:
  python dev.py check        # Verify required environment variables
  python dev.py run          # Run development server
  python dev.py test         # Run tests
        """
    )

    parser.add_argument(
        "command",
        choices=["run", "test", "check", "status"],
        help="Command to execute"
    )
    parser.add_argument(
        "--url",
        default="http://localhost:3000",
        help="Base URL of the relay for the status command (default: http://localhost:3000)"
    )

    args = parser.parse_args()

    # Change to script directory
    os.chdir(Path(__file__).parent)

    print("🛠️  GitHub OAuth Relay - Development Utility")
    print("=" * 60)

    if args.command == "run":
        run_server()

    elif args.command == "test":
        sys.exit(run_tests())

    elif args.command == "check":
        sys.exit(0 if check_env() else 1)

    elif args.command == "status":
        sys.exit(0 if status(args.url) else 1)

if __name__ == "__main__":
    main()
