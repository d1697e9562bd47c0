"""Check a remote JVM for deadlocked threads.

Exits with status 2 and prints the deadlock cycle when one is found, so the
script can drive a monitoring check.

Usage:
  uv run python examples/deadlock_check.py localhost:8778
"""

import argparse
import sys

from jmxcli.bridge import JmxError
from jmxcli.core import IntrospectionError, JmxClient
from jmxcli.core.types import ConnectionConfig, JmxCliConfig

parser = argparse.ArgumentParser(description="Detect deadlocked threads.")
parser.add_argument("address", help="host:port of the management agent")
parser.add_argument("--auth", help="username:password of a secured endpoint")
args = parser.parse_args()

config = JmxCliConfig(connection=ConnectionConfig.from_address(args.address, args.auth))

with JmxClient(config) as client:
    try:
        report = client.find_deadlock()
    except IntrospectionError as exc:
        print(f"Deadlock detection unavailable: {exc}", file=sys.stderr)
        sys.exit(1)
    except JmxError as exc:
        print(f"Could not check for deadlocks: {exc}", file=sys.stderr)
        sys.exit(1)

    if report:
        print(report.render(), end="")
        sys.exit(2)
    print("No deadlock found")
