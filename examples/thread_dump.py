"""Print a thread dump of a remote JVM.

Locked monitors and synchronizers are included when the endpoint can report
them; otherwise a plain dump is printed.

Usage:
  uv run python examples/thread_dump.py localhost:8778
"""

import argparse
import sys

from jmxcli.bridge import JmxError
from jmxcli.core import JmxClient
from jmxcli.core.types import ConnectionConfig, JmxCliConfig

parser = argparse.ArgumentParser(description="Dump remote threads.")
parser.add_argument("address", help="host:port of the management agent")
parser.add_argument("--auth", help="username:password of a secured endpoint")
args = parser.parse_args()

config = JmxCliConfig(connection=ConnectionConfig.from_address(args.address, args.auth))

with JmxClient(config) as client:
    try:
        monitor = client.thread_monitor()
        dump = monitor.thread_dump()
    except JmxError as exc:
        print(f"Could not dump threads: {exc}", file=sys.stderr)
        sys.exit(1)

    print(f"Capability mode: {monitor.capabilities.mode.value}\n")
    print(dump.render(), end="")
