"""List every managed object registered on a remote endpoint.

Usage:
  uv run python examples/list_objects.py localhost:8778
  uv run python examples/list_objects.py db01:8778 --auth monitor:secret
"""

import argparse
import sys

from jmxcli.core import JmxClient
from jmxcli.core.types import ConnectionConfig, JmxCliConfig

parser = argparse.ArgumentParser(description="List managed objects.")
parser.add_argument("address", help="host:port of the management agent, e.g. localhost:8778")
parser.add_argument("--auth", help="username:password of a secured endpoint")
args = parser.parse_args()

config = JmxCliConfig(connection=ConnectionConfig.from_address(args.address, args.auth))

with JmxClient(config) as client:
    result = client.list_objects()
    if not result.ok:
        print(f"Could not list objects: {result.error}", file=sys.stderr)
        sys.exit(1)
    if not result.names:
        print("Listing objects returned nothing")
    for name in result.names:
        print(name)
