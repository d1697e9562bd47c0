"""Describe the attributes of one managed object.

Prints each attribute as ``name [type] description``.

Usage:
  uv run python examples/list_attributes.py localhost:8778 java.lang:type=Memory
"""

import argparse

from jmxcli.core import JmxClient
from jmxcli.core.types import ConnectionConfig, JmxCliConfig

parser = argparse.ArgumentParser(description="List the attributes of a managed object.")
parser.add_argument("address", help="host:port of the management agent")
parser.add_argument("object_name", help="Object name, e.g. java.lang:type=Memory")
parser.add_argument("--auth", help="username:password of a secured endpoint")
args = parser.parse_args()

config = JmxCliConfig(connection=ConnectionConfig.from_address(args.address, args.auth))

with JmxClient(config) as client:
    print(f"## Attributes for {args.object_name}")
    for attr in client.list_attributes(args.object_name):
        print(f"{attr.name} [{attr.type_name}] {attr.description}")
