"""Poll attributes of every object matching a pattern.

Object and attribute arguments containing ``*`` are regular expressions
matched against the whole name; ``Attr.field`` selects one field of a
composite attribute.  Targets are resolved once, then read ``--count`` times
(0 polls until stopped) with ``--interval`` seconds between rounds.
CTRL-C during the wait skips it; CTRL-C while reading ends the run.

Usage:
  uv run python examples/watch_attributes.py localhost:8778 \\
      'com.mchange.v2.c3p0:type=PooledDataSource.*' 'num.*Connections' \\
      --interval 5 --count 0
  uv run python examples/watch_attributes.py localhost:8778 \\
      java.lang:type=Memory HeapMemoryUsage.used
"""

import argparse
import sys
import time
from datetime import datetime

from jmxcli.core import JmxClient
from jmxcli.core.types import ConnectionConfig, JmxCliConfig, PollConfig

parser = argparse.ArgumentParser(description="Read attributes repeatedly.")
parser.add_argument("address", help="host:port of the management agent")
parser.add_argument("object_pattern", help="Object name or pattern")
parser.add_argument("attribute_pattern", help="Attribute name, pattern, or Attr.field path")
parser.add_argument("--auth", help="username:password of a secured endpoint")
parser.add_argument("--interval", type=float, default=10.0, help="Seconds between rounds")
parser.add_argument("--count", type=int, default=1, help="Rounds to run, 0 for forever")
parser.add_argument("-v", "--verbose", action="store_true")
args = parser.parse_args()

config = JmxCliConfig(
    connection=ConnectionConfig.from_address(args.address, args.auth),
    poll=PollConfig(interval=args.interval, count=args.count),
    verbose=args.verbose,
)

with JmxClient(config) as client:
    resolution = client.resolve_targets(args.object_pattern, args.attribute_pattern)
    for error in resolution.errors:
        print(f"Could not resolve targets: {error}", file=sys.stderr)
    if not resolution.objects.ok:
        sys.exit(1)
    targets = resolution.targets
    if not targets:
        print("No objects matched", file=sys.stderr)
        sys.exit(1)
    if config.poll.count == 0:
        print("Will execute until CTRL-C received")

    rounds = 0
    try:
        while config.poll.count == 0 or rounds < config.poll.count:
            if rounds > 0:
                try:
                    time.sleep(config.poll.interval)
                except KeyboardInterrupt:
                    print("Wait interrupted, polling now")
                print(f"##### {datetime.now():%Y-%m-%d %H:%M:%S}")
            rounds += 1

            readings = client.read_targets(targets)
            current = None
            for reading in readings:
                if len(targets) > 1 and reading.object_name != current:
                    current = reading.object_name
                    print(f"#### {current}")
                print(reading)
    except KeyboardInterrupt:
        pass
