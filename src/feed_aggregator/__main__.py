"""Allow `python -m feed_aggregator` execution."""

import sys

from feed_aggregator.cli import main

sys.exit(main())
