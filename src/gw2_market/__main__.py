import sys

from gw2_market.cli import main

# Spawned workers re-import this module as __mp_main__
if __name__ == "__main__":
    sys.exit(main())
