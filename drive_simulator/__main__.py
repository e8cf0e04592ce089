import sys

from drive_simulator.cli import main

sys.exit(main())
