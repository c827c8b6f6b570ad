import sys

from tedium.cli import main

sys.exit(main())
