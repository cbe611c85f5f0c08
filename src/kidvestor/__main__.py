import sys

from kidvestor.cli import main

sys.exit(main())
