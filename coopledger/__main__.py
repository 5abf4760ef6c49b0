import sys

from coopledger.cli import main

sys.exit(main())
