import sys

from context_transfer.cli import main

sys.exit(main())
