import sys

from fairdice.cli import main

sys.exit(main())
