import sys

from qrunner.cli import main

sys.exit(main())
