import sys

from nestlex.cli import main

sys.exit(main())
