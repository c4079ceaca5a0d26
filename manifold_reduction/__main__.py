import sys

from manifold_reduction.cli import main

sys.exit(main())
