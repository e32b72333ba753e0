import sys

from heartqr.cli import main

sys.exit(main())
