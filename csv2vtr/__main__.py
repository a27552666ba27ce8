import sys

from csv2vtr.cli import main

sys.exit(main())
