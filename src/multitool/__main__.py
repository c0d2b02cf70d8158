import sys

from multitool.cli.main import main

sys.exit(main())
