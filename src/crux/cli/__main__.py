import sys

from crux.cli.main import main

sys.exit(main())
