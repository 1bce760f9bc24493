import sys

from cafce.cli import main


sys.exit(main())
