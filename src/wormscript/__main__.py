import sys

from wormscript.cli import main

sys.exit(main())
