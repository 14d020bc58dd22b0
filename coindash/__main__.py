import sys

from coindash.app import main

sys.exit(main())
