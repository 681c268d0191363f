import sys

from pyptree.app import main

sys.exit(main())
