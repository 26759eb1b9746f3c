import sys

from verify_peering.main import main

sys.exit(main())
